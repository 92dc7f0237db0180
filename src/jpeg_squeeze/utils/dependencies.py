"""Shared utilities for checking external tool dependencies."""

import shutil
from typing import List


def check_comparator(command: List[str]) -> List[str]:
    """Verify the comparator executable is available.

    The first element of ``command`` is resolved against PATH; any remaining
    elements are passed through unchanged as leading arguments.

    Returns:
        The command with its executable replaced by the resolved absolute path.

    Raises:
        RuntimeError: If the command is empty or the executable is not found.
    """
    if not command:
        raise RuntimeError("No comparator command configured")

    executable = shutil.which(command[0])
    if executable is None:
        raise RuntimeError(f"Required tool not found: {command[0]}")

    return [executable, *command[1:]]
