"""Shared CLI error handling."""

import functools
import logging
from collections.abc import Callable

import typer
from rich.console import Console
from rich.logging import RichHandler

from jpeg_squeeze.oracle.main import ComparatorError

EXIT_USER_ERROR = 50
EXIT_COMPARATOR_ERROR = 51
EXIT_INTERRUPT = 130

stderr_console = Console(stderr=True)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging with Rich handler."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=stderr_console, rich_tracebacks=True, show_time=True)],
        force=True,
    )


def cli_error_handler(func: Callable) -> Callable:
    """Wrap a CLI command to catch common exceptions with consistent exit codes.

    Every failure is fatal: nothing is retried and no partial output is kept.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (typer.Exit, SystemExit):
            raise
        except KeyboardInterrupt:
            stderr_console.print("\n[bold yellow]Interrupted by user[/bold yellow]")
            raise typer.Exit(code=EXIT_INTERRUPT)
        except ComparatorError as e:
            stderr_console.print(f"[bold red]Comparator error:[/bold red] {e}")
            raise typer.Exit(code=EXIT_COMPARATOR_ERROR)
        except (FileNotFoundError, FileExistsError, ValueError, RuntimeError, OSError) as e:
            stderr_console.print(f"[bold red]Error:[/bold red] {e}")
            raise typer.Exit(code=EXIT_USER_ERROR)
        except Exception as e:
            stderr_console.print(f"[bold red]Unexpected error:[/bold red] {e}")
            raise typer.Exit(code=EXIT_USER_ERROR)

    return wrapper
