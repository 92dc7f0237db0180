"""Human-readable size formatting for the final report."""

SIZE_UNITS = ["B", "KB", "MB", "GB", "TB", "PB", "EB"]


def human_size(num_bytes: int) -> str:
    """Format a byte count with one decimal place, e.g. 1536 -> '1.5KB'."""
    value = float(num_bytes)
    unit = 0
    while value >= 1024 and unit < len(SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{value:.1f}{SIZE_UNITS[unit]}"
