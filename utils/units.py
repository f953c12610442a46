BYTE_UNITS = ['Bytes', 'KB', 'MB', 'GB', 'TB']

def format_bytes(size: int) -> str:
    """Human readable size with two decimals at most, e.g. ``1.5 MB``."""
    if size <= 0:
        return '0 Bytes'
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(BYTE_UNITS) - 1:
        value /= 1024
        unit += 1
    # Drop trailing zeros, 1.50 MB is shown as 1.5 MB
    return f"{round(value, 2):g} {BYTE_UNITS[unit]}"
