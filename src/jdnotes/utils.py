"""Utility functions for the JD Notes backend."""

KB = 1024
MB = KB * 1024
GB = MB * 1024


def format_size(size_bytes: int) -> str:
    """Format a byte count for display.

    Uses binary units with two decimals above one kilobyte.

    Examples:
        >>> format_size(1023)
        '1023 B'
        >>> format_size(1024)
        '1.00 KB'
        >>> format_size(1_048_576)
        '1.00 MB'
    """
    if size_bytes >= GB:
        return f"{size_bytes / GB:.2f} GB"
    if size_bytes >= MB:
        return f"{size_bytes / MB:.2f} MB"
    if size_bytes >= KB:
        return f"{size_bytes / KB:.2f} KB"
    return f"{size_bytes} B"
