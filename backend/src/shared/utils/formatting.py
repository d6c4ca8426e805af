"""
Formatting helpers for API responses.
"""

from src.config.settings import MEGABYTE


def format_megabytes(size_bytes: int) -> str:
    """Human-readable size, e.g. 5242880 -> "5.00MB"."""
    return f"{size_bytes / MEGABYTE:.2f}MB"
