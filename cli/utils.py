"""Utility functions for CLI output."""

from pathlib import Path

from common.constants import DEFAULT_EXTENSION


def format_file_size(size_bytes: int) -> str:
    """
    Format file size in bytes to human-readable format with appropriate unit.
    
    Uses binary units (1024-based) and automatically selects the most
    appropriate unit (B, KiB, MiB, GiB, TiB).
    
    Args:
        size_bytes: File size in bytes
        
    Returns:
        Formatted string with size and unit (e.g., "1.50 MiB", "512 B")
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    
    units = ['KiB', 'MiB', 'GiB', 'TiB']
    size = size_bytes / 1024.0
    
    for unit in units:
        if size < 1024.0:
            return f"{size:.2f} {unit}"
        size /= 1024.0
    
    return f"{size:.2f} PiB"


def format_progress(fraction: float, width: int = 20) -> str:
    """
    Render a progress fraction as a text bar.

    Args:
        fraction: Completion in [0, 1]
        width: Number of bar cells

    Returns:
        String like "[#####---------------]  25.0%"
    """
    fraction = min(max(fraction, 0.0), 1.0)
    filled = int(round(fraction * width))
    return f"[{'#' * filled}{'-' * (width - filled)}] {fraction * 100:5.1f}%"


def extension_of(path: Path) -> str:
    """
    Extension used when opening an upload stream for path.

    Args:
        path: Local file path

    Returns:
        Last suffix without the dot, or DEFAULT_EXTENSION if there is none
    """
    suffix = path.suffix
    return suffix[1:] if len(suffix) > 1 else DEFAULT_EXTENSION
