"""
Presentation helpers for compression results.
"""
import os
from typing import Dict


SIZE_UNITS = ['Bytes', 'KB', 'MB', 'GB']


def format_file_size(size_bytes: int) -> str:
    """
    Format a byte count for display.

    Uses base 1024 with at most two decimals, trailing zeros trimmed:
    0 -> "0 Bytes", 1536 -> "1.5 KB", 1048576 -> "1 MB".
    """
    if size_bytes == 0:
        return '0 Bytes'

    k = 1024
    # Integer comparison avoids log() rounding at exact powers of 1024
    i = 0
    while size_bytes >= k ** (i + 1) and i < len(SIZE_UNITS) - 1:
        i += 1
    value = ('%.2f' % (size_bytes / k ** i)).rstrip('0').rstrip('.')
    return f'{value} {SIZE_UNITS[i]}'


def compression_ratio(original_size: int, compressed_size: int) -> float:
    """
    Percentage size reduction from original to compressed.

    Negative when the compressed output is larger than the original.
    An empty original yields 0.0.
    """
    if original_size == 0:
        return 0.0
    return (original_size - compressed_size) / original_size * 100


def format_ratio(ratio: float) -> str:
    return f'{ratio:.1f}%'


def download_name(original_filename: str) -> str:
    """Filename offered for the compressed download."""
    return f'compressed-{os.path.basename(original_filename)}'


def summarize(original_size: int, compressed_size: int) -> Dict[str, str]:
    """
    Build the display strings shown after a compression.

    Returns:
        Dict with original_size, compressed_size and size_reduction
    """
    return {
        'original_size': format_file_size(original_size),
        'compressed_size': format_file_size(compressed_size),
        'size_reduction': format_ratio(compression_ratio(original_size, compressed_size)),
    }


def save_compressed(compressed_bytes: bytes, original_filename: str, output_dir: str = '.') -> str:
    """
    Write the compressed bytes as compressed-<original filename>.

    Args:
        compressed_bytes: Bytes returned by the compression endpoint
        original_filename: Name of the uploaded file
        output_dir: Directory to write into (created if missing)

    Returns:
        Path of the written file
    """
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, download_name(original_filename))
    with open(path, 'wb') as f:
        f.write(compressed_bytes)
    return path
