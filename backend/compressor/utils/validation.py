"""
Input validation utilities for the compression endpoint.
"""
import os
from typing import Tuple


DEFAULT_QUALITY = 80
MIN_QUALITY = 1
MAX_QUALITY = 100


def parse_quality(quality_str, default: int = DEFAULT_QUALITY) -> int:
    """
    Parses the quality form field and clamps it to the JPEG range.

    Args:
        quality_str: Raw form value (may be None)
        default: Value used when the field is absent or not an integer

    Returns:
        Quality in [1, 100]
    """
    if quality_str is None:
        return default

    try:
        quality = int(str(quality_str).strip())
    except ValueError:
        return default

    return max(MIN_QUALITY, min(MAX_QUALITY, quality))


def describe_size_limit(max_size: int) -> str:
    """Human-readable upload limit, e.g. "10MB" or "512 bytes"."""
    if max_size >= 1024 * 1024:
        return f"{max_size // (1024 * 1024)}MB"
    return f"{max_size} bytes"


def validate_upload(file, max_size: int) -> Tuple[bool, str, int]:
    """
    Validates the uploaded image field.

    Content type is not checked here: anything Pillow can decode is
    accepted, and undecodable bytes fail later as a compression error.

    Args:
        file: FileStorage object from Flask request (or None)
        max_size: Maximum accepted size in bytes

    Returns:
        Tuple of (is_valid, error_message, status_code); status_code is
        400 for a missing or empty file and 413 for an oversized one
    """
    if file is None:
        return False, "No file provided", 400

    # Check file size
    file.seek(0, os.SEEK_END)
    size = file.tell()
    file.seek(0)

    if size == 0:
        return False, "No file provided", 400

    if size > max_size:
        return False, f"Image exceeds maximum size of {describe_size_limit(max_size)}", 413

    return True, "", 200


def sanitize_filename(filename: str) -> str:
    """
    Sanitize an uploaded filename for logging.

    Args:
        filename: Client-supplied filename

    Returns:
        Sanitized filename
    """
    if not filename:
        return ""

    # Remove any null bytes and path components
    sanitized = filename.replace('\x00', '')
    sanitized = sanitized.replace('\\', '/').split('/')[-1]

    # Strip whitespace
    sanitized = sanitized.strip()

    # Limit length to prevent DoS
    max_length = 256
    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length]

    return sanitized
