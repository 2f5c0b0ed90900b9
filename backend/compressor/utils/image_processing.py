"""
Image processing utilities for the compression endpoint.
"""
import base64
import io
from PIL import Image


# Modes the JPEG encoder can write directly
JPEG_MODES = ('RGB', 'L', 'CMYK')


def compress_image(image_bytes: bytes, quality: int = 80) -> bytes:
    """
    Re-encodes an image as JPEG at the given quality.

    Args:
        image_bytes: Original image bytes (any format Pillow can decode)
        quality: JPEG quality, 1-100

    Returns:
        Compressed image bytes (JPEG format)

    Raises:
        PIL.UnidentifiedImageError: If the bytes are not a recognizable image
        OSError: If the image is truncated or cannot be encoded
    """
    img = Image.open(io.BytesIO(image_bytes))

    # Force a full decode so truncated files fail here, not on save
    img.load()

    # Convert RGBA, palette and 16-bit modes to RGB
    if img.mode not in JPEG_MODES:
        img = img.convert('RGB')

    output = io.BytesIO()
    img.save(output, format='JPEG', quality=quality, optimize=True)

    return output.getvalue()


def encode_base64(data: bytes) -> str:
    """Encode bytes as base64 text for the legacy text response."""
    return base64.b64encode(data).decode('utf-8')


def check_jpeg_encoder() -> None:
    """
    Encode a 1x1 image to confirm Pillow's JPEG support is usable.

    Raises:
        RuntimeError: If the encoder is missing or produced no JPEG
    """
    output = io.BytesIO()
    try:
        Image.new('RGB', (1, 1)).save(output, format='JPEG')
    except (OSError, KeyError) as e:
        raise RuntimeError(f"JPEG encoder unavailable: {str(e)}")

    if output.getvalue()[:2] != b'\xff\xd8':
        raise RuntimeError("JPEG encoder produced invalid output")
