"""
HTTP client for the compression endpoint.
"""
import base64
import logging
from dataclasses import dataclass

import requests

from compressor.client.presenter import compression_ratio
from compressor.client.uploader import UploadCandidate


logger = logging.getLogger(__name__)

DATA_URL_PREFIX = 'data:image/jpeg;base64,'


@dataclass
class CompressionResult:
    compressed_bytes: bytes
    compressed_size: int
    original_size: int
    compression_ratio: float
    content_type: str = 'image/jpeg'


class CompressionError(Exception):
    """Raised when a compression request fails in transport or on the server."""

    def __init__(self, message: str, status_code: int = None, hint: str = None):
        super().__init__(message)
        self.status_code = status_code
        self.hint = hint or "Please try again with a different image."


class CompressionClient:
    """
    Submits images to a compression service.

    Args:
        base_url: Root URL of the service, e.g. http://localhost:8080
        timeout: Seconds to wait for the service before giving up
    """

    def __init__(self, base_url: str, timeout: float = 30):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout

    @property
    def compress_url(self) -> str:
        return f'{self.base_url}/function/compress-image'

    def compress_image(self, candidate: UploadCandidate, quality: int = 80) -> CompressionResult:
        """
        Send an image for compression.

        Args:
            candidate: The validated image to compress
            quality: JPEG quality, 1-100

        Returns:
            CompressionResult with the compressed bytes and size statistics

        Raises:
            CompressionError: On any transport failure or a non-2xx reply
        """
        logger.info(f'Compressing image: {candidate.filename} ({candidate.size} bytes)')

        files = {'image': (candidate.filename, candidate.data, candidate.content_type)}
        data = {'quality': str(quality)}

        try:
            response = requests.post(self.compress_url, files=files, data=data, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            logger.error(f'Compression request timed out: {str(e)}')
            raise CompressionError(
                f'Compression timed out after {self.timeout}s',
                hint=f"The compression service at {self.base_url} did not respond in time."
            ) from e
        except requests.exceptions.ConnectionError as e:
            logger.error(f'Compression service unreachable: {str(e)}')
            raise CompressionError(
                f'Failed to connect: {str(e)}',
                hint=(f"Unable to connect to the compression service at {self.base_url}. "
                      "Please check if the server is running and accessible.")
            ) from e
        except requests.exceptions.RequestException as e:
            # Bad URL scheme, broken chunked body, redirect loops
            logger.error(f'Compression request failed: {str(e)}')
            raise CompressionError(
                f'Request failed: {str(e)}',
                hint=(f"The request to the compression service at {self.base_url} failed. "
                      "Please check the service URL.")
            ) from e

        if not response.ok:
            message = f'Compression failed: {response.status_code} {response.reason} - {response.text}'
            logger.error(message)
            hint = None
            if response.status_code in (502, 503):
                hint = "Server error: the compress-image function may not be deployed or is not responding."
            raise CompressionError(message, status_code=response.status_code, hint=hint)

        compressed = response.content
        ratio = compression_ratio(candidate.size, len(compressed))

        logger.info(f'Compression successful: {candidate.size} -> {len(compressed)} bytes ({ratio:.2f}%)')

        return CompressionResult(
            compressed_bytes=compressed,
            compressed_size=len(compressed),
            original_size=candidate.size,
            compression_ratio=ratio,
            content_type=response.headers.get('Content-Type', 'image/jpeg')
        )

    def check_health(self) -> bool:
        """Return True if the service lists its functions."""
        try:
            response = requests.get(f'{self.base_url}/system/functions', timeout=self.timeout)
            return response.ok
        except requests.exceptions.RequestException as e:
            logger.error(f'Compression service health check failed: {str(e)}')
            return False


def decode_base64_payload(payload: str) -> bytes:
    """
    Decode a body from the base64 text endpoint.

    Accepts the bare base64 text or a data URL carrying it.
    """
    if payload.startswith(DATA_URL_PREFIX):
        payload = payload[len(DATA_URL_PREFIX):]
    return base64.b64decode(payload.strip())


def to_data_url(payload: str) -> str:
    """Prefix base64 text so it can be rendered as an image source."""
    return DATA_URL_PREFIX + payload.strip()
