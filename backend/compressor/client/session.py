"""
Client image session: one uploaded image, its preview, and its compression result.
"""
import logging
import os
import tempfile
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

from compressor.client.presenter import format_ratio
from compressor.client.service import CompressionClient, CompressionError, CompressionResult
from compressor.client.uploader import UploadCandidate, Notifier, log_notifier


logger = logging.getLogger(__name__)


class PreviewHandle:
    """
    Temporary file holding the original image for display.

    Must be released once the image is no longer shown.
    """

    def __init__(self, candidate: UploadCandidate):
        suffix = os.path.splitext(candidate.filename)[1]
        fd, self.path = tempfile.mkstemp(prefix='preview-', suffix=suffix)
        with os.fdopen(fd, 'wb') as f:
            f.write(candidate.data)
        self.released = False

    def release(self):
        if self.released:
            return
        try:
            os.remove(self.path)
        except FileNotFoundError:
            pass
        self.released = True


@dataclass
class ImageState:
    original: UploadCandidate
    preview: PreviewHandle
    original_size: int
    compressed: Optional[bytes] = None
    compressed_size: Optional[int] = None
    compression_ratio: Optional[float] = None


class CompressionSession:
    """
    Holds the state for one image at a time.

    Uploading compresses in a single background worker. Resetting discards
    the state and releases the preview; a response that arrives for an
    image that was reset or replaced is dropped.
    """

    def __init__(self, client: CompressionClient, quality: int = 80,
                 notify: Notifier = log_notifier):
        self.client = client
        self.quality = quality
        self.notify = notify
        self.state: Optional[ImageState] = None
        self.is_compressing = False
        self._generation = 0
        self._pending: Optional[Future] = None
        self._lock = threading.Lock()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix='compress')

    def upload(self, candidate: UploadCandidate) -> Future:
        """
        Replace the current image with candidate and start compressing it.

        Returns:
            Future resolving to the CompressionResult, or None if the
            request failed or was superseded
        """
        with self._lock:
            self._discard()
            self.state = ImageState(
                original=candidate,
                preview=PreviewHandle(candidate),
                original_size=candidate.size
            )
            self.is_compressing = True
            generation = self._generation
            self._pending = self._executor.submit(self._compress, candidate, generation)
            return self._pending

    def reset(self):
        """Clear all image state and release the preview."""
        with self._lock:
            self._discard()

    def close(self):
        self.reset()
        self._executor.shutdown(wait=True)

    def _discard(self):
        # Caller holds the lock
        self._generation += 1
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        if self.state is not None:
            self.state.preview.release()
            self.state = None
        self.is_compressing = False

    def _compress(self, candidate: UploadCandidate, generation: int) -> Optional[CompressionResult]:
        try:
            result = self.client.compress_image(candidate, self.quality)
        except CompressionError as e:
            with self._lock:
                if generation != self._generation:
                    return None
                self.is_compressing = False
                self._pending = None
            logger.error(f'Compression error: {str(e)}')
            self.notify("Compression failed", e.hint, 'destructive')
            return None

        with self._lock:
            if generation != self._generation:
                logger.info(f'Dropping stale compression result for {candidate.filename}')
                return None
            self.state.compressed = result.compressed_bytes
            self.state.compressed_size = result.compressed_size
            self.state.compression_ratio = result.compression_ratio
            self.is_compressing = False
            self._pending = None

        self.notify("Image compressed successfully!",
                    f"Reduced size by {format_ratio(result.compression_ratio)}", 'default')
        return result
