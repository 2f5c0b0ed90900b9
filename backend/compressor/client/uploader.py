"""
Client-side image sourcing and validation.

Images can come from three channels: a file path (the file picker), a list
of dropped files, or clipboard items. Every candidate passes through the
same validation before it is handed to the submission callback. Validation
failures are reported through a notifier and never raise.
"""
import logging
import mimetypes
import os
from dataclasses import dataclass
from typing import Callable, Iterable, Mapping, Optional, Sequence, Tuple


logger = logging.getLogger(__name__)

# Supported image formats (MIME types)
SUPPORTED_IMAGE_TYPES = ('image/jpeg', 'image/png', 'image/webp', 'image/gif')

MAX_IMAGE_SIZE = 10 * 1024 * 1024  # 10MB


@dataclass
class UploadCandidate:
    """An image picked by the user, not yet validated."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


Notifier = Callable[[str, str, str], None]


def log_notifier(title: str, description: str, variant: str = 'default') -> None:
    """Default notifier: write the notification to the log."""
    if variant == 'destructive':
        logger.warning(f'{title}: {description}')
    else:
        logger.info(f'{title}: {description}')


def validate_file(candidate: UploadCandidate) -> Tuple[bool, str, str]:
    """
    Validates a candidate image.

    Args:
        candidate: The image to check

    Returns:
        Tuple of (is_valid, error_title, error_description)
    """
    if candidate.content_type not in SUPPORTED_IMAGE_TYPES:
        return False, "Invalid file type", "Please upload a JPEG, PNG, WebP, or GIF image."

    if candidate.size > MAX_IMAGE_SIZE:
        return False, "File too large", "Please upload an image smaller than 10MB."

    if candidate.size == 0:
        return False, "Empty file", "The selected image contains no data."

    return True, "", ""


def candidate_from_path(path: str) -> UploadCandidate:
    """
    Read a file from disk into a candidate, guessing its MIME type.

    Raises:
        OSError: If the file cannot be read
    """
    content_type, _ = mimetypes.guess_type(path)
    with open(path, 'rb') as f:
        data = f.read()
    return UploadCandidate(
        filename=os.path.basename(path),
        content_type=content_type or 'application/octet-stream',
        data=data
    )


class ImageUploader:
    """Sources images from the supported channels and submits valid ones."""

    def __init__(self, on_image_upload: Callable[[UploadCandidate], object],
                 notify: Notifier = log_notifier):
        self.on_image_upload = on_image_upload
        self.notify = notify

    def _submit(self, candidate: UploadCandidate) -> bool:
        is_valid, title, description = validate_file(candidate)
        if not is_valid:
            self.notify(title, description, 'destructive')
            return False

        logger.info(f'Image accepted: {candidate.filename} ({candidate.size} bytes)')
        self.on_image_upload(candidate)
        return True

    def select_file(self, path: str) -> bool:
        """
        File picker channel.

        Returns:
            True if the file was accepted and submitted
        """
        try:
            candidate = candidate_from_path(path)
        except OSError as e:
            logger.error(f'Could not read {path}: {str(e)}')
            self.notify("File unreadable", f"Unable to read {os.path.basename(path)}.", 'destructive')
            return False

        return self._submit(candidate)

    def drop_files(self, files: Sequence[UploadCandidate]) -> bool:
        """
        Drag-and-drop channel. Only the first image-typed file is considered.
        """
        candidate = first_image(files)

        if candidate is None:
            self.notify("No images found", "Please drop an image file.", 'destructive')
            return False

        return self._submit(candidate)

    def paste(self, read_clipboard: Callable[[], Iterable[Mapping[str, bytes]]]) -> bool:
        """
        Clipboard channel.

        Args:
            read_clipboard: Callable returning clipboard items, each a mapping
                of MIME type to bytes in the order the clipboard offers them

        Returns:
            True if an image was found, accepted and submitted
        """
        try:
            clipboard_items = list(read_clipboard())
        except Exception as e:
            logger.error(f'Paste error: {str(e)}')
            self.notify("Paste failed", "Unable to paste image. Please try uploading instead.", 'destructive')
            return False

        for item in clipboard_items:
            for mime_type, data in item.items():
                if mime_type.startswith('image/'):
                    candidate = UploadCandidate(
                        filename=f"pasted-image.{mime_type.split('/')[1]}",
                        content_type=mime_type,
                        data=data
                    )
                    return self._submit(candidate)

        self.notify("No image in clipboard", "Please copy an image first, then try pasting.", 'destructive')
        return False


def first_image(files: Sequence[UploadCandidate]) -> Optional[UploadCandidate]:
    """Return the first image-typed file of a drop, if any."""
    for f in files:
        if f.content_type.startswith('image/'):
            return f
    return None
