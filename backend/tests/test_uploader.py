"""
Tests for client-side image sourcing and validation.
"""
import pytest
from unittest.mock import MagicMock
from compressor.client.uploader import (
    ImageUploader, UploadCandidate, validate_file, candidate_from_path, MAX_IMAGE_SIZE
)


MIB = 1024 * 1024


def candidate(content_type='image/png', size=100, filename='test.png'):
    return UploadCandidate(filename=filename, content_type=content_type, data=b'\x00' * size)


@pytest.fixture
def on_upload():
    return MagicMock()


@pytest.fixture
def notify():
    return MagicMock()


@pytest.fixture
def uploader(on_upload, notify):
    return ImageUploader(on_upload, notify=notify)


class TestValidateFile:

    @pytest.mark.parametrize('content_type', ['image/jpeg', 'image/png', 'image/webp', 'image/gif'])
    def test_supported_types(self, content_type):
        is_valid, _, _ = validate_file(candidate(content_type))
        assert is_valid

    def test_large_png_rejected(self):
        is_valid, title, _ = validate_file(candidate('image/png', 15 * MIB))
        assert not is_valid
        assert title == "File too large"

    def test_medium_gif_accepted(self):
        is_valid, _, _ = validate_file(candidate('image/gif', 5 * MIB))
        assert is_valid

    def test_exact_limit_accepted(self):
        is_valid, _, _ = validate_file(candidate('image/jpeg', MAX_IMAGE_SIZE))
        assert is_valid

    def test_one_byte_over_rejected(self):
        is_valid, _, _ = validate_file(candidate('image/jpeg', MAX_IMAGE_SIZE + 1))
        assert not is_valid

    @pytest.mark.parametrize('size', [10, 15 * MIB])
    def test_text_rejected_regardless_of_size(self, size):
        is_valid, title, _ = validate_file(candidate('text/plain', size, 'notes.txt'))
        assert not is_valid
        assert title == "Invalid file type"

    def test_unsupported_image_type_rejected(self):
        is_valid, _, _ = validate_file(candidate('image/bmp'))
        assert not is_valid

    def test_empty_rejected(self):
        is_valid, title, _ = validate_file(candidate('image/png', 0))
        assert not is_valid
        assert title == "Empty file"


class TestSelectFile:

    def test_valid_path_submitted(self, uploader, on_upload, notify, tmp_path):
        path = tmp_path / 'photo.jpg'
        path.write_bytes(b'\xff\xd8' + b'\x00' * 50)

        assert uploader.select_file(str(path)) is True

        submitted = on_upload.call_args[0][0]
        assert submitted.filename == 'photo.jpg'
        assert submitted.content_type == 'image/jpeg'
        assert submitted.size == 52
        notify.assert_not_called()

    def test_text_file_rejected(self, uploader, on_upload, notify, tmp_path):
        path = tmp_path / 'notes.txt'
        path.write_text('hello')

        assert uploader.select_file(str(path)) is False

        on_upload.assert_not_called()
        notify.assert_called_once()
        assert notify.call_args[0][0] == "Invalid file type"
        assert notify.call_args[0][2] == 'destructive'

    def test_missing_file_notifies(self, uploader, on_upload, notify, tmp_path):
        assert uploader.select_file(str(tmp_path / 'gone.png')) is False

        on_upload.assert_not_called()
        assert notify.call_args[0][0] == "File unreadable"

    def test_unknown_extension(self, tmp_path):
        path = tmp_path / 'blob'
        path.write_bytes(b'data')

        assert candidate_from_path(str(path)).content_type == 'application/octet-stream'


class TestDropFiles:

    def test_first_image_used(self, uploader, on_upload):
        files = [
            candidate('text/plain', filename='readme.txt'),
            candidate('image/gif', filename='first.gif'),
            candidate('image/png', filename='second.png'),
        ]

        assert uploader.drop_files(files) is True

        on_upload.assert_called_once()
        assert on_upload.call_args[0][0].filename == 'first.gif'

    def test_no_images(self, uploader, on_upload, notify):
        assert uploader.drop_files([candidate('application/pdf', filename='doc.pdf')]) is False

        on_upload.assert_not_called()
        assert notify.call_args[0][0] == "No images found"

    def test_first_image_invalid_does_not_fall_through(self, uploader, on_upload, notify):
        """Only the first image-typed file is considered, even when it fails validation"""
        files = [
            candidate('image/bmp', filename='first.bmp'),
            candidate('image/png', filename='second.png'),
        ]

        assert uploader.drop_files(files) is False

        on_upload.assert_not_called()
        assert notify.call_args[0][0] == "Invalid file type"


class TestPaste:

    def test_image_in_clipboard(self, uploader, on_upload):
        items = [{'text/plain': b'caption'}, {'text/html': b'<b>x</b>', 'image/png': b'\x89PNG' + b'\x00' * 10}]

        assert uploader.paste(lambda: items) is True

        submitted = on_upload.call_args[0][0]
        assert submitted.filename == 'pasted-image.png'
        assert submitted.content_type == 'image/png'

    def test_filename_from_subtype(self, uploader, on_upload):
        assert uploader.paste(lambda: [{'image/webp': b'RIFF1234WEBP'}]) is True

        assert on_upload.call_args[0][0].filename == 'pasted-image.webp'

    def test_no_image_in_clipboard(self, uploader, on_upload, notify):
        assert uploader.paste(lambda: [{'text/plain': b'hello'}]) is False

        on_upload.assert_not_called()
        assert notify.call_args[0][0] == "No image in clipboard"

    def test_clipboard_read_failure(self, uploader, on_upload, notify):
        def broken():
            raise PermissionError('clipboard access denied')

        assert uploader.paste(broken) is False

        on_upload.assert_not_called()
        assert notify.call_args[0][0] == "Paste failed"

    def test_pasted_image_still_validated(self, uploader, on_upload, notify):
        assert uploader.paste(lambda: [{'image/gif': b'\x00' * (11 * MIB)}]) is False

        on_upload.assert_not_called()
        assert notify.call_args[0][0] == "File too large"
