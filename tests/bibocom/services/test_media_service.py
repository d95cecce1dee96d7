"""Tests for MediaService."""

import pytest

from bibocom.constants.messages import Messages
from bibocom.core.errors import MediaValidationError
from bibocom.schemas.media import MediaFile
from bibocom.schemas.message import MediaType
from bibocom.services.media_service import MediaService

MB = 1024 * 1024


@pytest.fixture
def media_service():
    return MediaService(max_bytes=10 * MB)


def test_rejects_large_file(media_service):
    file = MediaFile(filename="big.mp4", content_type="video/mp4", size=15 * MB)

    with pytest.raises(MediaValidationError) as exc_info:
        media_service.stage(file)

    assert exc_info.value.reason == MediaValidationError.TOO_LARGE
    assert exc_info.value.message == "The file is too large. Maximum size: 10 MB."


def test_rejects_unsupported_type(media_service):
    file = MediaFile(filename="notes.txt", content_type="text/plain", size=100)

    with pytest.raises(MediaValidationError) as exc_info:
        media_service.stage(file)

    assert exc_info.value.reason == MediaValidationError.UNSUPPORTED_TYPE
    assert exc_info.value.message == Messages.MEDIA_UNSUPPORTED_TYPE


def test_stages_image_with_preview(media_service):
    file = MediaFile(filename="photo.png", content_type="image/png", size=2 * MB)

    attachment = media_service.stage(file)

    assert attachment.media_type == MediaType.IMAGE
    assert attachment.preview is not None
    assert attachment.preview.filename == "photo.png"


def test_exact_limit_is_accepted(media_service):
    file = MediaFile(filename="clip.mp4", content_type="video/mp4", size=10 * MB)
    assert media_service.stage(file).media_type == MediaType.VIDEO
