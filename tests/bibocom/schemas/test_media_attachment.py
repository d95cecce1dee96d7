"""Tests for media file descriptions."""

from bibocom.schemas.media import MediaAttachment, MediaFile
from bibocom.schemas.message import MediaType


def test_from_path_guesses_type(tmp_path):
    path = tmp_path / "photo.png"
    path.write_bytes(b"12345")

    media = MediaFile.from_path(str(path))

    assert media.filename == "photo.png"
    assert media.content_type == "image/png"
    assert media.size == 5
    assert media.read() == b"12345"


def test_hidden_preview():
    attachment = MediaAttachment(
        file=MediaFile(filename="a.png", content_type="image/png", size=1, content=b"x"),
        media_type=MediaType.IMAGE,
        preview_visible=False,
    )
    assert attachment.preview is None
