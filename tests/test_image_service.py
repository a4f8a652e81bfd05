"""Tests for image download caching and upload compression."""

import io

from PIL import Image
import pytest

from core.errors import ApiError
from infrastructure.image_service import ImageService, compress_for_upload

URL = "https://cdn.example/1.png"


class FlakyClient:
    """Fails the first download, then serves `data`."""

    def __init__(self, data: bytes) -> None:
        self.data = data
        self.calls = 0

    def download(self, url: str) -> bytes:
        self.calls += 1
        if self.calls == 1:
            raise ApiError(503, "unavailable")
        return self.data


def _png_bytes(size: tuple[int, int]) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, (20, 120, 40)).save(buf, format="PNG")
    return buf.getvalue()


class TestGetImage:
    def test_failed_download_returns_none_and_is_retried(self, qapp):
        client = FlakyClient(_png_bytes((120, 60)))
        service = ImageService(client)

        assert service.get_image(URL, 60) is None
        img = service.get_image(URL, 60)

        assert img is not None
        assert (img.width(), img.height()) == (60, 30)
        assert client.calls == 2

    def test_successful_download_is_cached(self, qapp):
        client = FlakyClient(_png_bytes((40, 40)))
        client.calls = 1
        service = ImageService(client)
        service.get_image(URL)
        service.get_image(URL)
        assert client.calls == 2

    def test_undecodable_bytes_return_none(self, qapp):
        client = FlakyClient(b"not an image")
        client.calls = 1
        assert ImageService(client).get_image(URL) is None

    def test_clear_cache_forces_download(self, qapp):
        client = FlakyClient(_png_bytes((40, 40)))
        client.calls = 1
        service = ImageService(client)
        service.get_image(URL)
        service.clear_cache()
        service.get_image(URL)
        assert client.calls == 3


class TestCompressForUpload:
    def test_bounds_longest_side_and_encodes_jpeg(self, tmp_path):
        src = tmp_path / "big.png"
        Image.new("RGBA", (3000, 1500), (200, 30, 30, 255)).save(src)

        encoded = compress_for_upload(src, max_side=1000, quality=70)

        assert encoded.filename == "big.jpg"
        assert encoded.mime_type == "image/jpeg"
        out = tmp_path / "out.jpg"
        out.write_bytes(encoded.content)
        with Image.open(out) as im:
            assert im.format == "JPEG"
            assert max(im.size) == 1000

    def test_small_image_not_upscaled(self, tmp_path):
        src = tmp_path / "small.jpg"
        Image.new("RGB", (200, 100)).save(src)
        encoded = compress_for_upload(src, max_side=1000)
        out = tmp_path / "out.jpg"
        out.write_bytes(encoded.content)
        with Image.open(out) as im:
            assert im.size == (200, 100)

    def test_rejects_other_formats(self, tmp_path):
        src = tmp_path / "clip.gif"
        Image.new("RGB", (10, 10)).save(src)
        with pytest.raises(ValueError):
            compress_for_upload(src)
