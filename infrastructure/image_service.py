"""Image download, decoding, caching and upload compression.

Downloaded activity photos are decoded into `QImage` and kept in a small
in-memory LRU cache. Uploads are re-encoded with Pillow so large camera
files are bounded in size before they leave the machine.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
import hashlib
import io
from pathlib import Path

from PIL import Image, ImageOps
from PySide6.QtCore import Qt
from PySide6.QtGui import QImage
from loguru import logger

from core.errors import GalleryError
from core.models import UploadFile

DEFAULT_MEM_CACHE = 128
DEFAULT_UPLOAD_MAX_SIDE = 1920
DEFAULT_UPLOAD_QUALITY = 80
UPLOAD_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png"})


def _compute_cache_key(url: str, size_key: int) -> str:
    """Compute a stable cache key from the URL and requested side."""
    return hashlib.sha1(f"{url}|{int(size_key)}".encode("utf-8", errors="ignore")).hexdigest()


@dataclass
class _MemCacheItem:
    key: str
    image: QImage


class _LRUCache:
    def __init__(self, capacity: int) -> None:
        self._cap = max(1, int(capacity or 1))
        self._data: OrderedDict[str, _MemCacheItem] = OrderedDict()

    def get(self, key: str) -> QImage | None:
        """Return cached QImage for key, moving it to the MRU position."""
        item = self._data.get(key)
        if not item:
            return None
        self._data.move_to_end(key)
        return item.image

    def put(self, key: str, image: QImage) -> None:
        """Insert or update `key` with `image`, evicting LRU when over capacity."""
        self._data[key] = _MemCacheItem(key, image)
        self._data.move_to_end(key)
        while len(self._data) > self._cap:
            self._data.popitem(last=False)

    def clear(self) -> None:
        self._data.clear()


def compress_for_upload(
    path: str | Path,
    max_side: int = DEFAULT_UPLOAD_MAX_SIDE,
    quality: int = DEFAULT_UPLOAD_QUALITY,
) -> UploadFile:
    """Re-encode the image at `path` as JPEG bounded by `max_side`.

    Raises:
        ValueError: If the file is not a JPG/PNG image.
        OSError: If the file cannot be read or decoded.
    """
    src = Path(path)
    if src.suffix.lower() not in UPLOAD_EXTENSIONS:
        raise ValueError(f"Please upload a JPG or PNG image: {src.name}")
    with Image.open(src) as im:
        im = ImageOps.exif_transpose(im)
        if im.mode not in ("RGB", "L"):
            im = im.convert("RGB")
        if max_side and max_side > 0:
            im.thumbnail((max_side, max_side), Image.Resampling.LANCZOS)
        buf = io.BytesIO()
        im.save(buf, format="JPEG", quality=int(quality), optimize=True)
    content = buf.getvalue()
    logger.debug("Compressed {} -> {} bytes", src.name, len(content))
    return UploadFile(filename=f"{src.stem}.jpg", content=content, mime_type="image/jpeg")


class ImageService:
    """Downloads activity images through the authenticated client."""

    def __init__(self, client, settings: object | None = None) -> None:
        """Create the service.

        Args:
            client: Object with `download(url) -> bytes`.
            settings: Optional settings with `images.mem_cache` and `upload.*`.
        """
        self._client = client
        mem_cap = DEFAULT_MEM_CACHE
        self.upload_max_side = DEFAULT_UPLOAD_MAX_SIDE
        self.upload_quality = DEFAULT_UPLOAD_QUALITY
        if settings is not None:
            mem_cap = settings.get_int("images.mem_cache", DEFAULT_MEM_CACHE)
            self.upload_max_side = settings.get_int("upload.max_side_px", DEFAULT_UPLOAD_MAX_SIDE)
            self.upload_quality = settings.get_int("upload.jpeg_quality", DEFAULT_UPLOAD_QUALITY)
        self._mem_cache = _LRUCache(mem_cap)

    def get_image(self, url: str, max_side: int = 0) -> QImage | None:
        """Return the decoded image at `url`, bounded by `max_side` if > 0.

        Returns None when the image cannot be downloaded or decoded. Failures
        are not cached, so a later call retries the download.
        """
        key = _compute_cache_key(url, max_side)
        img = self._mem_cache.get(key)
        if img is not None and not img.isNull():
            return img

        img = self._load(url, max_side)
        if img is None or img.isNull():
            return None
        self._mem_cache.put(key, img)
        return img

    def compress(self, path: str | Path) -> UploadFile:
        return compress_for_upload(path, self.upload_max_side, self.upload_quality)

    def clear_cache(self) -> None:
        self._mem_cache.clear()

    def _load(self, url: str, max_side: int) -> QImage | None:
        try:
            data = self._client.download(url)
        except GalleryError as ex:
            logger.error("Image download failed for {}: {}", url, ex)
            return None
        img = QImage.fromData(data)
        if img.isNull():
            logger.warning("Could not decode image from {}", url)
            return None
        if max_side and max_side > 0 and max(img.width(), img.height()) > max_side:
            img = img.scaled(max_side, max_side, Qt.KeepAspectRatio, Qt.SmoothTransformation)
        return img
