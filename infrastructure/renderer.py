"""Pillow-based renderer for the color matrix pipeline.

Decodes source images (HEIC/HEIF via optional pillow-heif), fits them into a
drawing surface, applies a color matrix, and encodes JPEG snapshots of the
current frame.
"""

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Sequence
from dataclasses import dataclass
import io
import os
from pathlib import Path
from urllib.parse import unquote, urlparse

from PIL import Image, ImageOps, UnidentifiedImageError
from loguru import logger

from core.color_matrix import COLS, IDENTITY, to_byte_range
from core.errors import RenderNotReady, StorageReadError

try:  # pragma: no cover - optional dependency
    from pillow_heif import register_heif_opener  # type: ignore

    register_heif_opener()
    PIL_HEIF_AVAILABLE = True
except ImportError:  # pragma: no cover - optional dependency
    PIL_HEIF_AVAILABLE = False


def uri_to_path(uri: str) -> str:
    """Return a local file-system path for a plain path or `file://` URI."""
    if uri.startswith("file://"):
        parsed = urlparse(uri)
        path = unquote(parsed.path)
        # file:///C:/x on Windows parses to "/C:/x"
        if os.name == "nt" and len(path) > 2 and path[0] == "/" and path[2] == ":":
            path = path[1:]
        return path
    return uri


def _cache_key(path: str) -> str:
    try:
        st = os.stat(path)
        return f"{path}|{int(st.st_mtime_ns)}|{int(st.st_size)}"
    except OSError:
        return f"{path}|0|0"


@dataclass
class _MemCacheItem:
    key: str
    image: Image.Image


class _LRUCache:
    def __init__(self, capacity: int) -> None:
        self._cap = max(1, int(capacity or 1))
        self._data: OrderedDict[str, _MemCacheItem] = OrderedDict()

    def get(self, key: str) -> Image.Image | None:
        """Return cached image for key, moving it to the MRU position."""
        item = self._data.get(key)
        if not item:
            return None
        self._data.move_to_end(key)
        return item.image

    def put(self, key: str, image: Image.Image) -> None:
        """Insert or update `key` with `image`, evicting LRU when over capacity."""
        self._data[key] = _MemCacheItem(key, image)
        self._data.move_to_end(key)
        while len(self._data) > self._cap:
            self._data.popitem(last=False)

    def __len__(self) -> int:
        return len(self._data)


def apply_color_matrix(image: Image.Image, matrix: Sequence[float]) -> Image.Image:
    """Apply a normalized 4x5 color matrix to `image` and return a new image.

    The RGB rows go through Pillow's matrix conversion on 0-255 channels. Alpha
    is carried over unchanged; engine matrices never mix alpha with color.
    """
    m = to_byte_range(matrix)
    rgb_matrix = tuple(m[row * COLS + col] for row in range(3) for col in (0, 1, 2, 4))
    has_alpha = "A" in image.getbands()
    rgb = image.convert("RGB")
    out = rgb.convert("RGB", rgb_matrix)
    if has_alpha:
        out.putalpha(image.getchannel("A"))
    return out


class PillowRenderer:
    """Renders a source image through a color matrix and keeps the last frame."""

    def __init__(self, cache_size: int = 8, max_side: int = 1600) -> None:
        self._cache = _LRUCache(cache_size)
        self._max_side = max(1, int(max_side))
        self._frame: Image.Image | None = None
        self._frame_source: str | None = None
        self.heif_available = bool(PIL_HEIF_AVAILABLE)

    @property
    def has_frame(self) -> bool:
        return self._frame is not None

    @property
    def frame(self) -> Image.Image | None:
        """The most recently rendered frame, if any."""
        return self._frame

    def clear(self) -> None:
        """Forget the current frame (e.g. when another project is opened)."""
        self._frame = None
        self._frame_source = None

    def load(self, source_uri: str) -> Image.Image:
        """Decode `source_uri`, applying EXIF orientation. Cached by path and mtime."""
        path = uri_to_path(source_uri)
        key = _cache_key(path)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        try:
            with Image.open(path) as im:
                try:
                    im = ImageOps.exif_transpose(im)
                except (OSError, ValueError, AttributeError) as ex:
                    logger.debug("EXIF transpose skipped for {}: {}", path, ex)
                mode = "RGBA" if "A" in im.getbands() or im.mode == "P" else "RGB"
                decoded = im.convert(mode)
                decoded.load()
        except FileNotFoundError as ex:
            raise StorageReadError(f"Image not found: {path}") from ex
        except (UnidentifiedImageError, OSError, ValueError) as ex:
            logger.error("Decode failed for {}: {}", path, ex)
            raise StorageReadError(f"Could not open image {Path(path).name}: {ex}") from ex

        if max(decoded.size) > self._max_side:
            decoded.thumbnail((self._max_side, self._max_side), Image.Resampling.LANCZOS)
        self._cache.put(key, decoded)
        return decoded

    def render(
        self,
        source_uri: str,
        matrix: Sequence[float] = IDENTITY,
        size: tuple[int, int] | None = None,
    ) -> Image.Image:
        """Fit the source into `size` (contain) and apply `matrix`.

        A missing or empty `size` renders at the decoded size.
        """
        source = self.load(source_uri)
        if size and size[0] > 0 and size[1] > 0 and source.size != tuple(size):
            target = (int(size[0]), int(size[1]))
            fitted = ImageOps.contain(source, target, Image.Resampling.LANCZOS)
        else:
            fitted = source
        frame = apply_color_matrix(fitted, matrix)
        self._frame = frame
        self._frame_source = source_uri
        return frame

    def snapshot(self, quality: int = 95) -> bytes:
        """Encode the current frame as JPEG. Raises `RenderNotReady` without a frame."""
        if self._frame is None:
            raise RenderNotReady()
        quality = min(100, max(0, int(quality)))
        buf = io.BytesIO()
        self._frame.convert("RGB").save(buf, format="JPEG", quality=quality)
        data = buf.getvalue()
        logger.debug(
            "Snapshot of {} encoded: {} bytes (q={})", self._frame_source, len(data), quality
        )
        return data
