"""Bringing picked and captured photos into the application.

A camera hands over a temporary capture file; it is copied under the captures
directory so the project keeps a stable source reference. Gallery picks are
referenced in place after a readability check.
"""

from __future__ import annotations

from collections.abc import Callable
import os
from pathlib import Path
import shutil

from loguru import logger

from core.errors import PermissionDenied, StorageReadError, StorageWriteError
from core.services.ids import now_ms
from infrastructure.renderer import uri_to_path
from infrastructure.utils import ensure_dir, unique_path

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".heic", ".heif", ".webp", ".bmp", ".tif", ".tiff"}


class CaptureService:
    """Validates gallery picks and imports camera captures."""

    def __init__(self, captures_dir: str | Path, clock: Callable[[], int] = now_ms) -> None:
        self._dir = Path(captures_dir)
        self._clock = clock

    def validate_pick(self, path: str) -> str:
        """Return `path` if it names a readable image file."""
        local = uri_to_path(path)
        if not os.path.isfile(local):
            raise StorageReadError(f"Image not found: {local}")
        if not os.access(local, os.R_OK):
            raise PermissionDenied(f"Reading {Path(local).name} was refused.")
        if Path(local).suffix.lower() not in IMAGE_EXTENSIONS:
            logger.warning("Picked file has unusual extension: {}", local)
        return path

    def import_capture(self, temp_path: str) -> str:
        """Copy a camera capture to `photo_<ms><ext>` and return the new path."""
        src = Path(uri_to_path(temp_path))
        suffix = src.suffix.lower() or ".jpg"
        try:
            ensure_dir(self._dir)
            target = unique_path(self._dir, "photo_", self._clock(), suffix)
            shutil.copyfile(src, target)
        except FileNotFoundError as ex:
            raise StorageReadError(f"Capture file missing: {src}") from ex
        except PermissionError as ex:
            logger.error("Capture copy refused {} -> {}: {}", src, self._dir, ex)
            raise PermissionDenied("Access to the captured photo was refused.") from ex
        except OSError as ex:
            logger.error("Capture copy failed {} -> {}: {}", src, self._dir, ex)
            raise StorageWriteError(f"Failed to save photo: {ex}") from ex

        if not target.exists():
            logger.error("File copy failed from {} to {}", src, target)
            raise StorageWriteError("Failed to save photo.")
        logger.info("Imported capture {} -> {}", src, target)
        return str(target)
