"""Storage for encoded renders: per-project edits and user exports."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from loguru import logger

from core.errors import PermissionDenied, StorageWriteError
from core.services.ids import now_ms
from infrastructure.utils import atomic_write_bytes, ensure_dir, unique_path


class MediaStore:
    """Writes JPEG snapshots under the edits and exports directories."""

    def __init__(
        self,
        edits_dir: str | Path,
        exports_dir: str | Path,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._edits = Path(edits_dir)
        self._exports = Path(exports_dir)
        self._clock = clock

    def write_edit(self, data: bytes) -> str:
        """Store a rendered edit as `edit-<ms>.jpg` and return its path."""
        return self._write(self._edits, "edit-", data)

    def write_export(self, data: bytes) -> str:
        """Store an exported image as `export-<ms>.jpg` and return its path."""
        return self._write(self._exports, "export-", data)

    def discard_edit(self, path: str | None) -> bool:
        """Remove a superseded edit file; paths outside the edits directory are left alone."""
        if not path:
            return False
        target = Path(path)
        try:
            if target.resolve().parent != self._edits.resolve():
                return False
            target.unlink()
        except FileNotFoundError:
            return False
        except OSError as ex:
            logger.warning("Could not remove old edit {}: {}", target, ex)
            return False
        logger.debug("Removed superseded edit {}", target)
        return True

    def _write(self, directory: Path, prefix: str, data: bytes) -> str:
        try:
            ensure_dir(directory)
            target = unique_path(directory, prefix, self._clock(), ".jpg")
            atomic_write_bytes(target, data)
        except PermissionError as ex:
            logger.error("Write refused in {}: {}", directory, ex)
            raise PermissionDenied(f"Writing to {directory} was refused.") from ex
        except OSError as ex:
            logger.error("Write failed in {}: {}", directory, ex)
            raise StorageWriteError(f"Could not write image to {directory}: {ex}") from ex
        logger.info("Wrote {} ({} bytes)", target, len(data))
        return str(target)
