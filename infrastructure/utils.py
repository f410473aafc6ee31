"""File-system helpers shared by the project store and media store.

Writes go to a temporary sibling first and are moved into place with
`os.replace`, so readers never observe a half-written file.
"""

from __future__ import annotations

import os
from pathlib import Path
import tempfile

from loguru import logger


def ensure_dir(p: Path) -> None:
    """Create directory `p` if missing (including parents)."""
    p.mkdir(parents=True, exist_ok=True)


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Write `data` to `path` atomically. Raises OSError on failure."""
    ensure_dir(path.parent)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError as ex:
            logger.debug("Temp cleanup failed for {}: {}", tmp_name, ex)
        raise


def atomic_write_text(path: Path, text: str) -> None:
    atomic_write_bytes(path, text.encode("utf-8"))


def unique_path(directory: Path, prefix: str, stamp: int, suffix: str) -> Path:
    """Return `<prefix><stamp><suffix>` under `directory`, bumping `stamp` if taken."""
    candidate = directory / f"{prefix}{stamp}{suffix}"
    while candidate.exists():
        stamp += 1
        candidate = directory / f"{prefix}{stamp}{suffix}"
    return candidate
