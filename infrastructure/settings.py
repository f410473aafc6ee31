"""Settings access helpers for JSON-based configuration."""

from __future__ import annotations

from dataclasses import dataclass
import json
import os
from pathlib import Path
from typing import Any

from loguru import logger

MATRIX_VARIANTS = ("combined", "reduced")


class JsonSettings:
    """Lightweight JSON settings reader with dotted-key access."""

    def __init__(self, settings_path: str | Path) -> None:
        self._path = Path(settings_path)
        if not self._path.exists():
            raise FileNotFoundError(f"settings.json not found: {self._path}")
        with self._path.open("r", encoding="utf-8") as f:
            self._data = json.load(f)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> JsonSettings:
        """Build settings from an in-memory mapping (no file involved)."""
        inst = cls.__new__(cls)
        inst._path = Path("<memory>")
        inst._data = data
        return inst

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return value for dotted `key`, or `default` if not present."""
        parts = key.split(".")
        node: Any = self._data
        for part in parts:
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return default
        return node


def _expand_path(raw: str) -> Path:
    return Path(os.path.expandvars(raw)).expanduser()


def _get_int(settings: JsonSettings, key: str, default: int) -> int:
    try:
        return int(settings.get(key, default) or default)
    except (ValueError, TypeError):
        logger.warning("Invalid integer for {}: {!r}, using {}", key, settings.get(key), default)
        return default


@dataclass(frozen=True)
class AppConfig:
    """Resolved, immutable application configuration.

    Built once at start-up; the storage root is handed to the project store
    explicitly rather than read from a global.
    """

    storage_root: Path
    edits_dir: Path
    exports_dir: Path
    captures_dir: Path
    log_dir: Path
    jpeg_quality: int = 95
    preview_max_side: int = 1600
    render_cache_size: int = 8
    matrix_variant: str = "combined"

    @classmethod
    def from_settings(cls, settings: JsonSettings) -> AppConfig:
        """Resolve paths and numeric options from `settings`, applying defaults."""
        base = "~/.photo_editor"
        variant = str(settings.get("editor.matrix_variant", "combined") or "combined").lower()
        if variant not in MATRIX_VARIANTS:
            logger.warning("Unknown matrix variant {!r}, using combined", variant)
            variant = "combined"
        quality = min(100, max(0, _get_int(settings, "render.jpeg_quality", 95)))
        return cls(
            storage_root=_expand_path(settings.get("storage.root", f"{base}/projects")),
            edits_dir=_expand_path(settings.get("storage.edits_dir", f"{base}/edits")),
            exports_dir=_expand_path(settings.get("storage.exports_dir", "~/Pictures/PhotoEditor")),
            captures_dir=_expand_path(settings.get("storage.captures_dir", f"{base}/captures")),
            log_dir=_expand_path(settings.get("logging.dir", f"{base}/logs")),
            jpeg_quality=quality,
            preview_max_side=_get_int(settings, "render.preview_max_side", 1600),
            render_cache_size=_get_int(settings, "render.cache_size", 8),
            matrix_variant=variant,
        )
