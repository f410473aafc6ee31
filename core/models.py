"""Core domain models for editing projects and their adjustments."""

from __future__ import annotations

from dataclasses import dataclass, replace
import math
from typing import Any

from core.errors import CorruptRecord

# UI slider domains; the color matrix engine itself never clamps.
ADJUSTMENT_RANGES: dict[str, tuple[float, float]] = {
    "brightness": (-1.0, 1.0),
    "contrast": (-1.0, 1.0),
    "exposure": (-2.0, 2.0),
    "saturation": (0.0, 2.0),
}
REDUCED_EXPOSURE_RANGE: tuple[float, float] = (-1.0, 1.0)

ADJUSTMENT_FIELDS: tuple[str, ...] = ("brightness", "contrast", "exposure", "saturation")

# Epoch milliseconds up to the end of year 9999, the last instant datetime can show.
MAX_TIMESTAMP_MS = 253_402_300_799_999


@dataclass
class Adjustments:
    """The four scalar sliders that drive the color transform."""

    brightness: float = 0.0
    contrast: float = 0.0
    exposure: float = 0.0
    saturation: float = 1.0

    def to_dict(self) -> dict[str, float]:
        return {name: getattr(self, name) for name in ADJUSTMENT_FIELDS}

    @property
    def is_identity(self) -> bool:
        """True when every slider sits at its neutral value."""
        return self == Adjustments()


@dataclass
class Project:
    """A persisted unit of editing work.

    Field names are snake_case in Python; `to_dict`/`from_dict` translate to
    the camelCase names used in the stored JSON.
    """

    id: str
    source_uri: str
    created_at: int
    updated_at: int
    name: str | None = None
    edited_uri: str | None = None
    # Raw stored values, possibly partial. Use `resolve_adjustments` to read.
    adjustments: dict[str, float] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the on-disk shape, dropping absent optional fields."""
        data: dict[str, Any] = {"id": self.id}
        if self.name is not None:
            data["name"] = self.name
        data["sourceUri"] = self.source_uri
        if self.edited_uri is not None:
            data["editedUri"] = self.edited_uri
        data["createdAt"] = self.created_at
        data["updatedAt"] = self.updated_at
        if self.adjustments is not None:
            data["adjustments"] = dict(self.adjustments)
        return data

    @classmethod
    def from_dict(cls, data: Any, source: str = "<memory>") -> Project:
        """Build a Project from decoded JSON, raising `CorruptRecord` on bad shape."""
        if not isinstance(data, dict):
            raise CorruptRecord(source, "record is not an object")

        project_id = _require_str(data, "id", source)
        source_uri = _require_str(data, "sourceUri", source)
        created_at = _require_timestamp(data, "createdAt", source)
        updated_at = _require_timestamp(data, "updatedAt", source)
        name = _optional_str(data, "name", source)
        edited_uri = _optional_str(data, "editedUri", source)

        adjustments: dict[str, float] | None = None
        raw_adj = data.get("adjustments")
        if raw_adj is not None:
            if not isinstance(raw_adj, dict):
                raise CorruptRecord(source, "adjustments is not an object")
            adjustments = {}
            for key in ADJUSTMENT_FIELDS:
                value = raw_adj.get(key)
                if value is None:
                    continue
                if not _is_number(value) or not math.isfinite(value):
                    raise CorruptRecord(source, f"adjustments.{key} is not a finite number")
                adjustments[key] = float(value)

        return cls(
            id=project_id,
            source_uri=source_uri,
            created_at=created_at,
            updated_at=updated_at,
            name=name,
            edited_uri=edited_uri,
            adjustments=adjustments,
        )

    def with_edit(
        self, adjustments: Adjustments, edited_uri: str | None, updated_at: int
    ) -> Project:
        """Return the next full record after a save; identity fields are kept."""
        return replace(
            self,
            edited_uri=edited_uri,
            updated_at=updated_at,
            adjustments=adjustments.to_dict(),
        )


def resolve_adjustments(raw: Project | dict[str, Any] | Adjustments | None) -> Adjustments:
    """Map stored (possibly absent or partial) adjustments to a full set.

    Missing fields take their identity value: brightness, contrast and
    exposure 0, saturation 1.
    """
    if isinstance(raw, Adjustments):
        return replace(raw)
    if isinstance(raw, Project):
        raw = raw.adjustments
    if not raw:
        return Adjustments()
    defaults = Adjustments()
    values = {}
    for name in ADJUSTMENT_FIELDS:
        value = raw.get(name)
        values[name] = float(value) if value is not None else getattr(defaults, name)
    return Adjustments(**values)


def clamp_adjustments(adj: Adjustments, reduced: bool = False) -> Adjustments:
    """Clamp each slider into its UI range."""
    values = {}
    for name in ADJUSTMENT_FIELDS:
        lo, hi = ADJUSTMENT_RANGES[name]
        if reduced and name == "exposure":
            lo, hi = REDUCED_EXPOSURE_RANGE
        values[name] = min(hi, max(lo, float(getattr(adj, name))))
    if reduced:
        values["saturation"] = 1.0
    return Adjustments(**values)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _require_str(data: dict, key: str, source: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise CorruptRecord(source, f"missing or invalid '{key}'")
    return value


def _optional_str(data: dict, key: str, source: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise CorruptRecord(source, f"'{key}' is not a string")
    return value


def _require_timestamp(data: dict, key: str, source: str) -> int:
    value = data.get(key)
    if not _is_number(value):
        raise CorruptRecord(source, f"missing or invalid '{key}'")
    if isinstance(value, float) and not (math.isfinite(value) and value.is_integer()):
        raise CorruptRecord(source, f"'{key}' is not a whole number of milliseconds")
    if not 0 <= value <= MAX_TIMESTAMP_MS:
        raise CorruptRecord(source, f"'{key}' is out of range")
    return int(value)
