"""
UI/view constants centralized for reuse across view modules.

Slider ranges come from the domain model so the UI contract and the stored
values can never disagree.
"""

from __future__ import annotations

from PySide6.QtCore import Qt

from core.models import ADJUSTMENT_RANGES, REDUCED_EXPOSURE_RANGE

# Slider labels in display order
SLIDER_LABELS: list[tuple[str, str]] = [
    ("brightness", "Brightness"),
    ("contrast", "Contrast"),
    ("exposure", "Exposure"),
    ("saturation", "Saturation"),
]

# QSlider works on ints; each unit is 1/SLIDER_STEPS of the real value.
SLIDER_STEPS: int = 100


def slider_range(name: str, reduced: bool = False) -> tuple[float, float]:
    """Real-valued UI range for adjustment `name`."""
    if reduced and name == "exposure":
        return REDUCED_EXPOSURE_RANGE
    return ADJUSTMENT_RANGES[name]


# Data roles
PROJECT_ID_ROLE: int = Qt.UserRole

# List/preview defaults
LIST_THUMB_PX: int = 64
PREVIEW_MIN_PX: int = 320
RENDER_DEBOUNCE_MS: int = 30
STATUS_TIMEOUT_MS: int = 3000
