"""Lightweight view model wrapper around `Project`."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from core.models import Adjustments, Project, resolve_adjustments


@dataclass
class ProjectVM:
    """Expose convenient properties for list bindings."""

    project: Project

    @property
    def project_id(self) -> str:
        return self.project.id

    @property
    def title(self) -> str:
        """Project name, falling back to the source file name."""
        return self.project.name or Path(self.project.source_uri).name

    @property
    def thumbnail_uri(self) -> str:
        """Latest rendered edit if present, otherwise the original image."""
        return self.project.edited_uri or self.project.source_uri

    @property
    def updated_label(self) -> str:
        """Human readable "Updated ..." line in local time."""
        try:
            when = datetime.fromtimestamp(self.project.updated_at / 1000)
        except (ValueError, OverflowError, OSError):
            return "Updated at an unknown time"
        return f"Updated {when:%Y-%m-%d %H:%M}"

    @property
    def adjustments(self) -> Adjustments:
        return resolve_adjustments(self.project)

    @property
    def is_edited(self) -> bool:
        """True when the project carries non-neutral adjustments."""
        return not self.adjustments.is_identity
