"""Core service interfaces and shared data structures.

Protocols describe the collaborators the view models depend on (project
storage, rendering, image import, media output); dataclasses carry the
outcomes of user-initiated actions back to the view layer.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol

from core.models import Adjustments, Project


@dataclass
class SaveResult:
    """Outcome of saving a project.

    Attributes:
        project: The record as written to storage.
        edited_uri: Path of the rendered snapshot stored alongside it.
    """

    project: Project
    edited_uri: str


@dataclass
class ExportResult:
    """Outcome of exporting the current render.

    Attributes:
        path: Where the encoded image was written.
        size_bytes: Encoded size.
    """

    path: str
    size_bytes: int


@dataclass
class DeleteResult:
    """Outcome of deleting a project.

    Attributes:
        project_id: Id of the deleted record.
        trashed: Rendered edit files moved to the recycle bin.
        failed: Tuples of (path, reason) for edit files that could not be trashed.
    """

    project_id: str
    trashed: list[str]
    failed: list[tuple[str, str]]


class ProjectRepository(Protocol):
    """Durable storage of project records keyed by id."""

    def create(self, source_uri: str, name: str | None = None) -> Project: ...

    def get(self, project_id: str) -> Project | None: ...

    def list(self) -> list[Project]: ...

    def save(self, project: Project) -> Project: ...

    def touch_and_save(
        self, project: Project, adjustments: Adjustments, edited_uri: str | None
    ) -> Project: ...

    def delete(self, project_id: str) -> None: ...


class Renderer(Protocol):
    """Paints a source image through a color matrix and encodes snapshots."""

    @property
    def has_frame(self) -> bool: ...

    def render(self, source_uri: str, matrix: Sequence[float], size: tuple[int, int]) -> Any: ...

    def snapshot(self, quality: int = 95) -> bytes: ...


class ImageSource(Protocol):
    """Turns a picked or captured image into a stable local path."""

    def validate_pick(self, path: str) -> str: ...

    def import_capture(self, temp_path: str) -> str: ...


class MediaSink(Protocol):
    """Stores encoded renders for projects and exports."""

    def write_edit(self, data: bytes) -> str: ...

    def write_export(self, data: bytes) -> str: ...
