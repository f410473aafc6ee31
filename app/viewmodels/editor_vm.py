"""ViewModel for the editor: adjustment state, live matrix, save and export."""

from __future__ import annotations

from dataclasses import replace

from loguru import logger

from core.color_matrix import color_matrix, reduced_color_matrix
from core.errors import PhotoEditorError, StorageWriteError
from core.models import (
    ADJUSTMENT_FIELDS,
    Adjustments,
    Project,
    clamp_adjustments,
    resolve_adjustments,
)
from core.services.interfaces import (
    ExportResult,
    MediaSink,
    ProjectRepository,
    Renderer,
    SaveResult,
)


class NoProjectLoaded(PhotoEditorError):
    title = "Cannot save"

    def default_message(self) -> str:
        return "No project loaded."


class EditorVM:
    """Editor view-model.

    Holds the effective adjustments of the open project and derives the color
    matrix from them. The matrix is cheap to compute and safe to read during a
    redraw.
    """

    def __init__(
        self,
        repo: ProjectRepository,
        renderer: Renderer,
        media: MediaSink,
        variant: str = "combined",
        jpeg_quality: int = 95,
    ) -> None:
        """Create an EditorVM.

        Args:
            repo: Project repository used to load and save records.
            renderer: Renderer producing frames and JPEG snapshots.
            media: Destination for rendered edits and exports.
            variant: "combined" (four sliders) or "reduced" (saturation fixed at 1).
            jpeg_quality: Encoding quality for snapshots, 0-100.
        """
        self._repo = repo
        self._renderer = renderer
        self._media = media
        self._reduced = variant == "reduced"
        self._quality = jpeg_quality
        self._project: Project | None = None
        self._adjustments = Adjustments()
        self._saved_adjustments = Adjustments()
        # Matrix and size of the frame the renderer currently holds.
        self._rendered: tuple[list[float], tuple[int, int] | None] | None = None

    @property
    def project(self) -> Project | None:
        return self._project

    @property
    def is_reduced(self) -> bool:
        return self._reduced

    @property
    def adjustments(self) -> Adjustments:
        return replace(self._adjustments)

    @property
    def is_dirty(self) -> bool:
        """True when the sliders differ from what was last loaded or saved."""
        return self._adjustments != self._saved_adjustments

    @property
    def matrix(self) -> list[float]:
        """Color matrix for the current adjustments."""
        a = self._adjustments
        if self._reduced:
            return reduced_color_matrix(a.brightness, a.contrast, a.exposure)
        return color_matrix(a.brightness, a.contrast, a.exposure, a.saturation)

    def load(self, project_id: str) -> bool:
        """Open `project_id`. Returns False when the project no longer exists."""
        project = self._repo.get(project_id)
        clear = getattr(self._renderer, "clear", None)
        if clear is not None:
            clear()
        self._rendered = None
        if project is None:
            logger.warning("Project {} not found", project_id)
            self._project = None
            self._adjustments = Adjustments()
            self._saved_adjustments = Adjustments()
            return False
        self._project = project
        self._adjustments = clamp_adjustments(resolve_adjustments(project), reduced=self._reduced)
        self._saved_adjustments = replace(self._adjustments)
        logger.info("Loaded project {} ({})", project.id, project.source_uri)
        return True

    def set_adjustment(self, name: str, value: float) -> Adjustments:
        """Set one slider, clamped to its UI range."""
        if name not in ADJUSTMENT_FIELDS:
            raise ValueError(f"Unknown adjustment: {name}")
        updated = replace(self._adjustments, **{name: float(value)})
        self._adjustments = clamp_adjustments(updated, reduced=self._reduced)
        return self.adjustments

    def set_adjustments(self, adjustments: Adjustments) -> Adjustments:
        self._adjustments = clamp_adjustments(adjustments, reduced=self._reduced)
        return self.adjustments

    def reset(self) -> Adjustments:
        """Return every slider to its neutral value."""
        self._adjustments = Adjustments()
        return self.adjustments

    def render(self, size: tuple[int, int] | None = None):
        """Render the open project's source through the current matrix."""
        project = self._require_project()
        matrix = self.matrix
        frame = self._renderer.render(project.source_uri, matrix, size)
        self._rendered = (matrix, size)
        return frame

    def save(self) -> SaveResult:
        """Persist the current adjustments with a fresh rendered snapshot."""
        project = self._require_project()
        data = self._current_snapshot()
        edited_uri = self._media.write_edit(data)
        previous = project.edited_uri
        try:
            saved = self._repo.touch_and_save(project, self._adjustments, edited_uri)
        except StorageWriteError:
            self._discard(edited_uri)
            raise
        if previous and previous != edited_uri:
            self._discard(previous)
        self._project = saved
        self._saved_adjustments = replace(self._adjustments)
        logger.info("Project {} saved with edit {}", saved.id, edited_uri)
        return SaveResult(project=saved, edited_uri=edited_uri)

    def export(self) -> ExportResult:
        """Write the current render to the exports location."""
        self._require_project()
        data = self._current_snapshot()
        path = self._media.write_export(data)
        logger.info("Exported {} bytes to {}", len(data), path)
        return ExportResult(path=path, size_bytes=len(data))

    def _current_snapshot(self) -> bytes:
        """Encode the held frame, re-rendering it first if the sliders moved since."""
        if self._rendered is not None and self._rendered[0] != self.matrix:
            logger.debug("Frame is stale, re-rendering before snapshot")
            self.render(self._rendered[1])
        return self._renderer.snapshot(self._quality)

    def _require_project(self) -> Project:
        if self._project is None:
            raise NoProjectLoaded()
        return self._project

    def _discard(self, path: str) -> None:
        discard = getattr(self._media, "discard_edit", None)
        if discard is not None:
            discard(path)
