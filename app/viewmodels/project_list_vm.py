"""ViewModel for the recent-projects list."""

from __future__ import annotations

from loguru import logger

from app.viewmodels.project_vm import ProjectVM
from core.models import Project
from core.services.interfaces import DeleteResult, ImageSource, ProjectRepository
from core.services.sort_service import DEFAULT_SORT, SortService


class ProjectListVM:
    """Project list view-model.

    Mediates between the project repository, the image import service and the
    list UI. Errors from storage propagate to the caller, which owns
    presentation.
    """

    def __init__(
        self,
        repo: ProjectRepository,
        image_source: ImageSource,
        delete_service=None,
        sorter: SortService | None = None,
        sort_keys: list[tuple[str, bool]] | None = None,
    ) -> None:
        """Create a ProjectListVM.

        Args:
            repo: Repository with `create/get/list/delete`.
            image_source: Validates picks and imports camera captures.
            delete_service: Optional service that also trashes rendered edits.
            sorter: Sorting service (defaults to `SortService`).
            sort_keys: List of (field_name, ascending); newest first by default.
        """
        self._repo = repo
        self._source = image_source
        self._deleter = delete_service
        self._sorter = sorter or SortService()
        self._sort_keys = sort_keys or DEFAULT_SORT
        self.projects: list[ProjectVM] = []

    def refresh(self) -> list[ProjectVM]:
        """Reload all projects from storage and sort them for display."""
        items = self._repo.list()
        ordered = self._sorter.sort(items, self._sort_keys)
        self.projects = [ProjectVM(p) for p in ordered]
        logger.info("Loaded {} projects", len(self.projects))
        return self.projects

    def create_from_pick(self, path: str) -> Project:
        """Start a project on a gallery image referenced in place."""
        source = self._source.validate_pick(path)
        return self._add(self._repo.create(source))

    def create_from_capture(self, temp_path: str) -> Project:
        """Start a project on a camera capture, copied into app storage first."""
        source = self._source.import_capture(temp_path)
        return self._add(self._repo.create(source))

    def delete(self, project_id: str) -> DeleteResult | None:
        """Delete a project and drop it from the list."""
        result: DeleteResult | None = None
        if self._deleter is not None:
            result = self._deleter.delete_project(project_id)
        else:
            self._repo.delete(project_id)
        self.projects = [vm for vm in self.projects if vm.project_id != project_id]
        return result

    def find(self, project_id: str) -> ProjectVM | None:
        for vm in self.projects:
            if vm.project_id == project_id:
                return vm
        return None

    @property
    def count(self) -> int:
        """Number of projects currently listed."""
        return len(self.projects)

    def _add(self, project: Project) -> Project:
        self.projects.insert(0, ProjectVM(project))
        return project
