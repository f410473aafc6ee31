"""JSON persistence for editing projects.

Each project is one pretty-printed `<id>.json` file under the storage root.
Records are independent: one damaged file never prevents listing the rest.
Every save rewrites the whole record.
"""

from __future__ import annotations

from collections.abc import Callable
import json
from pathlib import Path

from loguru import logger

from core.errors import CorruptRecord, ProjectNotFound, StorageReadError, StorageWriteError
from core.models import Adjustments, Project
from core.services.ids import TimeIdGenerator, now_ms
from infrastructure.utils import atomic_write_text, ensure_dir

RECORD_SUFFIX = ".json"


class JsonProjectRepository:
    """Load and save projects as one JSON file per record."""

    def __init__(
        self,
        storage_root: str | Path,
        id_generator: Callable[[], str] | None = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        """Create a repository rooted at `storage_root`.

        Args:
            storage_root: Directory holding the records; created on first use.
            id_generator: Callable producing new ids (defaults to time-based).
            clock: Callable returning the current epoch milliseconds.
        """
        self._root = Path(storage_root)
        self._clock = clock
        self._new_id = id_generator or TimeIdGenerator(clock)

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, project_id: str) -> Path:
        """Return the record path for `project_id`."""
        if not project_id or "/" in project_id or "\\" in project_id or project_id.startswith("."):
            raise ValueError(f"Invalid project id: {project_id!r}")
        return self._root / f"{project_id}{RECORD_SUFFIX}"

    def create(self, source_uri: str, name: str | None = None) -> Project:
        """Create and persist a new project for `source_uri`."""
        self._ensure_root()
        project_id = self._new_id()
        while self.path_for(project_id).exists():
            logger.warning("Project id {} already taken, generating another", project_id)
            project_id = self._new_id()
        now = self._clock()
        project = Project(
            id=project_id,
            name=name if name is not None else f"Project {project_id}",
            source_uri=source_uri,
            created_at=now,
            updated_at=now,
        )
        self._write(project)
        logger.info("Created project {} for {}", project_id, source_uri)
        return project

    def get(self, project_id: str) -> Project | None:
        """Return the project for `project_id`, or None when it does not exist."""
        path = self.path_for(project_id)
        try:
            return self._read(path)
        except FileNotFoundError:
            return None

    def list(self) -> list[Project]:
        """Return every readable project; damaged records are skipped and logged."""
        self._ensure_root()
        projects: list[Project] = []
        for path in self._root.glob(f"*{RECORD_SUFFIX}"):
            if not path.is_file():
                continue
            try:
                projects.append(self._read(path))
            except FileNotFoundError:
                logger.debug("Project file {} vanished during listing", path.name)
            except (CorruptRecord, StorageReadError) as ex:
                logger.warning("Skipping project file {}: {}", path.name, ex.message)
        return projects

    def save(self, project: Project) -> Project:
        """Overwrite the stored record for `project.id` with `project`."""
        self._ensure_root()
        self._write(project)
        logger.info("Saved project {}", project.id)
        return project

    def touch_and_save(
        self, project: Project, adjustments: Adjustments, edited_uri: str | None
    ) -> Project:
        """Save `project` with new adjustments/edit and a fresh `updated_at`."""
        updated = project.with_edit(adjustments, edited_uri, updated_at=self._clock())
        return self.save(updated)

    def delete(self, project_id: str) -> None:
        """Remove the record for `project_id`. Raises `ProjectNotFound` if absent."""
        path = self.path_for(project_id)
        try:
            path.unlink()
        except FileNotFoundError as ex:
            raise ProjectNotFound(project_id) from ex
        except OSError as ex:
            logger.error("Delete failed for {}: {}", path, ex)
            raise StorageWriteError(f"Could not delete project {project_id}: {ex}") from ex
        logger.info("Deleted project {}", project_id)

    # Internal helpers
    def _ensure_root(self) -> None:
        try:
            ensure_dir(self._root)
        except OSError as ex:
            raise StorageWriteError(f"Cannot create project folder {self._root}: {ex}") from ex

    def _read(self, path: Path) -> Project:
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise
        except UnicodeDecodeError as ex:
            raise CorruptRecord(str(path), "not UTF-8 text") from ex
        except OSError as ex:
            raise StorageReadError(f"Could not read {path}: {ex}") from ex
        try:
            data = json.loads(content)
        except json.JSONDecodeError as ex:
            raise CorruptRecord(str(path), f"invalid JSON ({ex.msg})") from ex
        project = Project.from_dict(data, source=str(path))
        if project.id != path.stem:
            raise CorruptRecord(str(path), f"id '{project.id}' does not match the file name")
        return project

    def _write(self, project: Project) -> None:
        path = self.path_for(project.id)
        text = json.dumps(project.to_dict(), indent=2)
        try:
            atomic_write_text(path, text)
        except OSError as ex:
            logger.error("Write failed for {}: {}", path, ex)
            raise StorageWriteError(f"Could not save project {project.id}: {ex}") from ex
