"""Project deletion service.

Removes the project record and moves its rendered edit to the recycle bin.
Only files inside the edits directory are trashed; the source image belongs
to the gallery or camera roll and is never touched.
"""

from __future__ import annotations

import os
from pathlib import Path

from loguru import logger
from send2trash import send2trash

from core.errors import CorruptRecord
from core.services.interfaces import DeleteResult, ProjectRepository


class DeleteService:
    """Coordinates project removal and cleanup of rendered edits."""

    def __init__(self, repo: ProjectRepository, edits_dir: str | Path) -> None:
        self._repo = repo
        self._edits = Path(edits_dir)

    def delete_project(self, project_id: str, trash_edits: bool = True) -> DeleteResult:
        """Delete the record for `project_id` and optionally trash its edit.

        Raises `ProjectNotFound` when no record exists and `StorageWriteError`
        when the record cannot be removed. Failures to trash the edit file are
        reported in the result instead.
        """
        edited: str | None = None
        if trash_edits:
            try:
                project = self._repo.get(project_id)
            except CorruptRecord as ex:
                logger.warning("Deleting unreadable project {}: {}", project_id, ex.reason)
                project = None
            if project is not None:
                edited = project.edited_uri

        self._repo.delete(project_id)

        result = DeleteResult(project_id=project_id, trashed=[], failed=[])
        if edited:
            self._trash(edited, result)
        return result

    def _trash(self, path: str, result: DeleteResult) -> None:
        normalized_path = os.path.normpath(path)
        if Path(normalized_path).resolve().parent != self._edits.resolve():
            logger.warning("Not trashing {}: outside the edits folder", normalized_path)
            return
        if not os.path.exists(normalized_path):
            logger.info("Edit already gone: {}", normalized_path)
            return
        try:
            send2trash(normalized_path)
            result.trashed.append(path)
            logger.info("Moved edit to trash: {}", normalized_path)
        except (UnicodeEncodeError, OSError) as ex:
            logger.warning("Trash failed for {}: {}", normalized_path, ex)
            result.failed.append((path, str(ex)))
