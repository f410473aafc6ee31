"""Error taxonomy shared by the store, renderer, and view models.

Every error carries a short `title` and a user-facing `message` so the view
layer can present it without knowing where it came from.
"""

from __future__ import annotations


class PhotoEditorError(Exception):
    """Base class for all application errors."""

    title = "Error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message or self.default_message()

    def default_message(self) -> str:
        return "Something went wrong."


class PermissionDenied(PhotoEditorError):
    """The platform refused access to an image source or destination."""

    title = "Permission required"

    def default_message(self) -> str:
        return "Please allow access to continue."


class ProjectNotFound(PhotoEditorError):
    """No record exists for the requested project id."""

    title = "Project not found"

    def __init__(self, project_id: str) -> None:
        self.project_id = project_id
        super().__init__(f"Project {project_id} does not exist.")


class CorruptRecord(PhotoEditorError):
    """A stored project record could not be parsed."""

    title = "Unreadable project"

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Project file {path} is damaged: {reason}")


class StorageError(PhotoEditorError):
    """Underlying storage medium failure."""

    title = "Storage error"


class StorageWriteError(StorageError):
    title = "Could not save"

    def default_message(self) -> str:
        return "Writing to storage failed. Retry or cancel."


class StorageReadError(StorageError):
    title = "Could not read"

    def default_message(self) -> str:
        return "Reading from storage failed. Retry or cancel."


class RenderNotReady(PhotoEditorError):
    """A snapshot was requested before the renderer produced a frame."""

    title = "Image not ready"

    def default_message(self) -> str:
        return "Image not ready yet. Try again once it has loaded."
