"""DialogHandler: Coordinates file pickers and user-facing messages."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

from PySide6.QtWidgets import QFileDialog, QMessageBox, QWidget
from loguru import logger

from core.errors import PhotoEditorError, StorageError

T = TypeVar("T")

IMAGE_FILTER = "Images (*.jpg *.jpeg *.png *.heic *.heif *.webp *.bmp *.tif *.tiff)"


class DialogHandler:
    """Coordinates dialog operations and user interactions.

    This class encapsulates all dialog-related functionality including:
    - Image pickers for gallery picks and camera captures
    - Presenting application errors with an actionable message
    - Confirmation prompts
    """

    def __init__(self, parent_widget: QWidget) -> None:
        """Initialize with the parent widget used for all dialogs."""
        self.parent = parent_widget

    def pick_image(self, title: str = "Pick from Gallery") -> str | None:
        """Ask for an image file; None when cancelled."""
        path, _ = QFileDialog.getOpenFileName(self.parent, title, "", IMAGE_FILTER)
        return path or None

    def show_error(self, error: PhotoEditorError) -> bool:
        """Show `error`; for storage failures offer retry. Returns True to retry."""
        logger.warning("{}: {}", error.title, error.message)
        if isinstance(error, StorageError):
            choice = QMessageBox.warning(
                self.parent,
                error.title,
                error.message,
                QMessageBox.Retry | QMessageBox.Cancel,
                QMessageBox.Retry,
            )
            return choice == QMessageBox.Retry
        QMessageBox.critical(self.parent, error.title, error.message)
        return False

    def run(self, action: Callable[[], T]) -> T | None:
        """Run a user-initiated `action`, presenting failures; retries on request."""
        while True:
            try:
                return action()
            except PhotoEditorError as ex:
                if not self.show_error(ex):
                    return None

    def show_info(self, title: str, message: str) -> None:
        QMessageBox.information(self.parent, title, message)

    def confirm(self, title: str, message: str) -> bool:
        choice = QMessageBox.question(
            self.parent, title, message, QMessageBox.Yes | QMessageBox.No, QMessageBox.No
        )
        return choice == QMessageBox.Yes
