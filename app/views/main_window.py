"""Main window: the recent-projects list and project creation actions."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from PySide6.QtCore import QSize
from PySide6.QtGui import QIcon
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QPushButton,
    QVBoxLayout,
    QWidget,
)
from loguru import logger

from app.views.constants import LIST_THUMB_PX, PROJECT_ID_ROLE, STATUS_TIMEOUT_MS
from app.views.editor_window import EditorWindow
from app.views.handlers.dialog_handler import DialogHandler
from app.views.media_utils import load_thumbnail


class MainWindow(QMainWindow):
    """Lists recent projects and opens them in an `EditorWindow`."""

    def __init__(self, vm: Any, editor_factory: Callable[[], Any]) -> None:
        """Initialize MainWindow.

        Args:
            vm: `ProjectListVM` instance for list operations
            editor_factory: Returns a fresh `EditorVM` for each opened project
        """
        super().__init__()
        self._vm = vm
        self._editor_factory = editor_factory
        self._editor: EditorWindow | None = None
        self._dialogs = DialogHandler(self)
        self._setup_ui()

    def _setup_ui(self) -> None:
        self.setWindowTitle("Photo Editor")
        central = QWidget(self)
        root = QVBoxLayout(central)

        root.addWidget(QLabel("Recent Projects"))

        actions = QHBoxLayout()
        pick = QPushButton("Pick from Gallery")
        pick.clicked.connect(self.on_pick_from_gallery)
        capture = QPushButton("Import Capture")
        capture.clicked.connect(self.on_import_capture)
        delete = QPushButton("Delete")
        delete.clicked.connect(self.on_delete_selected)
        refresh = QPushButton("Refresh")
        refresh.clicked.connect(self.refresh)
        for btn in (pick, capture, delete, refresh):
            actions.addWidget(btn)
        root.addLayout(actions)

        self.list = QListWidget()
        self.list.setIconSize(QSize(LIST_THUMB_PX, LIST_THUMB_PX))
        self.list.itemActivated.connect(self._on_item_activated)
        root.addWidget(self.list, 1)

        self._empty = QLabel("No recent projects yet.\nPick an image or import a capture to start.")
        root.addWidget(self._empty)

        self.setCentralWidget(central)
        self.resize(520, 640)

    def refresh(self) -> None:
        """Reload projects from storage and rebuild the list."""
        if self._dialogs.run(self._vm.refresh) is None:
            return
        self._rebuild_list()
        self.statusBar().showMessage(f"{self._vm.count} projects", STATUS_TIMEOUT_MS)

    def _rebuild_list(self) -> None:
        self.list.clear()
        for pvm in self._vm.projects:
            item = QListWidgetItem(f"{pvm.title}\n{pvm.updated_label}")
            item.setData(PROJECT_ID_ROLE, pvm.project_id)
            pix = load_thumbnail(pvm.thumbnail_uri, LIST_THUMB_PX)
            if not pix.isNull():
                item.setIcon(QIcon(pix))
            self.list.addItem(item)
        self._empty.setVisible(self._vm.count == 0)

    # Actions
    def on_pick_from_gallery(self) -> None:
        path = self._dialogs.pick_image("Pick from Gallery")
        if not path:
            return
        project = self._dialogs.run(lambda: self._vm.create_from_pick(path))
        if project is not None:
            self._rebuild_list()
            self.open_project(project.id)

    def on_import_capture(self) -> None:
        path = self._dialogs.pick_image("Import Capture")
        if not path:
            return
        project = self._dialogs.run(lambda: self._vm.create_from_capture(path))
        if project is not None:
            self._rebuild_list()
            self.open_project(project.id)

    def on_delete_selected(self) -> None:
        item = self.list.currentItem()
        if item is None:
            return
        project_id = item.data(PROJECT_ID_ROLE)
        if not self._dialogs.confirm("Delete", "Delete this project? The original photo is kept."):
            return
        result = self._dialogs.run(lambda: self._vm.delete(project_id))
        if result is not None and result.failed:
            logger.warning("Edits left behind for {}: {}", project_id, result.failed)
        self._rebuild_list()

    def _on_item_activated(self, item: QListWidgetItem) -> None:
        self.open_project(item.data(PROJECT_ID_ROLE))

    def open_project(self, project_id: str) -> None:
        editor_vm = self._editor_factory()
        loaded = self._dialogs.run(lambda: editor_vm.load(project_id))
        if loaded is None:
            return
        if not loaded:
            self._dialogs.show_info("Project not found", "The project was removed.")
            self.refresh()
            return
        if self._editor is not None and not self._editor.close():
            return
        self._editor = EditorWindow(editor_vm, parent=self)
        self._editor.projectSaved.connect(lambda _pid: self.refresh())
        self._editor.show()
