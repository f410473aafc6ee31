"""Editor window: live preview with adjustment sliders, save and export."""

from __future__ import annotations

from typing import Any

from PySide6.QtCore import Qt, QTimer, Signal
from PySide6.QtGui import QPixmap
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QVBoxLayout,
    QWidget,
)
from loguru import logger

from app.views.constants import (
    PREVIEW_MIN_PX,
    RENDER_DEBOUNCE_MS,
    SLIDER_LABELS,
    STATUS_TIMEOUT_MS,
    slider_range,
)
from app.views.handlers.dialog_handler import DialogHandler
from app.views.image_tasks import RenderTaskRunner
from app.views.media_utils import pil_to_qimage
from app.views.widgets.adjustment_slider import AdjustmentSlider


class EditorWindow(QMainWindow):
    """Edits one project. Emits `projectSaved(project_id)` after a save."""

    frameRendered = Signal(int, object)  # token, PIL image
    renderFailed = Signal(int, str)  # token, message
    projectSaved = Signal(str)

    def __init__(self, editor_vm: Any, parent: QWidget | None = None) -> None:
        """Initialize the editor around an `EditorVM` with a loaded project."""
        super().__init__(parent)
        self._vm = editor_vm
        self._dialogs = DialogHandler(self)
        self._runner = RenderTaskRunner(editor_vm=editor_vm, receiver=self)
        self._sliders: dict[str, AdjustmentSlider] = {}

        self._debounce = QTimer(self)
        self._debounce.setSingleShot(True)
        self._debounce.setInterval(RENDER_DEBOUNCE_MS)
        self._debounce.timeout.connect(self._request_render)

        self._setup_ui()
        self.frameRendered.connect(self._on_frame_rendered)
        self.renderFailed.connect(self._on_render_failed)

    def _setup_ui(self) -> None:
        project = self._vm.project
        self.setWindowTitle(project.name if project and project.name else "Editor")

        central = QWidget(self)
        root = QVBoxLayout(central)

        buttons = QHBoxLayout()
        back = QPushButton("Back")
        back.clicked.connect(self.close)
        save = QPushButton("Save")
        save.clicked.connect(self.on_save)
        export = QPushButton("Export")
        export.clicked.connect(self.on_export)
        reset = QPushButton("Reset")
        reset.clicked.connect(self.on_reset)
        for btn in (back, reset, save, export):
            buttons.addWidget(btn)
        root.addLayout(buttons)

        self._preview = QLabel("Loading image...")
        self._preview.setAlignment(Qt.AlignCenter)
        self._preview.setMinimumSize(PREVIEW_MIN_PX, PREVIEW_MIN_PX)
        root.addWidget(self._preview, 1)

        root.addWidget(QLabel("Adjustments"))
        current = self._vm.adjustments
        for name, label in SLIDER_LABELS:
            if name == "saturation" and self._vm.is_reduced:
                continue
            slider = AdjustmentSlider(name, label, slider_range(name, self._vm.is_reduced))
            slider.set_value(getattr(current, name))
            slider.valueChanged.connect(self._on_slider_changed)
            self._sliders[name] = slider
            root.addWidget(slider)

        self.setCentralWidget(central)
        self.resize(900, 800)

    # Rendering
    def showEvent(self, event) -> None:  # noqa: N802 - Qt override
        super().showEvent(event)
        self._debounce.start()

    def resizeEvent(self, event) -> None:  # noqa: N802 - Qt override
        super().resizeEvent(event)
        self._debounce.start()

    def _request_render(self) -> None:
        size = (self._preview.width(), self._preview.height())
        if size[0] <= 0 or size[1] <= 0:
            return
        self._runner.request_render(size)

    def _on_frame_rendered(self, token: int, frame: Any) -> None:
        if token != self._runner.latest_token:
            return
        qimg = pil_to_qimage(frame)
        if qimg is None:
            self._preview.setText("Unable to display image")
            return
        self._preview.setPixmap(QPixmap.fromImage(qimg))

    def _on_render_failed(self, token: int, message: str) -> None:
        if token != self._runner.latest_token:
            return
        self._preview.setText(message)

    def _on_slider_changed(self, name: str, value: float) -> None:
        self._vm.set_adjustment(name, value)
        self._debounce.start()

    # Actions
    def on_reset(self) -> None:
        current = self._vm.reset()
        for name, slider in self._sliders.items():
            slider.set_value(getattr(current, name))
        self._debounce.start()

    def on_save(self) -> None:
        self._flush_render()
        result = self._dialogs.run(self._vm.save)
        if result is None:
            return
        logger.info("Saved project {} from editor", result.project.id)
        self.statusBar().showMessage("Project saved to recent list.", STATUS_TIMEOUT_MS)
        self.projectSaved.emit(result.project.id)

    def on_export(self) -> None:
        self._flush_render()
        result = self._dialogs.run(self._vm.export)
        if result is None:
            return
        self._dialogs.show_info("Exported", f"Image saved to {result.path}")

    def _flush_render(self) -> None:
        """Run any pending debounced render now and wait for it to finish."""
        if self._debounce.isActive():
            self._debounce.stop()
            self._request_render()
        self._runner.wait()

    def closeEvent(self, event) -> None:  # noqa: N802 - Qt override
        if self._vm.is_dirty and not self._dialogs.confirm(
            "Unsaved changes", "Discard the adjustments made since the last save?"
        ):
            event.ignore()
            return
        self._runner.wait()
        super().closeEvent(event)
