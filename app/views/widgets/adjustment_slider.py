from __future__ import annotations

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QHBoxLayout, QLabel, QSlider, QWidget

from app.views.constants import SLIDER_STEPS


class AdjustmentSlider(QWidget):
    """Labelled slider mapping a real-valued range onto an integer QSlider."""

    valueChanged = Signal(str, float)  # adjustment name, real value

    def __init__(
        self, name: str, label: str, value_range: tuple[float, float], parent: QWidget | None = None
    ) -> None:
        super().__init__(parent)
        self._name = name
        self._lo, self._hi = value_range

        row = QHBoxLayout(self)
        row.setContentsMargins(0, 0, 0, 0)
        title = QLabel(label)
        title.setFixedWidth(80)
        row.addWidget(title)

        self._slider = QSlider(Qt.Horizontal)
        self._slider.setRange(
            int(round(self._lo * SLIDER_STEPS)), int(round(self._hi * SLIDER_STEPS))
        )
        row.addWidget(self._slider, 1)

        self._value_label = QLabel("0.00")
        self._value_label.setFixedWidth(44)
        self._value_label.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
        row.addWidget(self._value_label)

        self._slider.valueChanged.connect(self._on_slider)

    @property
    def name(self) -> str:
        return self._name

    def value(self) -> float:
        return self._slider.value() / SLIDER_STEPS

    def set_value(self, value: float) -> None:
        """Move the slider without emitting `valueChanged`."""
        self._slider.blockSignals(True)
        self._slider.setValue(int(round(value * SLIDER_STEPS)))
        self._slider.blockSignals(False)
        self._value_label.setText(f"{self.value():.2f}")

    def _on_slider(self, raw: int) -> None:
        value = raw / SLIDER_STEPS
        self._value_label.setText(f"{value:.2f}")
        self.valueChanged.emit(self._name, value)
