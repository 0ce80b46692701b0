# mask_qt/ui/width_menu.py
from __future__ import annotations
from PySide6 import QtWidgets
from PySide6.QtCore import QPointF, Qt, Signal
from PySide6.QtGui import QColor, QPainter, QPixmap

from mask_qt.constants import BRUSH_RADIUS_PRESETS, MIN_BRUSH_RADIUS, MAX_BRUSH_RADIUS, PREVIEW_BLUE

PREVIEW_BOX = 64


def clamp_radius(value) -> int:
    """Ép bán kính về số nguyên trong [MIN_BRUSH_RADIUS, MAX_BRUSH_RADIUS]."""
    return max(MIN_BRUSH_RADIUS, min(MAX_BRUSH_RADIUS, int(round(float(value)))))


def radius_pixmap(radius: int, box: int = PREVIEW_BOX) -> QPixmap:
    """Chấm tròn minh hoạ cỡ cọ; bán kính lớn hơn ô thì vẽ theo tỉ lệ."""
    pm = QPixmap(box, box)
    pm.fill(Qt.transparent)
    r = min(radius, MAX_BRUSH_RADIUS) * (box / 2 - 2) / MAX_BRUSH_RADIUS
    p = QPainter(pm)
    try:
        p.setRenderHint(QPainter.Antialiasing, True)
        p.setPen(Qt.NoPen)
        p.setBrush(QColor(*PREVIEW_BLUE))
        p.drawEllipse(QPointF(box / 2, box / 2), max(r, 1.0), max(r, 1.0))
    finally:
        p.end()
    return pm


class BrushRadiusPanel(QtWidgets.QWidget):
    """Slider + preset + chấm xem trước; phát radiusChanged với giá trị đã ép biên."""
    radiusChanged = Signal(int)

    def __init__(self, init_value: int, parent=None):
        super().__init__(parent)
        self._radius = clamp_radius(init_value)

        lay = QtWidgets.QGridLayout(self)
        lay.setContentsMargins(10, 10, 10, 10)

        self.preview = QtWidgets.QLabel(self)
        self.preview.setFixedSize(PREVIEW_BOX, PREVIEW_BOX)
        lay.addWidget(self.preview, 0, 0, 2, 1)

        self.label = QtWidgets.QLabel(self)
        lay.addWidget(self.label, 0, 1)

        self.slider = QtWidgets.QSlider(Qt.Horizontal, self)
        self.slider.setRange(MIN_BRUSH_RADIUS, MAX_BRUSH_RADIUS)
        self.slider.setFixedWidth(180)
        self.slider.setValue(self._radius)
        lay.addWidget(self.slider, 1, 1)

        presets = QtWidgets.QHBoxLayout()
        for value in BRUSH_RADIUS_PRESETS:
            btn = QtWidgets.QToolButton(self)
            btn.setText(str(value))
            btn.clicked.connect(lambda _=False, v=value: self.set_radius(v))
            presets.addWidget(btn)
        lay.addLayout(presets, 2, 0, 1, 2)

        self.slider.valueChanged.connect(self.set_radius)
        self._refresh()

    def radius(self) -> int:
        return self._radius

    def set_radius(self, value, emit: bool = True):
        v = clamp_radius(value)
        changed = v != self._radius
        self._radius = v
        if self.slider.value() != v:
            self.slider.blockSignals(True); self.slider.setValue(v); self.slider.blockSignals(False)
        self._refresh()
        if changed and emit:
            self.radiusChanged.emit(v)

    def _refresh(self):
        self.label.setText(f"Bán kính cọ: {self._radius}px")
        self.preview.setPixmap(radius_pixmap(self._radius))


def create_brush_menu(parent, init_value: int) -> tuple:
    """Menu popup chứa BrushRadiusPanel (dùng chung cho Paint/Erase)."""
    menu = QtWidgets.QMenu(parent)
    panel = BrushRadiusPanel(init_value, menu)
    action = QtWidgets.QWidgetAction(menu)
    action.setDefaultWidget(panel)
    menu.addAction(action)
    return menu, panel
