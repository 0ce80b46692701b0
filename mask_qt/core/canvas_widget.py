from __future__ import annotations
import logging

from PySide6 import QtCore, QtGui, QtWidgets
from PySide6.QtCore import Qt, QSize
from PySide6.QtGui import QPainter

from mask_qt.constants import DEFAULT_BRUSH_RADIUS
from mask_qt.core.data_models import Tool
from mask_qt.render.preview import paint_strokes

logger = logging.getLogger(__name__)


class MaskCanvasWidget(QtWidgets.QWidget):
    """Canvas hiển thị: vẽ ảnh đã scale + lớp preview, chuyển sự kiện chuột cho session."""
    def __init__(self, session: 'MaskEditorSession', parent=None):
        super().__init__(parent)
        self.session = session
        self.tool = Tool.PAINT
        self.brush_radius = DEFAULT_BRUSH_RADIUS
        self.setAttribute(Qt.WA_OpaquePaintEvent, False)
        self.setFocusPolicy(Qt.StrongFocus)
        self.setCursor(Qt.CrossCursor)

        self.session.modelChanged.connect(self.update)
        self.session.inversionChanged.connect(lambda _: self.update())
        self.session.displaySizeChanged.connect(self._on_display_size)
        self._on_display_size(*self.session.display_size.as_tuple())

    # ---- infra ----
    def _on_display_size(self, w: int, h: int):
        self.setFixedSize(w, h)
        self.updateGeometry()
        self.update()

    def sizeHint(self) -> QtCore.QSize:
        ds = self.session.display_size
        return QSize(ds.width, ds.height)

    # ---- paint ----
    def paintEvent(self, e: QtGui.QPaintEvent):
        p = QPainter(self)
        p.setRenderHint(QPainter.SmoothPixmapTransform, True)
        p.fillRect(self.rect(), Qt.white)

        image = self.session.image
        if image is None:
            p.setPen(Qt.gray)
            p.drawText(self.rect(), Qt.AlignCenter, "Chưa có ảnh")
            p.end()
            return

        # a) Ảnh nguồn co theo kích thước hiển thị
        ds = self.session.display_size
        p.drawImage(QtCore.QRect(0, 0, ds.width, ds.height), image)

        # b) Lớp preview strokes
        try:
            paint_strokes(p, self.session.model.strokes, self.session.inverted)
        except Exception as e:
            logger.warning(f"Lỗi vẽ preview: {e}")
        p.end()

    # ---- events → session ----
    def mousePressEvent(self, e: QtGui.QMouseEvent):
        if e.button() != Qt.LeftButton:
            return
        pos = e.position()
        self.session.begin_stroke(self.tool, self.brush_radius, (pos.x(), pos.y()))

    def mouseMoveEvent(self, e: QtGui.QMouseEvent):
        if not (e.buttons() & Qt.LeftButton):
            return
        pos = e.position()
        self.session.extend_stroke((pos.x(), pos.y()))

    def mouseReleaseEvent(self, e: QtGui.QMouseEvent):
        if e.button() != Qt.LeftButton:
            return
        self.session.end_stroke()
