from __future__ import annotations
from typing import Iterable

from PySide6 import QtGui
from PySide6.QtCore import QPointF, Qt
from PySide6.QtGui import QColor, QPainter, QPen

from mask_qt.constants import PREVIEW_BLUE, PREVIEW_RED
from mask_qt.core.data_models import Stroke, Tool


def preview_color(tool: Tool, inverted: bool) -> QColor:
    """Bình thường: Paint xanh, Erase đỏ. Khi đảo mask thì đổi màu cho nhau."""
    blue_for_paint = not inverted
    if tool == Tool.PAINT:
        return QColor(*(PREVIEW_BLUE if blue_for_paint else PREVIEW_RED))
    return QColor(*(PREVIEW_RED if blue_for_paint else PREVIEW_BLUE))


def paint_strokes(p: QPainter, strokes: Iterable[Stroke], inverted: bool):
    """Vẽ lớp preview theo toạ độ màn hình, không qua nhị phân hoá."""
    p.save()
    p.setRenderHint(QPainter.Antialiasing, True)
    for s in strokes:
        color = preview_color(s.tool, inverted)
        if s.is_dab():
            p.setPen(Qt.NoPen); p.setBrush(color)
            p.drawEllipse(QPointF(*s.points[0]), s.brush_radius, s.brush_radius)
            continue
        path = QtGui.QPainterPath(QPointF(*s.points[0]))
        for pt in s.points[1:]:
            path.lineTo(QPointF(*pt))
        p.setBrush(Qt.NoBrush)
        p.setPen(QPen(color, s.brush_radius * 2, Qt.SolidLine, Qt.RoundCap, Qt.RoundJoin))
        p.drawPath(path)
    p.restore()
