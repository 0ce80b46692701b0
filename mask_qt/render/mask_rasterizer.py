# mask_qt/render/mask_rasterizer.py
"""
Vẽ lại toàn bộ strokes ở độ phân giải gốc của ảnh để tạo mask.

Quy trình:
- Vẽ từng nét theo thứ tự chèn lên QImage nền đen, nét Paint màu trắng,
  nét Erase màu nền (không xoá nét cũ, chỉ vẽ đè).
- Nhị phân hoá: kênh nào > 127 thì pixel "on", còn lại "off".
- Đảo mask chỉ hoán đổi giá trị của hai trạng thái, tập pixel "on" giữ nguyên.
- Mã hoá cuối: trắng/đen đục (BINARY) hoặc độ xám -> alpha (ALPHA).
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

import numpy as np
from PySide6 import QtGui
from PySide6.QtCore import QPointF, Qt
from PySide6.QtGui import QColor, QImage, QPainter, QPen

from mask_qt.constants import BINARIZE_THRESHOLD, CHANNEL_MAX
from mask_qt.core.data_models import MaskEncoding, Size, Stroke, Tool
from mask_qt.core.dimension_mapper import to_native
from mask_qt.io.mask_io import array_to_qimage, png_data_url, qimage_to_array, qimage_to_png_bytes

logger = logging.getLogger(__name__)

# Hệ số độ sáng ITU-R 601
_LUMA = np.array([0.299, 0.587, 0.114])


@dataclass
class MaskResult:
    image: QImage
    encoding: MaskEncoding
    inverted: bool

    @property
    def size(self) -> Size:
        return Size(self.image.width(), self.image.height())

    def to_png_bytes(self) -> bytes:
        return qimage_to_png_bytes(self.image)

    def to_data_url(self) -> str:
        return png_data_url(self.image)


# --------- vẽ ----------
def mask_colors(inverted: bool) -> Tuple[int, int]:
    """(background, paint) theo quy ước hiện tại; đảo thì hoán đổi."""
    return (CHANNEL_MAX, 0) if inverted else (0, CHANNEL_MAX)


def draw_strokes(strokes: Iterable[Stroke], native_size: Size,
                 scale_x: float, scale_y: float) -> QImage:
    img = QImage(native_size.width, native_size.height, QImage.Format_RGBA8888)
    img.fill(QColor(0, 0, 0, 255))
    paint, background = QColor(255, 255, 255, 255), QColor(0, 0, 0, 255)
    factor = max(scale_x, scale_y)

    p = QPainter(img)
    try:
        p.setRenderHint(QPainter.Antialiasing, True)
        for s in strokes:
            color = paint if s.tool == Tool.PAINT else background
            radius = s.brush_radius * factor
            pts = [to_native(pt, scale_x, scale_y) for pt in s.points]
            if len(set(pts)) == 1:
                # chấm tròn
                p.setPen(Qt.NoPen)
                p.setBrush(color)
                p.drawEllipse(QPointF(*pts[0]), radius, radius)
                continue
            path = QtGui.QPainterPath(QPointF(*pts[0]))
            for pt in pts[1:]:
                path.lineTo(QPointF(*pt))
            p.setBrush(Qt.NoBrush)
            p.setPen(QPen(color, radius * 2, Qt.SolidLine, Qt.RoundCap, Qt.RoundJoin))
            p.drawPath(path)
    finally:
        p.end()
    return img


def binarize(img: QImage) -> np.ndarray:
    """Mảng bool (h, w): True nếu một trong ba kênh màu vượt ngưỡng."""
    rgb = qimage_to_array(img)[..., :3]
    return (rgb > BINARIZE_THRESHOLD).any(axis=2)


def encode_mask(on: np.ndarray, inverted: bool,
                encoding: MaskEncoding = MaskEncoding.BINARY) -> QImage:
    background, paint = mask_colors(inverted)
    value = np.where(on, paint, background).astype(np.uint8)
    h, w = on.shape
    out = np.empty((h, w, 4), dtype=np.uint8)
    if MaskEncoding(encoding) == MaskEncoding.ALPHA:
        gray = np.stack([value] * 3, axis=-1) @ _LUMA
        out[..., :3] = 0
        out[..., 3] = np.clip(np.rint(gray), 0, CHANNEL_MAX).astype(np.uint8)
    else:
        out[..., :3] = value[..., None]
        out[..., 3] = CHANNEL_MAX
    return array_to_qimage(out)


def rasterize_mask(strokes, native_size: Optional[Size], scale: Tuple[float, float],
                   inverted: bool = False,
                   encoding: MaskEncoding = MaskEncoding.BINARY) -> Optional[MaskResult]:
    """Tạo mask; trả về None ("không có mask") khi chưa vẽ gì, chưa có ảnh hoặc lỗi."""
    strokes = list(strokes)
    if not strokes:
        return None
    if native_size is None or native_size.is_empty():
        logger.debug("Chưa biết kích thước ảnh gốc, bỏ qua tạo mask")
        return None
    try:
        scale_x, scale_y = scale
        coverage = draw_strokes(strokes, native_size, scale_x, scale_y)
        image = encode_mask(binarize(coverage), inverted, encoding)
    except Exception:
        logger.exception("Lỗi khi tạo mask")
        return None
    return MaskResult(image=image, encoding=MaskEncoding(encoding), inverted=inverted)
