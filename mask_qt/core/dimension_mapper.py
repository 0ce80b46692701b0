from __future__ import annotations
import logging
from typing import Optional, Tuple

from mask_qt.constants import (DEFAULT_DISPLAY_WIDTH, DEFAULT_DISPLAY_HEIGHT,
                               MAX_DISPLAY_HEIGHT, MAX_DISPLAY_HEIGHT_RATIO)
from mask_qt.core.data_models import DisplayPoint, NativePoint, Size

logger = logging.getLogger(__name__)


def max_display_height(viewport_height: float) -> float:
    return min(MAX_DISPLAY_HEIGHT, viewport_height * MAX_DISPLAY_HEIGHT_RATIO)


def fit_display_size(native: Size, container_width: float, max_height: float) -> Size:
    """
    Tính kích thước hiển thị giữ nguyên tỉ lệ ảnh gốc.

    1. Thử lấp đầy chiều ngang container.
    2. Nếu quá cao thì lấy chiều cao tối đa làm chuẩn.
    3. Không vượt quá chiều ngang container.
    """
    ratio = native.width / native.height
    width = float(container_width)
    height = width / ratio
    if height > max_height:
        height = max_height
        width = height * ratio
    width = min(width, container_width)
    return Size(max(1, int(round(width))), max(1, int(round(height))))


def to_native(point: DisplayPoint, scale_x: float, scale_y: float) -> NativePoint:
    return NativePoint(point.x * scale_x, point.y * scale_y)


class DimensionMapper:
    """Giữ kích thước gốc của ảnh và kích thước canvas đang hiển thị."""

    def __init__(self):
        self.native_size: Optional[Size] = None
        self.display_size = Size(DEFAULT_DISPLAY_WIDTH, DEFAULT_DISPLAY_HEIGHT)

    def reset(self, native_size: Optional[Size] = None):
        """Gọi mỗi lần nạp ảnh mới; native_size cố định cho tới lần nạp sau."""
        self.native_size = native_size
        self.display_size = Size(DEFAULT_DISPLAY_WIDTH, DEFAULT_DISPLAY_HEIGHT)

    def is_ready(self) -> bool:
        return self.native_size is not None and not self.native_size.is_empty()

    def fit(self, container_width: float, viewport_height: float) -> Size:
        if not self.is_ready() or container_width <= 0:
            return self.display_size
        self.display_size = fit_display_size(self.native_size, container_width,
                                             max_display_height(viewport_height))
        logger.debug(f"Display size {self.display_size.as_tuple()} cho ảnh {self.native_size.as_tuple()}")
        return self.display_size

    @property
    def scale(self) -> Tuple[float, float]:
        if not self.is_ready():
            return (1.0, 1.0)
        return (self.native_size.width / self.display_size.width,
                self.native_size.height / self.display_size.height)
