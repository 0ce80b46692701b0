from __future__ import annotations
import logging
from typing import Optional, Tuple

from PySide6 import QtCore
from PySide6.QtCore import Signal
from PySide6.QtGui import QImage

from mask_qt.constants import MASK_DEBOUNCE_MS
from mask_qt.core.data_models import DisplayPoint, MaskEncoding, Size, Tool
from mask_qt.core.dimension_mapper import DimensionMapper
from mask_qt.core.stroke_model import StrokeModel
from mask_qt.render.mask_rasterizer import MaskResult, rasterize_mask
from mask_qt.state.history import HistoryController

logger = logging.getLogger(__name__)


class MaskEditorSession(QtCore.QObject):
    """
    Phiên vẽ mask cho một ảnh: strokes, undo, cờ đảo mask, debounce xuất mask.

    Mọi thay đổi strokes khởi động lại một QTimer duy nhất; chỉ trạng thái
    cuối cùng sau một loạt sự kiện di chuột mới được rasterize.
    """
    maskChanged = Signal(object)            # MaskResult | None
    historyChanged = Signal(bool)           # can_undo
    inversionChanged = Signal(bool)
    modelChanged = Signal()                 # preview cần vẽ lại
    displaySizeChanged = Signal(int, int)

    def __init__(self, parent=None, debounce_ms: int = MASK_DEBOUNCE_MS,
                 encoding: MaskEncoding = MaskEncoding.BINARY):
        super().__init__(parent)
        self.model = StrokeModel()
        self.history = HistoryController()
        self.mapper = DimensionMapper()
        self.image: Optional[QImage] = None
        self.inverted = False
        self.encoding = MaskEncoding(encoding)
        self._pending_fit: Optional[Tuple[float, float]] = None

        self._mask_timer = QtCore.QTimer(self)
        self._mask_timer.setSingleShot(True)
        self._mask_timer.setInterval(debounce_ms)
        self._mask_timer.timeout.connect(self._emit_mask)

    # ========== ảnh ==========
    def has_image(self) -> bool:
        return self.image is not None and self.mapper.is_ready()

    def load_image(self, image: Optional[QImage]):
        """Đổi ảnh nguồn: bỏ toàn bộ strokes/lịch sử, huỷ mask đang chờ."""
        self._cancel_pending()
        self.model.clear()
        self.history.reset()
        self.inverted = False
        self._pending_fit = None
        if image is None or image.isNull():
            self.image = None
            self.mapper.reset(None)
        else:
            self.image = image
            self.mapper.reset(Size(image.width(), image.height()))
            logger.info(f"Nạp ảnh {image.width()}x{image.height()}")
        self.displaySizeChanged.emit(*self.mapper.display_size.as_tuple())
        self.inversionChanged.emit(False)
        self.historyChanged.emit(False)
        self.modelChanged.emit()
        self.maskChanged.emit(None)

    def unload_image(self):
        self.load_image(None)

    # ========== kích thước ==========
    @property
    def display_size(self) -> Size:
        return self.mapper.display_size

    def resize(self, container_width: float, viewport_height: float):
        """Nét đang vẽ giữ nguyên hệ toạ độ cũ; đổi kích thước được hoãn tới lúc thả chuột."""
        if self.model.is_drawing():
            self._pending_fit = (container_width, viewport_height)
            return
        old = self.mapper.display_size
        new = self.mapper.fit(container_width, viewport_height)
        if new != old:
            self.displaySizeChanged.emit(new.width, new.height)
            self._on_mutated()

    # ========== nét ==========
    def begin_stroke(self, tool: Tool, brush_radius: float, point) -> bool:
        if not self.has_image():
            logger.debug("Chưa có ảnh, bỏ qua nhấn chuột")
            return False
        if self.model.is_drawing():
            return False
        # Stroke tự kiểm tra tool/bán kính; chỉ lưu lịch sử khi nét đã tạo được
        before = self.model.snapshot()
        self.model.begin(Tool(tool), brush_radius, DisplayPoint(*point))
        self.history.push(before)
        self.historyChanged.emit(True)
        self._on_mutated()
        return True

    def extend_stroke(self, point) -> bool:
        if not self.model.extend(DisplayPoint(*point)):
            return False
        self._on_mutated()
        return True

    def end_stroke(self):
        self.model.end()
        if self._pending_fit is not None:
            pending, self._pending_fit = self._pending_fit, None
            self.resize(*pending)

    def is_drawing(self) -> bool:
        return self.model.is_drawing()

    # ========== lệnh ==========
    def can_undo(self) -> bool:
        return self.history.can_undo()

    def undo(self) -> bool:
        if self.model.is_drawing():
            self.end_stroke()
        if not self.history.undo(self.model):
            return False
        self.historyChanged.emit(self.history.can_undo())
        self._on_mutated()
        return True

    def clear(self):
        if self.model.is_drawing():
            self.end_stroke()
        if len(self.model):
            self.history.snapshot_before_mutation(self.model)
        self.model.clear()
        self.inverted = False
        self.inversionChanged.emit(False)
        self.historyChanged.emit(self.history.can_undo())
        self._on_mutated()

    def toggle_inversion(self) -> bool:
        self.inverted = not self.inverted
        self.inversionChanged.emit(self.inverted)
        self._on_mutated()
        return self.inverted

    def set_encoding(self, encoding: MaskEncoding):
        encoding = MaskEncoding(encoding)
        if encoding == self.encoding:
            return
        self.encoding = encoding
        self._schedule()

    # ========== mask ==========
    def generate_mask(self) -> Optional[MaskResult]:
        if not self.has_image():
            return None
        return rasterize_mask(self.model.strokes, self.mapper.native_size, self.mapper.scale,
                              inverted=self.inverted, encoding=self.encoding)

    def is_mask_pending(self) -> bool:
        return self._mask_timer.isActive()

    def flush(self):
        """Chạy ngay lần tạo mask đang chờ (nếu có)."""
        if self._mask_timer.isActive():
            self._mask_timer.stop()
            self._emit_mask()

    def _on_mutated(self):
        self.modelChanged.emit()
        self._schedule()

    def _schedule(self):
        if not self.has_image():
            return
        if len(self.model) == 0:
            self._cancel_pending()
            self.maskChanged.emit(None)
            return
        self._mask_timer.start()            # start() lại = huỷ lịch cũ

    def _cancel_pending(self):
        self._mask_timer.stop()

    def _emit_mask(self):
        self.maskChanged.emit(self.generate_mask())
