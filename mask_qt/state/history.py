from __future__ import annotations
from collections import deque
from typing import Optional

from mask_qt.core.stroke_model import Snapshot, StrokeModel


class HistoryController:
    """Undo tuyến tính bằng snapshot toàn bộ strokes (không có redo)."""

    def __init__(self, max_history: Optional[int] = None):
        self.max_history = max_history
        self._stack = deque(maxlen=max_history)

    def __len__(self) -> int:
        return len(self._stack)

    def can_undo(self) -> bool:
        return len(self._stack) > 0

    def push(self, snapshot: Snapshot):
        self._stack.append(snapshot)

    def snapshot_before_mutation(self, model: StrokeModel):
        """Lưu trạng thái hiện tại trước khi bắt đầu nét mới hoặc xoá hết."""
        self.push(model.snapshot())

    def undo(self, model: StrokeModel) -> bool:
        """Khôi phục snapshot gần nhất; stack rỗng thì không làm gì."""
        if not self.can_undo():
            return False
        model.restore(self._stack.pop())
        return True

    def reset(self):
        self._stack.clear()
