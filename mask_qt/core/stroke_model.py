from __future__ import annotations
import logging
from typing import Iterator, List, Optional, Tuple

from mask_qt.core.data_models import DisplayPoint, Stroke, Tool

logger = logging.getLogger(__name__)

Snapshot = Tuple[Stroke, ...]


class StrokeModel:
    """Danh sách nét theo thứ tự chèn; nét sau đè nét trước."""

    FORMAT_VERSION = 1

    def __init__(self, strokes: Optional[List[Stroke]] = None):
        self._strokes: List[Stroke] = list(strokes or [])
        self._active: Optional[Stroke] = None

    # --------- truy cập ----------
    def __len__(self) -> int: return len(self._strokes)
    def __iter__(self) -> Iterator[Stroke]: return iter(self._strokes)
    def __getitem__(self, i: int) -> Stroke: return self._strokes[i]

    @property
    def strokes(self) -> List[Stroke]:
        return self._strokes

    @property
    def active(self) -> Optional[Stroke]:
        return self._active

    def is_drawing(self) -> bool:
        return self._active is not None

    # --------- nét đang vẽ ----------
    def begin(self, tool: Tool, brush_radius: float, point: DisplayPoint) -> Optional[Stroke]:
        if self._active is not None:
            logger.debug("Bỏ qua nhấn thứ hai khi đang vẽ nét khác")
            return None
        stroke = Stroke(tool=tool, brush_radius=brush_radius, points=[point])
        self._strokes.append(stroke)
        self._active = stroke
        return stroke

    def extend(self, point: DisplayPoint) -> bool:
        if self._active is None:
            return False
        self._active.append(point)
        return True

    def end(self) -> Optional[Stroke]:
        stroke, self._active = self._active, None
        if stroke is not None:
            stroke.seal()
        return stroke

    # --------- snapshot cho undo ----------
    def snapshot(self) -> Snapshot:
        return tuple(s.copy() for s in self._strokes)

    def restore(self, snapshot: Snapshot):
        self._active = None
        self._strokes = [s.copy() for s in snapshot]

    def clear(self):
        self._active = None
        self._strokes = []

    # --------- serialize ----------
    def to_dict(self) -> dict:
        return {
            "version": self.FORMAT_VERSION,
            "strokes": [
                {
                    "id": s.id,
                    "tool": s.tool.value,
                    "brush_radius": s.brush_radius,
                    "points": [list(pt) for pt in s.points],
                } for s in self._strokes
            ],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "StrokeModel":
        strokes: List[Stroke] = []
        for s in data.get("strokes", []):
            strokes.append(Stroke(
                tool=Tool(s.get("tool", Tool.PAINT.value)),
                brush_radius=float(s.get("brush_radius", 1)),
                points=[tuple(pt) for pt in s.get("points", [])],
                id=int(s.get("id", 0)),
                sealed=True,
            ))
        return cls(strokes)
