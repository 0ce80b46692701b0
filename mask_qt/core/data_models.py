from __future__ import annotations
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, NamedTuple

from mask_qt.errors import StrokeSealedError


class Tool(str, Enum):
    PAINT = "paint"     # đánh dấu vùng cần sửa
    ERASE = "erase"     # vẽ bằng màu nền, không xoá nét


class MaskEncoding(str, Enum):
    BINARY = "binary"   # trắng/đen đục
    ALPHA = "alpha"     # độ xám -> kênh alpha


# Hai hệ toạ độ tách biệt: màn hình (canvas đã scale) và pixel gốc của ảnh.
class DisplayPoint(NamedTuple):
    x: float
    y: float


class NativePoint(NamedTuple):
    x: float
    y: float


@dataclass(frozen=True)
class Size:
    width: int
    height: int

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def as_tuple(self):
        return (self.width, self.height)


@dataclass
class Stroke:
    """Một nét vẽ liên tục từ lúc nhấn đến lúc thả chuột (toạ độ màn hình)."""
    tool: Tool
    brush_radius: float
    points: List[DisplayPoint]
    id: int = field(default_factory=time.time_ns)
    sealed: bool = False

    def __post_init__(self):
        if self.brush_radius <= 0:
            raise ValueError(f"brush_radius phải > 0, nhận {self.brush_radius}")
        if not self.points:
            raise ValueError("Stroke cần ít nhất 1 điểm")
        self.tool = Tool(self.tool)
        self.points = [DisplayPoint(*pt) for pt in self.points]

    def append(self, point: DisplayPoint):
        if self.sealed:
            raise StrokeSealedError(f"Stroke {self.id} đã kết thúc")
        self.points.append(DisplayPoint(*point))

    def seal(self):
        self.sealed = True

    def is_dab(self) -> bool:
        return len(self.points) == 1

    def copy(self) -> "Stroke":
        return Stroke(tool=self.tool, brush_radius=self.brush_radius,
                      points=list(self.points), id=self.id, sealed=True)
