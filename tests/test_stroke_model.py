import pytest

from mask_qt.core.data_models import DisplayPoint, Stroke, Tool
from mask_qt.core.stroke_model import StrokeModel
from mask_qt.errors import StrokeSealedError


def test_begin_extend_end_appends_points_in_order():
    m = StrokeModel()
    s = m.begin(Tool.PAINT, 5, (1, 2))
    assert m.is_drawing()
    assert m.extend((3, 4))
    assert m.extend((5, 6))
    m.end()
    assert not m.is_drawing()
    assert len(m) == 1
    assert m[0] is s
    assert s.points == [DisplayPoint(1, 2), DisplayPoint(3, 4), DisplayPoint(5, 6)]


def test_extend_without_active_stroke_is_ignored():
    m = StrokeModel()
    assert m.extend((1, 1)) is False
    assert len(m) == 0


def test_second_press_while_drawing_is_ignored():
    m = StrokeModel()
    m.begin(Tool.PAINT, 5, (0, 0))
    assert m.begin(Tool.ERASE, 5, (9, 9)) is None
    assert len(m) == 1


def test_released_stroke_is_sealed():
    m = StrokeModel()
    s = m.begin(Tool.PAINT, 5, (0, 0))
    m.end()
    with pytest.raises(StrokeSealedError):
        s.append((1, 1))


def test_snapshot_is_independent_of_live_model():
    m = StrokeModel()
    m.begin(Tool.PAINT, 5, (0, 0))
    snap = m.snapshot()
    m.extend((10, 10))
    m.end()
    assert len(snap[0].points) == 1
    m.restore(snap)
    assert len(m[0].points) == 1
    assert m[0] is not snap[0]


def test_stroke_rejects_bad_radius_and_empty_points():
    with pytest.raises(ValueError):
        Stroke(tool=Tool.PAINT, brush_radius=0, points=[(0, 0)])
    with pytest.raises(ValueError):
        Stroke(tool=Tool.PAINT, brush_radius=3, points=[])


def test_to_dict_from_dict_preserves_order_and_tools():
    m = StrokeModel()
    m.begin(Tool.PAINT, 4, (0, 0)); m.extend((1, 1)); m.end()
    m.begin(Tool.ERASE, 2, (5, 5)); m.end()
    data = m.to_dict()
    assert data["version"] == StrokeModel.FORMAT_VERSION
    restored = StrokeModel.from_dict(data)
    assert [s.tool for s in restored] == [Tool.PAINT, Tool.ERASE]
    assert restored[0].points == [DisplayPoint(0, 0), DisplayPoint(1, 1)]
    assert restored[1].brush_radius == 2
    assert all(s.sealed for s in restored)
