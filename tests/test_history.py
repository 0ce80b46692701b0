from mask_qt.core.data_models import Tool
from mask_qt.core.stroke_model import StrokeModel
from mask_qt.state.history import HistoryController


def _draw(model, history, x):
    history.snapshot_before_mutation(model)
    model.begin(Tool.PAINT, 3, (x, x))
    model.end()


def test_undo_on_empty_stack_is_noop():
    m, h = StrokeModel(), HistoryController()
    m.begin(Tool.PAINT, 3, (1, 1)); m.end()
    assert h.undo(m) is False
    assert len(m) == 1


def test_undo_restores_previous_states_in_order():
    m, h = StrokeModel(), HistoryController()
    _draw(m, h, 1)
    _draw(m, h, 2)
    assert len(h) == 2
    assert h.undo(m)
    assert len(m) == 1 and m[0].points[0].x == 1
    assert h.undo(m)
    assert len(m) == 0
    assert not h.can_undo()


def test_new_stroke_after_undo_discards_future():
    m, h = StrokeModel(), HistoryController()
    _draw(m, h, 1)
    _draw(m, h, 2)
    h.undo(m)
    _draw(m, h, 3)
    assert [s.points[0].x for s in m] == [1, 3]
    h.undo(m)
    assert [s.points[0].x for s in m] == [1]


def test_max_history_drops_oldest():
    m, h = StrokeModel(), HistoryController(max_history=2)
    for x in range(4):
        _draw(m, h, x)
    assert len(h) == 2
    h.undo(m); h.undo(m)
    assert len(m) == 2


def test_depth_limit_keeps_newest_entries():
    m, h = StrokeModel(), HistoryController(max_history=2)
    for x in range(5):
        _draw(m, h, x)
    assert len(h) == 2
    assert h.undo(m) and len(m) == 4
    assert h.undo(m) and len(m) == 3
    assert h.undo(m) is False


def test_push_records_given_snapshot():
    m, h = StrokeModel(), HistoryController()
    before = m.snapshot()
    m.begin(Tool.PAINT, 3, (1, 1)); m.end()
    h.push(before)
    assert h.undo(m)
    assert len(m) == 0
