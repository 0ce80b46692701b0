import pytest
from PySide6.QtGui import QColor, QImage
from PySide6.QtTest import QTest

from mask_qt.core.data_models import MaskEncoding, Size, Tool
from mask_qt.io.mask_io import qimage_to_array
from mask_qt.state.editor_state import MaskEditorSession


def make_image(w, h):
    img = QImage(w, h, QImage.Format_RGB32)
    img.fill(QColor(120, 120, 120))
    return img


def test_pointer_ignored_without_image(recorder):
    s = MaskEditorSession(debounce_ms=10)
    masks = recorder(s.maskChanged)
    assert s.begin_stroke(Tool.PAINT, 5, (1, 1)) is False
    assert s.extend_stroke((2, 2)) is False
    s.end_stroke()
    assert len(s.model) == 0
    assert s.generate_mask() is None
    QTest.qWait(30)
    assert masks.calls == []


def test_debounce_coalesces_burst(session, recorder):
    masks = recorder(session.maskChanged)
    session.begin_stroke(Tool.PAINT, 10, (100, 100))
    for i in range(20):
        session.extend_stroke((100 + i, 100))
    session.end_stroke()
    assert masks.calls == []
    assert session.is_mask_pending()
    QTest.qWait(80)
    assert len(masks.calls) == 1
    result = masks.last
    assert result.size == Size(800, 600)


def test_single_dab_mask_in_native_space(session):
    session.begin_stroke(Tool.PAINT, 10, (100, 100))
    session.end_stroke()
    arr = qimage_to_array(session.generate_mask().image)
    assert tuple(arr[200, 200]) == (255, 255, 255, 255)
    assert tuple(arr[200, 221]) == (0, 0, 0, 255)


def test_begin_stroke_snapshots_history(session, recorder):
    history = recorder(session.historyChanged)
    assert not session.can_undo()
    session.begin_stroke(Tool.PAINT, 5, (10, 10))
    session.end_stroke()
    assert session.can_undo()
    assert history.last is True
    assert session.undo()
    assert len(session.model) == 0
    assert history.last is False


def test_undo_on_empty_history_is_noop(session, recorder):
    masks = recorder(session.maskChanged)
    assert session.undo() is False
    assert len(session.model) == 0
    assert masks.calls == []


def test_undo_to_empty_reports_no_mask(session, recorder):
    session.begin_stroke(Tool.PAINT, 5, (10, 10)); session.end_stroke()
    masks = recorder(session.maskChanged)
    session.undo()
    assert masks.calls == [(None,)]
    assert not session.is_mask_pending()


def test_clear_resets_inversion_and_reports_no_mask(session, recorder):
    session.begin_stroke(Tool.PAINT, 5, (10, 10)); session.end_stroke()
    session.toggle_inversion()
    assert session.inverted
    masks = recorder(session.maskChanged)
    session.clear()
    assert not session.inverted
    assert masks.last is None
    assert not session.is_mask_pending()
    assert session.generate_mask() is None
    # clear có thể hoàn tác
    assert session.undo()
    assert len(session.model) == 1


def test_toggle_inversion_not_recorded_in_history(session):
    session.begin_stroke(Tool.PAINT, 5, (10, 10)); session.end_stroke()
    before = len(session.history)
    session.toggle_inversion()
    assert len(session.history) == before
    assert session.is_mask_pending()
    session.flush()
    assert not session.is_mask_pending()


def test_inversion_swaps_exported_colors(session):
    session.begin_stroke(Tool.PAINT, 10, (100, 100)); session.end_stroke()
    normal = qimage_to_array(session.generate_mask().image)
    session.toggle_inversion()
    inverted = qimage_to_array(session.generate_mask().image)
    assert (inverted[..., :3] == 255 - normal[..., :3]).all()


def test_switching_image_cancels_pending_mask(session, recorder, image_800x600):
    session.begin_stroke(Tool.PAINT, 5, (10, 10))
    session.extend_stroke((20, 20))
    session.end_stroke()
    assert session.is_mask_pending()
    masks = recorder(session.maskChanged)
    session.load_image(image_800x600.copy())
    assert masks.calls == [(None,)]
    QTest.qWait(60)
    assert masks.calls == [(None,)]
    assert len(session.model) == 0
    assert not session.can_undo()
    assert session.generate_mask() is None


def test_second_press_ignored_until_release(session):
    assert session.begin_stroke(Tool.PAINT, 5, (10, 10))
    assert session.begin_stroke(Tool.ERASE, 5, (50, 50)) is False
    session.end_stroke()
    assert len(session.model) == 1
    assert len(session.history) == 1


def test_resize_deferred_while_drawing(session):
    session.begin_stroke(Tool.PAINT, 5, (10, 10))
    session.resize(200, 10000)
    assert session.display_size == Size(400, 300)
    session.extend_stroke((20, 20))
    session.end_stroke()
    assert session.display_size == Size(200, 150)
    assert session.mapper.scale == (4.0, 4.0)


def test_encoding_is_final_step_parameter(session):
    session.begin_stroke(Tool.PAINT, 10, (100, 100)); session.end_stroke()
    session.set_encoding(MaskEncoding.ALPHA)
    result = session.generate_mask()
    assert result.encoding == MaskEncoding.ALPHA
    arr = qimage_to_array(result.image)
    assert arr[200, 200, 3] == 255
    assert arr[0, 0, 3] == 0
    assert (arr[..., :3] == 0).all()


def test_rejected_stroke_leaves_no_history(session, recorder):
    hist = recorder(session.historyChanged)
    with pytest.raises(ValueError):
        session.begin_stroke(Tool.PAINT, 0, (10, 10))
    assert len(session.history) == 0
    assert not session.can_undo()
    assert len(session.model) == 0
    assert not session.is_drawing()
    assert hist.calls == []
    # nét hợp lệ sau đó vẫn hoàn tác được đúng một bước
    assert session.begin_stroke(Tool.PAINT, 5, (10, 10))
    session.end_stroke()
    assert len(session.history) == 1


def test_load_image_announces_reset_display_size(session, recorder):
    sizes = recorder(session.displaySizeChanged)
    session.load_image(make_image(512, 512))
    assert sizes.calls[-1] == (512, 512)
    session.unload_image()
    assert sizes.calls[-1] == (512, 512)
