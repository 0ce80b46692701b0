import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6 import QtWidgets
from PySide6.QtGui import QColor, QImage

from mask_qt.state.editor_state import MaskEditorSession


@pytest.fixture(scope="session", autouse=True)
def qapp():
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    yield app


def make_image(w, h):
    img = QImage(w, h, QImage.Format_RGB32)
    img.fill(QColor(120, 120, 120))
    return img


@pytest.fixture
def image_800x600():
    return make_image(800, 600)


@pytest.fixture
def session(image_800x600):
    """Ảnh 800x600 hiển thị ở 400x300 (scale 2 mỗi trục)."""
    s = MaskEditorSession(debounce_ms=20)
    s.load_image(image_800x600)
    s.resize(400, 10000)
    assert s.display_size.as_tuple() == (400, 300)
    return s


class SignalRecorder:
    def __init__(self, signal):
        self.calls = []
        signal.connect(lambda *args: self.calls.append(args))

    @property
    def last(self):
        return self.calls[-1][0] if self.calls else None


@pytest.fixture
def recorder():
    return SignalRecorder
