from __future__ import annotations
import argparse, logging, os, sys
from typing import Callable, Optional

from PySide6 import QtCore, QtWidgets
from PySide6.QtCore import Qt
from PySide6.QtGui import QImage

from mask_qt import constants as C
from mask_qt.core.canvas_widget import MaskCanvasWidget
from mask_qt.core.data_models import MaskEncoding, Tool
from mask_qt.errors import DimensionMismatchError, InvalidImageDataError
from mask_qt.io import mask_io
from mask_qt.render.mask_rasterizer import MaskResult
from mask_qt.state.editor_state import MaskEditorSession
from mask_qt.ui.toolbar import MaskToolbar
from mask_qt.ui.width_menu import clamp_radius

logger = logging.getLogger(__name__)


class MaskEditorWindowQt(QtWidgets.QMainWindow):
    """Cửa sổ chính – điều phối session/canvas/toolbar, giữ QSettings."""
    def __init__(self, parent=None, image_path: Optional[str] = None,
                 on_mask: Optional[Callable[[Optional[MaskResult]], None]] = None):
        super().__init__(parent)
        self.setWindowTitle("🎭 Trình vẽ Mask")
        self.resize(1000, 800)
        self._on_mask_cb = on_mask
        self.current_mask: Optional[MaskResult] = None
        self.external_mask: Optional[QImage] = None

        # ---- settings ----
        self._settings = QtCore.QSettings()
        self.brush_radius = clamp_radius(self._settings.value(C.SETTINGS_BRUSH_RADIUS, C.DEFAULT_BRUSH_RADIUS))
        self.tool = self._read_enum(C.SETTINGS_TOOL, Tool, Tool.PAINT)
        self.encoding = self._read_enum(C.SETTINGS_ENCODING, MaskEncoding, MaskEncoding.BINARY)

        # ---- state ----
        self.session = MaskEditorSession(self, encoding=self.encoding)
        self.session.maskChanged.connect(self._on_mask_changed)

        # ---- UI ----
        self._build_ui()

        if image_path:
            self.load_image_file(image_path)

    def _read_enum(self, key, enum_cls, default):
        try:
            return enum_cls(str(self._settings.value(key, default.value)))
        except ValueError:
            logger.warning(f"Giá trị QSettings không hợp lệ cho {key}, dùng mặc định")
            return default

    # ========== UI ==========
    def _build_ui(self):
        self.toolbar = MaskToolbar(self, init_tool=self.tool, init_radius=self.brush_radius,
                                   init_encoding=self.encoding)
        self.addToolBar(self.toolbar)

        self.toolbar.toolChanged.connect(self._set_tool)
        self.toolbar.brushRadiusChanged.connect(self._set_brush_radius)
        self.toolbar.encodingChanged.connect(self._set_encoding)
        self.toolbar.requestOpenImage.connect(self.open_image_dialog)
        self.toolbar.requestPasteMask.connect(self.paste_mask_from_clipboard)
        self.toolbar.requestUndo.connect(self.session.undo)
        self.toolbar.requestClear.connect(self.session.clear)
        self.toolbar.requestInvert.connect(self.session.toggle_inversion)
        self.session.historyChanged.connect(self.toolbar.reflect_undo)
        self.session.inversionChanged.connect(self.toolbar.reflect_inverted)

        # Canvas đặt giữa một container; container đổi kích thước -> tính lại display size
        self.container = QtWidgets.QWidget(self)
        lay = QtWidgets.QVBoxLayout(self.container)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.setAlignment(Qt.AlignHCenter | Qt.AlignTop)
        self.canvas = MaskCanvasWidget(self.session, self.container)
        self.canvas.tool = self.tool
        self.canvas.brush_radius = self.brush_radius
        lay.addWidget(self.canvas)
        self.setCentralWidget(self.container)

        self.statusBar().showMessage("Chưa có mask")

    # ========== tool / settings ==========
    def _set_tool(self, name: str):
        self.tool = Tool(name)
        self.canvas.tool = self.tool
        self._settings.setValue(C.SETTINGS_TOOL, self.tool.value)
        self.toolbar.reflect_tool(self.tool.value)

    def _set_brush_radius(self, value: int):
        v = clamp_radius(value)
        self.brush_radius = v
        self.canvas.brush_radius = v
        self.toolbar.reflect_radius(v)
        self._settings.setValue(C.SETTINGS_BRUSH_RADIUS, v)

    def _set_encoding(self, name: str):
        self.encoding = MaskEncoding(name)
        self._settings.setValue(C.SETTINGS_ENCODING, self.encoding.value)
        self.session.set_encoding(self.encoding)

    # ========== kích thước ==========
    def _viewport_height(self) -> int:
        screen = self.screen()
        return screen.availableGeometry().height() if screen else self.height()

    def _refit(self):
        self.session.resize(self.container.width(), self._viewport_height())

    def resizeEvent(self, e):
        super().resizeEvent(e)
        if getattr(self, "container", None) is not None:
            self._refit()

    # ========== ảnh ==========
    def load_image(self, img: QImage):
        self.external_mask = None
        self.session.load_image(img)
        self._refit()

    def load_image_file(self, path: str) -> bool:
        img = QImage(path)
        if img.isNull():
            logger.error(f"Không mở được ảnh: {path}")
            QtWidgets.QMessageBox.critical(self, "Ảnh", "Không mở được ảnh.")
            return False
        self.load_image(img)
        self.setWindowTitle(f"🎭 Trình vẽ Mask – {os.path.basename(path)}")
        return True

    def open_image_dialog(self):
        path, _ = QtWidgets.QFileDialog.getOpenFileName(self, "Chọn ảnh", "", "Images (*.png *.jpg *.jpeg *.bmp *.webp)")
        if path: self.load_image_file(path)

    # ========== mask ==========
    def _on_mask_changed(self, result: Optional[MaskResult]):
        self.current_mask = result
        if result is not None:
            self.external_mask = None
        if result is None:
            self.statusBar().showMessage("Chưa có mask")
        else:
            s = result.size
            inv = ", đảo" if result.inverted else ""
            self.statusBar().showMessage(f"Mask {s.width}x{s.height} ({result.encoding.value}{inv})")
        if self._on_mask_cb:
            try: self._on_mask_cb(result)
            except Exception: logger.exception("Lỗi callback on_mask")

    def mask_data_url(self) -> Optional[str]:
        """Mask sẽ gửi kèm ảnh: mask vẽ tay, hoặc mask dán từ ngoài nếu có."""
        if self.external_mask is not None:
            img = self.external_mask
            if self.encoding == MaskEncoding.ALPHA:
                img = mask_io.to_alpha_mask(img)
            return mask_io.png_data_url(img)
        self.session.flush()
        return self.current_mask.to_data_url() if self.current_mask else None

    def apply_external_mask(self, data_url: str) -> bool:
        if not self.session.has_image():
            QtWidgets.QMessageBox.information(self, "Mask", "Hãy mở ảnh trước.")
            return False
        try:
            self.external_mask = mask_io.load_external_mask(data_url.strip(), self.session.image)
        except DimensionMismatchError as e:
            logger.warning(str(e))
            QtWidgets.QMessageBox.critical(self, "Mask", f"Mask và ảnh phải cùng kích thước!\n{e}")
            return False
        except InvalidImageDataError as e:
            logger.warning(str(e))
            QtWidgets.QMessageBox.critical(self, "Mask", str(e))
            return False
        self.statusBar().showMessage(f"Mask ngoài {self.external_mask.width()}x{self.external_mask.height()}")
        return True

    def paste_mask_from_clipboard(self):
        text = QtWidgets.QApplication.clipboard().text()
        if not text:
            QtWidgets.QMessageBox.information(self, "Dán mask", "Clipboard không có data URL."); return
        self.apply_external_mask(text)


# ======= Entrypoint (chạy rời) =======
def main(argv=None):
    parser = argparse.ArgumentParser(prog="mask-qt", description="Vẽ mask cho API chỉnh sửa ảnh")
    parser.add_argument("image", nargs="?", help="Ảnh nguồn")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s - %(levelname)s - [%(name)s] - %(message)s")

    app = QtWidgets.QApplication(sys.argv[:1])
    QtCore.QCoreApplication.setOrganizationName(C.ORGANIZATION_NAME)
    QtCore.QCoreApplication.setApplicationName(C.APPLICATION_NAME)
    win = MaskEditorWindowQt(image_path=args.image)
    win.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
