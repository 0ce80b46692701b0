from __future__ import annotations
from PySide6 import QtWidgets
from PySide6.QtCore import Signal
from PySide6.QtGui import QAction, QActionGroup, QKeySequence

from mask_qt.core.data_models import MaskEncoding, Tool
from .width_menu import clamp_radius, create_brush_menu


class MaskToolbar(QtWidgets.QToolBar):
    # ==== Signals (Window sẽ connect) ====
    toolChanged = Signal(str)               # "paint"|"erase"
    brushRadiusChanged = Signal(int)
    encodingChanged = Signal(str)           # "binary"|"alpha"

    requestOpenImage = Signal()
    requestPasteMask = Signal()
    requestUndo = Signal()
    requestClear = Signal()
    requestInvert = Signal()

    def __init__(self, parent=None, init_tool=Tool.PAINT, init_radius=10, init_encoding=MaskEncoding.BINARY):
        super().__init__("Mask", parent)
        self.setMovable(False)

        # Ảnh nguồn
        self.addAction(self._act("📂 Mở ảnh…", self.requestOpenImage.emit, "Ctrl+O"))
        self.addAction(self._act("📋 Dán mask (data URL)", self.requestPasteMask.emit))
        self.addSeparator()

        # Paint / Erase
        group = QActionGroup(self); group.setExclusive(True)
        self.act_paint = QAction("🖌️ Vẽ", self, checkable=True)
        self.act_erase = QAction("🧽 Tẩy", self, checkable=True)
        for act, tool in [(self.act_paint, Tool.PAINT), (self.act_erase, Tool.ERASE)]:
            group.addAction(act)
            act.triggered.connect(lambda _=False, t=tool.value: self.toolChanged.emit(t))
            self.addAction(act)

        # Bán kính cọ
        self.btn_radius = QtWidgets.QToolButton(self)
        self.btn_radius.setPopupMode(QtWidgets.QToolButton.InstantPopup)
        self.menu_radius, self.radius_panel = create_brush_menu(self, init_radius)
        self.radius_panel.radiusChanged.connect(self._on_radius)
        self.btn_radius.setMenu(self.menu_radius); self.addWidget(self.btn_radius)
        self.addSeparator()

        # Lệnh
        self.act_undo = self._act("↶ Hoàn tác", self.requestUndo.emit, QKeySequence.Undo)
        self.act_undo.setEnabled(False)
        self.addAction(self.act_undo)
        self.addAction(self._act("🗑 Xoá mask", self.requestClear.emit))
        self.act_invert = QAction("◐ Đảo mask", self, checkable=True)
        self.act_invert.triggered.connect(lambda _=False: self.requestInvert.emit())
        self.addAction(self.act_invert)
        self.addSeparator()

        # Kiểu mã hoá mask theo nhà cung cấp
        self.cmb_encoding = QtWidgets.QComboBox(self)
        self.cmb_encoding.addItem("Đen/Trắng", MaskEncoding.BINARY.value)
        self.cmb_encoding.addItem("Alpha", MaskEncoding.ALPHA.value)
        self.cmb_encoding.currentIndexChanged.connect(
            lambda i: self.encodingChanged.emit(self.cmb_encoding.itemData(i)))
        self.addWidget(self.cmb_encoding)

        self.reflect_tool(Tool(init_tool).value)
        self.reflect_encoding(MaskEncoding(init_encoding).value)
        self._sync_radius_button(self.radius_panel.radius())

    # ---- helpers ----
    def _act(self, text, slot, shortcut=None):
        a = QAction(text, self); a.triggered.connect(slot)
        if shortcut is not None: a.setShortcut(QKeySequence(shortcut))
        return a

    def _sync_radius_button(self, r: int):
        self.btn_radius.setText(f"⬤ {r}px")

    def _on_radius(self, v: int):
        v = clamp_radius(v)
        self._sync_radius_button(v)
        self.brushRadiusChanged.emit(v)

    # Cho Window đồng bộ lại trạng thái nút khi đổi từ ngoài:
    def reflect_radius(self, r: int):
        self.radius_panel.set_radius(r, emit=False)
        self._sync_radius_button(self.radius_panel.radius())

    def reflect_tool(self, name: str):
        self.act_paint.setChecked(name == Tool.PAINT.value)
        self.act_erase.setChecked(name == Tool.ERASE.value)

    def reflect_encoding(self, name: str):
        i = self.cmb_encoding.findData(name)
        if i >= 0:
            self.cmb_encoding.blockSignals(True); self.cmb_encoding.setCurrentIndex(i); self.cmb_encoding.blockSignals(False)

    def reflect_undo(self, can_undo: bool): self.act_undo.setEnabled(can_undo)
    def reflect_inverted(self, inverted: bool): self.act_invert.setChecked(inverted)
