# src/chip8_core_tracer/ui/register_view.py
"""
CPUのレジスタを表示するウィジェット。
レイアウト定義（RegisterLayoutInfo）に基づいて動的にUIを構築します。
"""
from typing import Dict, List

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QGridLayout, QGroupBox, QLabel, QVBoxLayout, QWidget

from chip8_core_tracer.common.types import RegisterLayoutInfo
from chip8_core_tracer.ui.fonts import get_monospace_font_family

# 1行に並べる (名前, 値) の組数。V0-VF が4行に収まる
PAIRS_PER_ROW = 4

GROUP_STYLE = (
    "QGroupBox { border: 1px solid #2A2E2A; margin-top: 14px; color: #C8D0C8; }"
    "QGroupBox::title { subcontrol-origin: margin; left: 8px; color: #3FA66B; }"
)

# @intent:responsibility レジスタ値を表示するUIウィジェットを提供します。
class RegisterView(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self._root = QVBoxLayout(self)
        self._root.setContentsMargins(4, 4, 4, 4)

        self._value_style = f"font-family: '{get_monospace_font_family()}', monospace; color: #E8C547;"
        self._labels: Dict[str, QLabel] = {}
        self._digits: Dict[str, int] = {}

    # @intent:responsibility レイアウト定義からグループとラベルを構築します。既存の表示は破棄されます。
    def set_layout_info(self, layout_info: List[RegisterLayoutInfo]) -> None:
        self._clear()
        for group in layout_info:
            box = QGroupBox(group.group_name)
            box.setStyleSheet(GROUP_STYLE)
            grid = QGridLayout(box)
            grid.setHorizontalSpacing(8)
            for index, reg in enumerate(group.registers):
                row, pair = divmod(index, PAIRS_PER_ROW)
                grid.addWidget(QLabel(reg.name), row, pair * 2)
                grid.addWidget(self._make_value_label(reg.name, reg.width), row, pair * 2 + 1)
            self._root.addWidget(box)
        self._root.addStretch()

    def _make_value_label(self, name: str, width: int) -> QLabel:
        digits = (width + 3) // 4
        label = QLabel("0x" + "0" * digits)
        label.setStyleSheet(self._value_style)
        label.setAlignment(Qt.AlignRight)
        self._labels[name] = label
        self._digits[name] = digits
        return label

    def _clear(self) -> None:
        while self._root.count():
            widget = self._root.takeAt(0).widget()
            if widget is not None:
                widget.deleteLater()
        self._labels.clear()
        self._digits.clear()

    # @intent:responsibility レジスタ名→値の辞書で表示を更新します。未知の名前は無視します。
    def update_registers(self, values: Dict[str, int]) -> None:
        for name, value in values.items():
            label = self._labels.get(name)
            if label is not None:
                label.setText(f"0x{value:0{self._digits[name]}X}")

    def get_register_text(self, name: str) -> str:
        return self._labels[name].text()
