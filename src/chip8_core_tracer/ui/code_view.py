"""
逆アセンブルコードを表示するウィジェット。
"""
from typing import Callable, List, Tuple

from PySide6.QtGui import QColor
from PySide6.QtWidgets import QHeaderView, QTableWidget, QTableWidgetItem, QVBoxLayout, QWidget

from chip8_core_tracer.ui.fonts import get_monospace_font

DisassembleFn = Callable[[int, int], List[Tuple[int, str, str]]]

# @intent:responsibility 逆アセンブルされたコードを表形式で表示し、現在のPCをハイライトするUIウィジェットを提供します。
class CodeView(QWidget):
    """
    PCが表示中の範囲にある間は再逆アセンブルせず、ハイライトだけを移動します。
    """
    def __init__(self, window_size: int = 128, parent=None):
        super().__init__(parent)
        self.layout = QVBoxLayout(self)
        self.layout.setContentsMargins(0, 0, 0, 0)

        self.table = QTableWidget()
        self.table.setColumnCount(3)
        self.table.setHorizontalHeaderLabels(["Address", "Bytes", "Mnemonic"])
        self.table.horizontalHeader().setSectionResizeMode(0, QHeaderView.ResizeToContents)
        self.table.horizontalHeader().setSectionResizeMode(1, QHeaderView.ResizeToContents)
        self.table.horizontalHeader().setSectionResizeMode(2, QHeaderView.Stretch)
        self.table.setFont(get_monospace_font(10))
        self.table.verticalHeader().setVisible(False)
        self.table.setEditTriggers(QTableWidget.NoEditTriggers)
        self.table.setSelectionBehavior(QTableWidget.SelectRows)
        self.table.setShowGrid(False)
        self.table.setStyleSheet("background-color: #101010; color: #BBBBBB; gridline-color: #303030;")
        self.layout.addWidget(self.table)

        self.window_size = window_size  # 1回に逆アセンブルする命令数
        self.highlight_row = -1
        self.disassembled_data: List[Tuple[int, str, str]] = []

    # @intent:responsibility PC周辺のコードを表示します。範囲外の場合のみ disassemble を呼び出します。
    def update_code(self, pc: int, disassemble: DisassembleFn) -> None:
        row_index = self._find_row(pc)
        if row_index == -1:
            self.disassembled_data = disassemble(pc, self.window_size)
            self.table.setRowCount(len(self.disassembled_data))
            for row, (addr, hex_dump, mnemonic) in enumerate(self.disassembled_data):
                self.table.setItem(row, 0, QTableWidgetItem(f"{addr:03X}"))
                self.table.setItem(row, 1, QTableWidgetItem(hex_dump))
                self.table.setItem(row, 2, QTableWidgetItem(mnemonic))
            row_index = self._find_row(pc)

        self._set_row_color(self.highlight_row, QColor("#101010"))
        self._set_row_color(row_index, QColor("#404000"))
        self.highlight_row = row_index

        if row_index != -1:
            # 先の数行が見えるようにスクロールする
            self.table.scrollToItem(self.table.item(row_index, 0), QTableWidget.EnsureVisible)
            look_ahead = min(row_index + 5, self.table.rowCount() - 1)
            self.table.scrollToItem(self.table.item(look_ahead, 0), QTableWidget.EnsureVisible)

    # @intent:responsibility メモリ内容が変わった場合（ROMロードなど）に表示を破棄します。
    def reset_cache(self) -> None:
        self.disassembled_data = []
        self.highlight_row = -1
        self.table.setRowCount(0)

    def _find_row(self, pc: int) -> int:
        for i, (addr, _, _) in enumerate(self.disassembled_data):
            if addr == pc:
                return i
        return -1

    def _set_row_color(self, row: int, color: QColor) -> None:
        if not 0 <= row < self.table.rowCount():
            return
        for column in range(3):
            item = self.table.item(row, column)
            if item is not None:
                item.setBackground(color)
