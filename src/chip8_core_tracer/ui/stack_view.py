# src/chip8_core_tracer/ui/stack_view.py
"""
CHIP-8 のコールスタック（戻りアドレス）を表示するウィジェット。
"""
from typing import Sequence

from PySide6.QtGui import QColor, QTextCharFormat, QTextCursor, QTextOption
from PySide6.QtWidgets import QPlainTextEdit, QVBoxLayout, QWidget

from chip8_core_tracer.arch.chip8.cpu import format_stack
from chip8_core_tracer.ui.fonts import get_monospace_font

# @intent:responsibility スタックの内容を深い順に一覧表示し、最上段をハイライトします。
class StackView(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.layout = QVBoxLayout(self)
        self.layout.setContentsMargins(0, 0, 0, 0)
        self.editor = QPlainTextEdit(self)
        self.editor.setFont(get_monospace_font(10))
        self.editor.setReadOnly(True)
        self.editor.setWordWrapMode(QTextOption.NoWrap)
        self.editor.setStyleSheet("background-color: #101010; color: #BBBBBB;")
        self.layout.addWidget(self.editor)

    def update_stack(self, stack: Sequence[int], sp: int) -> None:
        lines = format_stack(stack, sp)
        if not lines:
            self.editor.setPlainText("(empty)")
            return
        self.editor.setPlainText("\n".join(lines))

        # 先頭行（次のRETで戻るアドレス）を強調
        cursor = self.editor.textCursor()
        cursor.movePosition(QTextCursor.Start)
        cursor.select(QTextCursor.LineUnderCursor)
        fmt = QTextCharFormat()
        fmt.setBackground(QColor("#404000"))
        cursor.mergeCharFormat(fmt)

    def get_text(self) -> str:
        return self.editor.toPlainText()
