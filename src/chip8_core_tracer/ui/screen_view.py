# src/chip8_core_tracer/ui/screen_view.py
"""
CHIP-8 の表示面を描画するウィジェット。
フレームバッファ（常に128x64、行ストライド128）を受け取り、現在の画面モードの範囲だけを拡大表示します。
"""
from PySide6.QtCore import QRect, QSize, Qt
from PySide6.QtGui import QColor, QImage, QPainter
from PySide6.QtWidgets import QSizePolicy, QWidget

from chip8_core_tracer.common.types import DISPLAY_HEIGHT, DISPLAY_WIDTH, ScreenMode

# 0/1 のセル値をグレースケールの輝度に変換するテーブル
_PIXEL_TABLE = bytes([0x00, 0xFF] + [0xFF] * 254)

# @intent:responsibility フレームバッファを画像に変換し、ウィジェットいっぱいに描画します。
class ScreenView(QWidget):
    def __init__(self, pixel_scale: int = 8, parent=None):
        super().__init__(parent)
        self._pixel_scale = pixel_scale
        self._mode = ScreenMode.STANDARD
        self._buffer = bytes(DISPLAY_WIDTH * DISPLAY_HEIGHT)
        self._image = self._build_image()
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setAttribute(Qt.WA_OpaquePaintEvent)

    def sizeHint(self) -> QSize:
        # 拡張モードでも標準モードと同じ物理サイズになるように倍率を合わせる
        return QSize(ScreenMode.STANDARD.width * self._pixel_scale,
                     ScreenMode.STANDARD.height * self._pixel_scale)

    # @intent:responsibility 表示内容を差し替えて再描画を要求します。
    def update_screen(self, display: bytes, mode: ScreenMode) -> None:
        self._buffer = bytes(display).translate(_PIXEL_TABLE)
        self._mode = mode
        self._image = self._build_image()
        self.update()

    def get_image(self) -> QImage:
        return self._image

    def _build_image(self) -> QImage:
        # QImageはバッファを参照するだけなので、copy()で所有権を持たせる
        image = QImage(self._buffer, DISPLAY_WIDTH, DISPLAY_HEIGHT, DISPLAY_WIDTH, QImage.Format_Grayscale8)
        return image.copy(0, 0, self._mode.width, self._mode.height)

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor(0, 0, 0))
        target = self._fit_rect()
        painter.drawImage(target, self._image)
        painter.end()

    def _fit_rect(self) -> QRect:
        # アスペクト比 2:1 を保って中央に配置する
        width, height = self.width(), self.height()
        if width >= height * 2:
            target_w, target_h = height * 2, height
        else:
            target_w, target_h = width, width // 2
        return QRect((width - target_w) // 2, (height - target_h) // 2, target_w, target_h)
