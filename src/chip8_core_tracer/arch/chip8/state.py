# src/chip8_core_tracer/arch/chip8/state.py
"""
CHIP-8 マシン固有の状態定義。
"""
import random
from dataclasses import dataclass, field
from typing import List, Optional

from chip8_core_tracer.core.state import CpuState
from chip8_core_tracer.common.errors import StackOverflowError, StackUnderflowError
from chip8_core_tracer.common.types import (
    DISPLAY_HEIGHT, DISPLAY_WIDTH, KEY_COUNT, PROGRAM_START, REGISTER_COUNT, STACK_DEPTH, ScreenMode,
)

RPL_FLAG_COUNT = 8

# @intent:responsibility CHIP-8の全レジスタ、スタック、タイマー、表示バッファ、入力状態を保持します。
# @intent:rationale メモリは Transport Layer の Memory が保持し、ここにはCPU側の状態のみを置きます。
@dataclass
class Chip8State(CpuState):
    """
    CHIP-8 のマシン状態を保持するデータクラス。
    `sp` はスタックに積まれているアドレスの個数（0〜16）です。
    """
    pc: int = PROGRAM_START
    v: List[int] = field(default_factory=lambda: [0] * REGISTER_COUNT)  # V0-VF
    i: int = 0x0000
    stack: List[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    dt: int = 0  # Delay Timer
    st: int = 0  # Sound Timer
    screen_mode: ScreenMode = ScreenMode.STANDARD
    # 行ストライドは常に DISPLAY_WIDTH(128)。標準モードでは左上 64x32 のみ使用する。
    display: bytearray = field(default_factory=lambda: bytearray(DISPLAY_WIDTH * DISPLAY_HEIGHT))
    keys: List[bool] = field(default_factory=lambda: [False] * KEY_COUNT)
    waiting_key_register: Optional[int] = None
    rpl: List[int] = field(default_factory=lambda: [0] * RPL_FLAG_COUNT)
    exited: bool = False
    # RND用の乱数源。シード指定で決定的なトレースを得られる。
    rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)

    # --- Stack ---

    # @intent:responsibility 戻りアドレスをスタックに積みます。
    # @intent:pre-condition sp < 16。満杯の場合は状態を変更せずに例外を送出します。
    def push(self, address: int) -> None:
        if self.sp >= STACK_DEPTH:
            raise StackOverflowError(f"Stack overflow pushing {address:#05x} (depth {STACK_DEPTH})")
        self.stack[self.sp] = address & 0xFFFF
        self.sp += 1

    # @intent:responsibility スタックから戻りアドレスを取り出します。
    # @intent:pre-condition sp > 0。空の場合は状態を変更せずに例外を送出します。
    def pop(self) -> int:
        if self.sp <= 0:
            raise StackUnderflowError("Stack underflow: return with empty stack")
        self.sp -= 1
        return self.stack[self.sp]

    # --- Display ---

    @property
    def width(self) -> int:
        return self.screen_mode.width

    @property
    def height(self) -> int:
        return self.screen_mode.height

    def get_pixel(self, x: int, y: int) -> bool:
        return self.display[y * DISPLAY_WIDTH + x] != 0

    # @intent:responsibility 画素をXORし、点灯していた画素が消えた場合にTrueを返します。
    def xor_pixel(self, x: int, y: int) -> bool:
        index = y * DISPLAY_WIDTH + x
        erased = self.display[index] != 0
        self.display[index] ^= 1
        return erased

    def clear_display(self) -> None:
        self.display[:] = bytes(len(self.display))

    def _rows(self) -> List[bytearray]:
        w = self.width
        return [self.display[y * DISPLAY_WIDTH:y * DISPLAY_WIDTH + w] for y in range(self.height)]

    def _store_rows(self, rows: List[bytearray]) -> None:
        w = self.width
        for y, row in enumerate(rows):
            self.display[y * DISPLAY_WIDTH:y * DISPLAY_WIDTH + w] = row

    # @intent:responsibility 有効領域を下方向にスクロールし、空いた行を消去します。
    def scroll_down(self, rows: int) -> None:
        if rows <= 0:
            return
        w = self.width
        current = self._rows()
        blank = [bytearray(w) for _ in range(min(rows, len(current)))]
        self._store_rows((blank + current)[:len(current)])

    # @intent:responsibility 有効領域を水平方向にスクロールします。正の値で右、負の値で左。
    def scroll_horizontal(self, columns: int) -> None:
        w = self.width
        shifted = []
        for row in self._rows():
            if columns >= 0:
                shifted.append((bytearray(columns) + row)[:w])
            else:
                shifted.append((row[-columns:] + bytearray(-columns))[:w])
        self._store_rows(shifted)

    # @intent:responsibility 画面モードを切り替え、表示をクリアします。
    def set_screen_mode(self, mode: ScreenMode) -> None:
        self.screen_mode = mode
        self.clear_display()

    # --- Snapshot support ---

    # @intent:responsibility 可変コンテナも含めて切り離されたコピーを返します。
    # @intent:rationale Snapshotや公開ビューが後続サイクルの変更を観測しないようにするため。
    def copy(self) -> "Chip8State":
        return Chip8State(
            pc=self.pc,
            sp=self.sp,
            v=list(self.v),
            i=self.i,
            stack=list(self.stack),
            dt=self.dt,
            st=self.st,
            screen_mode=self.screen_mode,
            display=bytearray(self.display),
            keys=list(self.keys),
            waiting_key_register=self.waiting_key_register,
            rpl=list(self.rpl),
            exited=self.exited,
            rng=self.rng,
        )
