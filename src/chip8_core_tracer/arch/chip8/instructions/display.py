# src/chip8_core_tracer/arch/chip8/instructions/display.py
"""
表示命令（消去、スプライト描画、スクロール、画面モード切り替え）の実装。
"""
from chip8_core_tracer.arch.chip8.opcode_tree import OperandData
from chip8_core_tracer.arch.chip8.state import Chip8State
from chip8_core_tracer.common.types import ScreenMode
from chip8_core_tracer.transport.memory import Memory
from .base import VF, indirect, nibble, reg

SCROLL_COLUMNS = 4

# --- CLS ---
def execute_cls(state: Chip8State, memory: Memory, op: OperandData) -> None:
    state.clear_display()

def disasm_cls(op: OperandData) -> str:
    return "CLS"

# --- DRW Vx, Vy, nibble ---
# @intent:responsibility Iから読んだスプライトを(Vx, Vy)にXOR描画し、消えた画素があればVF=1とします。
# @intent:rationale 座標は有効な画面モードの幅・高さで画素ごとに折り返します。
#                  n=0 は Super-CHIP の大型スプライト（拡張モードで16x16、標準モードで8x16）です。
def execute_drw_vx_vy_n(state: Chip8State, memory: Memory, op: OperandData) -> None:
    width, height = state.width, state.height
    rows, columns = op.small4, 8
    if rows == 0:
        rows = 16
        if state.screen_mode is ScreenMode.EXTENDED:
            columns = 16
    bytes_per_row = columns // 8

    x0 = state.v[op.x] % width
    y0 = state.v[op.y] % height
    collision = False

    for row in range(rows):
        bits = 0
        for b in range(bytes_per_row):
            bits = (bits << 8) | memory.read(indirect(state, row * bytes_per_row + b))
        for col in range(columns):
            if bits & (1 << (columns - 1 - col)):
                if state.xor_pixel((x0 + col) % width, (y0 + row) % height):
                    collision = True

    state.v[VF] = 1 if collision else 0

def disasm_drw_vx_vy_n(op: OperandData) -> str:
    return f"DRW {reg(op.x)}, {reg(op.y)}, {nibble(op.small4)}"

# --- SCD nibble (Super-CHIP) ---
def execute_scd_n(state: Chip8State, memory: Memory, op: OperandData) -> None:
    state.scroll_down(op.small4)

def disasm_scd_n(op: OperandData) -> str:
    return f"SCD {nibble(op.small4)}"

# --- SCR / SCL (Super-CHIP) ---
def execute_scr(state: Chip8State, memory: Memory, op: OperandData) -> None:
    state.scroll_horizontal(SCROLL_COLUMNS)

def disasm_scr(op: OperandData) -> str:
    return "SCR"

def execute_scl(state: Chip8State, memory: Memory, op: OperandData) -> None:
    state.scroll_horizontal(-SCROLL_COLUMNS)

def disasm_scl(op: OperandData) -> str:
    return "SCL"

# --- LOW / HIGH (Super-CHIP) ---
def execute_low(state: Chip8State, memory: Memory, op: OperandData) -> None:
    state.set_screen_mode(ScreenMode.STANDARD)

def disasm_low(op: OperandData) -> str:
    return "LOW"

def execute_high(state: Chip8State, memory: Memory, op: OperandData) -> None:
    state.set_screen_mode(ScreenMode.EXTENDED)

def disasm_high(op: OperandData) -> str:
    return "HIGH"
