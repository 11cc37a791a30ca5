# src/chip8_core_tracer/arch/chip8/instructions/base.py
"""
CHIP-8命令実装用の共通ユーティリティ。
"""
from chip8_core_tracer.arch.chip8.state import Chip8State
from chip8_core_tracer.common.types import INSTRUCTION_SIZE

ADDRESS_MASK = 0x0FFF
VF = 0xF

# @intent:utility_function スキップ命令の条件成立時に次の命令を飛ばします。
# @intent:rationale PCはハンドラ呼び出し前に既に+2されているため、ここでさらに+2します（合計+4）。
def skip_next(state: Chip8State) -> None:
    state.pc += INSTRUCTION_SIZE

# @intent:utility_function Iレジスタを基点とした間接アドレスを12ビットに丸めて返します。
def indirect(state: Chip8State, offset: int = 0) -> int:
    return (state.i + offset) & ADDRESS_MASK

# --- 逆アセンブル用の書式 ---

def reg(index: int) -> str:
    return f"V{index:X}"

def addr(value: int) -> str:
    return f"0x{value:03X}"

def byte(value: int) -> str:
    return f"0x{value:02X}"

def nibble(value: int) -> str:
    return f"0x{value:X}"
