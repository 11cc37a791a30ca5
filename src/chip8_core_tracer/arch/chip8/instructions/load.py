# src/chip8_core_tracer/arch/chip8/instructions/load.py
"""
転送命令（レジスタ、タイマー、メモリ間のロード/ストア）の実装。
"""
from chip8_core_tracer.arch.chip8.font import (
    LARGE_FONT_ADDRESS, LARGE_GLYPH_SIZE, SMALL_FONT_ADDRESS, SMALL_GLYPH_SIZE,
)
from chip8_core_tracer.arch.chip8.opcode_tree import OperandData
from chip8_core_tracer.arch.chip8.state import RPL_FLAG_COUNT, Chip8State
from chip8_core_tracer.transport.memory import Memory
from .base import addr, byte, indirect, reg

# --- LD Vx, byte ---
def execute_ld_vx_kk(state: Chip8State, memory: Memory, op: OperandData) -> None:
    state.v[op.x] = op.imm8

def disasm_ld_vx_kk(op: OperandData) -> str:
    return f"LD {reg(op.x)}, {byte(op.imm8)}"

# --- LD Vx, Vy ---
def execute_ld_vx_vy(state: Chip8State, memory: Memory, op: OperandData) -> None:
    state.v[op.x] = state.v[op.y]

def disasm_ld_vx_vy(op: OperandData) -> str:
    return f"LD {reg(op.x)}, {reg(op.y)}"

# --- LD I, addr ---
def execute_ld_i_nnn(state: Chip8State, memory: Memory, op: OperandData) -> None:
    state.i = op.addr12

def disasm_ld_i_nnn(op: OperandData) -> str:
    return f"LD I, {addr(op.addr12)}"

# --- Timers ---
def execute_ld_vx_dt(state: Chip8State, memory: Memory, op: OperandData) -> None:
    state.v[op.x] = state.dt

def disasm_ld_vx_dt(op: OperandData) -> str:
    return f"LD {reg(op.x)}, DT"

def execute_ld_dt_vx(state: Chip8State, memory: Memory, op: OperandData) -> None:
    state.dt = state.v[op.x]

def disasm_ld_dt_vx(op: OperandData) -> str:
    return f"LD DT, {reg(op.x)}"

def execute_ld_st_vx(state: Chip8State, memory: Memory, op: OperandData) -> None:
    state.st = state.v[op.x]

def disasm_ld_st_vx(op: OperandData) -> str:
    return f"LD ST, {reg(op.x)}"

# --- Font ---
# @intent:responsibility Vxの下位4ビットが示す4x5フォントのアドレスをIに設定します。
def execute_ld_f_vx(state: Chip8State, memory: Memory, op: OperandData) -> None:
    state.i = SMALL_FONT_ADDRESS + (state.v[op.x] & 0xF) * SMALL_GLYPH_SIZE

def disasm_ld_f_vx(op: OperandData) -> str:
    return f"LD F, {reg(op.x)}"

# @intent:responsibility Vxの下位4ビットが示す8x10フォント（Super-CHIP）のアドレスをIに設定します。
def execute_ld_hf_vx(state: Chip8State, memory: Memory, op: OperandData) -> None:
    state.i = LARGE_FONT_ADDRESS + (state.v[op.x] & 0xF) * LARGE_GLYPH_SIZE

def disasm_ld_hf_vx(op: OperandData) -> str:
    return f"LD HF, {reg(op.x)}"

# --- LD B, Vx ---
# @intent:responsibility Vxの10進3桁（百、十、一の位）をI, I+1, I+2に書き込みます。
def execute_ld_b_vx(state: Chip8State, memory: Memory, op: OperandData) -> None:
    val = state.v[op.x]
    memory.write(indirect(state, 0), val // 100)
    memory.write(indirect(state, 1), (val // 10) % 10)
    memory.write(indirect(state, 2), val % 10)

def disasm_ld_b_vx(op: OperandData) -> str:
    return f"LD B, {reg(op.x)}"

# --- LD [I], Vx / LD Vx, [I] ---
# @intent:responsibility V0..Vx（両端含む）をIから始まるメモリへ書き込みます。Iは変更しません。
def execute_ld_i_vx(state: Chip8State, memory: Memory, op: OperandData) -> None:
    for r in range(op.x + 1):
        memory.write(indirect(state, r), state.v[r])

def disasm_ld_i_vx(op: OperandData) -> str:
    return f"LD [I], {reg(op.x)}"

# @intent:responsibility Iから始まるメモリをV0..Vx（両端含む）へ読み込みます。Iは変更しません。
def execute_ld_vx_i(state: Chip8State, memory: Memory, op: OperandData) -> None:
    for r in range(op.x + 1):
        state.v[r] = memory.read(indirect(state, r))

def disasm_ld_vx_i(op: OperandData) -> str:
    return f"LD {reg(op.x)}, [I]"

# --- RPL user flags (Super-CHIP) ---
# @intent:responsibility V0..Vx をRPLフラグへ保存します。フラグは8個のためxは7で打ち切ります。
def execute_ld_r_vx(state: Chip8State, memory: Memory, op: OperandData) -> None:
    for r in range(min(op.x, RPL_FLAG_COUNT - 1) + 1):
        state.rpl[r] = state.v[r]

def disasm_ld_r_vx(op: OperandData) -> str:
    return f"LD R, {reg(op.x)}"

def execute_ld_vx_r(state: Chip8State, memory: Memory, op: OperandData) -> None:
    for r in range(min(op.x, RPL_FLAG_COUNT - 1) + 1):
        state.v[r] = state.rpl[r]

def disasm_ld_vx_r(op: OperandData) -> str:
    return f"LD {reg(op.x)}, R"
