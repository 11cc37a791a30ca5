# src/chip8_core_tracer/arch/chip8/instructions/alu.py
"""
算術論理演算命令の実装。

VFを書き換える命令では、結果をVxに格納した後でVFを設定します。
（VxがVFの場合はフラグ値が優先されます）
"""
from chip8_core_tracer.arch.chip8.opcode_tree import OperandData
from chip8_core_tracer.arch.chip8.state import Chip8State
from chip8_core_tracer.transport.memory import Memory
from .base import VF, byte, reg

# --- ADD Vx, byte ---
# @intent:responsibility 即値を加算します。キャリーフラグは変化しません。
def execute_add_vx_kk(state: Chip8State, memory: Memory, op: OperandData) -> None:
    state.v[op.x] = (state.v[op.x] + op.imm8) & 0xFF

def disasm_add_vx_kk(op: OperandData) -> str:
    return f"ADD {reg(op.x)}, {byte(op.imm8)}"

# --- OR / AND / XOR ---
def execute_or_vx_vy(state: Chip8State, memory: Memory, op: OperandData) -> None:
    state.v[op.x] |= state.v[op.y]

def disasm_or_vx_vy(op: OperandData) -> str:
    return f"OR {reg(op.x)}, {reg(op.y)}"

def execute_and_vx_vy(state: Chip8State, memory: Memory, op: OperandData) -> None:
    state.v[op.x] &= state.v[op.y]

def disasm_and_vx_vy(op: OperandData) -> str:
    return f"AND {reg(op.x)}, {reg(op.y)}"

def execute_xor_vx_vy(state: Chip8State, memory: Memory, op: OperandData) -> None:
    state.v[op.x] ^= state.v[op.y]

def disasm_xor_vx_vy(op: OperandData) -> str:
    return f"XOR {reg(op.x)}, {reg(op.y)}"

# --- ADD Vx, Vy ---
# @intent:responsibility 8ビット加算を行い、桁あふれ時にVF=1とします。
def execute_add_vx_vy(state: Chip8State, memory: Memory, op: OperandData) -> None:
    res = state.v[op.x] + state.v[op.y]
    state.v[op.x] = res & 0xFF
    state.v[VF] = 1 if res > 0xFF else 0

def disasm_add_vx_vy(op: OperandData) -> str:
    return f"ADD {reg(op.x)}, {reg(op.y)}"

# --- SUB Vx, Vy ---
# @intent:responsibility Vx - Vy を計算し、ボローが発生しなかった場合にVF=1とします。
def execute_sub_vx_vy(state: Chip8State, memory: Memory, op: OperandData) -> None:
    v1, v2 = state.v[op.x], state.v[op.y]
    state.v[op.x] = (v1 - v2) & 0xFF
    state.v[VF] = 1 if v1 >= v2 else 0

def disasm_sub_vx_vy(op: OperandData) -> str:
    return f"SUB {reg(op.x)}, {reg(op.y)}"

# --- SUBN Vx, Vy ---
# @intent:responsibility Vy - Vx をVxに格納し、ボローが発生しなかった場合にVF=1とします。
def execute_subn_vx_vy(state: Chip8State, memory: Memory, op: OperandData) -> None:
    v1, v2 = state.v[op.x], state.v[op.y]
    state.v[op.x] = (v2 - v1) & 0xFF
    state.v[VF] = 1 if v2 >= v1 else 0

def disasm_subn_vx_vy(op: OperandData) -> str:
    return f"SUBN {reg(op.x)}, {reg(op.y)}"

# --- SHR / SHL ---
# @intent:responsibility Vxを1ビットシフトし、押し出されたビットをVFに設定します。Vyは参照しません。
def execute_shr_vx_vy(state: Chip8State, memory: Memory, op: OperandData) -> None:
    val = state.v[op.x]
    state.v[op.x] = val >> 1
    state.v[VF] = val & 0x01

def disasm_shr_vx_vy(op: OperandData) -> str:
    return f"SHR {reg(op.x)} {{, {reg(op.y)}}}"

def execute_shl_vx_vy(state: Chip8State, memory: Memory, op: OperandData) -> None:
    val = state.v[op.x]
    state.v[op.x] = (val << 1) & 0xFF
    state.v[VF] = (val >> 7) & 0x01

def disasm_shl_vx_vy(op: OperandData) -> str:
    return f"SHL {reg(op.x)} {{, {reg(op.y)}}}"

# --- RND Vx, byte ---
# The AND is intentional: the result is not a number in [0, kk].
def execute_rnd_vx_kk(state: Chip8State, memory: Memory, op: OperandData) -> None:
    state.v[op.x] = state.rng.randint(0, 0xFF) & op.imm8

def disasm_rnd_vx_kk(op: OperandData) -> str:
    return f"RND {reg(op.x)}, {byte(op.imm8)}"

# --- ADD I, Vx ---
def execute_add_i_vx(state: Chip8State, memory: Memory, op: OperandData) -> None:
    state.i = (state.i + state.v[op.x]) & 0xFFFF

def disasm_add_i_vx(op: OperandData) -> str:
    return f"ADD I, {reg(op.x)}"
