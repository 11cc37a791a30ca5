# src/chip8_core_tracer/arch/chip8/instructions/keypad.py
"""
キー入力命令の実装。
"""
from chip8_core_tracer.arch.chip8.opcode_tree import OperandData
from chip8_core_tracer.arch.chip8.state import Chip8State
from chip8_core_tracer.common.types import INSTRUCTION_SIZE
from chip8_core_tracer.transport.memory import Memory
from .base import reg, skip_next

# --- SKP Vx ---
def execute_skp_vx(state: Chip8State, memory: Memory, op: OperandData) -> None:
    if state.keys[state.v[op.x] & 0xF]:
        skip_next(state)

def disasm_skp_vx(op: OperandData) -> str:
    return f"SKP {reg(op.x)}"

# --- SKNP Vx ---
def execute_sknp_vx(state: Chip8State, memory: Memory, op: OperandData) -> None:
    if not state.keys[state.v[op.x] & 0xF]:
        skip_next(state)

def disasm_sknp_vx(op: OperandData) -> str:
    return f"SKNP {reg(op.x)}"

# --- LD Vx, K ---
# @intent:responsibility キー待ち状態に入ります。
# @intent:rationale PCをこの命令に戻して待機し、次のキー押下（Chip8Cpu.press_key）で
#                  Vxへの格納とPCの前進を行います。待機中もタイマーと表示は更新され続けます。
def execute_ld_vx_k(state: Chip8State, memory: Memory, op: OperandData) -> None:
    state.waiting_key_register = op.x
    state.pc -= INSTRUCTION_SIZE

def disasm_ld_vx_k(op: OperandData) -> str:
    return f"LD {reg(op.x)}, K"
