# src/chip8_core_tracer/arch/chip8/instructions/control.py
"""
制御命令（ジャンプ、サブルーチン、条件スキップ）の実装。

ハンドラが呼ばれる時点で state.pc は次の命令（現在の命令+2）を指しています。
"""
from chip8_core_tracer.arch.chip8.opcode_tree import OperandData
from chip8_core_tracer.arch.chip8.state import Chip8State
from chip8_core_tracer.transport.memory import Memory
from .base import addr, byte, reg, skip_next

# --- SYS ---
# @intent:responsibility SYS addr (0nnn) を実行します。機械語ルーチン呼び出しは無視します。
def execute_sys(state: Chip8State, memory: Memory, op: OperandData) -> None:
    # Intentional: SYS is ignored by modern interpreters.
    pass

def disasm_sys(op: OperandData) -> str:
    return f"SYS {addr(op.addr12)}"

# --- RET ---
# @intent:responsibility スタックから戻りアドレスをポップしてPCに設定します。
def execute_ret(state: Chip8State, memory: Memory, op: OperandData) -> None:
    state.pc = state.pop()

def disasm_ret(op: OperandData) -> str:
    return "RET"

# --- JP ---
def execute_jp(state: Chip8State, memory: Memory, op: OperandData) -> None:
    state.pc = op.addr12

def disasm_jp(op: OperandData) -> str:
    return f"JP {addr(op.addr12)}"

# --- CALL ---
# @intent:responsibility 戻りアドレス（次の命令）をスタックにプッシュしてからジャンプします。
def execute_call(state: Chip8State, memory: Memory, op: OperandData) -> None:
    # state.pc is already pointing to the NEXT instruction
    state.push(state.pc)
    state.pc = op.addr12

def disasm_call(op: OperandData) -> str:
    return f"CALL {addr(op.addr12)}"

# --- SE Vx, byte ---
def execute_se_vx_kk(state: Chip8State, memory: Memory, op: OperandData) -> None:
    if state.v[op.x] == op.imm8:
        skip_next(state)

def disasm_se_vx_kk(op: OperandData) -> str:
    return f"SE {reg(op.x)}, {byte(op.imm8)}"

# --- SNE Vx, byte ---
def execute_sne_vx_kk(state: Chip8State, memory: Memory, op: OperandData) -> None:
    if state.v[op.x] != op.imm8:
        skip_next(state)

def disasm_sne_vx_kk(op: OperandData) -> str:
    return f"SNE {reg(op.x)}, {byte(op.imm8)}"

# --- SE Vx, Vy ---
def execute_se_vx_vy(state: Chip8State, memory: Memory, op: OperandData) -> None:
    if state.v[op.x] == state.v[op.y]:
        skip_next(state)

def disasm_se_vx_vy(op: OperandData) -> str:
    return f"SE {reg(op.x)}, {reg(op.y)}"

# --- SNE Vx, Vy ---
def execute_sne_vx_vy(state: Chip8State, memory: Memory, op: OperandData) -> None:
    if state.v[op.x] != state.v[op.y]:
        skip_next(state)

def disasm_sne_vx_vy(op: OperandData) -> str:
    return f"SNE {reg(op.x)}, {reg(op.y)}"

# --- JP V0, addr ---
# @intent:responsibility V0 + nnn へジャンプします。範囲外の結果はCPU側の検証でフォールトになります。
def execute_jp_v0_nnn(state: Chip8State, memory: Memory, op: OperandData) -> None:
    state.pc = state.v[0] + op.addr12

def disasm_jp_v0_nnn(op: OperandData) -> str:
    return f"JP V0, {addr(op.addr12)}"

# --- EXIT (Super-CHIP) ---
# @intent:responsibility インタプリタを終了状態にします。以降のサイクルはリセットまで何もしません。
def execute_exit(state: Chip8State, memory: Memory, op: OperandData) -> None:
    state.exited = True

def disasm_exit(op: OperandData) -> str:
    return "EXIT"
