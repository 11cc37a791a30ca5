# src/chip8_core_tracer/arch/chip8/instructions/maps.py
"""
命令エンコーディングと命令実装のマッピング定義。
"""
from typing import Dict, List, Tuple

from chip8_core_tracer.arch.chip8.opcode_tree import OpHandler, OpcodeTree, parse_pattern
from . import alu
from . import control
from . import display
from . import keypad
from . import load

# @intent:map (識別子, パターン, 実行関数, 逆アセンブル関数) の定義表。登録順はこの並びです。
# パターン中の N/X/Y/K はオペランドのニブルを表します。
HANDLER_TABLE: List[Tuple[str, str, object, object]] = [
    # Control / Display (0 group)
    ("CLS",         "00E0", display.execute_cls,         display.disasm_cls),
    ("RET",         "00EE", control.execute_ret,         control.disasm_ret),
    ("SCD_N",       "00CN", display.execute_scd_n,       display.disasm_scd_n),
    ("SCR",         "00FB", display.execute_scr,         display.disasm_scr),
    ("SCL",         "00FC", display.execute_scl,         display.disasm_scl),
    ("EXIT",        "00FD", control.execute_exit,        control.disasm_exit),
    ("LOW",         "00FE", display.execute_low,         display.disasm_low),
    ("HIGH",        "00FF", display.execute_high,        display.disasm_high),
    ("SYS",         "0NNN", control.execute_sys,         control.disasm_sys),

    # Flow
    ("JP",          "1NNN", control.execute_jp,          control.disasm_jp),
    ("CALL",        "2NNN", control.execute_call,        control.disasm_call),
    ("SE_VX_KK",    "3XKK", control.execute_se_vx_kk,    control.disasm_se_vx_kk),
    ("SNE_VX_KK",   "4XKK", control.execute_sne_vx_kk,   control.disasm_sne_vx_kk),
    ("SE_VX_VY",    "5XY0", control.execute_se_vx_vy,    control.disasm_se_vx_vy),

    # Load / ALU
    ("LD_VX_KK",    "6XKK", load.execute_ld_vx_kk,       load.disasm_ld_vx_kk),
    ("ADD_VX_KK",   "7XKK", alu.execute_add_vx_kk,       alu.disasm_add_vx_kk),
    ("LD_VX_VY",    "8XY0", load.execute_ld_vx_vy,       load.disasm_ld_vx_vy),
    ("OR_VX_VY",    "8XY1", alu.execute_or_vx_vy,        alu.disasm_or_vx_vy),
    ("AND_VX_VY",   "8XY2", alu.execute_and_vx_vy,       alu.disasm_and_vx_vy),
    ("XOR_VX_VY",   "8XY3", alu.execute_xor_vx_vy,       alu.disasm_xor_vx_vy),
    ("ADD_VX_VY",   "8XY4", alu.execute_add_vx_vy,       alu.disasm_add_vx_vy),
    ("SUB_VX_VY",   "8XY5", alu.execute_sub_vx_vy,       alu.disasm_sub_vx_vy),
    ("SHR_VX_VY",   "8XY6", alu.execute_shr_vx_vy,       alu.disasm_shr_vx_vy),
    ("SUBN_VX_VY",  "8XY7", alu.execute_subn_vx_vy,      alu.disasm_subn_vx_vy),
    ("SHL_VX_VY",   "8XYE", alu.execute_shl_vx_vy,       alu.disasm_shl_vx_vy),
    ("SNE_VX_VY",   "9XY0", control.execute_sne_vx_vy,   control.disasm_sne_vx_vy),
    ("LD_I_NNN",    "ANNN", load.execute_ld_i_nnn,       load.disasm_ld_i_nnn),
    ("JP_V0_NNN",   "BNNN", control.execute_jp_v0_nnn,   control.disasm_jp_v0_nnn),
    ("RND_VX_KK",   "CXKK", alu.execute_rnd_vx_kk,       alu.disasm_rnd_vx_kk),
    ("DRW_VX_VY_N", "DXYN", display.execute_drw_vx_vy_n, display.disasm_drw_vx_vy_n),

    # Keypad
    ("SKP_VX",      "EX9E", keypad.execute_skp_vx,       keypad.disasm_skp_vx),
    ("SKNP_VX",     "EXA1", keypad.execute_sknp_vx,      keypad.disasm_sknp_vx),

    # F group
    ("LD_VX_DT",    "FX07", load.execute_ld_vx_dt,       load.disasm_ld_vx_dt),
    ("LD_VX_K",     "FX0A", keypad.execute_ld_vx_k,      keypad.disasm_ld_vx_k),
    ("LD_DT_VX",    "FX15", load.execute_ld_dt_vx,       load.disasm_ld_dt_vx),
    ("LD_ST_VX",    "FX18", load.execute_ld_st_vx,       load.disasm_ld_st_vx),
    ("ADD_I_VX",    "FX1E", alu.execute_add_i_vx,        alu.disasm_add_i_vx),
    ("LD_F_VX",     "FX29", load.execute_ld_f_vx,        load.disasm_ld_f_vx),
    ("LD_HF_VX",    "FX30", load.execute_ld_hf_vx,       load.disasm_ld_hf_vx),
    ("LD_B_VX",     "FX33", load.execute_ld_b_vx,        load.disasm_ld_b_vx),
    ("LD_I_VX",     "FX55", load.execute_ld_i_vx,        load.disasm_ld_i_vx),
    ("LD_VX_I",     "FX65", load.execute_ld_vx_i,        load.disasm_ld_vx_i),
    ("LD_R_VX",     "FX75", load.execute_ld_r_vx,        load.disasm_ld_r_vx),
    ("LD_VX_R",     "FX85", load.execute_ld_vx_r,        load.disasm_ld_vx_r),
]

# @intent:responsibility 定義表から識別子→ハンドラのレジストリを構築します。
def build_handlers() -> Dict[str, OpHandler]:
    handlers: Dict[str, OpHandler] = {}
    for name, pattern, execute, disassemble in HANDLER_TABLE:
        if name in handlers:
            raise ValueError(f"Duplicate handler identifier: {name}")
        handlers[name] = OpHandler(name, parse_pattern(pattern), execute, disassemble)
    return handlers

# @intent:map 識別子（例: "ADD_VX_VY"）からハンドラへのレジストリ。起動時に一度だけ構築されます。
HANDLERS: Dict[str, OpHandler] = build_handlers()

# @intent:responsibility レジストリの全ハンドラを登録したオペコードツリーを構築します。
def build_opcode_tree() -> OpcodeTree:
    tree = OpcodeTree()
    for handler in HANDLERS.values():
        tree.add(handler)
    return tree
