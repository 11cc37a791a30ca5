# src/chip8_core_tracer/arch/chip8/instructions/__init__.py
"""
CHIP-8 / Super-CHIP 命令セット実装パッケージ。
"""
from .maps import HANDLERS, HANDLER_TABLE, build_handlers, build_opcode_tree

__all__ = ["HANDLERS", "HANDLER_TABLE", "build_handlers", "build_opcode_tree"]
