# src/chip8_core_tracer/arch/chip8/disassembler.py
"""
CHIP-8 Disassembler

メモリ上のバイナリデータを解析し、CHIP-8のニーモニックに変換します。
実行と同じオペコードツリーを使用しますが、メモリはpeek（ログなし読み込み）でのみ参照するため、
実行状態やアクセスログには一切影響しません。
"""
from typing import List, Optional, Tuple

from chip8_core_tracer.arch.chip8.opcode_tree import OpcodeTree
from chip8_core_tracer.common.types import INSTRUCTION_SIZE, MAX_PC
from chip8_core_tracer.transport.memory import Memory

# @intent:responsibility 整列済みアドレスの命令を1つ逆アセンブルします。
# @intent:pre-condition addressは偶数かつ 0x000〜0xFFE の範囲である必要があります。
# @intent:return 一致するハンドラが無い場合はNone。
def disassemble_at(tree: OpcodeTree, memory: Memory, address: int) -> Optional[str]:
    if address % INSTRUCTION_SIZE != 0:
        raise ValueError(f"Address {address:#05x} is not aligned to an instruction boundary.")
    if not 0 <= address <= MAX_PC:
        raise ValueError(f"Address {address:#05x} is outside the program space.")
    return tree.disassemble(memory.peek_word(address))

# @intent:responsibility 指定されたメモリ範囲を逆アセンブルし、表示用データを生成します。
def disassemble(tree: OpcodeTree, memory: Memory, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
    """
    指定された範囲のメモリを逆アセンブルします。
    未知の命令語は "DW 0xNNNN" として表示します。

    Returns:
        List of (address, hex_bytes, mnemonic) tuples.
    """
    result = []
    current_addr = start_addr - (start_addr % INSTRUCTION_SIZE)
    end_addr = start_addr + length

    while current_addr < end_addr:
        # メモリ境界チェック
        if current_addr > MAX_PC:
            break

        word = memory.peek_word(current_addr)
        text = tree.disassemble(word)
        if text is None:
            text = f"DW 0x{word:04X}"

        result.append((current_addr, f"{word >> 8:02X} {word & 0xFF:02X}", text))
        current_addr += INSTRUCTION_SIZE

    return result
