# src/chip8_core_tracer/arch/chip8/opcode_tree.py
"""
Opcode Dispatch Engine

16ビットの命令語を4つのニブルに分解し、ニブル単位の4段ツリーを辿って
命令ハンドラ（実行ルーチンと逆アセンブルルーチンの組）を解決します。

各段のキーは固定ニブル値(0〜F)か、オペランドを表すワイルドカード(WILDCARD)です。
例えば `1NNN` は 1段目に 0x1、2〜4段目にワイルドカードを登録します。
探索は各段で「完全一致 → ワイルドカード」の順に試行するため、`00E0` のような
完全固定の命令と `0NNN` のような族を同じツリーに共存させることができます。
"""
from typing import Any, Callable, Dict, NamedTuple, Optional, Tuple

# @intent:constant オペランド位置を表すキー。
WILDCARD = None

# パターン文字列中でオペランドを表す文字
_OPERAND_CHARS = "NXYK"


# @intent:data_structure 命令語から一律に切り出したオペランド群。各ハンドラは必要なフィールドのみ参照します。
class OperandData(NamedTuple):
    addr12: int   # nnn
    x: int
    y: int
    imm8: int     # kk
    small4: int   # n


ExecuteFunc = Callable[[Any, Any, OperandData], None]
DisasmFunc = Callable[[OperandData], str]
Encoding = Tuple[Optional[int], Optional[int], Optional[int], Optional[int]]


# @intent:data_structure 命令ハンドラ。エンコーディングと実行・逆アセンブルの2ルーチンを保持します。
class OpHandler(NamedTuple):
    name: str
    encoding: Encoding
    execute: ExecuteFunc
    disassemble: DisasmFunc


# @intent:utility_function 命令語を上位から順に4つのニブルへ分解します。
def split_nibbles(instruction: int) -> Tuple[int, int, int, int]:
    return (
        (instruction >> 12) & 0xF,
        (instruction >> 8) & 0xF,
        (instruction >> 4) & 0xF,
        instruction & 0xF,
    )


# @intent:utility_function オペコードに関係なくオペランド構造体を埋めます。
def decode_operands(instruction: int) -> OperandData:
    instruction &= 0xFFFF
    return OperandData(
        addr12=instruction & 0x0FFF,
        x=(instruction >> 8) & 0xF,
        y=(instruction >> 4) & 0xF,
        imm8=instruction & 0xFF,
        small4=instruction & 0xF,
    )


# @intent:utility_function "8XY4" のようなパターン文字列をエンコーディングに変換します。
def parse_pattern(pattern: str) -> Encoding:
    """
    16進数字は固定ニブル、N/X/Y/K はワイルドカードとして扱います。
    """
    if len(pattern) != 4:
        raise ValueError(f"Opcode pattern must have 4 nibbles: {pattern!r}")
    encoding = []
    for ch in pattern.upper():
        if ch in _OPERAND_CHARS:
            encoding.append(WILDCARD)
        else:
            try:
                encoding.append(int(ch, 16))
            except ValueError:
                raise ValueError(f"Invalid nibble {ch!r} in opcode pattern {pattern!r}") from None
    return tuple(encoding)


def format_encoding(encoding: Encoding) -> str:
    return "".join("_" if nibble is WILDCARD else f"{nibble:X}" for nibble in encoding)


# @intent:responsibility ニブル単位の4段ツリーとしてハンドラを保持し、命令語から解決します。
class OpcodeTree:
    """
    4段の入れ子辞書によるオペコードツリー。
    """
    def __init__(self):
        self._root: Dict[Optional[int], Any] = {}
        self._count = 0

    def __len__(self) -> int:
        return self._count

    # @intent:responsibility ハンドラをエンコーディングに沿ってツリーへ登録します。
    # @intent:pre-condition 同一エンコーディングの重複登録は許可しません。
    def add(self, handler: OpHandler) -> None:
        if len(handler.encoding) != 4:
            raise ValueError(f"Handler {handler.name} must declare 4 nibbles")
        node = self._root
        for nibble in handler.encoding[:3]:
            node = node.setdefault(nibble, {})
        leaf = handler.encoding[3]
        if leaf in node:
            existing = node[leaf]
            raise ValueError(
                f"Encoding {format_encoding(handler.encoding)} of {handler.name} "
                f"already registered by {existing.name}"
            )
        node[leaf] = handler
        self._count += 1

    # @intent:responsibility 命令語に一致するハンドラを返します。一致しない場合はNone。
    # @intent:rationale 各段で完全一致を優先し、その枝で解決できなければワイルドカードの枝を試します。
    #                  これにより完全一致の命令は常にワイルドカードの族より優先され、かつ族に属する
    #                  全ての命令語が同じハンドラに解決されます。
    def lookup(self, instruction: int) -> Optional[OpHandler]:
        return self._find(self._root, split_nibbles(instruction), 0)

    def _find(self, node: Dict[Optional[int], Any], nibbles: Tuple[int, ...], level: int) -> Optional[OpHandler]:
        for key in (nibbles[level], WILDCARD):
            child = node.get(key)
            if child is None:
                continue
            if level == 3:
                return child
            found = self._find(child, nibbles, level + 1)
            if found is not None:
                return found
        return None

    # @intent:responsibility 命令語をオペランドとハンドラに分解します。
    def decode(self, instruction: int) -> Tuple[OperandData, Optional[OpHandler]]:
        return decode_operands(instruction), self.lookup(instruction)

    # @intent:responsibility 命令語を逆アセンブルします。副作用はありません。
    def disassemble(self, instruction: int) -> Optional[str]:
        operands, handler = self.decode(instruction)
        if handler is None:
            return None
        return handler.disassemble(operands)
