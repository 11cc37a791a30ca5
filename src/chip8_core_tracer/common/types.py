"""
共通の型定義を提供するモジュール。
プロジェクト全体で使用される定数、列挙型、レジスタ表示用の型などを定義します。
"""
from enum import Enum
from typing import List, NamedTuple

# @intent:constant CHIP-8マシンの固定寸法。
MEMORY_SIZE = 0x1000
PROGRAM_START = 0x200
REGISTER_COUNT = 16
STACK_DEPTH = 16
KEY_COUNT = 16
INSTRUCTION_SIZE = 2
MAX_PC = MEMORY_SIZE - INSTRUCTION_SIZE  # 0xFFE

# @intent:constant フレームバッファは常に最大解像度（拡張モード）のサイズで確保します。
DISPLAY_WIDTH = 128
DISPLAY_HEIGHT = 64

# @intent:responsibility 画面モード（標準 64x32 / Super-CHIP拡張 128x64）を定義します。
class ScreenMode(Enum):
    STANDARD = "STANDARD"
    EXTENDED = "EXTENDED"

    @property
    def width(self) -> int:
        return 64 if self is ScreenMode.STANDARD else 128

    @property
    def height(self) -> int:
        return 32 if self is ScreenMode.STANDARD else 64

# @intent:data_structure 単一のレジスタの表示定義。UIが動的にフィールドを生成するために使用される。
class RegisterInfo(NamedTuple):
    name: str
    width: int  # ビット幅 (8 or 16)

# @intent:data_structure レジスタグループの表示定義。関連するレジスタ（例: "General", "Pointers"）をまとめる。
class RegisterLayoutInfo(NamedTuple):
    group_name: str
    registers: List[RegisterInfo]
