"""
例外定義モジュール。

エミュレーション中に発生しうる致命的な状態（フォールト）を型で区別します。
スケジューラはこれらを捕捉してフォールト状態として公開します。
"""
from typing import Optional


# @intent:responsibility 全てのCHIP-8関連例外の基底クラス。
class Chip8Error(Exception):
    """
    CHIP-8エミュレーションに関する例外の基底クラス。
    `address` にはフォールトが発生した命令のアドレスを保持します（不明な場合はNone）。
    """
    def __init__(self, message: str, address: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.address = address


class RomLoadError(Chip8Error):
    """ROMをメモリに収められない、またはファイルを読めない。"""
    pass


class ConfigError(Chip8Error):
    """設定値が不正。"""
    pass


class MemoryAccessError(Chip8Error, IndexError):
    """メモリ範囲外へのアクセス。"""
    pass


# @intent:responsibility ディスパッチに失敗した命令語を表します。
class UnknownOpcodeError(Chip8Error):
    """
    どのハンドラにも一致しない命令語。
    """
    def __init__(self, address: int, instruction: int):
        super().__init__(f"No handler for instruction {instruction:04X} at {address:#05x}", address)
        self.instruction = instruction


class StackOverflowError(Chip8Error):
    """CALLでスタック深度(16)を超えた。"""
    pass


class StackUnderflowError(Chip8Error):
    """スタックが空の状態でRETが実行された。"""
    pass


# @intent:responsibility PCがアドレス空間 [0x000, 0xFFE] を外れたことを表します。
class ProgramCounterError(Chip8Error):
    def __init__(self, pc: int, address: Optional[int] = None):
        super().__init__(f"Program counter out of range: {pc:#06x}", address)
        self.pc = pc
