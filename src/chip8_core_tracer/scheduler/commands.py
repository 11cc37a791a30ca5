# chip8_core_tracer/scheduler/commands.py
"""
スケジューラへのコマンド定義。

外部（UI、入力、ローダー）はコマンドを送るだけで、マシン状態を直接変更しません。
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from chip8_core_tracer.common.types import PROGRAM_START

# @intent:responsibility コマンドの種類を定義します。新しい種類はハンドラ登録のみで追加できます。
class CommandType(Enum):
    LOAD_ROM = "LOAD_ROM"
    SET_RUNNING = "SET_RUNNING"
    SET_PAUSED = "SET_PAUSED"
    KEY_DOWN = "KEY_DOWN"
    KEY_UP = "KEY_UP"
    SET_CLOCK_SPEED = "SET_CLOCK_SPEED"
    RESET = "RESET"
    STEP = "STEP"

# @intent:responsibility スケジューラの実行状態を定義します。
class SchedulerState(Enum):
    PAUSED = "PAUSED"
    RUNNING = "RUNNING"

# @intent:data_structure キューに積まれる単一のコマンド。
@dataclass(frozen=True)
class Command:
    """
    `payload` の内容は種類ごとに異なります:
    LOAD_ROM は bytes、KEY_DOWN/KEY_UP はキー番号、SET_CLOCK_SPEED は毎秒サイクル数。
    """
    command_type: CommandType
    payload: Any = None
    address: int = PROGRAM_START

    @classmethod
    def load_rom(cls, data: bytes, address: int = PROGRAM_START) -> "Command":
        return cls(CommandType.LOAD_ROM, bytes(data), address)

    @classmethod
    def key_down(cls, key: int) -> "Command":
        return cls(CommandType.KEY_DOWN, key)

    @classmethod
    def key_up(cls, key: int) -> "Command":
        return cls(CommandType.KEY_UP, key)

    @classmethod
    def clock_speed(cls, cycles_per_second: int) -> "Command":
        return cls(CommandType.SET_CLOCK_SPEED, cycles_per_second)


CommandHandler = Callable[[Command], None]
