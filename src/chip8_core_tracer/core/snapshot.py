# chip8_core_tracer/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、1命令サイクル完了時点のマシン状態を記録した不変のデータ構造を定義します。
UIへの情報提供と、デバッグ時のトレース記録に用いる責務を負います。
"""
from dataclasses import dataclass, field
from typing import List, Optional

from chip8_core_tracer.core.state import CpuState
from chip8_core_tracer.transport.memory import BusAccessType, BusAccess

__all__ = ["BusAccessType", "BusAccess", "Operation", "Metadata", "Snapshot"]


# @intent:responsibility 実行された命令の詳細を記録します。
@dataclass(frozen=True) # 不変データ構造
class Operation:
    """
    実行された命令の詳細（HEX、ハンドラ識別子、逆アセンブル文字列）を記録するデータクラス。
    """
    opcode_hex: str # 例: "1200"
    name: str # 例: "JP"
    text: str # 例: "JP 0x200"
    length: int = 2 # 命令のバイト長

# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True) # 不変データ構造
class Metadata:
    """
    実行に関するメタデータ（累計サイクル数、命令アドレス）を記録するデータクラス。
    """
    cycle_count: int
    address: Optional[int] = None # 実行した命令のアドレス

# @intent:responsibility ある一時点におけるマシンの完全な状態を不変に記録します。
@dataclass(frozen=True) # 不変データ構造
class Snapshot:
    """
    ある一時点における、CPU状態とメモリの完全な状態を記録した不変のデータ構造。
    `state` は生成時に切り離されたコピーであり、後続のサイクルで変化しません。
    """
    state: CpuState
    memory: bytes
    operation: Operation
    metadata: Metadata
    bus_activity: List[BusAccess] = field(default_factory=list)
