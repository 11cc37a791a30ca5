# chip8_core_tracer/core/state.py
"""
Core Layer (CPU状態)

このモジュールは、CPUの基本的な状態（PC/SP）を保持するデータ構造を定義します。
"""
from dataclasses import dataclass, replace

# @intent:responsibility CPUのレジスタ状態を保持します。アーキテクチャ固有のレジスタはこれを拡張します。
@dataclass
class CpuState:
    """
    CPUのレジスタ状態を保持するデータクラス。
    これは抽象的な基底状態であり、具体的なアーキテクチャに応じて拡張されます。
    """
    pc: int = 0x0000  # Program Counter
    sp: int = 0x0000  # Stack Pointer

    # @intent:responsibility 状態のコピーを返します。可変コンテナを持つサブクラスは深いコピーを実装します。
    def copy(self) -> "CpuState":
        return replace(self)
