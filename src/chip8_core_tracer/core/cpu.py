# chip8_core_tracer/core/cpu.py
"""
Core Layer (命令サイクル)

フェッチ・デコード・実行の流れとフォールト時のPC復元を定義する抽象CPU。
命令ごとの振る舞いはアーキテクチャ側の命令テーブルが持ちます。
"""
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

from chip8_core_tracer.common.errors import Chip8Error
from chip8_core_tracer.common.types import RegisterLayoutInfo
from chip8_core_tracer.core.snapshot import Metadata, Operation, Snapshot
from chip8_core_tracer.core.state import CpuState
from chip8_core_tracer.transport.memory import Memory

# @intent:responsibility 命令サイクルの共通手順と、UI・スケジューラ向けの問い合わせ口を定義します。
class AbstractCpu(ABC):
    """
    メモリを所有せず参照のみを保持するCPUの基底クラス。
    状態の書き換えは `step()` と `reset()` を通してのみ行います。
    """
    def __init__(self, memory: Memory):
        self._memory = memory
        self._state: CpuState = self._create_initial_state()
        self._cycle_count: int = 0

    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        pass

    # @intent:responsibility 状態を初期値に戻し、サイクル数を0にします。
    def reset(self) -> None:
        self._state = self._create_initial_state()
        self._cycle_count = 0

    # @intent:responsibility 実行中の状態そのものを返します。別スレッドから読む場合は copy() を使ってください。
    def get_state(self) -> CpuState:
        return self._state

    def get_memory(self) -> Memory:
        return self._memory

    def get_cycle_count(self) -> int:
        return self._cycle_count

    # @intent:responsibility 現在のPCから命令語を読み出します。PCはここでは動かしません。
    @abstractmethod
    def _fetch(self) -> int:
        pass

    @abstractmethod
    def _decode(self, opcode: int) -> Operation:
        pass

    @abstractmethod
    def _execute(self, operation: Operation) -> None:
        pass

    # @intent:responsibility 1命令を実行し、実行後の状態を記録したSnapshotを返します。
    # @intent:rationale Template Methodとして手順を固定し、アーキテクチャ側はHookのみを実装します。
    #                  フェッチ・デコードの失敗ではPCは動かず、実行・検証の失敗ではPCを命令の先頭に戻してから再送出します。
    def step(self) -> Snapshot:
        # 1. 前サイクルの残りのアクセスログを捨てる
        self._memory.get_and_clear_activity_log()
        initial_pc = self._state.pc

        # 2. 停止中 (Hook)
        halt_snapshot = self._handle_halt(initial_pc)
        if halt_snapshot is not None:
            return halt_snapshot

        # 3. フェッチ & 4. デコード
        operation = self._decode(self._fetch())

        # 5. PCを次の命令へ (Hook)
        self._update_pc(operation)

        # 6. 実行 & 7. 実行後の検証 (Hook)
        try:
            self._execute(operation)
            self._validate(initial_pc)
        except Chip8Error as e:
            self._state.pc = initial_pc
            if e.address is None:
                e.address = initial_pc
            raise

        self._cycle_count += 1
        return self._create_snapshot(initial_pc, operation)

    # @intent:return 停止中であればその時点のSnapshot、実行を続ける場合はNone。
    def _handle_halt(self, current_pc: int) -> Optional[Snapshot]:
        return None

    def _update_pc(self, operation: Operation) -> None:
        self._state.pc += operation.length

    def _validate(self, initial_pc: int) -> None:
        pass

    def _create_snapshot(self, initial_pc: int, operation: Operation) -> Snapshot:
        return Snapshot(
            state=self._state.copy(),
            memory=self._memory.dump(),
            operation=operation,
            metadata=Metadata(cycle_count=self._cycle_count, address=initial_pc),
            bus_activity=self._memory.get_and_clear_activity_log(),
        )

    # @intent:responsibility レジスタ名→値の辞書。UIはCPUの内部構造を知らずに値を表示できます。
    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        pass

    # @intent:responsibility レジスタのグループ分けと表示幅。
    @abstractmethod
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        pass

    # @intent:return (address, hex_bytes, mnemonic) のリスト。
    @abstractmethod
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        pass
