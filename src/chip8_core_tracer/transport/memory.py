# chip8_core_tracer/transport/memory.py
"""
Transport Layer (メモリ)

このモジュールは、CHIP-8の4KBアドレス空間を抽象化し、
読み書きアクセスを記録する責務を負います。
"""
from dataclasses import dataclass
from enum import Enum
from typing import List

from chip8_core_tracer.common.errors import MemoryAccessError
from chip8_core_tracer.common.types import MEMORY_SIZE

# @intent:responsibility メモリアクセスを記録するためのタイプを定義します。
class BusAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"

# @intent:responsibility 個々のメモリアクセス操作を記録します。
@dataclass(frozen=True) # 不変データ構造
class BusAccess:
    """
    メモリ上で行われた単一のアクセス（読み込みまたは書き込み）を記録するデータクラス。
    """
    address: int
    data: int # 8bit value
    access_type: BusAccessType

# @intent:responsibility 固定サイズのRAMとアクセスログを提供します。
# @intent:rationale 全てのアクセスを記録し、Snapshotに含めることで命令ごとのメモリトレースを観測可能にします。
class Memory:
    """
    CHIP-8のメインメモリ（既定4096バイト）。
    read/write はアクセスログに記録され、peek/load/dump は記録されません。
    """
    # @intent:responsibility 指定されたサイズのメモリ領域を初期化します。
    # @intent:pre-condition sizeは正の整数である必要があります。
    def __init__(self, size: int = MEMORY_SIZE):
        if not isinstance(size, int) or size <= 0:
            raise ValueError("Memory size must be a positive integer.")
        self._memory = bytearray(size)
        self._size = size
        self._activity_log: List[BusAccess] = []

    def _check(self, address: int) -> None:
        if not 0 <= address < self._size:
            raise MemoryAccessError(f"Address {address:#06x} out of bounds for memory of size {self._size:#06x}.")

    # @intent:responsibility 記録されたアクセスログを取得し、クリアします。
    def get_and_clear_activity_log(self) -> List[BusAccess]:
        log = self._activity_log
        self._activity_log = [] # ログをクリア
        return log

    # @intent:responsibility 指定されたアドレスから8bitのデータを読み出します（ログ記録あり）。
    def read(self, address: int) -> int:
        self._check(address)
        data = self._memory[address]
        self._activity_log.append(BusAccess(address, data, BusAccessType.READ))
        return data

    # @intent:responsibility ログを記録せずに指定されたアドレスからデータを読み出します。
    def peek(self, address: int) -> int:
        """
        逆アセンブラやUIなどのインスペクタ用。
        """
        self._check(address)
        return self._memory[address]

    # @intent:responsibility 指定されたアドレスに8bitのデータを書き込みます（ログ記録あり）。
    def write(self, address: int, data: int) -> None:
        self._check(address)
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Data {data} is not an 8-bit value.")
        self._memory[address] = data
        self._activity_log.append(BusAccess(address, data, BusAccessType.WRITE))

    def read_word(self, address: int) -> int:
        """Big-endian 16-bit read."""
        return (self.read(address) << 8) | self.read(address + 1)

    def peek_word(self, address: int) -> int:
        """Big-endian 16-bit read without logging."""
        return (self.peek(address) << 8) | self.peek(address + 1)

    # @intent:responsibility バイト列をまとめて書き込みます（ROMやフォントの配置用、ログなし）。
    # @intent:post-condition 範囲外の場合は何も書き込まずにFalseを返します。
    def load(self, address: int, data: bytes) -> bool:
        if address < 0 or address + len(data) > self._size:
            return False
        self._memory[address:address + len(data)] = data
        return True

    def clear(self) -> None:
        self._memory[:] = bytes(self._size)
        self._activity_log = []

    # @intent:responsibility メモリ内容の不変コピーを返します。
    def dump(self) -> bytes:
        return bytes(self._memory)

    def get_size(self) -> int:
        return self._size
