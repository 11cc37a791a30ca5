# src/chip8_core_tracer/arch/chip8/cpu.py
"""
CHIP-8 CPUエミュレーションの中心モジュール。
"""
import random
from typing import Dict, List, Optional, Sequence, Tuple

from chip8_core_tracer.arch.chip8 import disassembler
from chip8_core_tracer.arch.chip8.font import LARGE_FONT, LARGE_FONT_ADDRESS, SMALL_FONT, SMALL_FONT_ADDRESS
from chip8_core_tracer.arch.chip8.instructions import HANDLERS, build_opcode_tree
from chip8_core_tracer.arch.chip8.opcode_tree import OpcodeTree, decode_operands
from chip8_core_tracer.arch.chip8.state import Chip8State
from chip8_core_tracer.common.errors import ProgramCounterError, UnknownOpcodeError
from chip8_core_tracer.common.types import (
    INSTRUCTION_SIZE, KEY_COUNT, MAX_PC, PROGRAM_START, REGISTER_COUNT, RegisterInfo, RegisterLayoutInfo,
)
from chip8_core_tracer.core.cpu import AbstractCpu
from chip8_core_tracer.core.snapshot import Metadata, Operation, Snapshot
from chip8_core_tracer.transport.memory import Memory

# @intent:responsibility CHIP-8 CPUの具体的なエミュレーションロジック（フェッチ、デコード、実行）を提供します。
class Chip8Cpu(AbstractCpu):
    """
    CHIP-8（Super-CHIP拡張画面対応）をエミュレートするクラス。
    """
    # @intent:responsibility Chip8Cpuを初期化し、リセット状態（フォント配置済み）にします。
    def __init__(self, memory: Optional[Memory] = None, rng_seed: Optional[int] = None):
        self._rng_seed = rng_seed
        self._rng = random.Random(rng_seed)
        self._tree: OpcodeTree = build_opcode_tree()
        super().__init__(memory if memory is not None else Memory())
        self.reset()

    # @intent:responsibility CHIP-8の初期状態を生成します。
    def _create_initial_state(self) -> Chip8State:
        return Chip8State(rng=self._rng)

    # @intent:responsibility メモリ、レジスタ、スタック、表示を消去し、組み込みフォントを再配置します。
    # @intent:post-condition 乱数列は初期シードから再開するため、同じシードの新しいマシンと同じRND結果になります。
    def reset(self) -> None:
        self._rng.seed(self._rng_seed)
        self._memory.clear()
        self._memory.load(SMALL_FONT_ADDRESS, SMALL_FONT)
        self._memory.load(LARGE_FONT_ADDRESS, LARGE_FONT)
        super().reset()

    # @intent:responsibility ROMを指定アドレスに配置します。
    # @intent:post-condition メモリに収まらない場合はFalseを返し、メモリは変更しません。
    def load_rom(self, rom: bytes, address: int = PROGRAM_START) -> bool:
        return self._memory.load(address, bytes(rom))

    def get_opcode_tree(self) -> OpcodeTree:
        return self._tree

    # @intent:responsibility PCの範囲を検証してから命令語を読み出します。
    def _fetch(self) -> int:
        pc = self._state.pc
        if not 0 <= pc <= MAX_PC:
            raise ProgramCounterError(pc, address=pc)
        return self._memory.read_word(pc)

    # @intent:responsibility 命令語をハンドラに解決し、Operationオブジェクトを返します。
    # @intent:post-condition 一致するハンドラが無い場合はPCを動かさずにUnknownOpcodeErrorを送出します。
    def _decode(self, opcode: int) -> Operation:
        operands, handler = self._tree.decode(opcode)
        if handler is None:
            raise UnknownOpcodeError(self._state.pc, opcode)
        return Operation(
            opcode_hex=f"{opcode:04X}",
            name=handler.name,
            text=handler.disassemble(operands),
            length=INSTRUCTION_SIZE,
        )

    # @intent:responsibility Operationを実行し、状態を更新します。
    def _execute(self, operation: Operation) -> None:
        handler = HANDLERS[operation.name]
        handler.execute(self._state, self._memory, decode_operands(int(operation.opcode_hex, 16)))

    # @intent:responsibility ジャンプ・スキップ後のPCがアドレス空間内にあることを検証します。
    def _validate(self, initial_pc: int) -> None:
        pc = self._state.pc
        if not 0 <= pc <= MAX_PC:
            raise ProgramCounterError(pc, address=initial_pc)

    # @intent:responsibility EXIT後、またはキー待ち中はフェッチを行わずに現在の状態を返します。
    def _handle_halt(self, current_pc: int) -> Optional[Snapshot]:
        state = self._state
        if state.exited:
            operation = Operation(opcode_hex="00FD", name="EXIT", text="EXIT", length=0)
        elif state.waiting_key_register is not None:
            text = f"LD V{state.waiting_key_register:X}, K"
            operation = Operation(opcode_hex=f"F{state.waiting_key_register:X}0A", name="LD_VX_K", text=text, length=0)
        else:
            return None
        return Snapshot(
            state=state.copy(),
            memory=self._memory.dump(),
            operation=operation,
            metadata=Metadata(cycle_count=self._cycle_count, address=current_pc),
            bus_activity=self._memory.get_and_clear_activity_log(),
        )

    # --- Input / Timers ---

    # @intent:responsibility キー押下を反映します。キー待ち中であれば待機を解除してPCを進めます。
    def press_key(self, key: int) -> None:
        self._check_key(key)
        state = self._state
        state.keys[key] = True
        if state.waiting_key_register is not None:
            state.v[state.waiting_key_register] = key
            state.waiting_key_register = None
            state.pc += INSTRUCTION_SIZE

    def release_key(self, key: int) -> None:
        self._check_key(key)
        self._state.keys[key] = False

    @staticmethod
    def _check_key(key: int) -> None:
        if not 0 <= key < KEY_COUNT:
            raise ValueError(f"Key index must be 0-15, got {key}")

    # @intent:responsibility 遅延タイマーとサウンドタイマーを1カウント減らします（60Hz想定）。
    def tick_timers(self) -> None:
        state = self._state
        if state.dt > 0:
            state.dt -= 1
        if state.st > 0:
            state.st -= 1

    # --- Inspection ---

    # @intent:responsibility 整列済みアドレスの命令を副作用なしに逆アセンブルします。
    def disassemble_at(self, address: int) -> Optional[str]:
        return disassembler.disassemble_at(self._tree, self._memory, address)

    # @intent:responsibility 指定範囲のメモリを逆アセンブルします。
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return disassembler.disassemble(self._tree, self._memory, start_addr, length)

    # @intent:responsibility UI表示用に、現在のレジスタ値を辞書形式で提供します。
    def get_register_map(self) -> Dict[str, int]:
        return register_map(self._state)

    # @intent:responsibility UIのレジスタ表示レイアウト（グループ化）を定義します。
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return REGISTER_LAYOUT


REGISTER_LAYOUT: List[RegisterLayoutInfo] = [
    RegisterLayoutInfo("General", [RegisterInfo(f"V{n:X}", 8) for n in range(REGISTER_COUNT)]),
    RegisterLayoutInfo("Pointers", [RegisterInfo("I", 16), RegisterInfo("PC", 16), RegisterInfo("SP", 8)]),
    RegisterLayoutInfo("Timers", [RegisterInfo("DT", 8), RegisterInfo("ST", 8)]),
]

# @intent:utility_function 状態（実体またはコピー）からレジスタ名→値の辞書を作ります。
def register_map(state: Chip8State) -> Dict[str, int]:
    values: Dict[str, int] = {f"V{n:X}": value for n, value in enumerate(state.v)}
    values.update({"I": state.i, "PC": state.pc, "SP": state.sp, "DT": state.dt, "ST": state.st})
    return values

def format_stack(stack: Sequence[int], sp: int) -> List[str]:
    return [f"{depth:2d}: 0x{stack[depth]:03X}" for depth in range(sp - 1, -1, -1)]
