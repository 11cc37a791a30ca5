# chip8_core_tracer/scheduler/daemon.py
"""
実行スケジューラモジュール。

専用のワーカースレッド上でフェッチ・実行ループを駆動し、外部からの非同期コマンド
（ROMロード、実行/停止、キー入力、クロック変更）を受け付ける責務を負います。

スレッド間で共有されるのはコマンドキューのみで、キューの操作時だけロックを保持します。
読み出し側には、サイクル完了ごとにワーカーが差し替える不変のビュー（MachineView）を公開します。
"""
import threading
import time
from collections import defaultdict, deque
from dataclasses import dataclass
from typing import Any, DefaultDict, Deque, List, Optional, Tuple

from chip8_core_tracer.arch.chip8 import disassembler
from chip8_core_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_core_tracer.arch.chip8.state import Chip8State
from chip8_core_tracer.common.errors import Chip8Error, ConfigError, RomLoadError
from chip8_core_tracer.common.log import LogChannel
from chip8_core_tracer.common.types import DISPLAY_HEIGHT, DISPLAY_WIDTH, MEMORY_SIZE, ScreenMode
from chip8_core_tracer.core.snapshot import Snapshot
from chip8_core_tracer.transport.memory import Memory
from .commands import Command, CommandHandler, CommandType, SchedulerState

COMPONENT = "scheduler"
DEFAULT_CLOCK_SPEED = 500
DEFAULT_TIMER_HZ = 60


# @intent:data_structure 読み出し側に公開されるマシン状態。ワーカーが丸ごと差し替えるため、常に完了したサイクルの状態を表します。
@dataclass(frozen=True)
class MachineView:
    state: Chip8State
    memory: bytes


# @intent:responsibility CPUを所有し、コマンドキューとワーカースレッドによって実行を制御します。
class ExecutionScheduler:
    """
    CHIP-8 CPUの実行スケジューラ。

    状態は PAUSED と RUNNING の2つで、初期状態は PAUSED です。
    致命的なフォールトが発生すると PAUSED に戻り、`get_fault()` で内容を参照できます。
    ワーカースレッドはフォールト後も動作を続け、RESET や LOAD_ROM による復旧を受け付けます。
    """
    def __init__(self, cpu: Chip8Cpu, log: Optional[LogChannel] = None,
                 clock_speed: int = DEFAULT_CLOCK_SPEED, timer_hz: int = DEFAULT_TIMER_HZ,
                 idle_wait: float = 0.05):
        _check_clock_speed(clock_speed)
        _check_clock_speed(timer_hz)
        self._cpu = cpu
        self._log = log if log is not None else LogChannel(name="chip8_core_tracer.scheduler")
        self._clock_speed = clock_speed
        self._timer_period = 1.0 / timer_hz
        self._idle_wait = idle_wait
        self._state = SchedulerState.PAUSED
        self._fault: Optional[Exception] = None
        self._last_snapshot: Optional[Snapshot] = None
        self._timer_accumulator = 0.0

        # コマンドキュー（唯一の共有資源）
        self._queue_lock = threading.Lock()
        self._pending: Deque[Command] = deque()
        self._sent = 0
        self._applied = 0
        self._progress = threading.Condition()

        self._handlers: DefaultDict[Any, List[CommandHandler]] = defaultdict(list)
        self._wakeup = threading.Event()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

        self._view = MachineView(cpu.get_state().copy(), cpu.get_memory().dump())
        self._register_default_handlers()

    # --- Lifecycle ---

    # @intent:responsibility ワーカースレッドを起動します。
    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError("Scheduler thread already started")
        self._log.info(COMPONENT, "starting cpu thread")
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="chip8-cpu", daemon=True)
        self._thread.start()

    # @intent:responsibility ワーカースレッドに終了を指示し、終了を待ち合わせます。
    # @intent:post-condition 戻った後はマシン状態が変更されることはありません。
    def shutdown(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        self._wakeup.set()
        if self._thread is not None and self._thread.is_alive():
            self._thread.join(timeout)
            self._log.info(COMPONENT, "cpu thread stopped")

    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def __enter__(self) -> "ExecutionScheduler":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    # --- Command surface ---

    # @intent:responsibility コマンド種別にハンドラを追加します。同じ種別のハンドラは登録順に全て呼ばれます。
    def register_command_handler(self, command_type: Any, handler: CommandHandler) -> None:
        self._handlers[command_type].append(handler)

    # @intent:responsibility コマンドをキューに積んで即座に戻ります（ワーカーを待ちません）。
    def send_command(self, command: Command) -> None:
        with self._queue_lock:
            self._pending.append(command)
            self._sent += 1
        self._wakeup.set()

    def load_rom(self, data: bytes, address: int = 0x200) -> None:
        self.send_command(Command.load_rom(data, address))

    def set_state(self, state: SchedulerState) -> None:
        command_type = CommandType.SET_RUNNING if state is SchedulerState.RUNNING else CommandType.SET_PAUSED
        self.send_command(Command(command_type))

    def set_key_down(self, key: int) -> None:
        _check_key(key)
        self.send_command(Command.key_down(key))

    def set_key_up(self, key: int) -> None:
        _check_key(key)
        self.send_command(Command.key_up(key))

    def set_clock_speed(self, cycles_per_second: int) -> None:
        self.send_command(Command.clock_speed(cycles_per_second))

    def reset(self) -> None:
        self.send_command(Command(CommandType.RESET))

    def step(self) -> None:
        self.send_command(Command(CommandType.STEP))

    # @intent:responsibility これまでに送信したコマンドが全て適用されるまで待ちます。
    # @intent:return タイムアウトした場合はFalse。
    def flush(self, timeout: Optional[float] = 1.0) -> bool:
        with self._queue_lock:
            target = self._sent
        with self._progress:
            return self._progress.wait_for(lambda: self._applied >= target, timeout)

    # --- Worker ---

    # @intent:responsibility ワーカースレッドの本体。終了指示まで、コマンド処理とサイクル実行を繰り返します。
    def _run(self) -> None:
        last = time.monotonic()
        while not self._stop.is_set():
            self._wakeup.clear()
            self._process_commands()

            if self._state is SchedulerState.RUNNING:
                self._run_cycle()
                now = time.monotonic()
                self._advance_timers(now - last)
                last = now
                self._stop.wait(1.0 / self._clock_speed)
            else:
                self._wakeup.wait(self._idle_wait)
                last = time.monotonic()

    # @intent:responsibility キューを取り出してから、ロックを解放した状態でハンドラを実行します。
    def _process_commands(self) -> None:
        with self._queue_lock:
            pending = self._pending
            self._pending = deque()

        for command in pending:
            self._dispatch(command)
            self._publish()
            with self._progress:
                self._applied += 1
                self._progress.notify_all()

    def _dispatch(self, command: Command) -> None:
        handlers = self._handlers.get(command.command_type, [])
        if not handlers:
            self._log.warning(COMPONENT, "no handler for command %s", command.command_type)
            return
        for handler in list(handlers):
            try:
                handler(command)
            except Exception as e:
                self._log.exception(COMPONENT, "command %s failed: %s", command.command_type, e)
                self._fault = e

    # @intent:responsibility 1命令サイクルを実行し、結果を公開します。フォールト時は停止状態に戻します。
    def _run_cycle(self) -> Optional[Snapshot]:
        try:
            snapshot = self._cpu.step()
        except Chip8Error as e:
            self._log.error(COMPONENT, "fault: %s; execution paused", e)
            self._enter_fault(e)
            return None
        except Exception as e:
            self._log.exception(COMPONENT, "cycle failed: %s; execution paused", e)
            self._enter_fault(e)
            return None

        self._last_snapshot = snapshot
        if snapshot.state.exited and self._state is SchedulerState.RUNNING:
            self._state = SchedulerState.PAUSED
            self._log.info(COMPONENT, "program exited at %#05x", snapshot.metadata.address)
        self._view = MachineView(snapshot.state, snapshot.memory)
        return snapshot

    def _enter_fault(self, error: Exception) -> None:
        self._fault = error
        self._state = SchedulerState.PAUSED
        self._publish()

    def _advance_timers(self, elapsed: float) -> None:
        self._timer_accumulator += elapsed
        ticked = False
        while self._timer_accumulator >= self._timer_period:
            self._cpu.tick_timers()
            self._timer_accumulator -= self._timer_period
            ticked = True
        if ticked:
            self._publish()

    def _publish(self) -> None:
        self._view = MachineView(self._cpu.get_state().copy(), self._cpu.get_memory().dump())

    # --- Default command handlers ---

    def _register_default_handlers(self) -> None:
        self.register_command_handler(CommandType.LOAD_ROM, self._on_load_rom)
        self.register_command_handler(CommandType.SET_RUNNING, self._on_set_running)
        self.register_command_handler(CommandType.SET_PAUSED, self._on_set_paused)
        self.register_command_handler(CommandType.KEY_DOWN, self._on_key_down)
        self.register_command_handler(CommandType.KEY_UP, self._on_key_up)
        self.register_command_handler(CommandType.SET_CLOCK_SPEED, self._on_set_clock_speed)
        self.register_command_handler(CommandType.RESET, self._on_reset)
        self.register_command_handler(CommandType.STEP, self._on_step)

    def _on_load_rom(self, command: Command) -> None:
        data = command.payload or b""
        self._log.info(COMPONENT, "received rom: %d bytes", len(data))
        self._cpu.reset()
        self._last_snapshot = None
        if self._cpu.load_rom(data, command.address):
            self._fault = None
        else:
            self._fault = RomLoadError(
                f"ROM of {len(data)} bytes does not fit at {command.address:#05x} "
                f"(memory size {MEMORY_SIZE:#06x})", command.address)
            self._log.error(COMPONENT, "%s", self._fault)

    def _on_set_running(self, command: Command) -> None:
        self._log.info(COMPONENT, "set cpu running")
        self._state = SchedulerState.RUNNING

    def _on_set_paused(self, command: Command) -> None:
        self._log.info(COMPONENT, "set cpu paused")
        self._state = SchedulerState.PAUSED

    def _on_key_down(self, command: Command) -> None:
        self._cpu.press_key(command.payload)

    def _on_key_up(self, command: Command) -> None:
        self._cpu.release_key(command.payload)

    def _on_set_clock_speed(self, command: Command) -> None:
        _check_clock_speed(command.payload)
        self._clock_speed = command.payload
        self._log.info(COMPONENT, "clock speed set to %d Hz", command.payload)

    def _on_reset(self, command: Command) -> None:
        self._cpu.reset()
        self._fault = None
        self._last_snapshot = None
        self._log.info(COMPONENT, "cpu reset")

    def _on_step(self, command: Command) -> None:
        if self._state is SchedulerState.PAUSED:
            self._run_cycle()

    # --- Read accessors (published view) ---

    def get_state(self) -> SchedulerState:
        return self._state

    def get_fault(self) -> Optional[Exception]:
        return self._fault

    def get_clock_speed(self) -> int:
        return self._clock_speed

    def get_last_snapshot(self) -> Optional[Snapshot]:
        return self._last_snapshot

    # @intent:responsibility 最後に公開されたマシン状態を返します。戻り値は読み取り専用として扱ってください。
    def get_view(self) -> MachineView:
        return self._view

    def get_screen_mode(self) -> ScreenMode:
        return self._view.state.screen_mode

    # @intent:responsibility フレームバッファ全体（常に128x64、行ストライド128）を返します。
    def get_screen_framebuffer(self) -> List[bool]:
        return [cell != 0 for cell in self._view.state.display]

    # @intent:pre-condition 0 <= x < 128, 0 <= y < 64。範囲外はValueError。
    def get_screen_xy(self, x: int, y: int) -> bool:
        if not (0 <= x < DISPLAY_WIDTH and 0 <= y < DISPLAY_HEIGHT):
            raise ValueError(f"Pixel ({x}, {y}) is outside the {DISPLAY_WIDTH}x{DISPLAY_HEIGHT} framebuffer.")
        return self._view.state.display[y * DISPLAY_WIDTH + x] != 0

    def get_gpr(self) -> Tuple[int, ...]:
        return tuple(self._view.state.v)

    def get_i(self) -> int:
        return self._view.state.i

    def get_sp(self) -> int:
        return self._view.state.sp

    def get_pc(self) -> int:
        return self._view.state.pc

    def get_dt(self) -> int:
        return self._view.state.dt

    def get_st(self) -> int:
        return self._view.state.st

    def get_stack(self) -> Tuple[int, ...]:
        return tuple(self._view.state.stack)

    # @intent:responsibility 公開済みのメモリ内容から逆アセンブルします。実行中のCPUには触れません。
    def disassemble(self, address: int, count: int) -> List[Tuple[int, str, str]]:
        memory = Memory(len(self._view.memory))
        memory.load(0, self._view.memory)
        return disassembler.disassemble(self._cpu.get_opcode_tree(), memory, address, count * 2)


def _check_key(key: int) -> None:
    if not isinstance(key, int) or not 0 <= key <= 0xF:
        raise ValueError(f"Key index must be 0-15, got {key!r}")

def _check_clock_speed(value: Any) -> None:
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        raise ConfigError(f"Rate must be a positive integer, got {value!r}")
