import logging
from typing import Optional, Tuple

from chip8_core_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_core_tracer.common.log import LogChannel
from chip8_core_tracer.scheduler.daemon import ExecutionScheduler
from chip8_core_tracer.transport.memory import Memory
from .models import MachineConfig

# @intent:responsibility 設定（Config）に基づいて、メモリ、CPU、ログチャネル、スケジューラを生成・接続します。
class SystemBuilder:
    def build_system(self, config: MachineConfig,
                     log: Optional[LogChannel] = None) -> Tuple[Chip8Cpu, ExecutionScheduler, LogChannel]:
        if log is None:
            log = LogChannel(capacity=config.log_capacity,
                             level=getattr(logging, config.log_level, logging.INFO))

        cpu = Chip8Cpu(Memory(), rng_seed=config.rng_seed)
        scheduler = ExecutionScheduler(
            cpu,
            log=log,
            clock_speed=config.clock_speed,
            timer_hz=config.timer_hz,
        )
        log.info("builder", "system built: clock %d Hz, timers %d Hz", config.clock_speed, config.timer_hz)
        return cpu, scheduler, log
