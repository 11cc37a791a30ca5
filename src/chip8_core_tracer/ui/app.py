# src/chip8_core_tracer/ui/app.py
"""
Qtアプリケーションのエントリポイント。
設定を読み込んでシステムを構築し、メインウィンドウを起動します。
"""
import argparse
import sys
from typing import List, Optional

from PySide6.QtWidgets import QApplication

from chip8_core_tracer.common.errors import ConfigError
from chip8_core_tracer.common.log import configure_console_logging
from chip8_core_tracer.config.builder import SystemBuilder
from chip8_core_tracer.config.loader import ConfigLoader
from chip8_core_tracer.config.models import MachineConfig
from chip8_core_tracer.scheduler.commands import SchedulerState
from .main_window import MainWindow

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chip8-core-tracer", description="CHIP-8 / Super-CHIP emulator and tracer")
    parser.add_argument("rom", nargs="?", help="ROM file to load at startup")
    parser.add_argument("--config", help="YAML machine configuration")
    parser.add_argument("--paused", action="store_true", help="load the ROM without starting execution")
    return parser

# @intent:responsibility アプリケーションを起動し、ウィンドウが閉じられるまでイベントループを回します。
def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = ConfigLoader().load_from_file(args.config) if args.config else MachineConfig()
    except ConfigError as e:
        print(f"chip8-core-tracer: {e}", file=sys.stderr)
        return 2

    configure_console_logging(config.log_level)
    cpu, scheduler, log = SystemBuilder().build_system(config)

    app = QApplication(sys.argv[:1])
    main_win = MainWindow(cpu, scheduler, log, config)
    scheduler.start()

    if args.rom and main_win.load_rom_file(args.rom):
        if config.start_running and not args.paused:
            scheduler.set_state(SchedulerState.RUNNING)

    main_win.show()
    try:
        return app.exec()
    finally:
        scheduler.shutdown()
        log.close()

if __name__ == '__main__':
    sys.exit(main())
