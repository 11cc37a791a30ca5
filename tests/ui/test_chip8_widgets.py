# tests/ui/test_chip8_widgets.py
"""
表示系ウィジェットの更新ロジックを検証するテスト。
UIウィジェットですが、QApplicationがあればロジックのテストは可能です。
"""
import os
import uuid

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
QtWidgets = pytest.importorskip("PySide6.QtWidgets")

from chip8_core_tracer.arch.chip8.cpu import Chip8Cpu, REGISTER_LAYOUT
from chip8_core_tracer.arch.chip8.state import Chip8State
from chip8_core_tracer.common.log import LogChannel
from chip8_core_tracer.common.types import ScreenMode
from chip8_core_tracer.config.models import MachineConfig
from chip8_core_tracer.scheduler.daemon import ExecutionScheduler


# PySide6のテストにはQApplicationのインスタンスが必要
@pytest.fixture(scope="session")
def qapp():
    app = QtWidgets.QApplication.instance()
    if app is None:
        try:
            app = QtWidgets.QApplication([])
        except Exception as e:  # プラットフォームプラグインが起動できない環境
            pytest.skip(f"Qt platform unavailable: {e}")
    yield app


class TestScreenView:
    def test_standard_mode_image(self, qapp):
        from chip8_core_tracer.ui.screen_view import ScreenView
        view = ScreenView(pixel_scale=4)
        state = Chip8State()
        state.xor_pixel(3, 2)
        view.update_screen(state.display, state.screen_mode)
        image = view.get_image()
        assert (image.width(), image.height()) == (64, 32)
        assert image.pixelColor(3, 2).value() == 255
        assert image.pixelColor(4, 2).value() == 0

    def test_extended_mode_image(self, qapp):
        from chip8_core_tracer.ui.screen_view import ScreenView
        view = ScreenView()
        state = Chip8State()
        state.set_screen_mode(ScreenMode.EXTENDED)
        state.xor_pixel(127, 63)
        view.update_screen(state.display, state.screen_mode)
        image = view.get_image()
        assert (image.width(), image.height()) == (128, 64)
        assert image.pixelColor(127, 63).value() == 255


class TestInspectorViews:
    def test_register_view(self, qapp):
        from chip8_core_tracer.ui.register_view import RegisterView
        view = RegisterView()
        view.set_layout_info(REGISTER_LAYOUT)
        cpu = Chip8Cpu()
        cpu.get_state().v[0xA] = 0x2B
        view.update_registers(cpu.get_register_map())
        assert view.get_register_text("VA") == "0x2B"
        assert view.get_register_text("PC") == "0x0200"

    def test_stack_view(self, qapp):
        from chip8_core_tracer.ui.stack_view import StackView
        view = StackView()
        view.update_stack([0x202, 0x30A] + [0] * 14, 2)
        assert view.get_text().splitlines() == [" 1: 0x30A", " 0: 0x202"]
        view.update_stack([0] * 16, 0)
        assert view.get_text() == "(empty)"

    def test_code_view_caches_window(self, qapp):
        from chip8_core_tracer.ui.code_view import CodeView
        cpu = Chip8Cpu()
        cpu.load_rom(bytes([0x00, 0xE0, 0x12, 0x00]))
        calls = []

        def disassemble(address, count):
            calls.append(address)
            return cpu.disassemble(address, count * 2)

        view = CodeView(window_size=16)
        view.update_code(0x200, disassemble)
        view.update_code(0x202, disassemble)
        assert calls == [0x200]
        assert view.highlight_row == 1
        assert view.table.item(1, 2).text() == "JP 0x200"

        view.update_code(0x400, disassemble)
        assert calls == [0x200, 0x400]
        view.reset_cache()
        assert view.table.rowCount() == 0


class TestMainWindow:
    @pytest.fixture
    def window(self, qapp):
        from chip8_core_tracer.ui.main_window import MainWindow
        log = LogChannel(name=f"test.ui.{uuid.uuid4().hex}")
        cpu = Chip8Cpu()
        scheduler = ExecutionScheduler(cpu, log=log)
        scheduler.start()
        win = MainWindow(cpu, scheduler, log, MachineConfig())
        yield win, scheduler, log
        win.close()
        scheduler.shutdown(timeout=2.0)
        log.close()

    def test_load_rom_file(self, window, tmp_path):
        win, scheduler, log = window
        path = tmp_path / "clear.ch8"
        path.write_bytes(bytes([0x00, 0xE0]))
        assert win.load_rom_file(str(path))
        assert scheduler.flush()
        win.refresh()
        assert win.register_view.get_register_text("PC") == "0x0200"
        assert any("loaded" in line for line in log.get_lines())

    def test_load_missing_rom_file(self, window, tmp_path):
        win, scheduler, log = window
        assert not win.load_rom_file(str(tmp_path / "missing.ch8"))
        assert any("not found" in line for line in log.get_lines())

    def test_close_stops_scheduler(self, window):
        win, scheduler, _ = window
        win.close()
        assert not scheduler.is_alive()
