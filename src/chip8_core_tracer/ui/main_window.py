# src/chip8_core_tracer/ui/main_window.py
"""
メインウィンドウの実装。
表示面、レジスタ/スタック/逆アセンブルの各ビュー、ログペインを保持し、
一定周期でスケジューラの公開ビューをポーリングして表示を更新します。
"""
from PySide6.QtCore import Qt, QTimer, Slot
from PySide6.QtGui import QAction, QCloseEvent, QColor, QKeyEvent, QPalette
from PySide6.QtWidgets import (
    QApplication, QDockWidget, QFileDialog, QLabel, QMainWindow, QMessageBox, QPlainTextEdit, QTabWidget, QToolBar,
)

from chip8_core_tracer.arch.chip8.cpu import Chip8Cpu, register_map
from chip8_core_tracer.common.errors import RomLoadError
from chip8_core_tracer.common.log import LogChannel
from chip8_core_tracer.config.models import MachineConfig
from chip8_core_tracer.loader.rom_loader import read_rom_file
from chip8_core_tracer.scheduler.commands import SchedulerState
from chip8_core_tracer.scheduler.daemon import ExecutionScheduler
from .code_view import CodeView
from .fonts import get_monospace_font, get_monospace_font_family
from .register_view import RegisterView
from .screen_view import ScreenView
from .stack_view import StackView

COMPONENT = "ui"

WINDOW_COLOR = "#1B1D1B"
PANEL_COLOR = "#101210"
TEXT_COLOR = "#C8D0C8"
ACCENT_COLOR = "#3FA66B"

THEME_COLORS = {
    QPalette.Window: WINDOW_COLOR,
    QPalette.WindowText: TEXT_COLOR,
    QPalette.Base: PANEL_COLOR,
    QPalette.Text: TEXT_COLOR,
    QPalette.Button: "#2F332F",
    QPalette.ButtonText: TEXT_COLOR,
    QPalette.Highlight: ACCENT_COLOR,
}

# @intent:responsibility アプリケーションのメインウィンドウを定義し、UIの主要なコンポーネントを組み立てます。
class MainWindow(QMainWindow):
    """
    UIはマシン状態を直接変更せず、全ての操作をスケジューラへのコマンドとして送信します。
    """
    def __init__(self, cpu: Chip8Cpu, scheduler: ExecutionScheduler, log: LogChannel,
                 config: MachineConfig, parent=None):
        super().__init__(parent)
        self.setWindowTitle("CHIP-8 Core Tracer")
        self.setDockNestingEnabled(True)

        self._scheduler = scheduler
        self._log = log
        self._config = config
        self._key_map = dict(config.key_map)
        self._log_serial = -1

        self._set_dark_theme()
        self.screen_view = ScreenView(config.pixel_scale)
        self.setCentralWidget(self.screen_view)
        self._create_toolbar()
        self._create_navigation_pane()
        self._create_status_inspector(cpu)
        self._create_log_pane()
        self.status_label = QLabel("PAUSED")
        self.statusBar().addWidget(self.status_label)

        # @intent:rationale 表示は一定周期のポーリングで行い、ワーカースレッドからUIへは通知しない。
        self.refresh_timer = QTimer(self)
        self.refresh_timer.setInterval(max(1, 1000 // config.refresh_hz))
        self.refresh_timer.timeout.connect(self.refresh)
        self.refresh_timer.start()

    # @intent:responsibility 実行制御用のツールバーを作成します。
    def _create_toolbar(self):
        toolbar = QToolBar("Main Toolbar")
        self.addToolBar(toolbar)

        self.load_rom_action = QAction("Load ROM...", self)
        self.load_rom_action.setShortcut("Ctrl+O")
        self.load_rom_action.triggered.connect(self._open_rom_dialog)
        toolbar.addAction(self.load_rom_action)
        toolbar.addSeparator()

        self.run_action = QAction("Run", self)
        self.run_action.triggered.connect(lambda: self._scheduler.set_state(SchedulerState.RUNNING))
        toolbar.addAction(self.run_action)

        self.pause_action = QAction("Pause", self)
        self.pause_action.triggered.connect(lambda: self._scheduler.set_state(SchedulerState.PAUSED))
        toolbar.addAction(self.pause_action)

        self.step_action = QAction("Step", self)
        self.step_action.triggered.connect(self._scheduler.step)
        toolbar.addAction(self.step_action)

        self.reset_action = QAction("Reset", self)
        self.reset_action.triggered.connect(self._reset)
        toolbar.addAction(self.reset_action)

    def _create_navigation_pane(self):
        self.code_view = CodeView()
        self._add_dock("Code", self.code_view, Qt.LeftDockWidgetArea)

    def _create_status_inspector(self, cpu: Chip8Cpu):
        self.register_view = RegisterView()
        self.register_view.set_layout_info(cpu.get_register_layout())
        self.stack_view = StackView()
        tabs = QTabWidget()
        tabs.addTab(self.register_view, "Registers")
        tabs.addTab(self.stack_view, "Stack")
        self._add_dock("Machine", tabs, Qt.RightDockWidgetArea)

    def _create_log_pane(self):
        self.log_view = QPlainTextEdit()
        self.log_view.setReadOnly(True)
        self.log_view.setMaximumBlockCount(self._config.log_capacity)
        self.log_view.setFont(get_monospace_font(9))
        self.log_view.setStyleSheet(f"background-color: {PANEL_COLOR}; color: {TEXT_COLOR};")
        self._add_dock("Log", self.log_view, Qt.BottomDockWidgetArea)

    # 各ドックは初期配置のエリアにのみ置ける
    def _add_dock(self, title: str, widget, area) -> QDockWidget:
        dock = QDockWidget(title, self)
        dock.setObjectName(f"{title.lower()}_dock")
        dock.setAllowedAreas(area)
        dock.setWidget(widget)
        self.addDockWidget(area, dock)
        return dock

    # @intent:responsibility 公開ビューを読み出して各ビューを更新します。
    @Slot()
    def refresh(self):
        view = self._scheduler.get_view()
        state = view.state
        self.screen_view.update_screen(state.display, state.screen_mode)
        self.register_view.update_registers(register_map(state))
        self.stack_view.update_stack(state.stack, state.sp)

        running = self._scheduler.get_state() is SchedulerState.RUNNING
        if not running:
            self.code_view.update_code(state.pc, self._scheduler.disassemble)
        self._update_ui_state(running)

        fault = self._scheduler.get_fault()
        status = self._scheduler.get_state().value
        if fault is not None:
            status += f" | fault: {fault}"
        elif state.waiting_key_register is not None:
            status += f" | waiting for key (V{state.waiting_key_register:X})"
        self.status_label.setText(status)

        serial = self._log.get_serial()
        if serial != self._log_serial:
            self._log_serial = serial
            self.log_view.setPlainText("\n".join(self._log.get_lines()))
            self.log_view.verticalScrollBar().setValue(self.log_view.verticalScrollBar().maximum())

    def _update_ui_state(self, is_running: bool):
        self.run_action.setEnabled(not is_running)
        self.step_action.setEnabled(not is_running)
        self.pause_action.setEnabled(is_running)

    # @intent:responsibility ROMファイルを読み込み、スケジューラへロードを依頼します。
    # @intent:return 読み込みに失敗した場合はFalse。
    def load_rom_file(self, file_name: str) -> bool:
        try:
            data = read_rom_file(file_name, self._config.load_address)
        except RomLoadError as e:
            self._log.error(COMPONENT, "%s", e)
            return False
        self._scheduler.load_rom(data, self._config.load_address)
        self.code_view.reset_cache()
        self._log.info(COMPONENT, "loaded %s", file_name)
        return True

    @Slot()
    def _open_rom_dialog(self):
        file_name, _ = QFileDialog.getOpenFileName(self, "Open CHIP-8 ROM", "", "CHIP-8 ROMs (*.ch8 *.c8 *.sc8);;All Files (*)")
        if not file_name:
            return
        if not self.load_rom_file(file_name):
            QMessageBox.critical(self, "Error", f"Failed to load ROM: {file_name}")
        elif self._config.start_running:
            self._scheduler.set_state(SchedulerState.RUNNING)

    @Slot()
    def _reset(self):
        self._scheduler.reset()
        self.code_view.reset_cache()

    # @intent:responsibility キーボード入力をキーマップ経由でCHIP-8のキー番号に変換して送信します。
    def keyPressEvent(self, event: QKeyEvent):
        key = self._key_map.get(event.text().upper())
        if key is None or event.isAutoRepeat():
            super().keyPressEvent(event)
            return
        self._scheduler.set_key_down(key)

    def keyReleaseEvent(self, event: QKeyEvent):
        key = self._key_map.get(event.text().upper())
        if key is None or event.isAutoRepeat():
            super().keyReleaseEvent(event)
            return
        self._scheduler.set_key_up(key)

    def _set_dark_theme(self):
        palette = QPalette()
        for role, color in THEME_COLORS.items():
            palette.setColor(role, QColor(color))
        QApplication.setPalette(palette)

        family = get_monospace_font_family()
        self.setStyleSheet(
            f"QWidget {{ font-family: '{family}', monospace; font-size: 10pt; }}"
            f"QMainWindow, QToolBar {{ background-color: {WINDOW_COLOR}; border: none; }}"
            f"QDockWidget::title {{ background: {PANEL_COLOR}; padding: 3px 6px; }}"
            f"QTabWidget::pane {{ border-top: 1px solid {ACCENT_COLOR}; }}"
        )

    # @intent:responsibility アプリケーション終了時に呼ばれ、ワーカースレッドを停止・待機してから終了します。
    def closeEvent(self, event: QCloseEvent):
        self.refresh_timer.stop()
        self._scheduler.shutdown()
        event.accept()
