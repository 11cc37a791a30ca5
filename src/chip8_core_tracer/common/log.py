"""
ログチャネルモジュール。

エミュレーションコアとUIの間で診断メッセージを受け渡すための明示的なチャネルを提供します。
グローバルなログストリームは持たず、LogChannelのインスタンスを必要なコンポーネントに
参照として渡します。
"""
import itertools
import logging
import threading
from collections import deque
from typing import Deque, List, Optional

DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(message)s"

# チャネルごとに固有のロガー名を振るための連番
_channel_ids = itertools.count(1)


# @intent:responsibility ログレコードをLogChannelのリングバッファへ転送するハンドラ。
class _BufferHandler(logging.Handler):
    def __init__(self, channel: "LogChannel"):
        super().__init__()
        self._channel = channel

    def emit(self, record: logging.LogRecord) -> None:
        self._channel._append(self.format(record))


# @intent:responsibility 診断メッセージの送信口と、UIが読み出すための行バッファを一体で提供します。
# @intent:rationale 標準loggingに委譲することで、コンソール出力やファイル出力は通常のHandler設定で追加できます。
class LogChannel:
    """
    コンポーネント名付きのメッセージを標準loggingへ流しつつ、
    直近 `capacity` 行をスレッドセーフに保持するチャネル。
    """
    def __init__(self, name: str = "chip8_core_tracer", capacity: int = 500, level: int = logging.INFO):
        self._lines: Deque[str] = deque(maxlen=capacity)
        self._lock = threading.Lock()
        self._serial = 0
        # @intent:rationale ロガーはチャネルごとに固有の子ロガーとし、他のチャネルとハンドラやレベルを共有しない。
        #                  コンソールへは親ロガーへの伝播で出力されます。
        self._logger = logging.getLogger(f"{name}.channel{next(_channel_ids)}")
        self._logger.setLevel(level)
        self._handler = _BufferHandler(self)
        self._handler.setLevel(level)
        self._handler.setFormatter(logging.Formatter("%(levelname)s %(message)s"))
        self._logger.addHandler(self._handler)

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def _append(self, line: str) -> None:
        with self._lock:
            self._lines.append(line)
            self._serial += 1

    def log(self, level: int, component: str, message: str, *args, exc_info=None) -> None:
        self._logger.log(level, f"[{component}] {message}", *args, exc_info=exc_info)

    def debug(self, component: str, message: str, *args) -> None:
        self.log(logging.DEBUG, component, message, *args)

    def info(self, component: str, message: str, *args) -> None:
        self.log(logging.INFO, component, message, *args)

    def warning(self, component: str, message: str, *args) -> None:
        self.log(logging.WARNING, component, message, *args)

    def error(self, component: str, message: str, *args) -> None:
        self.log(logging.ERROR, component, message, *args)

    def exception(self, component: str, message: str, *args) -> None:
        self.log(logging.ERROR, component, message, *args, exc_info=True)

    # @intent:responsibility バッファ内の行を古い順に返します。
    def get_lines(self, limit: Optional[int] = None) -> List[str]:
        with self._lock:
            lines = list(self._lines)
        if limit is not None:
            return lines[-limit:]
        return lines

    # @intent:responsibility 追加された行の累計数を返します。UIが再描画の要否を判定するために使用します。
    def get_serial(self) -> int:
        with self._lock:
            return self._serial

    def clear(self) -> None:
        with self._lock:
            self._lines.clear()

    # @intent:responsibility ロガーからバッファハンドラを取り外します。
    def close(self) -> None:
        self._logger.removeHandler(self._handler)


# @intent:utility_function コンソールへの出力を標準的な書式で有効化します。
def configure_console_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=DEFAULT_FORMAT)
