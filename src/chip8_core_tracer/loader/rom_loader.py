# chip8_core_tracer/loader/rom_loader.py
"""
ROMローダーモジュール。
CHIP-8 のROMはヘッダを持たない生バイナリで、そのままプログラム開始アドレスに配置されます。
"""
import os

from chip8_core_tracer.common.errors import RomLoadError
from chip8_core_tracer.common.types import MEMORY_SIZE, PROGRAM_START

# @intent:responsibility ROMファイルを読み込み、指定アドレスに収まることを確認してからバイト列を返します。
# @intent:post-condition ファイルが存在しない、読めない、または収まらない場合はRomLoadErrorを送出します。
def read_rom_file(file_path: str, load_address: int = PROGRAM_START) -> bytes:
    if not os.path.isfile(file_path):
        raise RomLoadError(f"ROM file not found: {file_path}")

    try:
        with open(file_path, 'rb') as f:
            data = f.read()
    except OSError as e:
        raise RomLoadError(f"Cannot read ROM file '{file_path}': {e}") from e

    capacity = MEMORY_SIZE - load_address
    if len(data) > capacity:
        raise RomLoadError(
            f"ROM '{os.path.basename(file_path)}' is {len(data)} bytes; "
            f"only {capacity} bytes fit at {load_address:#05x}",
            address=load_address,
        )
    return data
