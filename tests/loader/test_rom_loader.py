import pytest

from chip8_core_tracer.common.errors import RomLoadError
from chip8_core_tracer.loader.rom_loader import read_rom_file


def test_read_rom(tmp_path):
    path = tmp_path / "pong.ch8"
    path.write_bytes(b"\x00\xE0\x12\x00")
    assert read_rom_file(str(path)) == b"\x00\xE0\x12\x00"


def test_missing_file(tmp_path):
    with pytest.raises(RomLoadError, match="not found"):
        read_rom_file(str(tmp_path / "missing.ch8"))


def test_directory_is_not_a_rom(tmp_path):
    with pytest.raises(RomLoadError):
        read_rom_file(str(tmp_path))


# @intent:test_case_abnormal メモリに収まらないROMファイルが拒否されることを検証します。
def test_oversize_rom(tmp_path):
    path = tmp_path / "big.ch8"
    path.write_bytes(bytes(0xE01))
    with pytest.raises(RomLoadError) as excinfo:
        read_rom_file(str(path))
    assert excinfo.value.address == 0x200


def test_capacity_depends_on_load_address(tmp_path):
    path = tmp_path / "exact.ch8"
    path.write_bytes(bytes(0xA00))
    assert len(read_rom_file(str(path), load_address=0x600)) == 0xA00
    with pytest.raises(RomLoadError):
        read_rom_file(str(path), load_address=0x602)
