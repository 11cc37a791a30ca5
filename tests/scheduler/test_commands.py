import pytest
from dataclasses import FrozenInstanceError

from chip8_core_tracer.scheduler.commands import Command, CommandType


def test_load_rom_command_copies_data():
    data = bytearray(b"\x00\xE0")
    command = Command.load_rom(data)
    data[0] = 0xFF
    assert command.command_type is CommandType.LOAD_ROM
    assert command.payload == b"\x00\xE0"
    assert command.address == 0x200


def test_factories():
    assert Command.key_down(3) == Command(CommandType.KEY_DOWN, 3)
    assert Command.key_up(3).command_type is CommandType.KEY_UP
    assert Command.clock_speed(700).payload == 700
    assert Command.load_rom(b"", 0x600).address == 0x600


def test_command_is_immutable():
    command = Command(CommandType.RESET)
    with pytest.raises(FrozenInstanceError):
        command.payload = 1
