# tests/arch/chip8/test_chip8_disassembler.py
"""
逆アセンブラが実行状態に影響を与えずにニーモニックを生成することを検証するテスト。
"""
import pytest

from chip8_core_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_core_tracer.arch.chip8.instructions import HANDLERS


@pytest.fixture
def cpu():
    cpu = Chip8Cpu()
    cpu.load_rom(bytes([0x00, 0xE0, 0x6A, 0x05, 0xD1, 0x2F, 0x51, 0x21, 0xF3, 0x65]))
    return cpu


def test_disassemble_range(cpu):
    lines = cpu.disassemble(0x200, 10)
    assert lines == [
        (0x200, "00 E0", "CLS"),
        (0x202, "6A 05", "LD VA, 0x05"),
        (0x204, "D1 2F", "DRW V1, V2, 0xF"),
        (0x206, "51 21", "DW 0x5121"),
        (0x208, "F3 65", "LD V3, [I]"),
    ]


# @intent:test_case_side_effect 逆アセンブルがPC、サイクル数、アクセスログを変更しないことを検証します。
def test_disassemble_has_no_side_effects(cpu):
    before = cpu.get_state().copy()
    cpu.disassemble(0x200, 0x100)
    assert cpu.disassemble_at(0x202) == "LD VA, 0x05"
    assert cpu.get_state().pc == before.pc
    assert cpu.get_state().v == before.v
    assert cpu.get_cycle_count() == 0
    assert cpu.get_memory().get_and_clear_activity_log() == []


def test_disassemble_at_unknown_returns_none(cpu):
    assert cpu.disassemble_at(0x206) is None


def test_disassemble_at_rejects_bad_address(cpu):
    with pytest.raises(ValueError):
        cpu.disassemble_at(0x201)
    with pytest.raises(ValueError):
        cpu.disassemble_at(0x1000)


def test_disassemble_stops_at_end_of_memory(cpu):
    lines = cpu.disassemble(0xFFC, 0x10)
    assert [addr for addr, _, _ in lines] == [0xFFC, 0xFFE]


# 各オペランド欄に異なる値を入れた代表命令語: x=0xA, y=0xB, kk=0xBC, nnn=0x3BC, n=0xC
EXPECTED_TEXT = {
    "CLS": (0x00E0, "CLS"),
    "RET": (0x00EE, "RET"),
    "SCD_N": (0x00CC, "SCD 0xC"),
    "SCR": (0x00FB, "SCR"),
    "SCL": (0x00FC, "SCL"),
    "EXIT": (0x00FD, "EXIT"),
    "LOW": (0x00FE, "LOW"),
    "HIGH": (0x00FF, "HIGH"),
    "SYS": (0x03BC, "SYS 0x3BC"),
    "JP": (0x13BC, "JP 0x3BC"),
    "CALL": (0x23BC, "CALL 0x3BC"),
    "SE_VX_KK": (0x3ABC, "SE VA, 0xBC"),
    "SNE_VX_KK": (0x4ABC, "SNE VA, 0xBC"),
    "SE_VX_VY": (0x5AB0, "SE VA, VB"),
    "LD_VX_KK": (0x6ABC, "LD VA, 0xBC"),
    "ADD_VX_KK": (0x7ABC, "ADD VA, 0xBC"),
    "LD_VX_VY": (0x8AB0, "LD VA, VB"),
    "OR_VX_VY": (0x8AB1, "OR VA, VB"),
    "AND_VX_VY": (0x8AB2, "AND VA, VB"),
    "XOR_VX_VY": (0x8AB3, "XOR VA, VB"),
    "ADD_VX_VY": (0x8AB4, "ADD VA, VB"),
    "SUB_VX_VY": (0x8AB5, "SUB VA, VB"),
    "SHR_VX_VY": (0x8AB6, "SHR VA {, VB}"),
    "SUBN_VX_VY": (0x8AB7, "SUBN VA, VB"),
    "SHL_VX_VY": (0x8ABE, "SHL VA {, VB}"),
    "SNE_VX_VY": (0x9AB0, "SNE VA, VB"),
    "LD_I_NNN": (0xA3BC, "LD I, 0x3BC"),
    "JP_V0_NNN": (0xB3BC, "JP V0, 0x3BC"),
    "RND_VX_KK": (0xCABC, "RND VA, 0xBC"),
    "DRW_VX_VY_N": (0xDABC, "DRW VA, VB, 0xC"),
    "SKP_VX": (0xEA9E, "SKP VA"),
    "SKNP_VX": (0xEAA1, "SKNP VA"),
    "LD_VX_DT": (0xFA07, "LD VA, DT"),
    "LD_VX_K": (0xFA0A, "LD VA, K"),
    "LD_DT_VX": (0xFA15, "LD DT, VA"),
    "LD_ST_VX": (0xFA18, "LD ST, VA"),
    "ADD_I_VX": (0xFA1E, "ADD I, VA"),
    "LD_F_VX": (0xFA29, "LD F, VA"),
    "LD_HF_VX": (0xFA30, "LD HF, VA"),
    "LD_B_VX": (0xFA33, "LD B, VA"),
    "LD_I_VX": (0xFA55, "LD [I], VA"),
    "LD_VX_I": (0xFA65, "LD VA, [I]"),
    "LD_R_VX": (0xFA75, "LD R, VA"),
    "LD_VX_R": (0xFA85, "LD VA, R"),
}


def test_expected_text_covers_every_handler():
    assert set(EXPECTED_TEXT) == set(HANDLERS)


# @intent:test_case_consistency 各命令語が正しいハンドラに解決され、レジスタと即値が正しい位置に現れることを検証します。
@pytest.mark.parametrize("name", sorted(EXPECTED_TEXT))
def test_handler_text_shows_its_operands(cpu, name):
    word, expected = EXPECTED_TEXT[name]
    tree = cpu.get_opcode_tree()
    assert tree.lookup(word).name == name
    assert tree.disassemble(word) == expected
    cpu.get_memory().load(0x300, word.to_bytes(2, "big"))
    assert cpu.disassemble_at(0x300) == expected
