import unittest

from chip8_core_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_core_tracer.arch.chip8.instructions import HANDLERS
from chip8_core_tracer.arch.chip8.opcode_tree import decode_operands


class TestChip8AluInstructions(unittest.TestCase):
    def setUp(self):
        self.cpu = Chip8Cpu(rng_seed=1234)
        self.state = self.cpu.get_state()
        self.memory = self.cpu.get_memory()

    def _execute(self, name, instruction):
        HANDLERS[name].execute(self.state, self.memory, decode_operands(instruction))

    def test_add_vx_vy_carry(self):
        self.state.v[1] = 0xFF
        self.state.v[2] = 0x01
        self._execute("ADD_VX_VY", 0x8124)
        self.assertEqual(self.state.v[1], 0x00)
        self.assertEqual(self.state.v[0xF], 1)

    def test_add_vx_vy_no_carry(self):
        self.state.v[1] = 0x10
        self.state.v[2] = 0x20
        self.state.v[0xF] = 1
        self._execute("ADD_VX_VY", 0x8124)
        self.assertEqual(self.state.v[1], 0x30)
        self.assertEqual(self.state.v[0xF], 0)

    # VF as destination: the flag is written last and wins
    def test_add_into_vf_flag_wins(self):
        self.state.v[0xF] = 0xF0
        self.state.v[2] = 0x20
        self._execute("ADD_VX_VY", 0x8F24)
        self.assertEqual(self.state.v[0xF], 1)

    def test_sub_no_borrow(self):
        self.state.v[1] = 5
        self.state.v[2] = 3
        self._execute("SUB_VX_VY", 0x8125)
        self.assertEqual(self.state.v[1], 2)
        self.assertEqual(self.state.v[0xF], 1)

    def test_sub_borrow(self):
        self.state.v[1] = 3
        self.state.v[2] = 5
        self._execute("SUB_VX_VY", 0x8125)
        self.assertEqual(self.state.v[1], 0xFE)
        self.assertEqual(self.state.v[0xF], 0)

    def test_sub_equal_sets_flag(self):
        self.state.v[1] = 7
        self.state.v[2] = 7
        self._execute("SUB_VX_VY", 0x8125)
        self.assertEqual(self.state.v[1], 0)
        self.assertEqual(self.state.v[0xF], 1)

    def test_subn(self):
        self.state.v[1] = 3
        self.state.v[2] = 5
        self._execute("SUBN_VX_VY", 0x8127)
        self.assertEqual(self.state.v[1], 2)
        self.assertEqual(self.state.v[0xF], 1)

        self.state.v[1] = 5
        self.state.v[2] = 3
        self._execute("SUBN_VX_VY", 0x8127)
        self.assertEqual(self.state.v[1], 0xFE)
        self.assertEqual(self.state.v[0xF], 0)

    def test_shr_uses_vx_only(self):
        self.state.v[1] = 0x05
        self.state.v[2] = 0xFF
        self._execute("SHR_VX_VY", 0x8126)
        self.assertEqual(self.state.v[1], 0x02)
        self.assertEqual(self.state.v[0xF], 1)
        self.assertEqual(self.state.v[2], 0xFF)

    def test_shl(self):
        self.state.v[1] = 0x81
        self._execute("SHL_VX_VY", 0x812E)
        self.assertEqual(self.state.v[1], 0x02)
        self.assertEqual(self.state.v[0xF], 1)

        self.state.v[1] = 0x40
        self._execute("SHL_VX_VY", 0x812E)
        self.assertEqual(self.state.v[1], 0x80)
        self.assertEqual(self.state.v[0xF], 0)

    def test_logic_ops(self):
        self.state.v[1] = 0b1100
        self.state.v[2] = 0b1010
        self._execute("OR_VX_VY", 0x8121)
        self.assertEqual(self.state.v[1], 0b1110)

        self.state.v[1] = 0b1100
        self._execute("AND_VX_VY", 0x8122)
        self.assertEqual(self.state.v[1], 0b1000)

        self.state.v[1] = 0b1100
        self._execute("XOR_VX_VY", 0x8123)
        self.assertEqual(self.state.v[1], 0b0110)

    def test_add_immediate_wraps_without_flag(self):
        self.state.v[3] = 0xFF
        self.state.v[0xF] = 7
        self._execute("ADD_VX_KK", 0x7302)
        self.assertEqual(self.state.v[3], 0x01)
        self.assertEqual(self.state.v[0xF], 7)

    def test_add_i_vx(self):
        self.state.i = 0x300
        self.state.v[4] = 0x10
        self._execute("ADD_I_VX", 0xF41E)
        self.assertEqual(self.state.i, 0x310)

    def test_rnd_masks_with_immediate(self):
        for _ in range(50):
            self._execute("RND_VX_KK", 0xC10F)
            self.assertLessEqual(self.state.v[1], 0x0F)
        self._execute("RND_VX_KK", 0xC100)
        self.assertEqual(self.state.v[1], 0)

    def test_rnd_is_reproducible_with_seed(self):
        other = Chip8Cpu(rng_seed=1234)
        values = []
        for cpu in (self.cpu, other):
            state = cpu.get_state()
            seq = []
            for _ in range(10):
                HANDLERS["RND_VX_KK"].execute(state, cpu.get_memory(), decode_operands(0xC1FF))
                seq.append(state.v[1])
            values.append(seq)
        self.assertEqual(values[0], values[1])


if __name__ == '__main__':
    unittest.main()
