import unittest

from chip8_core_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_core_tracer.arch.chip8.font import LARGE_FONT, LARGE_FONT_ADDRESS, SMALL_FONT
from chip8_core_tracer.arch.chip8.instructions import HANDLERS
from chip8_core_tracer.arch.chip8.opcode_tree import decode_operands


class TestChip8LoadInstructions(unittest.TestCase):
    def setUp(self):
        self.cpu = Chip8Cpu()
        self.state = self.cpu.get_state()
        self.memory = self.cpu.get_memory()

    def _execute(self, name, instruction):
        HANDLERS[name].execute(self.state, self.memory, decode_operands(instruction))

    def test_register_loads(self):
        self._execute("LD_VX_KK", 0x6A42)
        self.assertEqual(self.state.v[0xA], 0x42)
        self._execute("LD_VX_VY", 0x8BA0)
        self.assertEqual(self.state.v[0xB], 0x42)
        self._execute("LD_I_NNN", 0xA123)
        self.assertEqual(self.state.i, 0x123)

    def test_bcd(self):
        self.state.v[1] = 254
        self.state.i = 0x300
        self._execute("LD_B_VX", 0xF133)
        self.assertEqual([self.memory.peek(0x300 + n) for n in range(3)], [2, 5, 4])

    def test_bcd_small_value(self):
        self.state.v[1] = 7
        self.state.i = 0x300
        self._execute("LD_B_VX", 0xF133)
        self.assertEqual([self.memory.peek(0x300 + n) for n in range(3)], [0, 0, 7])

    def test_store_registers_leaves_i(self):
        for r in range(4):
            self.state.v[r] = r + 1
        self.state.i = 0x300
        self._execute("LD_I_VX", 0xF355)
        self.assertEqual(self.memory.dump()[0x300:0x305], bytes([1, 2, 3, 4, 0]))
        self.assertEqual(self.state.i, 0x300)

    def test_load_registers_leaves_i(self):
        self.memory.load(0x300, bytes([9, 8, 7]))
        self.state.i = 0x300
        self._execute("LD_VX_I", 0xF265)
        self.assertEqual(self.state.v[:4], [9, 8, 7, 0])
        self.assertEqual(self.state.i, 0x300)

    # I accesses wrap within the 12-bit address space
    def test_store_wraps_at_end_of_memory(self):
        self.state.v[0] = 0xAA
        self.state.v[1] = 0xBB
        self.state.i = 0xFFF
        self._execute("LD_I_VX", 0xF155)
        self.assertEqual(self.memory.peek(0xFFF), 0xAA)
        self.assertEqual(self.memory.peek(0x000), 0xBB)

    def test_small_font_address(self):
        self.state.v[1] = 0xA
        self._execute("LD_F_VX", 0xF129)
        self.assertEqual(self.state.i, 0x32)
        self.assertEqual(self.memory.dump()[0x32:0x37], SMALL_FONT[50:55])
        self.assertEqual(self.memory.dump()[0x32:0x37], bytes([0xF0, 0x90, 0xF0, 0x90, 0x90]))

    def test_large_font_address(self):
        self.state.v[1] = 3
        self._execute("LD_HF_VX", 0xF130)
        self.assertEqual(self.state.i, LARGE_FONT_ADDRESS + 30)
        self.assertEqual(self.memory.dump()[self.state.i:self.state.i + 10], LARGE_FONT[30:40])

    def test_font_uses_low_nibble(self):
        self.state.v[1] = 0x1F
        self._execute("LD_F_VX", 0xF129)
        self.assertEqual(self.state.i, 0xF * 5)

    def test_timers(self):
        self.state.v[2] = 3
        self._execute("LD_DT_VX", 0xF215)
        self._execute("LD_ST_VX", 0xF218)
        self.assertEqual((self.state.dt, self.state.st), (3, 3))

        self.cpu.tick_timers()
        self._execute("LD_VX_DT", 0xF307)
        self.assertEqual(self.state.v[3], 2)

        for _ in range(5):
            self.cpu.tick_timers()
        self.assertEqual((self.state.dt, self.state.st), (0, 0))

    def test_rpl_flags(self):
        for r in range(3):
            self.state.v[r] = 0x10 + r
        self._execute("LD_R_VX", 0xF275)
        self.state.v[:3] = [0, 0, 0]
        self._execute("LD_VX_R", 0xF285)
        self.assertEqual(self.state.v[:3], [0x10, 0x11, 0x12])

    def test_rpl_flags_clamped_to_eight(self):
        self.state.v = list(range(16))
        self._execute("LD_R_VX", 0xFF75)
        self.assertEqual(self.state.rpl, list(range(8)))


if __name__ == '__main__':
    unittest.main()
