# tests/config/test_config_loader.py
"""
YAML設定の読み込みとシステム構築を検証するテスト。
"""
import textwrap
import uuid

import pytest

from chip8_core_tracer.arch.chip8.cpu import Chip8Cpu
from chip8_core_tracer.common.errors import ConfigError
from chip8_core_tracer.common.log import LogChannel
from chip8_core_tracer.config.builder import SystemBuilder
from chip8_core_tracer.config.loader import ConfigLoader
from chip8_core_tracer.config.models import DEFAULT_KEY_MAP, MachineConfig
from chip8_core_tracer.scheduler.commands import SchedulerState
from chip8_core_tracer.scheduler.daemon import ExecutionScheduler


def _write(tmp_path, text):
    path = tmp_path / "machine.yaml"
    path.write_text(textwrap.dedent(text))
    return str(path)


class TestConfigLoader:
    def test_defaults_for_empty_file(self, tmp_path):
        config = ConfigLoader().load_from_file(_write(tmp_path, ""))
        assert config == MachineConfig()
        assert config.clock_speed == 500
        assert config.key_map == DEFAULT_KEY_MAP

    # @intent:test_case_parse 16進文字列を含む各フィールドが読み込まれることを検証します。
    def test_parse_values(self, tmp_path):
        path = _write(tmp_path, """
            clock_speed: 700
            timer_hz: "0x3C"
            load_address: "0x600"
            start_running: false
            rng_seed: 42
            log_level: debug
            pixel_scale: 4
            key_map:
              k: 0x5
              l: "0xA"
        """)
        config = ConfigLoader().load_from_file(path)
        assert config.clock_speed == 700
        assert config.timer_hz == 60
        assert config.load_address == 0x600
        assert config.start_running is False
        assert config.rng_seed == 42
        assert config.log_level == "DEBUG"
        assert config.pixel_scale == 4
        assert config.key_map == {"K": 5, "L": 10}

    @pytest.mark.parametrize("text", [
        "clock_speed: 0",
        "clock_speed: -5",
        "clock_speed: fast",
        "refresh_hz: true",
        "load_address: 0x1000",
        "log_level: LOUD",
        "key_map: {a: 16}",
        "key_map: [1, 2]",
        "- just a list",
    ])
    def test_invalid_values(self, tmp_path, text):
        with pytest.raises(ConfigError):
            ConfigLoader().load_from_file(_write(tmp_path, text))

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read"):
            ConfigLoader().load_from_file(str(tmp_path / "missing.yaml"))

    def test_malformed_yaml(self, tmp_path):
        with pytest.raises(ConfigError, match="Invalid YAML"):
            ConfigLoader().load_from_file(_write(tmp_path, "clock_speed: [1, 2"))


class TestSystemBuilder:
    def test_build_system(self):
        log = LogChannel(name=f"test.builder.{uuid.uuid4().hex}")
        try:
            cpu, scheduler, built_log = SystemBuilder().build_system(MachineConfig(clock_speed=900, rng_seed=3), log=log)
            assert isinstance(cpu, Chip8Cpu)
            assert isinstance(scheduler, ExecutionScheduler)
            assert built_log is log
            assert scheduler.get_clock_speed() == 900
            assert scheduler.get_state() is SchedulerState.PAUSED
            assert not scheduler.is_alive()
            assert any("[builder] system built" in line for line in log.get_lines())
        finally:
            log.close()

    def test_rng_seed_gives_reproducible_machines(self):
        values = []
        for _ in range(2):
            cpu, _, log = SystemBuilder().build_system(MachineConfig(rng_seed=7),
                                                       log=LogChannel(name=f"test.builder.{uuid.uuid4().hex}"))
            cpu.load_rom(bytes([0xC1, 0xFF]))
            cpu.step()
            values.append(cpu.get_state().v[1])
            log.close()
        assert values[0] == values[1]

    # @intent:test_case_isolation 同一プロセスで構築した2つのシステムのログが混ざらないことを検証します。
    def test_systems_have_separate_log_channels(self):
        _, _, log_a = SystemBuilder().build_system(MachineConfig(log_level="DEBUG"))
        _, _, log_b = SystemBuilder().build_system(MachineConfig(log_level="WARNING"))
        try:
            assert log_a.logger is not log_b.logger
            log_b.warning("machine", "only for system b")
            log_a.debug("machine", "only for system a")
            assert not any("system b" in line for line in log_a.get_lines())
            assert not any("system a" in line for line in log_b.get_lines())
            assert any("only for system a" in line for line in log_a.get_lines())
            assert log_b.get_lines() == ["WARNING [machine] only for system b"]
        finally:
            log_a.close()
            log_b.close()
