import yaml
from typing import Any, Dict, Optional

from chip8_core_tracer.common.errors import ConfigError
from chip8_core_tracer.common.types import MEMORY_SIZE
from .models import MachineConfig

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

class ConfigLoader:
    def load_from_file(self, path: str) -> MachineConfig:
        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read config file '{path}': {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in '{path}': {e}") from e
        return self.parse(data or {})

    def parse(self, data: Dict[str, Any]) -> MachineConfig:
        if not isinstance(data, dict):
            raise ConfigError("Config root must be a mapping")

        defaults = MachineConfig()
        config = MachineConfig(
            clock_speed=self._parse_positive(data, "clock_speed", defaults.clock_speed),
            timer_hz=self._parse_positive(data, "timer_hz", defaults.timer_hz),
            refresh_hz=self._parse_positive(data, "refresh_hz", defaults.refresh_hz),
            load_address=self._parse_int(data.get("load_address", defaults.load_address)),
            start_running=bool(data.get("start_running", defaults.start_running)),
            rng_seed=self._parse_optional_int(data.get("rng_seed")),
            log_level=str(data.get("log_level", defaults.log_level)).upper(),
            log_capacity=self._parse_positive(data, "log_capacity", defaults.log_capacity),
            pixel_scale=self._parse_positive(data, "pixel_scale", defaults.pixel_scale),
            key_map=self._parse_key_map(data.get("key_map"), defaults.key_map),
        )

        if not 0 <= config.load_address < MEMORY_SIZE:
            raise ConfigError(f"load_address out of range: {config.load_address:#x}")
        if config.log_level not in LOG_LEVELS:
            raise ConfigError(f"Unknown log_level: {config.log_level}")
        return config

    def _parse_positive(self, data: Dict[str, Any], key: str, default: int) -> int:
        value = self._parse_int(data.get(key, default))
        if value <= 0:
            raise ConfigError(f"{key} must be positive, got {value}")
        return value

    def _parse_optional_int(self, value: Any) -> Optional[int]:
        if value is None:
            return None
        return self._parse_int(value)

    def _parse_key_map(self, value: Any, default: Dict[str, int]) -> Dict[str, int]:
        if value is None:
            return default
        if not isinstance(value, dict):
            raise ConfigError("key_map must be a mapping of keyboard key to CHIP-8 key")
        key_map = {}
        for name, key in value.items():
            index = self._parse_int(key)
            if not 0 <= index <= 0xF:
                raise ConfigError(f"key_map entry '{name}' must map to 0-15, got {index}")
            key_map[str(name).upper()] = index
        return key_map

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise ConfigError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            try:
                if value.lower().startswith("0x"):
                    return int(value, 16)
                return int(value)
            except ValueError as e:
                raise ConfigError(f"Invalid integer format: {value}") from e
        raise ConfigError(f"Invalid integer format: {value}")
