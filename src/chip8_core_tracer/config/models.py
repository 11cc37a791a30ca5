from dataclasses import dataclass, field
from typing import Dict, Optional

# 1 2 3 C / 4 5 6 D / 7 8 9 E / A 0 B F を、キーボードの 1234/QWER/ASDF/ZXCV に対応付ける
DEFAULT_KEY_MAP: Dict[str, int] = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
}

@dataclass
class MachineConfig:
    clock_speed: int = 500  # cycles per second
    timer_hz: int = 60
    refresh_hz: int = 60
    load_address: int = 0x200
    start_running: bool = True
    rng_seed: Optional[int] = None
    log_level: str = "INFO"
    log_capacity: int = 500
    pixel_scale: int = 8
    key_map: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_KEY_MAP))
