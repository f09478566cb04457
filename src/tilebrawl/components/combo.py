from dataclasses import dataclass, field
from typing import Dict


@dataclass(slots=True)
class ColorBreakdown:
    matched_tiles: int
    combo_value: int
    value: int


@dataclass(slots=True)
class ComboState:
    """Combo counters plus the timer that lapses them."""
    duration: float
    time_remaining: float
    count: int = 0
    highest: int = 0
    color_counts: Dict[str, int] = field(default_factory=dict)
    last_breakdown: Dict[str, ColorBreakdown] = field(default_factory=dict)

    def reset(self) -> None:
        self.count = 0
        self.color_counts = {}
        self.last_breakdown = {}
        self.time_remaining = self.duration
