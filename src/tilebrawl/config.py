from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from tilebrawl.components.game_state import ComboMode
from tilebrawl.constants import (
    ATTACK_INTERVAL,
    BOARD_SIZE,
    COMBO_TIMER,
    MATCH_MIN,
    SETTLE_DELAY,
    STARTING_BASE_BLOCK_VALUE,
    STARTING_ENEMY_ATTACK,
    STARTING_ENEMY_HEALTH,
    STARTING_LEVEL,
    STARTING_PLAYER_HEALTH,
    STARTING_XP_THRESHOLD,
)


@dataclass(frozen=True)
class SessionConfig:
    """Knobs fixed for the lifetime of one session."""

    board_size: int = BOARD_SIZE
    combo_mode: ComboMode = ComboMode.UNIFIED
    combo_timers: Dict[str, float] = field(default_factory=lambda: dict(COMBO_TIMER))
    attack_interval: float = ATTACK_INTERVAL
    settle_delay: float = SETTLE_DELAY
    starting_level: int = STARTING_LEVEL
    enemy_health: int = STARTING_ENEMY_HEALTH
    enemy_attack: int = STARTING_ENEMY_ATTACK
    player_health: int = STARTING_PLAYER_HEALTH
    xp_threshold: int = STARTING_XP_THRESHOLD
    base_block_value: int = STARTING_BASE_BLOCK_VALUE

    def __post_init__(self) -> None:
        if isinstance(self.combo_mode, str):
            object.__setattr__(self, "combo_mode", ComboMode(self.combo_mode))
        if self.board_size < MATCH_MIN:
            raise ValueError(f"board_size must be at least {MATCH_MIN}, got {self.board_size}")
        if self.combo_mode.value not in self.combo_timers:
            raise ValueError(f"no combo timer configured for mode {self.combo_mode.value!r}")
        if self.attack_interval <= 0:
            raise ValueError("attack_interval must be positive")
        if self.settle_delay < 0:
            raise ValueError("settle_delay must not be negative")
        if self.starting_level < 1:
            raise ValueError("starting_level must be at least 1")
        if self.xp_threshold <= 0:
            raise ValueError("xp_threshold must be positive")

    @property
    def combo_duration(self) -> float:
        return float(self.combo_timers[self.combo_mode.value])
