"""Public entry point: one playable session wrapping a world, a bus and its systems."""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple, Union

from esper import World

from tilebrawl.components.tile import Position, Tile
from tilebrawl.config import SessionConfig
from tilebrawl.events.bus import EVENT_TICK, EVENT_TILE_CLICK, EventBus
from tilebrawl.run_state import RunState, build_run_state
from tilebrawl.systems.board import BoardSystem
from tilebrawl.systems.defeat_system import DefeatSystem
from tilebrawl.systems.enemy_attack_system import EnemyAttackSystem
from tilebrawl.systems.health_system import HealthSystem
from tilebrawl.systems.high_score_system import HighScoreSystem
from tilebrawl.systems.match import MatchSystem
from tilebrawl.systems.match_resolution import MatchResolutionSystem
from tilebrawl.systems.progression_system import ProgressionSystem
from tilebrawl.systems.scoring_system import ScoringSystem
from tilebrawl.systems.state_utils import get_board
from tilebrawl.world import create_world

logger = logging.getLogger(__name__)

Target = Union[Tile, Tuple[int, int], Sequence[int]]


@dataclass(slots=True)
class Systems:
    board: BoardSystem
    match: MatchSystem
    resolution: MatchResolutionSystem
    scoring: ScoringSystem
    progression: ProgressionSystem
    health: HealthSystem
    enemy_attack: EnemyAttackSystem
    defeat: DefeatSystem
    high_score: HighScoreSystem


def create_systems(
    world: World,
    event_bus: EventBus,
    config: SessionConfig,
    *,
    high_score_path: Path | None = None,
) -> Systems:
    # Subscription order matters on shared events: scoring runs before
    # progression, and tick consumers see the combo and attack timers before
    # the settle phase advances.
    board = BoardSystem(world, event_bus, size=config.board_size, level=config.starting_level)
    match = MatchSystem(world, event_bus)
    scoring = ScoringSystem(world, event_bus)
    progression = ProgressionSystem(world, event_bus)
    health = HealthSystem(world, event_bus)
    defeat = DefeatSystem(world, event_bus)
    high_score = HighScoreSystem(world, event_bus, config.combo_mode.value, save_path=high_score_path)
    enemy_attack = EnemyAttackSystem(world, event_bus)
    resolution = MatchResolutionSystem(world, event_bus, settle_delay=config.settle_delay)
    return Systems(
        board=board,
        match=match,
        resolution=resolution,
        scoring=scoring,
        progression=progression,
        health=health,
        enemy_attack=enemy_attack,
        defeat=defeat,
        high_score=high_score,
    )


class GameSession:
    """Synchronous facade over the event-driven engine.

    Every operation publishes onto the session's bus, lets the systems react,
    and returns a fresh RunState snapshot. Invalid input never raises; it just
    leaves the state as it was.
    """

    def __init__(
        self,
        config: SessionConfig | None = None,
        *,
        rng: random.Random | None = None,
        high_score_path: Path | str | None = None,
    ) -> None:
        self.config = config or SessionConfig()
        self._rng = rng
        self._high_score_path = Path(high_score_path) if high_score_path is not None else None
        self._observers: List[Tuple[str, Callable]] = []
        self.event_bus: EventBus
        self.world: World
        self.systems: Systems
        self._build()

    def _build(self) -> None:
        self.event_bus = EventBus()
        self.world = create_world(self.event_bus, self.config, rng=self._rng or random.Random())
        self.systems = create_systems(
            self.world, self.event_bus, self.config, high_score_path=self._high_score_path
        )
        for name, fn in self._observers:
            self.event_bus.subscribe(name, fn)

    @property
    def state(self) -> RunState:
        return build_run_state(self.world)

    def subscribe(self, event_name: str, fn: Callable) -> None:
        """Register an observer; it is carried over to the fresh bus on restart."""
        self._observers.append((event_name, fn))
        self.event_bus.subscribe(event_name, fn)

    def select_or_swap(self, target: Target) -> RunState:
        pos = self._resolve_target(target)
        if pos is not None:
            self.event_bus.emit(EVENT_TILE_CLICK, row=pos[0], col=pos[1])
        return self.state

    def tick(self, delta_seconds: float) -> RunState:
        try:
            dt = float(delta_seconds)
        except (TypeError, ValueError):
            return self.state
        if dt >= 0.0:
            self.event_bus.emit(EVENT_TICK, dt=dt)
        return self.state

    def restart(self) -> RunState:
        logger.info("restarting session (%s)", self.config.combo_mode.value)
        self._build()
        return self.state

    def _resolve_target(self, target: Target) -> Optional[Position]:
        board = get_board(self.world)
        if isinstance(target, Tile):
            # Stale tiles from an older snapshot no longer match any cell.
            for tile in board.tiles():
                if tile.tile_id == target.tile_id:
                    return tile.position
            return None
        try:
            row, col = target
            row, col = int(row), int(col)
        except (TypeError, ValueError):
            return None
        if not board.in_bounds(row, col):
            return None
        return (row, col)


def new_session(
    config: SessionConfig | None = None,
    *,
    rng: random.Random | None = None,
    high_score_path: Path | str | None = None,
) -> GameSession:
    return GameSession(config, rng=rng, high_score_path=high_score_path)
