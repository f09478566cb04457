from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from esper import World

from tilebrawl.components.board import Board
from tilebrawl.components.combatant import Enemy
from tilebrawl.components.combo import ColorBreakdown
from tilebrawl.components.game_state import ComboMode, GameStatus
from tilebrawl.components.health import Health
from tilebrawl.components.tile import Position
from tilebrawl.components.turn_state import ResolutionPhase
from tilebrawl.systems import state_utils


@dataclass(slots=True)
class RunState:
    """Read-only snapshot of a session, rebuilt after every public operation."""

    board: Board
    selection: Optional[Position]
    status: GameStatus
    combo_mode: ComboMode
    phase: ResolutionPhase
    busy: bool
    cascade_depth: int
    score: int
    best_score: int
    gold: int
    combo: int
    highest_combo: int
    color_combos: Dict[str, int]
    combo_time_remaining: float
    attack_time_remaining: float
    level: int
    player_level: int
    xp: int
    xp_threshold: int
    base_block_value: int
    player_health: int
    player_max_health: int
    enemy_health: int
    enemy_max_health: int
    enemy_attack: int
    last_breakdown: Dict[str, ColorBreakdown] = field(default_factory=dict)

    @property
    def is_game_over(self) -> bool:
        return self.status is GameStatus.GAME_OVER


def build_run_state(world: World) -> RunState:
    board = state_utils.get_board(world)
    game = state_utils.get_game_state(world)
    turn = state_utils.get_or_create_turn_state(world)
    progression = state_utils.get_progression(world)
    combo = state_utils.get_combo_state(world)
    timer = state_utils.get_attack_timer(world)
    player = world.component_for_entity(state_utils.player_entity(world), Health)
    enemy = state_utils.enemy_entity(world)
    enemy_health = world.component_for_entity(enemy, Health)
    try:
        best = state_utils.get_high_score(world).best
    except KeyError:
        best = 0
    return RunState(
        board=board.copy(),
        selection=state_utils.get_selection(world).position,
        status=game.status,
        combo_mode=game.combo_mode,
        phase=turn.phase,
        busy=turn.busy,
        cascade_depth=turn.cascade_depth,
        score=progression.score,
        best_score=max(best, progression.score),
        gold=progression.gold,
        combo=combo.count,
        highest_combo=combo.highest,
        color_combos=dict(combo.color_counts),
        combo_time_remaining=combo.time_remaining,
        attack_time_remaining=timer.remaining,
        level=progression.level,
        player_level=progression.player_level,
        xp=progression.xp,
        xp_threshold=progression.xp_threshold,
        base_block_value=progression.base_block_value,
        player_health=player.current,
        player_max_health=player.max_hp,
        enemy_health=enemy_health.current,
        enemy_max_health=enemy_health.max_hp,
        enemy_attack=world.component_for_entity(enemy, Enemy).attack,
        last_breakdown=dict(combo.last_breakdown),
    )
