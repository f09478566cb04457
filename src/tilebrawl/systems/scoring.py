"""Pure progression and scoring rules.

Nothing here touches the ECS world; the combo and progression systems read
their components, call these functions and write the results back.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Dict, Mapping, Sequence, Tuple

from tilebrawl.components.board import Board
from tilebrawl.components.combo import ColorBreakdown
from tilebrawl.components.game_state import ComboMode
from tilebrawl.components.match import Match
from tilebrawl.constants import (
    COLOR_EFFECTS,
    COUNTDOWN_TYPE,
    COUNTDOWN_VALUE_MULTIPLIER,
    EFFECT_DAMAGE,
    EFFECT_GOLD,
    EFFECT_HEAL,
    EFFECT_XP,
)


@dataclass(slots=True)
class CombatStats:
    player_health: int
    enemy_health: int
    enemy_max_health: int
    enemy_attack: int
    level: int = 1
    player_level: int = 1
    xp: int = 0
    xp_threshold: int = 10
    base_block_value: int = 1
    gold: int = 0
    score: int = 0


@dataclass(slots=True)
class ExperienceResult:
    xp: int
    xp_threshold: int
    level_ups: int
    player_level: int
    base_block_value: int
    health_boost: int


@dataclass(slots=True)
class StepOutcome:
    stats: CombatStats
    enemy_defeated: bool = False
    xp_bonus: int = 0
    level_ups: int = 0
    health_boost_per_level: int = 0
    healed: int = 0
    damage_dealt: int = 0
    totals: Dict[str, int] = field(default_factory=dict)


def count_by_color(matches: Sequence[Match], board: Board) -> Dict[str, int]:
    """Tile counts per color; a tile appearing in two matches counts twice."""
    counts: Dict[str, int] = {}
    for match in matches:
        if not match.positions:
            continue
        color = match.type_name or board.tile_at(match.positions[0]).type_name
        counts[color] = counts.get(color, 0) + len(match.positions)
    return counts


def tile_value(count: int, base_block_value: int, combo: int, type_name: str) -> int:
    value = count * base_block_value * max(1, combo)
    if type_name == COUNTDOWN_TYPE:
        value *= COUNTDOWN_VALUE_MULTIPLIER
    return value


def advance_combo(
    mode: ComboMode,
    count: int,
    color_counts: Mapping[str, int],
    colors: Sequence[str],
) -> Tuple[int, Dict[str, int]]:
    """Bump the global counter once and, in per-color mode, each color present once."""
    new_counts = dict(color_counts)
    if mode is ComboMode.PER_COLOR:
        for color in colors:
            new_counts[color] = new_counts.get(color, 0) + 1
    return count + 1, new_counts


def score_colors(
    counts: Mapping[str, int],
    *,
    mode: ComboMode,
    base_block_value: int,
    combo: int,
    color_counts: Mapping[str, int],
) -> Dict[str, ColorBreakdown]:
    breakdown: Dict[str, ColorBreakdown] = {}
    for color, matched in counts.items():
        multiplier = color_counts.get(color, 0) if mode is ComboMode.PER_COLOR else combo
        breakdown[color] = ColorBreakdown(
            matched_tiles=matched,
            combo_value=multiplier,
            value=tile_value(matched, base_block_value, multiplier, color),
        )
    return breakdown


def effect_totals(breakdown: Mapping[str, ColorBreakdown]) -> Dict[str, int]:
    totals = {EFFECT_DAMAGE: 0, EFFECT_HEAL: 0, EFFECT_XP: 0, EFFECT_GOLD: 0}
    for color, entry in breakdown.items():
        effect = COLOR_EFFECTS.get(color)
        if effect is not None:
            totals[effect] += entry.value
    return totals


def heal_player(health: int, amount: int, ceiling: int) -> int:
    """Apply healing, then cap at ceiling. Health already above the ceiling is pulled down to it."""
    return min(ceiling, health + max(0, amount))


def apply_experience(
    xp: int,
    xp_threshold: int,
    gained: int,
    *,
    player_level: int = 1,
    base_block_value: int = 1,
    enemy_max_health: int = 0,
) -> ExperienceResult:
    """Add experience and run the level-up loop until xp drops below the threshold."""
    current = xp + gained
    threshold = xp_threshold
    level_ups = 0
    while threshold > 0 and current >= threshold:
        current -= threshold
        threshold *= 2
        level_ups += 1
    return ExperienceResult(
        xp=current,
        xp_threshold=threshold,
        level_ups=level_ups,
        player_level=player_level + level_ups,
        base_block_value=base_block_value + level_ups,
        health_boost=enemy_max_health // 10,
    )


def resolve_step(stats: CombatStats, totals: Mapping[str, int]) -> StepOutcome:
    """Apply one resolution step's heal, damage, gold and experience to stats.

    Player health is capped at the enemy's max health on every step, heal or
    not. Killing the enemy awards its max health as experience, doubles its max
    health and attack, fully heals it and advances the stage level. Level-up health boosts use the enemy max
    health from before the step.
    """
    start_max = stats.enemy_max_health
    nxt = replace(stats)
    damage = int(totals.get(EFFECT_DAMAGE, 0))
    heal = int(totals.get(EFFECT_HEAL, 0))
    xp_gained = int(totals.get(EFFECT_XP, 0))

    before = nxt.player_health
    nxt.player_health = heal_player(nxt.player_health, heal, start_max)
    outcome = StepOutcome(stats=nxt, healed=nxt.player_health - before, damage_dealt=damage, totals=dict(totals))

    nxt.gold += int(totals.get(EFFECT_GOLD, 0))
    nxt.score += damage
    nxt.enemy_health = max(0, nxt.enemy_health - damage)
    if damage > 0 and nxt.enemy_health <= 0:
        outcome.enemy_defeated = True
        outcome.xp_bonus = start_max
        xp_gained += start_max
        nxt.enemy_max_health = start_max * 2
        nxt.enemy_health = nxt.enemy_max_health
        nxt.enemy_attack *= 2
        nxt.level += 1

    exp = apply_experience(
        nxt.xp,
        nxt.xp_threshold,
        xp_gained,
        player_level=nxt.player_level,
        base_block_value=nxt.base_block_value,
        enemy_max_health=start_max,
    )
    nxt.xp = exp.xp
    nxt.xp_threshold = exp.xp_threshold
    nxt.player_level = exp.player_level
    nxt.base_block_value = exp.base_block_value
    nxt.player_health += exp.health_boost * exp.level_ups
    outcome.level_ups = exp.level_ups
    outcome.health_boost_per_level = exp.health_boost
    return outcome

