from __future__ import annotations

import logging

from esper import World

from tilebrawl.components.combatant import Enemy
from tilebrawl.components.health import Health
from tilebrawl.constants import EFFECT_DAMAGE
from tilebrawl.events.bus import (
    EventBus,
    EVENT_ENEMY_DEFEATED,
    EVENT_HEALTH_CHANGED,
    EVENT_HEALTH_DAMAGE,
    EVENT_HEALTH_SET,
    EVENT_MATCH_RESOLVED,
    EVENT_PLAYER_LEVEL_UP,
)
from tilebrawl.systems.scoring import CombatStats, resolve_step
from tilebrawl.systems.state_utils import (
    enemy_entity,
    get_or_create_turn_state,
    get_progression,
    player_entity,
)

logger = logging.getLogger(__name__)


class ProgressionSystem:
    """Applies a resolved step's effects: healing, damage, kills, experience, gold and score."""

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_MATCH_RESOLVED, self.on_match_resolved)

    def on_match_resolved(self, sender, **kwargs):
        totals = kwargs.get('totals')
        if not totals:
            return
        try:
            player = player_entity(self.world)
            enemy = enemy_entity(self.world)
            player_health = self.world.component_for_entity(player, Health)
            enemy_health = self.world.component_for_entity(enemy, Health)
            enemy_stats = self.world.component_for_entity(enemy, Enemy)
            progression = get_progression(self.world)
        except KeyError:
            return

        stats = CombatStats(
            player_health=player_health.current,
            enemy_health=enemy_health.current,
            enemy_max_health=enemy_health.max_hp,
            enemy_attack=enemy_stats.attack,
            level=progression.level,
            player_level=progression.player_level,
            xp=progression.xp,
            xp_threshold=progression.xp_threshold,
            base_block_value=progression.base_block_value,
            gold=progression.gold,
            score=progression.score,
        )
        outcome = resolve_step(stats, totals)
        result = outcome.stats

        # Heal cap and level-up boosts are already folded into the resolved value.
        self.event_bus.emit(
            EVENT_HEALTH_SET,
            target_entity=player,
            value=result.player_health,
            reason='level_up' if outcome.level_ups else 'match',
        )
        damage = int(totals.get(EFFECT_DAMAGE, 0))
        if damage > 0:
            self.event_bus.emit(EVENT_HEALTH_DAMAGE, target_entity=enemy, amount=damage, reason='match')

        progression.gold = result.gold
        progression.score = result.score

        if outcome.enemy_defeated:
            enemy_health.max_hp = result.enemy_max_health
            enemy_health.current = result.enemy_health
            enemy_stats.attack = result.enemy_attack
            progression.level = result.level
            get_or_create_turn_state(self.world).regenerate_board = True
            logger.info(
                "enemy defeated: stage level %d, enemy max hp %d, attack %d",
                result.level, result.enemy_max_health, result.enemy_attack,
            )
            self.event_bus.emit(
                EVENT_HEALTH_CHANGED,
                entity=enemy,
                current=enemy_health.current,
                max_hp=enemy_health.max_hp,
                delta=enemy_health.current,
                reason='enemy_respawn',
            )
            self.event_bus.emit(
                EVENT_ENEMY_DEFEATED,
                level=result.level,
                xp_bonus=outcome.xp_bonus,
                max_hp=result.enemy_max_health,
                attack=result.enemy_attack,
            )

        progression.xp = result.xp
        progression.xp_threshold = result.xp_threshold
        if outcome.level_ups:
            progression.player_level = result.player_level
            progression.base_block_value = result.base_block_value
            boost = outcome.health_boost_per_level * outcome.level_ups
            logger.info(
                "player level %d (+%d), base block value %d",
                result.player_level, outcome.level_ups, result.base_block_value,
            )
            self.event_bus.emit(
                EVENT_PLAYER_LEVEL_UP,
                player_level=result.player_level,
                base_block_value=result.base_block_value,
                health_boost=boost,
                level_ups=outcome.level_ups,
            )
