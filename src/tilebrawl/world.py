import random

from esper import World
from .config import SessionConfig
from .events.bus import EventBus
from tilebrawl.components.attack_timer import AttackTimer
from tilebrawl.components.combatant import Enemy, PlayerAgent
from tilebrawl.components.combo import ComboState
from tilebrawl.components.game_state import GameState, GameStatus
from tilebrawl.components.health import Health
from tilebrawl.components.progression import Progression
from tilebrawl.components.turn_state import TurnState


def create_world(
    event_bus: EventBus,
    config: SessionConfig | None = None,
    *,
    rng: random.Random | None = None,
) -> World:
    """Build a world holding the session state, the player and the enemy.

    The board entity is created by BoardSystem so that it is generated with
    the same rng once systems are wired to ``event_bus``.
    """
    config = config or SessionConfig()
    world = World()
    setattr(world, "random", rng or random.Random())

    # Session-wide resources live on one entity.
    world.create_entity(
        GameState(status=GameStatus.PLAYING, combo_mode=config.combo_mode),
        TurnState(),
        Progression(
            level=config.starting_level,
            xp_threshold=config.xp_threshold,
            base_block_value=config.base_block_value,
        ),
        ComboState(duration=config.combo_duration, time_remaining=config.combo_duration),
        AttackTimer(interval=config.attack_interval, remaining=config.attack_interval),
    )

    world.create_entity(
        PlayerAgent(),
        Health(current=config.player_health, max_hp=config.player_health),
    )
    world.create_entity(
        Enemy(attack=config.enemy_attack),
        Health(current=config.enemy_health, max_hp=config.enemy_health),
    )
    return world
