from __future__ import annotations

import logging

from esper import World

from tilebrawl.components.game_state import GameStatus
from tilebrawl.events.bus import EventBus, EVENT_GAME_OVER, EVENT_HEALTH_CHANGED
from tilebrawl.systems.state_utils import get_game_state, get_progression, player_entity

logger = logging.getLogger(__name__)


class DefeatSystem:
    """Ends the session the first time the player's health reaches zero."""

    def __init__(self, world: World, event_bus: EventBus) -> None:
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_HEALTH_CHANGED, self._on_health_changed)

    def _on_health_changed(self, sender, **payload) -> None:
        entity = payload.get("entity")
        current = payload.get("current")
        if entity is None or current is None or current > 0:
            return
        try:
            if entity != player_entity(self.world):
                return
            state = get_game_state(self.world)
            score = get_progression(self.world).score
        except KeyError:
            return
        if state.status is not GameStatus.PLAYING:
            return
        state.status = GameStatus.GAME_OVER
        logger.info("game over: score %d (%s)", score, state.combo_mode.value)
        self.event_bus.emit(EVENT_GAME_OVER, score=score, session_type=state.combo_mode.value)
