from __future__ import annotations

import random
from typing import Optional

from esper import World

from tilebrawl.events.bus import EventBus, EVENT_TICK, EVENT_TILE_CLICK
from tilebrawl.systems.board_ops import find_valid_swaps
from tilebrawl.systems.state_utils import get_board, get_or_create_turn_state, get_selection, is_playing


class RandomAgentSystem:
    """Plays a random legal swap whenever the board is idle, by clicking like a player would."""

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        rng: Optional[random.Random] = None,
        decision_delay: float = 0.5,
    ) -> None:
        self.world = world
        self.event_bus = event_bus
        self.random = rng or random.Random()
        self.decision_delay = decision_delay
        self.delay_remaining = decision_delay
        self.moves_made = 0
        event_bus.subscribe(EVENT_TICK, self.on_tick)

    def on_tick(self, sender, **payload) -> None:
        if not is_playing(self.world) or get_or_create_turn_state(self.world).busy:
            return
        dt = float(payload.get("dt", 0.0))
        if self.delay_remaining > 0.0:
            self.delay_remaining = max(0.0, self.delay_remaining - dt)
            if self.delay_remaining > 0.0:
                return
        try:
            board = get_board(self.world)
            selection = get_selection(self.world)
        except KeyError:
            return
        swaps = find_valid_swaps(board)
        if not swaps:
            return
        src, dst = self.random.choice(swaps)
        if selection.position is not None:
            # Clicking the selected tile again clears it.
            prev = selection.position
            self.event_bus.emit(EVENT_TILE_CLICK, row=prev[0], col=prev[1])
        self.event_bus.emit(EVENT_TILE_CLICK, row=src[0], col=src[1])
        self.event_bus.emit(EVENT_TILE_CLICK, row=dst[0], col=dst[1])
        self.moves_made += 1
        self.delay_remaining = self.decision_delay
