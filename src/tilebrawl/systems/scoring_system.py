from __future__ import annotations

import logging

from esper import World

from tilebrawl.events.bus import (
    EventBus,
    EVENT_COMBO_RESET,
    EVENT_MATCH_RESOLVED,
    EVENT_TICK,
    EVENT_TILES_MATCHED,
)
from tilebrawl.systems.scoring import (
    advance_combo,
    count_by_color,
    effect_totals,
    score_colors,
)
from tilebrawl.systems.state_utils import get_combo_state, get_game_state, get_progression, is_playing

logger = logging.getLogger(__name__)


class ScoringSystem:
    """Turns each resolution step into a per-color breakdown and owns the combo timer."""

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_TILES_MATCHED, self.on_tiles_matched)
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)

    def on_tiles_matched(self, sender, **kwargs):
        matches = kwargs.get('matches')
        board = kwargs.get('board')
        if not matches or board is None:
            return
        try:
            combo = get_combo_state(self.world)
            mode = get_game_state(self.world).combo_mode
            progression = get_progression(self.world)
        except KeyError:
            return
        counts = count_by_color(matches, board)
        if not counts:
            return
        combo.count, combo.color_counts = advance_combo(mode, combo.count, combo.color_counts, list(counts))
        combo.highest = max(combo.highest, combo.count)
        combo.time_remaining = combo.duration
        breakdown = score_colors(
            counts,
            mode=mode,
            base_block_value=progression.base_block_value,
            combo=combo.count,
            color_counts=combo.color_counts,
        )
        combo.last_breakdown = breakdown
        totals = effect_totals(breakdown)
        logger.debug("combo=%d totals=%s", combo.count, totals)
        self.event_bus.emit(EVENT_MATCH_RESOLVED, breakdown=breakdown, totals=totals, combo=combo.count)

    def on_tick(self, sender, **kwargs):
        if not is_playing(self.world):
            return
        try:
            combo = get_combo_state(self.world)
        except KeyError:
            return
        if combo.count == 0 and not combo.color_counts:
            return
        combo.time_remaining -= float(kwargs.get('dt', 0.0))
        if combo.time_remaining > 0.0:
            return
        previous = combo.count
        combo.reset()
        self.event_bus.emit(EVENT_COMBO_RESET, previous=previous)
