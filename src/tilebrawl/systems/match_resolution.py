from __future__ import annotations

import logging
from typing import Sequence

from esper import World

from tilebrawl.components.match import Match
from tilebrawl.components.turn_state import ResolutionPhase
from tilebrawl.constants import SETTLE_DELAY
from tilebrawl.events.bus import (
    EventBus,
    EVENT_BOARD_RESHUFFLED,
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STEP,
    EVENT_GRAVITY_APPLIED,
    EVENT_MATCH_FOUND,
    EVENT_REFILL_COMPLETED,
    EVENT_SPECIAL_TILE_CREATED,
    EVENT_TICK,
    EVENT_TILE_SWAP_VALID,
    EVENT_TILES_MATCHED,
    EVENT_TURN_ACTION_STARTED,
)
from tilebrawl.systems.board_ops import (
    apply_gravity_and_refill,
    find_valid_swaps,
    generate_playable_board,
)
from tilebrawl.systems.chain_reaction import mark_matched_tiles
from tilebrawl.systems.match_detection import find_matches
from tilebrawl.systems.special_tiles import apply_special_tiles, plan_special_tiles
from tilebrawl.systems.state_utils import (
    get_board,
    get_or_create_turn_state,
    get_progression,
    get_rng,
    is_playing,
    replace_board,
)

logger = logging.getLogger(__name__)


class MatchResolutionSystem:
    """Drives the IDLE -> MATCHED -> SETTLING -> IDLE cycle for swaps and cascades.

    A resolution step marks matched tiles (chain reactions included) and
    publishes them for scoring, then waits ``settle_delay`` seconds of ticks
    before placing special tiles, applying gravity and refilling. Each refill
    is rescanned; any new match starts another step at the next depth without
    releasing the busy flag.
    """

    def __init__(self, world: World, event_bus: EventBus, settle_delay: float = SETTLE_DELAY):
        self.world = world
        self.event_bus = event_bus
        self.settle_delay = settle_delay
        self.event_bus.subscribe(EVENT_TILE_SWAP_VALID, self.on_swap_valid)
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)

    def on_swap_valid(self, sender, **kwargs):
        dst = kwargs.get('dst')
        swapped = kwargs.get('board')
        matches = kwargs.get('matches')
        if dst is None or swapped is None or not matches:
            return
        state = get_or_create_turn_state(self.world)
        if state.busy:
            return
        replace_board(self.world, swapped)
        state.busy = True
        state.action_source = "swap"
        state.cascade_depth = 0
        state.last_swap = dst
        self.event_bus.emit(EVENT_TURN_ACTION_STARTED, source="swap")
        self._begin_step(matches, source="swap")

    def on_tick(self, sender, **kwargs):
        state = get_or_create_turn_state(self.world)
        if state.phase is not ResolutionPhase.SETTLING:
            return
        dt = float(kwargs.get('dt', 0.0))
        state.settle_remaining -= dt
        if state.settle_remaining > 0.0:
            return
        state.settle_remaining = 0.0
        self._settle()

    def _begin_step(self, matches: Sequence[Match], source: str) -> None:
        state = get_or_create_turn_state(self.world)
        state.cascade_depth += 1
        state.phase = ResolutionPhase.MATCHED
        state.pending_matches = list(matches)
        marked = replace_board(self.world, mark_matched_tiles(get_board(self.world), matches))
        positions = sorted(tile.position for tile in marked.tiles() if tile.is_matched)
        logger.debug(
            "resolution step depth=%d source=%s matches=%d cleared=%d",
            state.cascade_depth, source, len(matches), len(positions),
        )
        self.event_bus.emit(
            EVENT_MATCH_FOUND,
            positions=positions,
            matches=list(matches),
            depth=state.cascade_depth,
            source=source,
        )
        self.event_bus.emit(EVENT_CASCADE_STEP, depth=state.cascade_depth, positions=positions)
        self.event_bus.emit(EVENT_TILES_MATCHED, matches=list(matches), board=marked, source=source)
        state.phase = ResolutionPhase.SETTLING
        state.settle_remaining = self.settle_delay

    def _settle(self) -> None:
        state = get_or_create_turn_state(self.world)
        level = get_progression(self.world).level
        rng = get_rng(self.world)
        board = get_board(self.world)

        if state.regenerate_board:
            state.regenerate_board = False
            replace_board(self.world, generate_playable_board(level=level, size=board.size, rng=rng))
            self.event_bus.emit(EVENT_BOARD_RESHUFFLED, reason="enemy_defeated", level=level)
            self._finish()
            return

        specials, _ = plan_special_tiles(board, state.pending_matches, state.last_swap)
        if specials:
            board = replace_board(self.world, apply_special_tiles(board, specials))
            for special in specials:
                self.event_bus.emit(
                    EVENT_SPECIAL_TILE_CREATED,
                    position=special.position,
                    type_name=special.type_name,
                    kind=special.kind,
                )

        result = apply_gravity_and_refill(board, level=level, rng=rng)
        replace_board(self.world, result.board)
        state.pending_matches = []
        state.last_swap = None
        self.event_bus.emit(
            EVENT_GRAVITY_APPLIED,
            moves=[(move.source, move.target) for move in result.moves],
            removed=list(result.removed),
        )
        self.event_bus.emit(
            EVENT_REFILL_COMPLETED,
            new_tiles=[spawn.position for spawn in result.spawned],
            entry_rows={spawn.position: spawn.entry_row for spawn in result.spawned},
        )

        if is_playing(self.world):
            matches = find_matches(result.board)
            if matches:
                state.action_source = "cascade"
                self._begin_step(matches, source="cascade")
                return
        self._finish()

    def _finish(self) -> None:
        state = get_or_create_turn_state(self.world)
        if is_playing(self.world):
            self._reshuffle_if_stalemate()
        depth = state.cascade_depth
        state.phase = ResolutionPhase.IDLE
        state.busy = False
        state.action_source = None
        state.cascade_depth = 0
        state.pending_matches = []
        state.last_swap = None
        self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=depth)

    def _reshuffle_if_stalemate(self) -> None:
        board = get_board(self.world)
        if find_valid_swaps(board):
            return
        level = get_progression(self.world).level
        replace_board(self.world, generate_playable_board(level=level, size=board.size, rng=get_rng(self.world)))
        logger.info("no valid swaps left, board regenerated at level %d", level)
        self.event_bus.emit(EVENT_BOARD_RESHUFFLED, reason="stalemate", level=level)
