from __future__ import annotations

import logging
from typing import Optional, Tuple

from esper import World

from tilebrawl.components.board import Board
from tilebrawl.components.selection import Selection
from tilebrawl.components.tile import Position
from tilebrawl.events.bus import (
    EventBus,
    EVENT_TILE_CLICK,
    EVENT_TILE_DESELECTED,
    EVENT_TILE_SELECTED,
    EVENT_TILE_SELECTION_REFUSED,
    EVENT_TILE_SWAP_REQUEST,
)
from tilebrawl.systems.board_ops import are_adjacent, generate_playable_board, tile_has_matching_move
from tilebrawl.systems.state_utils import get_or_create_turn_state, get_rng, is_playing

logger = logging.getLogger(__name__)


class BoardSystem:
    """Owns the board entity and turns tile clicks into selections or swap requests."""

    def __init__(self, world: World, event_bus: EventBus, size: int = 8, level: int = 1):
        self.world = world
        self.event_bus = event_bus
        board = generate_playable_board(level=level, size=size, rng=get_rng(world))
        self.board_entity = self.world.create_entity(board, Selection())
        self.event_bus.subscribe(EVENT_TILE_CLICK, self.on_tile_click)

    @property
    def board(self) -> Board:
        return self.world.component_for_entity(self.board_entity, Board)

    @property
    def selected(self) -> Optional[Position]:
        return self.world.component_for_entity(self.board_entity, Selection).position

    def on_tile_click(self, sender, **kwargs):
        row = kwargs.get('row')
        col = kwargs.get('col')
        if row is None or col is None:
            return
        if not is_playing(self.world) or get_or_create_turn_state(self.world).busy:
            return
        board = self.board
        if not board.in_bounds(row, col):
            return
        pos = (row, col)
        selected = self.selected
        if selected is None:
            self._try_select(pos)
        elif selected == pos:
            self._clear_selection(reason='toggle')
        elif are_adjacent(selected, pos, board):
            self._clear_selection(reason='swap')
            self.event_bus.emit(EVENT_TILE_SWAP_REQUEST, src=selected, dst=pos)
        else:
            # Only a first selection needs a legal move; a non-adjacent click always re-targets.
            self._clear_selection(reason='retarget')
            self._set_selection(pos)
            self.event_bus.emit(EVENT_TILE_SELECTED, row=pos[0], col=pos[1])

    def _try_select(self, pos: Position) -> None:
        board = self.board
        if board.tile_at(pos).is_countdown or not tile_has_matching_move(board, pos):
            logger.debug("selection refused at %s", pos)
            self.event_bus.emit(
                EVENT_TILE_SELECTION_REFUSED, row=pos[0], col=pos[1], reason='no_matching_move'
            )
            return
        self._set_selection(pos)
        self.event_bus.emit(EVENT_TILE_SELECTED, row=pos[0], col=pos[1])

    def _set_selection(self, pos: Position) -> None:
        self.world.component_for_entity(self.board_entity, Selection).position = pos
        self.board.tile_at(pos).is_selected = True

    def _clear_selection(self, reason: str) -> Optional[Tuple[int, int]]:
        selection = self.world.component_for_entity(self.board_entity, Selection)
        prev = selection.position
        if prev is None:
            return None
        selection.position = None
        board = self.board
        if board.in_bounds(*prev):
            board.tile_at(prev).is_selected = False
        self.event_bus.emit(EVENT_TILE_DESELECTED, reason=reason, prev_row=prev[0], prev_col=prev[1])
        return prev
