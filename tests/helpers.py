from __future__ import annotations

from typing import Sequence

from tilebrawl.components.board import Board
from tilebrawl.components.tile import create_tile
from tilebrawl.constants import TILE_TYPES
from tilebrawl.systems.state_utils import replace_board

LETTERS = {
    'R': 'red',
    'B': 'blue',
    'G': 'green',
    'Y': 'yellow',
    'P': 'purple',
    'X': 'grey',
}


def board_from_rows(rows: Sequence[str]) -> Board:
    """Build a board from letter rows, e.g. ``["RGB", "GBR", "BRG"]``; X is grey."""
    size = len(rows)
    assert all(len(row) == size for row in rows), "board must be square"
    grid = [
        [create_tile(r, c, LETTERS[letter]) for c, letter in enumerate(row)]
        for r, row in enumerate(rows)
    ]
    return Board(size=size, grid=grid)


def filler_board(size: int) -> Board:
    """Match-free board: neighbours along a row differ by 2 colors, along a column by 1."""
    grid = [
        [create_tile(r, c, TILE_TYPES[(r + 2 * c) % len(TILE_TYPES)]) for c in range(size)]
        for r in range(size)
    ]
    return Board(size=size, grid=grid)


def install_board(session, board: Board) -> None:
    replace_board(session.world, board)


def settle(session, dt: float = 0.3, max_ticks: int = 100):
    """Tick until the in-flight resolution (cascades included) has finished."""
    state = session.state
    for _ in range(max_ticks):
        if not state.busy:
            break
        state = session.tick(dt)
    return state
