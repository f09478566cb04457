from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from tilebrawl.components.board import Board
from tilebrawl.components.tile import Position, create_tile
from tilebrawl.constants import (
    BOARD_SIZE,
    COUNTDOWN_MIN_LEVEL,
    COUNTDOWN_SPAWN_CHANCE,
    COUNTDOWN_TYPE,
    MAX_RESHUFFLE_ATTEMPTS,
    TILE_TYPES,
)
from tilebrawl.systems.match_detection import find_matches

_NEIGHBOUR_OFFSETS = ((-1, 0), (1, 0), (0, -1), (0, 1))


@dataclass(slots=True)
class GravityMove:
    source: Position
    target: Position
    type_name: str


@dataclass(slots=True)
class SpawnedTile:
    """A refill tile; ``entry_row`` is the virtual row above the grid it drops from."""
    position: Position
    entry_row: int
    type_name: str


@dataclass(slots=True)
class RefillResult:
    board: Board
    removed: List[Position] = field(default_factory=list)
    moves: List[GravityMove] = field(default_factory=list)
    spawned: List[SpawnedTile] = field(default_factory=list)


def _rng(rng: Optional[random.Random]) -> random.Random:
    return rng if isinstance(rng, random.Random) else random.Random()


def random_tile_type(level: int = 1, rng: Optional[random.Random] = None) -> str:
    rng = _rng(rng)
    if level >= COUNTDOWN_MIN_LEVEL and rng.random() < COUNTDOWN_SPAWN_CHANCE:
        return COUNTDOWN_TYPE
    return rng.choice(TILE_TYPES)


def generate_board(
    level: int = 1,
    size: int = BOARD_SIZE,
    rng: Optional[random.Random] = None,
) -> Board:
    """Fill a fresh board and re-roll matched cells until no match remains."""
    rng = _rng(rng)
    board = Board(
        size=size,
        grid=[
            [create_tile(row, col, random_tile_type(level, rng)) for col in range(size)]
            for row in range(size)
        ],
    )
    matches = find_matches(board)
    while matches:
        for match in matches:
            for row, col in match.positions:
                board.grid[row][col] = create_tile(row, col, random_tile_type(level, rng))
        matches = find_matches(board)
    return board


def are_adjacent(a: Position, b: Position, board: Board) -> bool:
    """True when a and b are orthogonal neighbours and neither holds a countdown tile."""
    if not (board.in_bounds(*a) and board.in_bounds(*b)):
        return False
    if board.tile_at(a).is_countdown or board.tile_at(b).is_countdown:
        return False
    return abs(a[0] - b[0]) + abs(a[1] - b[1]) == 1


def swap_tiles(board: Board, a: Position, b: Position) -> Board:
    """Return a copy of board with the tiles at a and b exchanged."""
    swapped = board.copy()
    tile_a = swapped.tile_at(a)
    tile_b = swapped.tile_at(b)
    tile_a.position = b
    tile_b.position = a
    swapped.grid[b[0]][b[1]] = tile_a
    swapped.grid[a[0]][a[1]] = tile_b
    return swapped


def swap_creates_match(board: Board, a: Position, b: Position) -> bool:
    if not are_adjacent(a, b, board):
        return False
    return bool(find_matches(swap_tiles(board, a, b)))


def tile_has_matching_move(board: Board, pos: Position) -> bool:
    """True if some legal swap involving pos produces at least one match."""
    row, col = pos
    for dr, dc in _NEIGHBOUR_OFFSETS:
        if swap_creates_match(board, pos, (row + dr, col + dc)):
            return True
    return False


def find_valid_swaps(board: Board) -> List[Tuple[Position, Position]]:
    """Enumerate adjacent swaps that would produce a match."""
    swaps: List[Tuple[Position, Position]] = []
    for row in range(board.size):
        for col in range(board.size):
            pos = (row, col)
            for other in ((row, col + 1), (row + 1, col)):
                if swap_creates_match(board, pos, other):
                    swaps.append((pos, other))
    return swaps


def generate_playable_board(
    level: int = 1,
    size: int = BOARD_SIZE,
    rng: Optional[random.Random] = None,
    attempts: int = MAX_RESHUFFLE_ATTEMPTS,
) -> Board:
    """Generate boards until one has a valid swap, giving up after ``attempts`` retries."""
    rng = _rng(rng)
    board = generate_board(level=level, size=size, rng=rng)
    for _ in range(attempts):
        if find_valid_swaps(board):
            break
        board = generate_board(level=level, size=size, rng=rng)
    return board


def apply_gravity_and_refill(
    board: Board,
    level: int = 1,
    rng: Optional[random.Random] = None,
) -> RefillResult:
    """Drop surviving tiles down each column and spawn replacements from above.

    A countdown tile still sitting on the bottom row is removed here even when
    no match touched it. The returned board carries no matched, selected or
    highlighted tiles.
    """
    rng = _rng(rng)
    settled = board.copy()
    result = RefillResult(board=settled)
    for tile in settled.tiles():
        tile.highlight_type = None
        tile.is_selected = False
    bottom = settled.size - 1
    for col in range(settled.size):
        bottom_tile = settled.grid[bottom][col]
        if bottom_tile.is_countdown:
            bottom_tile.is_matched = True
        survivors = []
        for row in range(settled.size):
            tile = settled.grid[row][col]
            if tile.is_matched:
                result.removed.append((row, col))
            else:
                survivors.append(tile)
        empty = settled.size - len(survivors)
        for offset, tile in enumerate(survivors):
            target = (empty + offset, col)
            if tile.position != target:
                result.moves.append(GravityMove(source=tile.position, target=target, type_name=tile.type_name))
                tile.position = target
            settled.grid[target[0]][col] = tile
        for row in range(empty):
            fresh = create_tile(row, col, random_tile_type(level, rng))
            settled.grid[row][col] = fresh
            result.spawned.append(SpawnedTile(position=(row, col), entry_row=row - empty, type_name=fresh.type_name))
    result.removed.sort()
    return result
