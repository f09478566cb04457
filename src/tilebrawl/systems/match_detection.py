from __future__ import annotations

from typing import Callable, List, Optional, Sequence

from tilebrawl.components.board import Board
from tilebrawl.components.match import Match, MatchAxis, MatchKind
from tilebrawl.components.tile import Position, Tile
from tilebrawl.constants import MATCH_MIN


def find_matches(board: Board) -> List[Match]:
    """Detect runs of three or more same-typed tiles in every row and column.

    Rows and columns are scanned independently, so a tile sitting in both a
    horizontal and a vertical run contributes to two matches. Grey countdown
    tiles never join a run and break run continuity. A run of exactly four
    captures every same-colored tile in its whole line; runs of five or more
    are tagged as connected groups for special-tile creation.
    """
    matches: List[Match] = []
    for row in range(board.size):
        cells = board.grid[row]
        matches.extend(_scan_line(cells, lambda i, r=row: (r, i), MatchAxis.ROW, row))
    for col in range(board.size):
        cells = [board.grid[row][col] for row in range(board.size)]
        matches.extend(_scan_line(cells, lambda i, c=col: (i, c), MatchAxis.COL, col))
    return matches


def flatten_positions(matches: Sequence[Match]) -> List[Position]:
    return sorted({pos for match in matches for pos in match.positions})


def _scan_line(
    cells: Sequence[Tile],
    to_pos: Callable[[int], Position],
    axis: MatchAxis,
    line: int,
) -> List[Match]:
    found: List[Match] = []
    run_type: Optional[str] = None
    start = 0
    for index, tile in enumerate(cells):
        if tile.is_countdown:
            _close_run(found, cells, to_pos, axis, line, run_type, start, index)
            run_type = None
            start = index + 1
            continue
        if tile.type_name != run_type:
            _close_run(found, cells, to_pos, axis, line, run_type, start, index)
            run_type = tile.type_name
            start = index
    _close_run(found, cells, to_pos, axis, line, run_type, start, len(cells))
    return found


def _close_run(
    found: List[Match],
    cells: Sequence[Tile],
    to_pos: Callable[[int], Position],
    axis: MatchAxis,
    line: int,
    run_type: Optional[str],
    start: int,
    end: int,
) -> None:
    length = end - start
    if run_type is None or length < MATCH_MIN:
        return
    if length == 4:
        positions = [
            to_pos(i)
            for i, tile in enumerate(cells)
            if not tile.is_countdown and tile.type_name == run_type
        ]
        kind = MatchKind.LINE4_CAPTURE
    else:
        positions = [to_pos(i) for i in range(start, end)]
        kind = MatchKind.CONNECTED_GROUP if length > 4 else MatchKind.LINE3
    found.append(Match(kind=kind, positions=positions, type_name=run_type, axis=axis, line=line))
