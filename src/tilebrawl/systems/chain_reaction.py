from __future__ import annotations

from collections import deque
from typing import Deque, List, Sequence, Set, Tuple

from tilebrawl.components.board import Board
from tilebrawl.components.match import Match, MatchAxis
from tilebrawl.components.tile import Position
from tilebrawl.constants import BOMB_RADIUS

Explosion = Tuple[Position, str]


def blast_area(board: Board, center: Position, radius: int = BOMB_RADIUS) -> List[Position]:
    """Cells within Chebyshev distance ``radius`` of center, clipped to the board."""
    row, col = center
    return [
        (r, c)
        for r in range(max(0, row - radius), min(board.size - 1, row + radius) + 1)
        for c in range(max(0, col - radius), min(board.size - 1, col + radius) + 1)
    ]


def line_positions(board: Board, match: Match) -> List[Position]:
    if match.axis is MatchAxis.ROW:
        return [(match.line, c) for c in range(board.size)]
    return [(r, match.line) for r in range(board.size)]


def mark_matched_tiles(board: Board, matches: Sequence[Match]) -> Board:
    """Flag every tile consumed by matches, including bomb/bolt chain reactions.

    Order of resolution: bolts clear their whole color, line-of-four captures
    clear their line, queued bombs explode breadth-first (a bomb caught in a
    blast detonates once, later in the queue), then plain match positions are
    marked and finally countdown tiles next to a match tick down.
    """
    marked = board.copy()
    processed: Set[Position] = set()
    detonated: Set[Position] = set()
    explosions: Deque[Explosion] = deque()
    bolt_colors: List[str] = []

    match_positions = [pos for match in matches for pos in match.positions]
    for pos in match_positions:
        tile = marked.tile_at(pos)
        if tile.is_bomb:
            explosions.append((pos, tile.type_name))
        if tile.is_bolt:
            bolt_colors.append(tile.type_name)

    for color in bolt_colors:
        for tile in marked.tiles():
            if tile.type_name != color or tile.position in processed:
                continue
            if tile.is_bomb:
                explosions.append((tile.position, tile.type_name))
            tile.is_matched = True
            tile.highlight_type = color
            tile.is_bolt = False
            processed.add(tile.position)

    for match in matches:
        if not match.is_line4_capture:
            continue
        color = match.type_name or marked.tile_at(match.positions[0]).type_name
        for pos in line_positions(marked, match):
            tile = marked.tile_at(pos)
            if tile.is_countdown:
                continue
            if tile.is_bomb:
                # The explosion marks it.
                explosions.append((pos, tile.type_name))
                continue
            tile.is_matched = True
            tile.highlight_type = color
            processed.add(pos)

    while explosions:
        center, color = explosions.popleft()
        if center in detonated:
            continue
        detonated.add(center)
        for pos in blast_area(marked, center):
            if pos == center:
                continue
            tile = marked.tile_at(pos)
            if tile.is_bomb and pos not in detonated:
                explosions.append((pos, tile.type_name))
            if pos in processed:
                continue
            tile.is_matched = True
            tile.highlight_type = color
            processed.add(pos)
        bomb = marked.tile_at(center)
        bomb.is_bomb = False
        bomb.is_matched = True
        bomb.highlight_type = color
        processed.add(center)

    for pos in match_positions:
        if pos in processed:
            continue
        marked.tile_at(pos).is_matched = True
        processed.add(pos)

    touched = set(match_positions)
    for tile in marked.tiles():
        if not tile.is_countdown or tile.is_matched or tile.position in processed:
            continue
        if not tile.countdown:
            continue
        row, col = tile.position
        if not touched.intersection(((row - 1, col), (row + 1, col), (row, col - 1), (row, col + 1))):
            continue
        tile.countdown -= 1
        if tile.countdown <= 0:
            tile.countdown = 0
            tile.is_matched = True
        processed.add(tile.position)
    return marked
