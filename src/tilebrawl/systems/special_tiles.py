from __future__ import annotations

from collections import deque
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence, Set, Tuple

from tilebrawl.components.board import Board
from tilebrawl.components.match import Match
from tilebrawl.components.tile import Position, create_tile

SPECIAL_BOMB = "bomb"
SPECIAL_BOLT = "bolt"

_NEIGHBOUR_OFFSETS = ((-1, 0), (1, 0), (0, -1), (0, 1))


@dataclass(slots=True)
class SpecialTile:
    position: Position
    type_name: str
    kind: str


def is_straight_line_of_five(positions: Sequence[Position]) -> bool:
    if len(positions) != 5:
        return False
    rows = sorted(pos[0] for pos in positions)
    cols = sorted(pos[1] for pos in positions)
    if rows[0] == rows[-1]:
        return cols[-1] - cols[0] == 4
    if cols[0] == cols[-1]:
        return rows[-1] - rows[0] == 4
    return False


def connected_components(matched: Dict[Position, str]) -> List[Tuple[str, List[Position]]]:
    """Split matched cells into 4-connected groups of one color, in first-seen order."""
    visited: Set[Position] = set()
    components: List[Tuple[str, List[Position]]] = []
    for start, color in matched.items():
        if start in visited:
            continue
        visited.add(start)
        queue = deque([start])
        members: List[Position] = []
        while queue:
            row, col = queue.popleft()
            members.append((row, col))
            for dr, dc in _NEIGHBOUR_OFFSETS:
                neighbour = (row + dr, col + dc)
                if neighbour in visited or matched.get(neighbour) != color:
                    continue
                visited.add(neighbour)
                queue.append(neighbour)
        components.append((color, members))
    return components


def _same_color_neighbours(pos: Position, color: str, matched: Dict[Position, str]) -> int:
    row, col = pos
    return sum(1 for dr, dc in _NEIGHBOUR_OFFSETS if matched.get((row + dr, col + dc)) == color)


def plan_special_tiles(
    board: Board,
    matches: Sequence[Match],
    last_swap: Optional[Position] = None,
) -> Tuple[List[SpecialTile], List[Match]]:
    """Decide which matched cells turn into bombs or bolts.

    A straight line of exactly five becomes a bolt at the swapped cell, and only
    when the player's last swap is part of it. Any other connected group of five
    or more becomes a bomb, at the swapped cell when it belongs to the group,
    otherwise at the member with the most same-colored matched neighbours.
    Returns the specials and the matches with those cells removed.
    """
    matched: Dict[Position, str] = {}
    for match in matches:
        for pos in match.positions:
            matched.setdefault(pos, board.tile_at(pos).type_name)

    specials: List[SpecialTile] = []
    for color, members in connected_components(matched):
        if len(members) < 5:
            continue
        swapped_here = last_swap is not None and last_swap in members
        if is_straight_line_of_five(members):
            if swapped_here:
                specials.append(SpecialTile(position=last_swap, type_name=color, kind=SPECIAL_BOLT))
            continue
        if swapped_here:
            target = last_swap
        else:
            target = members[0]
            best = 0
            for pos in members:
                count = _same_color_neighbours(pos, color, matched)
                if count > best:
                    best = count
                    target = pos
        specials.append(SpecialTile(position=target, type_name=color, kind=SPECIAL_BOMB))

    if not specials:
        return specials, list(matches)
    keep_out = {special.position for special in specials}
    reduced = [
        replace(match, positions=[pos for pos in match.positions if pos not in keep_out])
        for match in matches
    ]
    return specials, reduced


def apply_special_tiles(board: Board, specials: Sequence[SpecialTile]) -> Board:
    """Return a copy of board with each special cell replaced by a fresh, unmatched special tile."""
    updated = board.copy()
    for special in specials:
        row, col = special.position
        updated.grid[row][col] = create_tile(
            row,
            col,
            special.type_name,
            is_bomb=special.kind == SPECIAL_BOMB,
            is_bolt=special.kind == SPECIAL_BOLT,
        )
    return updated
