from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Optional, Tuple

from tilebrawl.constants import COUNTDOWN_START, COUNTDOWN_TYPE

Position = Tuple[int, int]

_tile_ids = itertools.count(1)


def next_tile_id() -> int:
    return next(_tile_ids)


@dataclass(slots=True)
class Tile:
    """A single cell occupant.

    ``type_name`` is one of the matchable colors or the grey countdown type.
    ``position`` always mirrors the (row, col) of the cell holding the tile.
    Grey tiles carry a ``countdown``; bombs and bolts carry their special flag
    until they are triggered. ``highlight_type`` records which match or chain
    effect consumed the tile and is cleared once the board settles.
    """
    tile_id: int
    type_name: str
    position: Position
    is_selected: bool = False
    is_matched: bool = False
    countdown: Optional[int] = None
    is_bomb: bool = False
    is_bolt: bool = False
    highlight_type: Optional[str] = None

    @property
    def is_countdown(self) -> bool:
        return self.type_name == COUNTDOWN_TYPE

    @property
    def row(self) -> int:
        return self.position[0]

    @property
    def col(self) -> int:
        return self.position[1]


def create_tile(
    row: int,
    col: int,
    type_name: str,
    *,
    is_bomb: bool = False,
    is_bolt: bool = False,
) -> Tile:
    return Tile(
        tile_id=next_tile_id(),
        type_name=type_name,
        position=(row, col),
        countdown=COUNTDOWN_START if type_name == COUNTDOWN_TYPE else None,
        is_bomb=is_bomb,
        is_bolt=is_bolt,
    )
