from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Iterator, List

from tilebrawl.components.tile import Position, Tile


@dataclass(slots=True)
class Board:
    """Square grid of tiles, indexed ``grid[row][col]`` with row 0 at the top."""
    size: int
    grid: List[List[Tile]] = field(default_factory=list)

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def tile_at(self, pos: Position) -> Tile:
        row, col = pos
        return self.grid[row][col]

    def tiles(self) -> Iterator[Tile]:
        for row in self.grid:
            yield from row

    def copy(self) -> "Board":
        """Copy the grid and every tile so the result can be mutated freely."""
        return Board(
            size=self.size,
            grid=[[replace(tile) for tile in row] for row in self.grid],
        )

    def type_names(self) -> List[List[str]]:
        return [[tile.type_name for tile in row] for row in self.grid]
