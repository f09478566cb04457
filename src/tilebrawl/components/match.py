from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from tilebrawl.components.tile import Position


class MatchKind(Enum):
    LINE3 = "line3"
    # Run of exactly four: captures every same-colored tile in the line.
    LINE4_CAPTURE = "line4_capture"
    # Run of five or more: candidate for special-tile creation.
    CONNECTED_GROUP = "connected_group"


class MatchAxis(Enum):
    ROW = "row"
    COL = "col"


@dataclass(slots=True)
class Match:
    """One resolved run from a single row or column scan."""
    kind: MatchKind
    positions: List[Position] = field(default_factory=list)
    type_name: Optional[str] = None
    axis: MatchAxis = MatchAxis.ROW
    line: int = 0

    def __len__(self) -> int:
        return len(self.positions)

    @property
    def is_line4_capture(self) -> bool:
        return self.kind is MatchKind.LINE4_CAPTURE
