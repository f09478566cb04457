from dataclasses import dataclass
from typing import Optional

from tilebrawl.components.tile import Position


@dataclass(slots=True)
class Selection:
    """Currently selected cell, if any."""
    position: Optional[Position] = None
