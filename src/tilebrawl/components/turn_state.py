from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from tilebrawl.components.match import Match
from tilebrawl.components.tile import Position


class ResolutionPhase(Enum):
    IDLE = "idle"
    MATCHED = "matched"
    SETTLING = "settling"


@dataclass(slots=True)
class TurnState:
    """Tracks the in-flight resolution shared across systems.

    ``busy`` guards player input from the first matched swap until the last
    refill of its cascade chain. ``pending_matches`` holds the detector output
    for the step currently settling so special tiles can be planned from it.
    """

    phase: ResolutionPhase = ResolutionPhase.IDLE
    busy: bool = False
    action_source: Optional[str] = None
    cascade_depth: int = 0
    settle_remaining: float = 0.0
    last_swap: Optional[Position] = None
    pending_matches: List[Match] = field(default_factory=list)
    regenerate_board: bool = False
