"""Session-wide status resource and combo mode selection."""
from dataclasses import dataclass
from enum import Enum


class GameStatus(Enum):
    IDLE = "idle"
    PLAYING = "playing"
    GAME_OVER = "game_over"


class ComboMode(Enum):
    """How the combo multiplier is tracked; fixed for the lifetime of a session."""
    UNIFIED = "unified"
    PER_COLOR = "per_color"


@dataclass
class GameState:
    """Singleton component storing the session status."""
    status: GameStatus = GameStatus.PLAYING
    combo_mode: ComboMode = ComboMode.UNIFIED
