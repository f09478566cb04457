from dataclasses import dataclass


@dataclass(slots=True)
class HighScore:
    """Best score recorded for the current session type."""
    session_type: str
    best: int = 0
