from dataclasses import dataclass


@dataclass(slots=True)
class PlayerAgent:
    """Marker component for the human-controlled combatant."""


@dataclass(slots=True)
class Enemy:
    """Marker plus attack stat for the opponent being fought."""

    attack: int = 5
