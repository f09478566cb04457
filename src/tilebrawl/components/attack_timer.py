from dataclasses import dataclass


@dataclass(slots=True)
class AttackTimer:
    """Fixed-interval countdown until the enemy strikes the player."""
    interval: float
    remaining: float
