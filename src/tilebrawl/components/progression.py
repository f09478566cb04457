from dataclasses import dataclass


@dataclass(slots=True)
class Progression:
    """Player growth and run totals.

    ``level`` is the stage level: it advances with each enemy kill and drives
    board generation. ``player_level`` advances with experience.
    """
    level: int = 1
    player_level: int = 1
    xp: int = 0
    xp_threshold: int = 10
    base_block_value: int = 1
    gold: int = 0
    score: int = 0
