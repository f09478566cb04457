"""Lookups for the single-instance components shared by every system."""
from __future__ import annotations

import random
from typing import Type, TypeVar

from esper import World

from tilebrawl.components.attack_timer import AttackTimer
from tilebrawl.components.board import Board
from tilebrawl.components.combatant import Enemy, PlayerAgent
from tilebrawl.components.combo import ComboState
from tilebrawl.components.game_state import GameState, GameStatus
from tilebrawl.components.high_score import HighScore
from tilebrawl.components.progression import Progression
from tilebrawl.components.selection import Selection
from tilebrawl.components.turn_state import TurnState

C = TypeVar("C")


def _singleton(world: World, component_type: Type[C]) -> C:
    entries = list(world.get_component(component_type))
    if not entries:
        raise KeyError(component_type.__name__)
    return entries[0][1]


def _single_entity(world: World, component_type: type) -> int:
    entries = list(world.get_component(component_type))
    if not entries:
        raise KeyError(component_type.__name__)
    return entries[0][0]


def get_or_create_turn_state(world: World) -> TurnState:
    """Return the shared TurnState component, creating it if absent."""
    existing = list(world.get_component(TurnState))
    if existing:
        return existing[0][1]
    world.create_entity(TurnState())
    return list(world.get_component(TurnState))[0][1]


def get_board(world: World) -> Board:
    return _singleton(world, Board)


def get_selection(world: World) -> Selection:
    return _singleton(world, Selection)


def get_game_state(world: World) -> GameState:
    return _singleton(world, GameState)


def get_progression(world: World) -> Progression:
    return _singleton(world, Progression)


def get_combo_state(world: World) -> ComboState:
    return _singleton(world, ComboState)


def get_attack_timer(world: World) -> AttackTimer:
    return _singleton(world, AttackTimer)


def get_high_score(world: World) -> HighScore:
    return _singleton(world, HighScore)


def player_entity(world: World) -> int:
    return _single_entity(world, PlayerAgent)


def enemy_entity(world: World) -> int:
    return _single_entity(world, Enemy)


def get_rng(world: World) -> random.Random:
    rng = getattr(world, "random", None)
    if isinstance(rng, random.Random):
        return rng
    rng = random.Random()
    setattr(world, "random", rng)
    return rng


def is_playing(world: World) -> bool:
    try:
        return get_game_state(world).status is GameStatus.PLAYING
    except KeyError:
        return False


def replace_board(world: World, new_board: Board) -> Board:
    """Swap the contents of the shared Board component for new_board's grid."""
    board = get_board(world)
    board.size = new_board.size
    board.grid = new_board.grid
    return board
