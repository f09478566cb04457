import random

import pytest

from tests.helpers import board_from_rows, install_board, settle
from tilebrawl.components.game_state import GameStatus
from tilebrawl.components.tile import create_tile
from tilebrawl.components.turn_state import ResolutionPhase
from tilebrawl.config import SessionConfig
from tilebrawl.events.bus import (
    EVENT_BOARD_RESHUFFLED,
    EVENT_CASCADE_COMPLETE,
    EVENT_ENEMY_DEFEATED,
    EVENT_MATCH_RESOLVED,
    EVENT_TILE_DESELECTED,
    EVENT_TILE_SELECTED,
    EVENT_TILE_SELECTION_REFUSED,
    EVENT_TILE_SWAP_INVALID,
    EVENT_TILE_SWAP_VALID,
)
from tilebrawl.session import new_session
from tilebrawl.systems.match_detection import find_matches

BOARD_A = [
    "RRPBYR",
    "BYRGPB",
    "GPBYRG",
    "YRGPBY",
    "PBYRGP",
    "RGPBYR",
]


@pytest.fixture
def session(tmp_path):
    config = SessionConfig(board_size=6, attack_interval=1000.0)
    game = new_session(config, rng=random.Random(11), high_score_path=tmp_path / "scores.json")
    install_board(game, board_from_rows(BOARD_A))
    return game


def record(game, event_name):
    seen = []
    game.subscribe(event_name, lambda sender, **kw: seen.append(kw))
    return seen


def test_session_starts_idle_and_playing(session):
    state = session.state
    assert state.status is GameStatus.PLAYING
    assert state.phase is ResolutionPhase.IDLE
    assert not state.busy
    assert state.enemy_health == 100
    assert state.player_health == 100
    assert state.level == 1
    assert state.combo == 0


def test_valid_swap_scores_immediately_and_settles_later(session):
    resolved = record(session, EVENT_MATCH_RESOLVED)
    valid = record(session, EVENT_TILE_SWAP_VALID)

    session.select_or_swap((0, 2))
    state = session.select_or_swap((1, 2))

    assert len(valid) == 1
    assert state.busy
    assert state.phase is ResolutionPhase.SETTLING
    assert state.enemy_health == 97
    assert state.score == 3
    assert state.combo == 1
    assert state.last_breakdown['red'].matched_tiles == 3
    assert resolved[0]['breakdown']['red'].value == 3
    assert {(0, 0), (0, 1), (0, 2)} <= {
        tile.position for tile in state.board.tiles() if tile.is_matched
    }

    state = settle(session)
    assert not state.busy
    assert state.phase is ResolutionPhase.IDLE
    assert find_matches(state.board) == []
    assert all(not tile.is_matched for tile in state.board.tiles())


def test_invalid_swap_leaves_board_unchanged(session):
    invalid = record(session, EVENT_TILE_SWAP_INVALID)
    before = session.state.board.type_names()

    session.select_or_swap((0, 2))
    state = session.select_or_swap((0, 3))

    assert invalid == [{'src': (0, 2), 'dst': (0, 3)}]
    assert state.board.type_names() == before
    assert state.selection is None
    assert not state.busy
    assert state.score == 0


def test_selecting_tile_without_moves_is_refused(session):
    refused = record(session, EVENT_TILE_SELECTION_REFUSED)
    state = session.select_or_swap((5, 5))
    assert state.selection is None
    assert refused[0]['row'] == 5 and refused[0]['col'] == 5


def test_clicking_selected_tile_deselects_it(session):
    deselected = record(session, EVENT_TILE_DESELECTED)
    state = session.select_or_swap((0, 2))
    assert state.selection == (0, 2)
    assert state.board.tile_at((0, 2)).is_selected
    state = session.select_or_swap((0, 2))
    assert state.selection is None
    assert not state.board.tile_at((0, 2)).is_selected
    assert deselected[0]['reason'] == 'toggle'


def test_non_adjacent_click_retargets_without_move_check(session):
    refused = record(session, EVENT_TILE_SELECTION_REFUSED)
    deselected = record(session, EVENT_TILE_DESELECTED)
    session.select_or_swap((0, 2))
    state = session.select_or_swap((5, 5))
    assert state.selection == (5, 5)
    assert state.board.tile_at((5, 5)).is_selected
    assert not state.board.tile_at((0, 2)).is_selected
    assert refused == []
    assert deselected == [{'reason': 'retarget', 'prev_row': 0, 'prev_col': 2}]


def test_tile_targets_resolve_by_identity(session):
    tile = session.state.board.tile_at((0, 2))
    state = session.select_or_swap(tile)
    assert state.selection == (0, 2)
    stale = create_tile(1, 2, 'red')
    state = session.select_or_swap(stale)
    assert state.selection == (0, 2)


def test_out_of_range_targets_are_ignored(session):
    selected = record(session, EVENT_TILE_SELECTED)
    for target in [(-1, 0), (0, 6), (9, 9), "xy", None]:
        state = session.select_or_swap(target)
    assert selected == []
    assert state.selection is None


def test_input_is_ignored_while_resolving(session):
    selected = record(session, EVENT_TILE_SELECTED)
    session.select_or_swap((0, 2))
    session.select_or_swap((1, 2))
    assert len(selected) == 1
    state = session.select_or_swap((3, 3))
    assert len(selected) == 1
    assert state.selection is None
    assert state.busy


def test_restart_discards_pending_resolution(session):
    completions = record(session, EVENT_CASCADE_COMPLETE)
    session.select_or_swap((0, 2))
    session.select_or_swap((1, 2))
    assert session.state.busy

    state = session.restart()
    assert not state.busy
    assert state.phase is ResolutionPhase.IDLE
    assert state.score == 0
    assert state.enemy_health == 100
    assert state.combo == 0

    state = session.tick(5.0)
    assert completions == []
    assert state.phase is ResolutionPhase.IDLE


def test_observers_survive_restart(session):
    selected = record(session, EVENT_TILE_SELECTED)
    session.restart()
    install_board(session, board_from_rows(BOARD_A))
    session.select_or_swap((0, 2))
    assert len(selected) == 1


def test_enemy_kill_regenerates_board_at_next_level(tmp_path):
    config = SessionConfig(board_size=6, attack_interval=1000.0, enemy_health=3)
    game = new_session(config, rng=random.Random(4), high_score_path=tmp_path / "scores.json")
    install_board(game, board_from_rows(BOARD_A))
    defeated = record(game, EVENT_ENEMY_DEFEATED)
    reshuffled = record(game, EVENT_BOARD_RESHUFFLED)

    game.select_or_swap((0, 2))
    state = game.select_or_swap((1, 2))

    assert defeated == [{'level': 2, 'xp_bonus': 3, 'max_hp': 6, 'attack': 10}]
    assert state.level == 2
    assert state.enemy_health == 6
    assert state.enemy_max_health == 6
    assert state.enemy_attack == 10
    assert state.xp == 3

    state = settle(game)
    assert reshuffled[0]['reason'] == 'enemy_defeated'
    assert reshuffled[0]['level'] == 2
    assert not state.busy
    assert find_matches(state.board) == []
