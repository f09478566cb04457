import random

from tests.helpers import board_from_rows, install_board, settle
from tilebrawl.config import SessionConfig
from tilebrawl.events.bus import (
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STEP,
    EVENT_GRAVITY_APPLIED,
    EVENT_MATCH_FOUND,
    EVENT_REFILL_COMPLETED,
)
from tilebrawl.session import new_session

# Swapping (3,2) with (4,2) clears red on row 3; the drop then lines up blue
# on row 3, columns 1-3, without relying on refilled tiles.
CASCADE_BOARD = [
    "GPYGPY",
    "YGPYGP",
    "PBBYPG",
    "RRYBGY",
    "BYRGBP",
    "GPGPYB",
]


def test_two_step_cascade(tmp_path):
    config = SessionConfig(board_size=6, attack_interval=1000.0)
    game = new_session(config, rng=random.Random(21), high_score_path=tmp_path / "scores.json")
    install_board(game, board_from_rows(CASCADE_BOARD))

    steps = []
    found = []
    gravity = []
    refills = []
    complete = {}
    game.subscribe(EVENT_CASCADE_STEP, lambda s, **k: steps.append(k.get('depth')))
    game.subscribe(EVENT_MATCH_FOUND, lambda s, **k: found.append(k))
    game.subscribe(EVENT_GRAVITY_APPLIED, lambda s, **k: gravity.append(k))
    game.subscribe(EVENT_REFILL_COMPLETED, lambda s, **k: refills.append(k))
    game.subscribe(EVENT_CASCADE_COMPLETE, lambda s, **k: complete.update(k))

    game.select_or_swap((3, 2))
    state = game.select_or_swap((4, 2))
    assert steps == [1]
    assert found[0]['source'] == 'swap'
    assert found[0]['positions'] == [(3, 0), (3, 1), (3, 2)]

    state = game.tick(config.settle_delay)
    assert steps[:2] == [1, 2]
    assert state.busy
    assert state.cascade_depth == 2
    assert found[1]['source'] == 'cascade'
    assert {(3, 1), (3, 2), (3, 3)} <= set(found[1]['positions'])
    assert state.combo == 2
    assert ((0, 0), (1, 0)) in gravity[0]['moves']
    assert refills[0]['entry_rows'][(0, 0)] == -1

    state = settle(game)
    assert not state.busy
    assert complete['depth'] >= 2
    assert state.highest_combo >= 2


def test_busy_flag_holds_until_cascade_chain_ends(tmp_path):
    config = SessionConfig(board_size=6, attack_interval=1000.0, settle_delay=0.5)
    game = new_session(config, rng=random.Random(3), high_score_path=tmp_path / "scores.json")
    install_board(game, board_from_rows(CASCADE_BOARD))

    game.select_or_swap((3, 2))
    game.select_or_swap((4, 2))
    state = game.tick(0.2)
    assert state.busy
    assert state.cascade_depth == 1
    state = game.tick(0.4)
    # First refill produced the blue cascade; still busy.
    assert state.busy
    assert state.cascade_depth == 2
