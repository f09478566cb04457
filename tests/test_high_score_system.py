import json
import logging
import random

from tests.helpers import board_from_rows, install_board
from tilebrawl.config import SessionConfig
from tilebrawl.events.bus import EventBus, EVENT_GAME_OVER, EVENT_HIGH_SCORE_CHANGED
from tilebrawl.session import new_session
from tilebrawl.systems.high_score_system import HighScoreSystem
from tilebrawl.systems.state_utils import get_high_score
from tilebrawl.world import create_world

BOARD_A = [
    "RRPBYR",
    "BYRGPB",
    "GPBYRG",
    "YRGPBY",
    "PBYRGP",
    "RGPBYR",
]


def make_system(save_path, session_type='unified'):
    bus = EventBus()
    world = create_world(bus, SessionConfig(), rng=random.Random(0))
    system = HighScoreSystem(world, bus, session_type, save_path=save_path)
    return bus, world, system


def test_missing_file_reads_as_zero(tmp_path):
    _, world, _ = make_system(tmp_path / "scores.json")
    assert get_high_score(world).best == 0


def test_corrupt_file_reads_as_zero(tmp_path):
    path = tmp_path / "scores.json"
    path.write_text("{not json", encoding="utf-8")
    _, world, _ = make_system(path)
    assert get_high_score(world).best == 0


def test_game_over_with_better_score_is_persisted(tmp_path):
    path = tmp_path / "nested" / "scores.json"
    path.parent.mkdir()
    path.write_text(json.dumps({"per_color": 40}), encoding="utf-8")
    bus, world, _ = make_system(path)
    changed = []
    bus.subscribe(EVENT_HIGH_SCORE_CHANGED, lambda s, **k: changed.append(k))

    bus.emit(EVENT_GAME_OVER, score=12, session_type='unified')

    assert get_high_score(world).best == 12
    assert changed == [{'session_type': 'unified', 'best': 12}]
    assert json.loads(path.read_text(encoding="utf-8")) == {"per_color": 40, "unified": 12}


def test_lower_score_is_not_written(tmp_path):
    path = tmp_path / "scores.json"
    path.write_text(json.dumps({"unified": 50}), encoding="utf-8")
    bus, world, _ = make_system(path)
    bus.emit(EVENT_GAME_OVER, score=30, session_type='unified')
    assert get_high_score(world).best == 50
    assert json.loads(path.read_text(encoding="utf-8")) == {"unified": 50}


def test_write_failure_is_logged_and_state_kept(tmp_path, caplog):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    bus, world, system = make_system(blocker / "scores.json")

    with caplog.at_level(logging.WARNING, logger="tilebrawl.systems.high_score_system"):
        bus.emit(EVENT_GAME_OVER, score=7, session_type='unified')

    assert get_high_score(world).best == 7
    assert not system.save()
    assert any("could not write" in record.getMessage() for record in caplog.records)


def test_best_score_carries_into_next_session(tmp_path):
    path = tmp_path / "scores.json"
    config = SessionConfig(board_size=6, player_health=5, enemy_attack=5, attack_interval=3.0)
    game = new_session(config, rng=random.Random(6), high_score_path=path)
    install_board(game, board_from_rows(BOARD_A))
    game.select_or_swap((0, 2))
    game.select_or_swap((1, 2))
    state = game.tick(3.0)
    assert state.is_game_over
    assert state.score == 3
    assert state.best_score == 3

    again = new_session(config, rng=random.Random(7), high_score_path=path)
    assert again.state.best_score == 3
    assert again.state.score == 0

    per_color = new_session(
        SessionConfig(board_size=6, combo_mode="per_color"), rng=random.Random(8), high_score_path=path
    )
    assert per_color.state.best_score == 0
