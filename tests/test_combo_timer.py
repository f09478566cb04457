import random

from tests.helpers import board_from_rows
from tilebrawl.components.game_state import ComboMode
from tilebrawl.config import SessionConfig
from tilebrawl.events.bus import (
    EventBus,
    EVENT_COMBO_RESET,
    EVENT_MATCH_RESOLVED,
    EVENT_TICK,
    EVENT_TILES_MATCHED,
)
from tilebrawl.systems.match_detection import find_matches
from tilebrawl.systems.scoring_system import ScoringSystem
from tilebrawl.systems.state_utils import get_combo_state
from tilebrawl.world import create_world

RED_ROW = [
    "RRRYP",
    "GBYPG",
    "BYPGB",
    "YPGBY",
    "GBYPG",
]

RED_AND_BLUE = [
    "RRRYP",
    "GBYPG",
    "BBBGY",
    "YPGBY",
    "GRYPG",
]


def setup(mode=ComboMode.UNIFIED):
    bus = EventBus()
    world = create_world(bus, SessionConfig(combo_mode=mode), rng=random.Random(0))
    ScoringSystem(world, bus)
    resolved = []
    resets = []
    bus.subscribe(EVENT_MATCH_RESOLVED, lambda s, **k: resolved.append(k))
    bus.subscribe(EVENT_COMBO_RESET, lambda s, **k: resets.append(k))
    return bus, world, resolved, resets


def emit_step(bus, rows):
    board = board_from_rows(rows)
    bus.emit(EVENT_TILES_MATCHED, matches=find_matches(board), board=board, source='swap')


def test_combo_grows_per_step_and_scales_value():
    bus, world, resolved, _ = setup()
    emit_step(bus, RED_ROW)
    emit_step(bus, RED_ROW)
    assert [r['combo'] for r in resolved] == [1, 2]
    assert resolved[1]['breakdown']['red'].value == 6
    assert get_combo_state(world).highest == 2


def test_combo_lapses_after_timer():
    bus, world, _, resets = setup()
    emit_step(bus, RED_ROW)
    bus.emit(EVENT_TICK, dt=2.9)
    assert resets == []
    bus.emit(EVENT_TICK, dt=0.2)
    assert resets == [{'previous': 1}]
    combo = get_combo_state(world)
    assert combo.count == 0
    assert combo.last_breakdown == {}
    assert combo.highest == 1
    bus.emit(EVENT_TICK, dt=10.0)
    assert len(resets) == 1


def test_new_step_restarts_timer():
    bus, world, _, resets = setup()
    emit_step(bus, RED_ROW)
    bus.emit(EVENT_TICK, dt=2.5)
    emit_step(bus, RED_ROW)
    bus.emit(EVENT_TICK, dt=2.5)
    assert resets == []
    assert get_combo_state(world).count == 2


def test_per_color_mode_tracks_colors_and_uses_longer_timer():
    bus, world, resolved, resets = setup(ComboMode.PER_COLOR)
    emit_step(bus, RED_AND_BLUE)
    emit_step(bus, RED_ROW)
    combo = get_combo_state(world)
    assert combo.color_counts == {'red': 2, 'blue': 1}
    assert resolved[1]['breakdown']['red'].combo_value == 2
    assert resolved[0]['breakdown']['blue'].value == 3
    bus.emit(EVENT_TICK, dt=4.9)
    assert resets == []
    bus.emit(EVENT_TICK, dt=0.2)
    assert len(resets) == 1
    assert get_combo_state(world).color_counts == {}
