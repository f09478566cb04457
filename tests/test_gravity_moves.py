import random

from tests.helpers import board_from_rows
from tilebrawl.systems.board_ops import apply_gravity_and_refill

ROWS = [
    "RGBY",
    "GBYR",
    "BYRG",
    "YRGB",
]


def test_gravity_compacts_column_and_records_moves():
    board = board_from_rows(ROWS)
    board.tile_at((2, 0)).is_matched = True
    board.tile_at((3, 0)).is_matched = True
    survivors = [board.tile_at((0, 0)).tile_id, board.tile_at((1, 0)).tile_id]

    result = apply_gravity_and_refill(board, level=1, rng=random.Random(3))
    settled = result.board

    assert result.removed == [(2, 0), (3, 0)]
    assert [(m.source, m.target) for m in result.moves] == [((0, 0), (2, 0)), ((1, 0), (3, 0))]
    assert [settled.tile_at((2, 0)).tile_id, settled.tile_at((3, 0)).tile_id] == survivors
    assert [(s.position, s.entry_row) for s in result.spawned] == [((0, 0), -2), ((1, 0), -1)]
    # Untouched columns keep their tiles.
    assert settled.tile_at((3, 3)).tile_id == board.tile_at((3, 3)).tile_id


def test_refilled_board_is_full_and_clean():
    board = board_from_rows(ROWS)
    for pos in [(0, 1), (1, 1), (3, 2)]:
        board.tile_at(pos).is_matched = True
        board.tile_at(pos).highlight_type = 'blue'
    board.tile_at((2, 3)).is_selected = True

    settled = apply_gravity_and_refill(board, level=1, rng=random.Random(8)).board

    for r, row in enumerate(settled.grid):
        for c, tile in enumerate(row):
            assert tile is not None
            assert tile.position == (r, c)
            assert not tile.is_matched
            assert not tile.is_selected
            assert tile.highlight_type is None


def test_input_board_is_not_mutated():
    board = board_from_rows(ROWS)
    board.tile_at((1, 1)).is_matched = True
    before = board.type_names()
    apply_gravity_and_refill(board, level=1, rng=random.Random(1))
    assert board.type_names() == before
    assert board.tile_at((1, 1)).is_matched


def test_countdown_on_bottom_row_is_removed():
    board = board_from_rows([
        "RGBY",
        "GBYR",
        "BYRG",
        "YXGB",
    ])
    above = board.tile_at((2, 1)).tile_id
    result = apply_gravity_and_refill(board, level=1, rng=random.Random(2))
    assert (3, 1) in result.removed
    assert result.board.tile_at((3, 1)).tile_id == above
    assert all(not tile.is_countdown for tile in result.board.tiles())
