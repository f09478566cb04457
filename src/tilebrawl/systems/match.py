from esper import World

from tilebrawl.events.bus import EventBus, EVENT_TILE_SWAP_REQUEST, EVENT_TILE_SWAP_VALID, EVENT_TILE_SWAP_INVALID
from tilebrawl.systems.board_ops import are_adjacent, swap_tiles
from tilebrawl.systems.match_detection import find_matches
from tilebrawl.systems.state_utils import get_board, get_or_create_turn_state, is_playing


class MatchSystem:
    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, self.on_swap_request)

    def on_swap_request(self, sender, **kwargs):
        src = kwargs.get('src')
        dst = kwargs.get('dst')
        if not src or not dst:
            return
        if not is_playing(self.world) or get_or_create_turn_state(self.world).busy:
            return
        try:
            board = get_board(self.world)
        except KeyError:
            return
        if not are_adjacent(src, dst, board):
            self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=src, dst=dst)
            return
        # Predict on a copy; the live board only changes once the swap is accepted.
        swapped = swap_tiles(board, src, dst)
        matches = find_matches(swapped)
        if matches:
            self.event_bus.emit(EVENT_TILE_SWAP_VALID, src=src, dst=dst, board=swapped, matches=matches)
        else:
            self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=src, dst=dst)
