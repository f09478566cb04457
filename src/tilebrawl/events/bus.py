from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Strong references so systems held only by the bus keep receiving events.
        sig.connect(fn, weak=False)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float


# ============================================================================
# INPUT & SELECTION
# ============================================================================
EVENT_TILE_CLICK = "tile_click"                    # payload: row, col
EVENT_TILE_SELECTED = "tile_selected"              # payload: row, col
EVENT_TILE_DESELECTED = "tile_deselected"          # payload: reason=str, prev_row, prev_col
EVENT_TILE_SELECTION_REFUSED = "tile_selection_refused"  # payload: row, col, reason=str


# ============================================================================
# SWAP & BOARD MECHANICS
# ============================================================================
EVENT_TILE_SWAP_REQUEST = "tile_swap_request"      # payload: src=(r,c), dst=(r,c)
EVENT_TILE_SWAP_VALID = "tile_swap_valid"          # payload: src=(r,c), dst=(r,c), board=Board, matches=list[Match]
EVENT_TILE_SWAP_INVALID = "tile_swap_invalid"      # payload: src=(r,c), dst=(r,c)
EVENT_MATCH_FOUND = "match_found"                  # payload: positions=[(r,c),...], matches=list[Match], depth=int, source=str
EVENT_TILES_MATCHED = "tiles_matched"              # payload: matches=list[Match], board=Board, source=str
EVENT_SPECIAL_TILE_CREATED = "special_tile_created"  # payload: position=(r,c), type_name=str, kind=str
EVENT_GRAVITY_APPLIED = "gravity_applied"          # payload: moves=list[((r,c),(r,c))], removed=[(r,c),...]
EVENT_REFILL_COMPLETED = "refill_completed"        # payload: new_tiles=[(r,c),...], entry_rows=dict[(r,c), int]
EVENT_CASCADE_STEP = "cascade_step"                # payload: depth=int, positions=[(r,c),...]
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int
EVENT_BOARD_RESHUFFLED = "board_reshuffled"        # payload: reason=str, level=int
EVENT_TURN_ACTION_STARTED = "turn_action_started"  # payload: source=str


# ============================================================================
# SCORING & PROGRESSION
# ============================================================================
EVENT_MATCH_RESOLVED = "match_resolved"            # payload: breakdown=dict[str, ColorBreakdown], totals=dict[str,int], combo=int
EVENT_COMBO_RESET = "combo_reset"                  # payload: previous=int
EVENT_ENEMY_DEFEATED = "enemy_defeated"            # payload: level=int, xp_bonus=int, max_hp=int, attack=int
EVENT_PLAYER_LEVEL_UP = "player_level_up"          # payload: player_level=int, base_block_value=int, health_boost=int, level_ups=int


# ============================================================================
# HEALTH & COMBAT
# ============================================================================
EVENT_HEALTH_DAMAGE = "health_damage"      # payload: target_entity=int, amount=int, reason=str
EVENT_HEALTH_SET = "health_set"            # payload: target_entity=int, value=int, reason=str
EVENT_HEALTH_CHANGED = "health_changed"    # payload: entity=int, current=int, max_hp=int, delta=int, reason=str
EVENT_ENEMY_ATTACK = "enemy_attack"        # payload: amount=int


# ============================================================================
# GAME FLOW
# ============================================================================
EVENT_GAME_OVER = "game_over"              # payload: score=int, session_type=str
EVENT_HIGH_SCORE_CHANGED = "high_score_changed"  # payload: session_type=str, best=int
