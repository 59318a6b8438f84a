from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # Use weak=False to retain strong reference to bound methods so systems not kept in a variable still receive events.
        sig.connect(fn, weak=False)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"  # payload: dt=float (seconds)


# ============================================================================
# INPUT & SELECTION
# ============================================================================
EVENT_TILE_CLICK = "tile_click"                    # payload: row, col
EVENT_TILE_SELECTED = "tile_selected"              # payload: row, col
EVENT_TILE_DESELECTED = "tile_deselected"          # payload: reason=str, prev_row, prev_col


# ============================================================================
# TILE & BOARD MECHANICS
# ============================================================================
EVENT_TILE_SWAP_REQUEST = "tile_swap_request"      # payload: src=(r,c), dst=(r,c)
EVENT_TILE_SWAP_VALID = "tile_swap_valid"          # payload: src=(r,c), dst=(r,c)
EVENT_TILE_SWAP_INVALID = "tile_swap_invalid"      # payload: src=(r,c), dst=(r,c), reason=str
EVENT_TILE_SWAPPED = "tile_swapped"                # payload: src=(r,c), dst=(r,c)
EVENT_MATCH_FOUND = "match_found"                  # payload: positions=[(r,c),...], groups=list[MatchGroup], depth=int
EVENT_MATCH_CLEARED = "match_cleared"              # payload: positions, types=[(r,c,type)], score=int, combo_multiplier=int, named_patterns=list[str]
EVENT_GRAVITY_APPLIED = "gravity_applied"          # payload: moves=list[GravityMove]
EVENT_REFILL_COMPLETED = "refill_completed"        # payload: new_tiles=[(r,c),...]
EVENT_CASCADE_STEP = "cascade_step"                # payload: depth=int, positions=[(r,c),...]
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int, score=int
EVENT_BOARD_POPULATED = "board_populated"          # payload: rows=int, cols=int, type_names=list[str]
EVENT_BOARD_CHANGED = "board_changed"              # payload: reason=str, positions=list[(r,c)]
EVENT_NO_MOVES_AVAILABLE = "no_moves_available"    # payload: reason=str


# ============================================================================
# SCORE & POWER-UPS
# ============================================================================
EVENT_SCORE_CHANGED = "score_changed"                          # payload: score=int, delta=int, reason=str
EVENT_POWER_UP_SPAWNED = "power_up_spawned"                    # payload: kind=PowerUpKind, available=list[PowerUpKind]
EVENT_POWER_UP_ACTIVATE_REQUEST = "power_up_activate_request"  # payload: kind=PowerUpKind, target=(r,c)|None
EVENT_POWER_UP_ACTIVATED = "power_up_activated"                # payload: kind=PowerUpKind, result=PowerUpResult
EVENT_POWER_UP_EXPIRED = "power_up_expired"                    # payload: kind=PowerUpKind, reason=str


# ============================================================================
# GAME FLOW & STATE
# ============================================================================
EVENT_GAME_MODE_CHANGED = "game_mode_changed"          # payload: previous_mode=GameMode|None, new_mode=GameMode
EVENT_MENU_NEW_GAME_SELECTED = "menu_new_game_selected"  # payload: level=int|None
EVENT_PAUSE_TOGGLE = "pause_toggle"                    # payload: None
EVENT_SESSION_ENDED = "session_ended"                  # payload: won=bool, final_score=int, level=int, elapsed_time=float, power_ups_used=list, pattern_counts=dict
