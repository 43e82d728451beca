"""Map game state to the background ambience the front end should play."""
from __future__ import annotations

from enum import Enum

from glitch_city.models.state import GameState


class AmbienceIntent(str, Enum):
    SILENT = "silent"
    CRITICAL = "critical"
    COMBAT = "combat"
    NORMAL = "normal"


def ambience_for(state: GameState, *, critical: bool = False, session_over: bool = False) -> AmbienceIntent:
    if session_over:
        return AmbienceIntent.SILENT
    if critical:
        return AmbienceIntent.CRITICAL
    if state.current_enemy is not None and not state.is_tutorial_active:
        return AmbienceIntent.COMBAT
    return AmbienceIntent.NORMAL
