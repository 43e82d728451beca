from __future__ import annotations

from glitch_city.models.llm_contract import (
    EncounterUpdate,
    GameOutcome,
    StalkerUpdate,
    StatsChange,
    connection_lost_outcome,
)
from glitch_city.models.state import (
    AiState,
    Enemy,
    GameState,
    LogEntry,
    PlayerStats,
    Sender,
    StalkingEnemy,
)

__all__ = [
    "AiState",
    "EncounterUpdate",
    "Enemy",
    "GameOutcome",
    "GameState",
    "LogEntry",
    "PlayerStats",
    "Sender",
    "StalkerUpdate",
    "StalkingEnemy",
    "StatsChange",
    "connection_lost_outcome",
]
