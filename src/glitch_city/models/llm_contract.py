"""Wire contract for the outcome payload returned by the narrative service."""
from __future__ import annotations

import math
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, field_validator

from glitch_city.models.state import AiState

_WIRE_CONFIG = ConfigDict(frozen=True, populate_by_name=True)


class StatsChange(BaseModel):
    model_config = _WIRE_CONFIG

    health: int = 0
    armor: int = 0
    glitch_level: int = Field(default=0, alias="glitchLevel")

    @field_validator("health", "armor", "glitch_level", mode="before")
    @classmethod
    def _numeric_delta(cls, value: Any) -> int:
        # bool is an int subclass; a "true" delta is a malformed payload, not +1
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"stat delta must be numeric, got {value!r}")
        if not math.isfinite(value):
            raise ValueError(f"stat delta must be finite, got {value!r}")
        return int(round(value))


class EncounterUpdate(BaseModel):
    model_config = _WIRE_CONFIG

    enemy_defeated: bool = Field(default=False, alias="enemyDefeated")
    flee_success: bool = Field(default=False, alias="fleeSuccess")

    @field_validator("enemy_defeated", "flee_success", mode="before")
    @classmethod
    def _bool_or_false(cls, value: Any) -> bool:
        return value if isinstance(value, bool) else False


class StalkerUpdate(BaseModel):
    model_config = _WIRE_CONFIG

    distance_change: Optional[int] = Field(default=None, alias="distanceChange")
    new_ai_state: Optional[AiState] = Field(default=None, alias="newAiState")
    description: Optional[str] = None

    @field_validator("distance_change", mode="before")
    @classmethod
    def _int_or_none(cls, value: Any) -> Optional[int]:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        if not math.isfinite(value):
            return None
        return int(round(value))

    @field_validator("new_ai_state", mode="before")
    @classmethod
    def _known_state_or_none(cls, value: Any) -> Optional[str]:
        if isinstance(value, str) and value.strip().lower() in {s.value for s in AiState}:
            return value.strip().lower()
        return None

    @field_validator("description", mode="before")
    @classmethod
    def _text_or_none(cls, value: Any) -> Optional[str]:
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None


class GameOutcome(BaseModel):
    """One turn's narrative and mechanical effects.

    ``description``, ``missionCompleted`` and ``statsChange`` are required and
    strictly typed. The two update blocks are optional and any malformed
    content inside them falls back to safe defaults.
    """

    model_config = _WIRE_CONFIG

    description: StrictStr
    mission_completed: StrictBool = Field(alias="missionCompleted")
    stats_change: StatsChange = Field(alias="statsChange")
    encounter_update: Optional[EncounterUpdate] = Field(default=None, alias="encounterUpdate")
    stalker_update: Optional[StalkerUpdate] = Field(default=None, alias="stalkerUpdate")

    @field_validator("description")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("description must not be empty")
        return value

    @field_validator("encounter_update", "stalker_update", mode="before")
    @classmethod
    def _mapping_or_none(cls, value: Any) -> Any:
        if isinstance(value, (dict, BaseModel)):
            return value
        return None

    @property
    def is_fallback(self) -> bool:
        """True for the connection-lost payload, which only touches stats and the log."""
        return self == connection_lost_outcome()


CONNECTION_LOST_TEXT = (
    "The city's connection to the master server flickers and dies. "
    "A dial-up modem sound screeches in the distance. Please try again."
)


def connection_lost_outcome() -> GameOutcome:
    """Fixed payload substituted whenever the narrative service fails."""
    return GameOutcome(
        description=CONNECTION_LOST_TEXT,
        mission_completed=False,
        stats_change=StatsChange(health=0, armor=0, glitch_level=1),
    )
