from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

STAT_MIN = 0
STAT_MAX = 100


class AiState(str, Enum):
    PATROLLING = "patrolling"
    HUNTING = "hunting"


class Sender(str, Enum):
    SYSTEM = "system"
    PLAYER = "player"


class PlayerStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    health: int = 100
    armor: int = 100
    glitch_level: int = 13


class Enemy(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str = ""


class StalkingEnemy(BaseModel):
    model_config = ConfigDict(frozen=True)

    enemy: Enemy
    distance: int = 4
    ai_state: AiState = AiState.PATROLLING


class LogEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    text: str
    sender: Sender = Sender.SYSTEM


INITIAL_MISSION = "Reboot the Downtown Server Core without causing a city-wide SEGFAULT."
INITIAL_SECONDARY_MISSION = "Directive #2: Don't divide by zero."


class GameState(BaseModel):
    """The single live aggregate. Never patched in place; every change goes through model_copy."""

    model_config = ConfigDict(frozen=True)

    mission: str = INITIAL_MISSION
    secondary_mission: Optional[str] = INITIAL_SECONDARY_MISSION
    stats: PlayerStats = Field(default_factory=PlayerStats)
    log: tuple[LogEntry, ...] = ()
    current_enemy: Optional[Enemy] = None
    stalking_enemy: Optional[StalkingEnemy] = None
    is_tutorial_active: bool = False
    tutorial_step: int = 0

    @property
    def next_log_id(self) -> int:
        return self.log[-1].id + 1 if self.log else 0

    @property
    def in_combat(self) -> bool:
        return self.current_enemy is not None

    def with_log(self, *texts: str, sender: Sender = Sender.SYSTEM) -> GameState:
        """Return a copy with *texts* appended to the log under fresh, increasing ids."""
        if not texts:
            return self
        start = self.next_log_id
        entries = tuple(
            LogEntry(id=start + i, text=text, sender=sender) for i, text in enumerate(texts)
        )
        return self.model_copy(update={"log": self.log + entries})

    def with_player_line(self, action: str) -> GameState:
        return self.with_log(f"> {action}", sender=Sender.PLAYER)

    def recent_log_texts(self, count: int = 2) -> list[str]:
        return [entry.text for entry in self.log[-count:]]
