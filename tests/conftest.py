"""Shared fixtures for the 404 City test suite."""
from __future__ import annotations

import random
from typing import Any

import pytest

from glitch_city.models.llm_contract import (
    EncounterUpdate,
    GameOutcome,
    StalkerUpdate,
    StatsChange,
)
from glitch_city.models.state import AiState, Enemy, GameState, PlayerStats, StalkingEnemy


class ScriptedRandom(random.Random):
    """Random source whose ``random()`` draws come from a script.

    ``choice`` keeps using the seeded bit generator, so a test can force a
    spawn or rotation roll without fixing which element gets picked.
    """

    def __init__(self, rolls: list[float] | tuple[float, ...] = (), seed: int = 0):
        super().__init__(seed)
        self.rolls = list(rolls)

    def random(self) -> float:
        if self.rolls:
            return self.rolls.pop(0)
        return super().random()

    # Random.__init_subclass__ routes _randbelow through random() unless
    # getrandbits is overridden too, which would let choice() eat scripted rolls.
    def getrandbits(self, k: int) -> int:
        return super().getrandbits(k)


ALWAYS = 0.0
NEVER = 0.999999


def make_outcome(
    description: str = "The terminal beeps ominously.",
    mission_completed: bool = False,
    health: int = 0,
    armor: int = 0,
    glitch: int = 0,
    encounter: dict[str, Any] | None = None,
    stalker: dict[str, Any] | None = None,
) -> GameOutcome:
    return GameOutcome(
        description=description,
        mission_completed=mission_completed,
        stats_change=StatsChange(health=health, armor=armor, glitch_level=glitch),
        encounter_update=EncounterUpdate(**encounter) if encounter is not None else None,
        stalker_update=StalkerUpdate(**stalker) if stalker is not None else None,
    )


class StubNarrator:
    """Narrative service double: replays queued outcomes and records calls."""

    def __init__(self, *outcomes: GameOutcome):
        self.outcomes = list(outcomes)
        self.calls: list[tuple[GameState, str]] = []

    def get_outcome(self, state: GameState, action: str) -> GameOutcome:
        self.calls.append((state, action))
        if self.outcomes:
            return self.outcomes.pop(0)
        return make_outcome()


class ExplodingNarrator:
    def __init__(self, exc: Exception | None = None):
        self.exc = exc or ConnectionError("socket closed")
        self.calls = 0

    def get_outcome(self, state: GameState, action: str) -> GameOutcome:
        self.calls += 1
        raise self.exc


@pytest.fixture
def seeded_rng() -> random.Random:
    return random.Random(42)


@pytest.fixture
def quiet_rng() -> ScriptedRandom:
    """Never rotates secondary missions and never spawns."""
    return ScriptedRandom([NEVER] * 20)


@pytest.fixture
def glitch_enemy() -> Enemy:
    return Enemy(name="Syntax Serpent", description="A writhing mass of broken code.")


@pytest.fixture
def base_state() -> GameState:
    return GameState(stats=PlayerStats(health=80, armor=60, glitch_level=20)).with_log("boot")


@pytest.fixture
def combat_state(base_state, glitch_enemy) -> GameState:
    return base_state.model_copy(update={"current_enemy": glitch_enemy})


@pytest.fixture
def stalked_state(base_state, glitch_enemy) -> GameState:
    stalker = StalkingEnemy(enemy=glitch_enemy, distance=3, ai_state=AiState.PATROLLING)
    return base_state.model_copy(update={"stalking_enemy": stalker})


@pytest.fixture
def in_memory_db(tmp_path):
    from glitch_city.storage.database import Database

    db = Database(str(tmp_path / "test.db"))
    db.initialize()
    yield db
    db.close()


@pytest.fixture
def settings_repo(in_memory_db):
    from glitch_city.storage.repos import SettingsRepo

    return SettingsRepo(in_memory_db)
