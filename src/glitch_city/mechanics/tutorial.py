"""Scripted onboarding sequence. Fully local: never consults the narrative service."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from glitch_city.models.state import Enemy, GameState

COMBAT_SIMULATION_STEP = 4
SIMULATED_ENEMY = Enemy(name="Lag Spike Elemental", description="A being of pure latency.")

REJECTION_TEXT = ":: Invalid command for tutorial sequence. Please follow the instructions. ::"
COMPLETION_TEXT = (
    ":: TUTORIAL_COMPLETE ::\nLive system connection established. Welcome to 404 City."
)


@dataclass(frozen=True)
class TutorialStep:
    text: str
    expected: frozenset[str]
    placeholder: str

    def accepts(self, action: str) -> bool:
        return action.strip().lower() in self.expected


def _step(text: str, expected: str | tuple[str, ...], placeholder: str) -> TutorialStep:
    literals = (expected,) if isinstance(expected, str) else expected
    return TutorialStep(text=text, expected=frozenset(e.lower() for e in literals), placeholder=placeholder)


TUTORIAL_STEPS: tuple[TutorialStep, ...] = (
    _step(
        ":: TUTORIAL_INITIATED ::\nWelcome to 404 City, user. This simulation will prepare you "
        "for the chaos. This is the **Game Log**, where all events are recorded. Your commands "
        "and system responses will appear here.\n\nType `continue` to proceed.",
        "continue", "Type 'continue'...",
    ),
    _step(
        "Good. Below is the **Action Panel**. This is your primary interface with the city. "
        "You type commands here and press EXECUTE. Try typing `look around` now.",
        "look around", "Type 'look around'...",
    ),
    _step(
        "Excellent. You see a flickering neon sign for a ramen shop. Look to the top-left. "
        "Those are your **Status Bars**: HEALTH, ARMOR, and GLITCH LEVEL. Keep an eye on them. "
        "Glitch is... unpredictable.\n\nType `got it`.",
        "got it", "Type 'got it'...",
    ),
    _step(
        "Now look to the top-right. These are your **Objectives**. The yellow one is your main "
        "mission. The purple one is a secondary directive. Completing them is... advised.\n\n"
        "Type `understood`.",
        "understood", "Type 'understood'...",
    ),
    _step(
        ":: SIMULATION ::\nA `Lag Spike Elemental` materializes in front of you! In combat, your "
        "action panel changes. You have three options: ATTACK, DEBUG, or FLEE. For this "
        "simulation, choose any action.",
        ("attack", "debug", "flee"), "Choose a combat action...",
    ),
    _step(
        "You chose wisely. The simulation is complete. Remember, real encounters are not so "
        "forgiving. The system is now yours to navigate. Good luck.\n\n"
        "Type `start game` to enter 404 City.",
        "start game", "Type 'start game'...",
    ),
)


@dataclass
class TutorialResult:
    state: GameState
    completed: bool = False
    accepted: bool = False


def start_tutorial() -> GameState:
    """Fresh state positioned at the first tutorial step."""
    return GameState(is_tutorial_active=True, tutorial_step=0).with_log(TUTORIAL_STEPS[0].text)


def end_tutorial(state: GameState) -> GameState:
    """Leave the tutorial: initial game values, tutorial transcript kept."""
    fresh = GameState(log=state.log)
    return fresh.with_log(COMPLETION_TEXT)


def tutorial_placeholder(state: GameState) -> Optional[str]:
    if not state.is_tutorial_active or state.tutorial_step >= len(TUTORIAL_STEPS):
        return None
    return TUTORIAL_STEPS[state.tutorial_step].placeholder


def handle_tutorial_input(state: GameState, action: str) -> TutorialResult:
    step_index = state.tutorial_step
    step = TUTORIAL_STEPS[step_index]
    echoed = state.with_player_line(action)

    if not step.accepts(action):
        return TutorialResult(state=echoed.with_log(REJECTION_TEXT))

    next_index = step_index + 1
    if next_index >= len(TUTORIAL_STEPS):
        return TutorialResult(state=end_tutorial(echoed), completed=True, accepted=True)

    next_text = TUTORIAL_STEPS[next_index].text
    if step_index == COMBAT_SIMULATION_STEP:
        advanced = echoed.with_log(
            f"You chose {action.strip().upper()}. The simulated entity dissolves into static.",
            next_text,
        )
        current_enemy = None
    else:
        advanced = echoed.with_log(next_text)
        current_enemy = SIMULATED_ENEMY if next_index == COMBAT_SIMULATION_STEP else None

    return TutorialResult(
        state=advanced.model_copy(update={"tutorial_step": next_index, "current_enemy": current_enemy}),
        accepted=True,
    )
