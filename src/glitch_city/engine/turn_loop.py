"""Session controller: routes each player action to the right transition."""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING

from glitch_city.engine.errors import SessionOverError, SystemCriticalError, TransitionInProgressError
from glitch_city.engine.transition import (
    TransitionResult,
    apply_outcome,
    enter_critical,
    enter_game_over,
    new_game_state,
    recover_from_critical,
    reset_state,
)
from glitch_city.engine.validators import is_meta_command, validate_action
from glitch_city.mechanics.stats import is_critical, is_session_over
from glitch_city.mechanics.tutorial import end_tutorial, handle_tutorial_input, start_tutorial
from glitch_city.models.llm_contract import GameOutcome, connection_lost_outcome
from glitch_city.models.state import GameState

if TYPE_CHECKING:
    from glitch_city.llm.narrator import NarrativeService
    from glitch_city.storage.repos.settings_repo import SettingsRepo

logger = logging.getLogger(__name__)

HELP_TEXT = (
    ":: AVAILABLE COMMANDS ::\n"
    "- Use natural language to interact (e.g., 'look around', 'hack the terminal').\n"
    "- 'help': Displays this message.\n"
    "- 'tutorial': Restarts the tutorial.\n"
    "- 'reboot': Resets the game state."
)


@dataclass
class TurnResult:
    state: GameState
    outcome: GameOutcome | None = None
    transition: TransitionResult | None = None
    handled_locally: bool = False
    tutorial_completed: bool = False


class TurnLoop:
    """Holds the single live GameState and applies one action at a time."""

    def __init__(
        self,
        narrator: NarrativeService,
        rng: random.Random | None = None,
        settings: SettingsRepo | None = None,
        state: GameState | None = None,
    ):
        self.narrator = narrator
        self.rng = rng or random.Random()
        self.settings = settings
        self.state = state or new_game_state()
        self._busy = False

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def critical(self) -> bool:
        return is_critical(self.state.stats)

    @property
    def session_over(self) -> bool:
        # A kernel panic is resolved before the crash screen.
        return is_session_over(self.state.stats) and not self.critical

    def boot(self, force_tutorial: bool = False) -> GameState:
        """Start a session: the tutorial for first-time players, the city otherwise."""
        completed = self.settings.has_completed_tutorial() if self.settings else False
        if force_tutorial or not completed:
            self.state = start_tutorial()
        else:
            self.state = new_game_state()
        return self.state

    def submit(self, raw_input: str) -> TurnResult:
        """Process a single player action."""
        if self._busy:
            raise TransitionInProgressError("A turn is already resolving.")

        if self.state.is_tutorial_active:
            return self._handle_tutorial(raw_input)

        if not raw_input.strip():
            return TurnResult(state=self.state, handled_locally=True)

        ok, reason = validate_action(
            self.state, raw_input, session_over=self.session_over, critical=self.critical,
        )
        if not ok:
            if self.critical:
                raise SystemCriticalError(reason)
            raise SessionOverError(reason)

        action = raw_input.strip()
        if is_meta_command(action, "tutorial"):
            self.state = start_tutorial()
            return TurnResult(state=self.state, handled_locally=True)

        if is_meta_command(action, "help") and not self.state.in_combat:
            self.state = self.state.with_player_line(action).with_log(HELP_TEXT)
            return TurnResult(state=self.state, handled_locally=True)

        return self._resolve_with_narrator(action)

    def _resolve_with_narrator(self, action: str) -> TurnResult:
        before = self.state
        self._busy = True
        try:
            outcome = self.narrator.get_outcome(before, action)
        except Exception as e:
            logger.warning(f"Narrative service failed, using fallback outcome: {e}")
            outcome = connection_lost_outcome()
        finally:
            self._busy = False

        transition = apply_outcome(before.with_player_line(action), outcome, self.rng)
        state = transition.state
        if transition.critical:
            logger.info("Glitch level critical (%d)", state.stats.glitch_level)
            state = enter_critical(state)
        elif transition.session_over:
            logger.info("Session over: health depleted")
            state = enter_game_over(state)
        transition.state = state
        self.state = state
        return TurnResult(state=state, outcome=outcome, transition=transition)

    def _handle_tutorial(self, raw_input: str) -> TurnResult:
        result = handle_tutorial_input(self.state, raw_input)
        self.state = result.state
        if result.completed:
            self._mark_tutorial_completed()
        return TurnResult(state=self.state, handled_locally=True, tutorial_completed=result.completed)

    def skip_tutorial(self) -> GameState:
        if not self.state.is_tutorial_active:
            return self.state
        self.state = end_tutorial(self.state)
        self._mark_tutorial_completed()
        return self.state

    def recover(self) -> GameState:
        """Leave the kernel-panic state once the front end's cooldown has elapsed."""
        if not self.critical:
            return self.state
        self.state = recover_from_critical(self.state)
        if self.session_over:
            self.state = enter_game_over(self.state)
        return self.state

    def reset(self) -> GameState:
        self.state = reset_state()
        return self.state

    def _mark_tutorial_completed(self) -> None:
        if self.settings is None:
            return
        self.settings.mark_tutorial_completed()
