"""Tests for the session controller in src/glitch_city/engine/turn_loop.py."""
from __future__ import annotations

import pytest

from conftest import ALWAYS, NEVER, ExplodingNarrator, ScriptedRandom, StubNarrator, make_outcome
from glitch_city.engine.errors import SessionOverError, SystemCriticalError, TransitionInProgressError
from glitch_city.engine.transition import GAME_OVER_TEXT, KERNEL_PANIC_TEXT, RECOVERY_TEXT, REBOOT_TEXT
from glitch_city.engine.turn_loop import HELP_TEXT, TurnLoop
from glitch_city.mechanics.tutorial import TUTORIAL_STEPS
from glitch_city.models.llm_contract import CONNECTION_LOST_TEXT
from glitch_city.models.state import AiState, GameState, PlayerStats, Sender, StalkingEnemy

TUTORIAL_ANSWERS = ["continue", "look around", "got it", "understood", "debug", "start game"]


def _loop(narrator=None, state=None, settings=None) -> TurnLoop:
    return TurnLoop(
        narrator=narrator or StubNarrator(),
        rng=ScriptedRandom([NEVER] * 50),
        settings=settings,
        state=state,
    )


class TestBoot:
    def test_first_launch_starts_tutorial(self, settings_repo):
        loop = _loop(settings=settings_repo)
        state = loop.boot()
        assert state.is_tutorial_active
        assert state.tutorial_step == 0
        assert state.log[-1].text == TUTORIAL_STEPS[0].text

    def test_returning_player_skips_tutorial(self, settings_repo):
        settings_repo.mark_tutorial_completed()
        loop = _loop(settings=settings_repo)
        assert not loop.boot().is_tutorial_active

    def test_forced_tutorial(self, settings_repo):
        settings_repo.mark_tutorial_completed()
        loop = _loop(settings=settings_repo)
        assert loop.boot(force_tutorial=True).is_tutorial_active

    def test_no_settings_store_means_tutorial(self):
        assert _loop().boot().is_tutorial_active


class TestTutorialRouting:
    def test_tutorial_input_never_reaches_narrator(self, settings_repo):
        narrator = StubNarrator()
        loop = _loop(narrator=narrator, settings=settings_repo)
        loop.boot()
        result = loop.submit("continue")
        assert result.handled_locally
        assert loop.state.tutorial_step == 1
        assert narrator.calls == []

    def test_wrong_answer_keeps_step(self, settings_repo):
        loop = _loop(settings=settings_repo)
        loop.boot()
        loop.submit("dance")
        assert loop.state.tutorial_step == 0

    def test_completion_persists_flag(self, settings_repo):
        loop = _loop(settings=settings_repo)
        loop.boot()
        for answer in TUTORIAL_ANSWERS:
            result = loop.submit(answer)
        assert result.tutorial_completed
        assert not loop.state.is_tutorial_active
        assert settings_repo.has_completed_tutorial()

    def test_skip_persists_flag(self, settings_repo):
        loop = _loop(settings=settings_repo)
        loop.boot()
        loop.skip_tutorial()
        assert not loop.state.is_tutorial_active
        assert settings_repo.has_completed_tutorial()

    def test_skip_outside_tutorial_is_noop(self, base_state):
        loop = _loop(state=base_state)
        assert loop.skip_tutorial() == base_state


class TestLocalCommands:
    def test_blank_input_ignored(self, base_state):
        loop = _loop(state=base_state)
        result = loop.submit("   ")
        assert result.handled_locally
        assert loop.state == base_state

    def test_help(self, base_state):
        narrator = StubNarrator()
        loop = _loop(narrator=narrator, state=base_state)
        loop.submit("HELP")
        assert loop.state.log[-1].text == HELP_TEXT
        assert loop.state.log[-2].sender == Sender.PLAYER
        assert narrator.calls == []

    def test_help_in_combat_goes_to_narrator(self, combat_state):
        narrator = StubNarrator(make_outcome(encounter={}))
        loop = _loop(narrator=narrator, state=combat_state)
        loop.submit("help")
        assert len(narrator.calls) == 1

    def test_tutorial_command_restarts_tutorial(self, base_state):
        loop = _loop(state=base_state)
        loop.submit("tutorial")
        assert loop.state.is_tutorial_active
        assert loop.state.tutorial_step == 0

    def test_reset(self, combat_state):
        loop = _loop(state=combat_state)
        state = loop.reset()
        assert [e.text for e in state.log] == [REBOOT_TEXT]
        assert state.current_enemy is None


class TestNarratedTurns:
    def test_player_line_then_outcome(self, base_state):
        narrator = StubNarrator(make_outcome("The vending machine hums."))
        loop = _loop(narrator=narrator, state=base_state)
        loop.submit("  kick the vending machine ")
        assert narrator.calls[0] == (base_state, "kick the vending machine")
        tail = loop.state.log[-2:]
        assert tail[0].text == "> kick the vending machine"
        assert tail[0].sender == Sender.PLAYER
        assert tail[1].text == "The vending machine hums."

    def test_narrator_failure_uses_fallback(self, base_state):
        narrator = ExplodingNarrator()
        loop = _loop(narrator=narrator, state=base_state)
        result = loop.submit("look around")
        assert narrator.calls == 1
        assert loop.state.log[-1].text == CONNECTION_LOST_TEXT
        assert loop.state.stats.glitch_level == base_state.stats.glitch_level + 1
        assert loop.state.stats.health == base_state.stats.health
        assert result.outcome.description == CONNECTION_LOST_TEXT
        assert not loop.busy

    def test_narrator_failure_freezes_pursuit_and_missions(self, base_state, glitch_enemy):
        stalker = StalkingEnemy(enemy=glitch_enemy, distance=1, ai_state=AiState.HUNTING)
        state = base_state.model_copy(update={"stalking_enemy": stalker})
        loop = TurnLoop(narrator=ExplodingNarrator(), rng=ScriptedRandom([ALWAYS] * 5), state=state)
        loop.submit("look around")
        assert loop.state.stalking_enemy == stalker
        assert loop.state.current_enemy is None
        assert loop.state.secondary_mission == state.secondary_mission
        assert loop.state.mission == state.mission

    def test_narrator_failure_never_spawns(self):
        state = GameState(stats=PlayerStats(glitch_level=60)).with_log("boot")
        loop = TurnLoop(narrator=ExplodingNarrator(), rng=ScriptedRandom([NEVER, ALWAYS]), state=state)
        loop.submit("look around")
        assert loop.state.stalking_enemy is None
        assert loop.state.stats.glitch_level == 61

    def test_busy_guard(self, base_state):
        loop = _loop(state=base_state)
        loop._busy = True
        with pytest.raises(TransitionInProgressError):
            loop.submit("look around")


class TestSessionOver:
    def test_death_locks_input(self, base_state):
        narrator = StubNarrator(make_outcome(health=-200))
        loop = _loop(narrator=narrator, state=base_state)
        loop.submit("jump off the server rack")
        assert loop.session_over
        assert loop.state.log[-1].text == GAME_OVER_TEXT
        with pytest.raises(SessionOverError):
            loop.submit("look around")
        assert len(narrator.calls) == 1

    def test_reboot_clears_session_over(self, base_state):
        loop = _loop(narrator=StubNarrator(make_outcome(health=-200)), state=base_state)
        loop.submit("jump")
        loop.reset()
        assert not loop.session_over


class TestCritical:
    def test_panic_then_recovery(self, base_state):
        narrator = StubNarrator(make_outcome(glitch=200))
        loop = _loop(narrator=narrator, state=base_state)
        loop.submit("divide by zero")
        assert loop.critical
        assert loop.state.log[-1].text == KERNEL_PANIC_TEXT
        with pytest.raises(SystemCriticalError):
            loop.submit("look around")

        state = loop.recover()
        assert state.stats.glitch_level == 75
        assert state.stats.health == base_state.stats.health - 15
        assert state.log[-1].text == RECOVERY_TEXT
        assert not loop.critical

    def test_critical_resolved_before_game_over(self, base_state):
        narrator = StubNarrator(make_outcome(health=-200, glitch=200))
        loop = _loop(narrator=narrator, state=base_state)
        loop.submit("overclock everything")
        assert loop.critical
        assert not loop.session_over
        loop.recover()
        assert loop.session_over
        assert loop.state.log[-1].text == GAME_OVER_TEXT

    def test_recovery_penalty_can_end_session(self):
        state = GameState(stats=PlayerStats(health=10, glitch_level=100)).with_log("boot")
        loop = _loop(state=state)
        loop.recover()
        assert loop.state.stats.health == 0
        assert loop.session_over

    def test_recover_when_stable_is_noop(self, base_state):
        loop = _loop(state=base_state)
        assert loop.recover() == base_state
