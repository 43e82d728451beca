"""Drives GameApp.run with scripted input and a recording display."""
from __future__ import annotations

from conftest import NEVER, ScriptedRandom, StubNarrator, make_outcome
from glitch_city.app import GameApp
from glitch_city.engine.transition import GAME_OVER_TEXT, REBOOT_TEXT
from glitch_city.engine.turn_loop import TurnLoop
from glitch_city.mechanics.ambience import AmbienceIntent
from glitch_city.models.state import Enemy


class RecordingDisplay:
    def __init__(self, inputs):
        self.inputs = list(inputs)
        self.shown: list[str] = []
        self.events: list[str] = []
        self.prompts: list[str] = []

    def show_title_screen(self):
        self.events.append("title")

    def show_log_entries(self, entries):
        self.shown.extend(e.text for e in entries)

    def show_combat_options(self, options):
        self.events.append("combat_options")

    def show_critical(self):
        self.events.append("critical")

    def show_game_over(self):
        self.events.append("game_over")

    def show_error(self, message):
        self.events.append(f"error:{message}")

    def show_info(self, message):
        self.events.append(f"info:{message}")

    def get_input(self, prompt="> "):
        self.prompts.append(prompt)
        return self.inputs.pop(0)


class SilentStatusBar:
    def __init__(self):
        self.renders = 0

    def render(self, state, critical=False):
        self.renders += 1


def _app(tmp_path, inputs, *outcomes, tutorial_done=True):
    app = GameApp(config={
        "storage": {"db_path": str(tmp_path / "city.db")},
        "game": {"critical_cooldown_seconds": 0},
    })
    if tutorial_done:
        app.settings.mark_tutorial_completed()
    app._display = RecordingDisplay(inputs)
    app._status_bar = SilentStatusBar()
    app._turn_loop = TurnLoop(
        narrator=StubNarrator(*outcomes),
        rng=ScriptedRandom([NEVER] * 50),
        settings=app.settings,
    )
    return app


class TestRun:
    def test_skip_tutorial_then_play(self, tmp_path):
        app = _app(tmp_path, ["skip", "look around", "quit"],
                   make_outcome("Neon rain falls upward."), tutorial_done=False)
        app.run()
        shown = app.display.shown
        assert "> look around" in shown
        assert "Neon rain falls upward." in shown
        assert app.settings.has_completed_tutorial()
        assert "Type 'continue'..." in app.display.prompts[0]

    def test_quit_immediately(self, tmp_path):
        app = _app(tmp_path, ["exit"])
        app.run()
        assert app.display.events[0] == "title"
        assert app.display.events[-1].startswith("info:")
        assert app.status_bar.renders == 1

    def test_death_and_decline_reboot(self, tmp_path):
        app = _app(tmp_path, ["jump off the roof", "n"], make_outcome(health=-500))
        app.run()
        assert "game_over" in app.display.events
        assert app.display.shown[-1] == GAME_OVER_TEXT

    def test_death_and_reboot(self, tmp_path):
        app = _app(tmp_path, ["jump off the roof", "y", "q"], make_outcome(health=-500))
        app.run()
        assert app.turn_loop.state.stats.health == 100
        assert REBOOT_TEXT in app.display.shown

    def test_kernel_panic_recovers(self, tmp_path):
        app = _app(tmp_path, ["divide by zero", "quit"], make_outcome(glitch=500))
        app.run()
        assert "critical" in app.display.events
        assert app.turn_loop.state.stats.glitch_level == 75
        assert app.ambience == AmbienceIntent.NORMAL

    def test_ambience_tracks_state(self, tmp_path):
        app = _app(tmp_path, [])
        app.turn_loop.boot()
        app._update_ambience()
        assert app.ambience == AmbienceIntent.NORMAL
        app.turn_loop.state = app.turn_loop.state.model_copy(
            update={"current_enemy": Enemy(name="Zombie Process")}
        )
        app._update_ambience()
        assert app.ambience == AmbienceIntent.COMBAT


class TestShowNewEntries:
    def test_only_fresh_entries(self, tmp_path):
        app = _app(tmp_path, [])
        loop = app.turn_loop
        loop.boot()
        app._show_new_entries()
        first = list(app.display.shown)
        loop.state = loop.state.with_log("a new line")
        app._show_new_entries()
        assert app.display.shown == first + ["a new line"]

    def test_replaced_log_shown_in_full(self, tmp_path):
        app = _app(tmp_path, [])
        app.turn_loop.boot()
        app._show_new_entries()
        app.turn_loop.reset()
        app.display.shown.clear()
        app._show_new_entries()
        assert app.display.shown == [REBOOT_TEXT]
