"""Main application bootstrap: wires the engine to the terminal."""
from __future__ import annotations

import logging
import random
import time
from pathlib import Path
from typing import Any

from glitch_city.engine.errors import GlitchCityError
from glitch_city.mechanics.ambience import AmbienceIntent, ambience_for
from glitch_city.mechanics.encounters import COMBAT_ACTIONS
from glitch_city.mechanics.tutorial import tutorial_placeholder
from glitch_city.models.state import LogEntry

logger = logging.getLogger(__name__)

QUIT_COMMANDS = frozenset({"quit", "exit", "q"})
DEFAULT_CRITICAL_COOLDOWN = 3.5


def _load_config() -> dict[str, Any]:
    """Load config.toml from project root."""
    import tomllib

    config_path = Path(__file__).parent.parent.parent / "config.toml"
    if config_path.exists():
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    return {}


def configure_logging(config: dict[str, Any]) -> None:
    log_cfg = config.get("logging", {})
    log_file = log_cfg.get("file", "logs/glitch_city.log")
    Path(log_file).parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=log_file,
        level=getattr(logging, str(log_cfg.get("level", "INFO")).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


class GameApp:
    """Main application class that bootstraps and runs the game."""

    def __init__(self, model_override: str | None = None, seed: int | None = None,
                 config: dict[str, Any] | None = None):
        self.config = config if config is not None else _load_config()
        self.model_override = model_override
        self.seed = seed if seed is not None else self.config.get("game", {}).get("seed")

        # Lazy-initialized components
        self._db = None
        self._settings = None
        self._llm = None
        self._narrator = None
        self._turn_loop = None
        self._display = None
        self._status_bar = None

        self._shown_log: tuple[LogEntry, ...] = ()
        self.ambience: AmbienceIntent | None = None

    # -- Component initialization (lazy) --

    @property
    def db(self):
        if self._db is None:
            from glitch_city.storage.database import Database

            db_path = self.config.get("storage", {}).get("db_path", "saves/glitch_city.db")
            self._db = Database(db_path)
            self._db.initialize()
        return self._db

    @property
    def settings(self):
        if self._settings is None:
            from glitch_city.storage.repos import SettingsRepo

            self._settings = SettingsRepo(self.db)
        return self._settings

    @property
    def llm(self):
        if self._llm is None:
            from glitch_city.llm.ollama_provider import OllamaProvider

            llm_cfg = self.config.get("llm", {})
            model = self.model_override or llm_cfg.get("model", "mistral")
            base_url = llm_cfg.get("base_url", "http://localhost:11434")
            num_ctx = llm_cfg.get("num_ctx", 4096)
            self._llm = OllamaProvider(model=model, base_url=base_url, num_ctx=num_ctx)
        return self._llm

    @property
    def narrator(self):
        if self._narrator is None:
            from glitch_city.llm.narrator import NarrativeService

            llm_cfg = self.config.get("llm", {})
            self._narrator = NarrativeService(
                self.llm,
                temperature=llm_cfg.get("temperature", 0.8),
                max_tokens=llm_cfg.get("max_tokens", 512),
            )
        return self._narrator

    @property
    def turn_loop(self):
        if self._turn_loop is None:
            from glitch_city.engine.turn_loop import TurnLoop

            self._turn_loop = TurnLoop(
                narrator=self.narrator,
                rng=random.Random(self.seed),
                settings=self.settings,
            )
        return self._turn_loop

    @property
    def display(self):
        if self._display is None:
            from glitch_city.cli.display import Display

            width = self.config.get("display", {}).get("width", 80)
            self._display = Display(width=width)
        return self._display

    @property
    def status_bar(self):
        if self._status_bar is None:
            from glitch_city.cli.status_bar import StatusBar

            self._status_bar = StatusBar(self.display.console)
        return self._status_bar

    # -- Public interface --

    def system_check(self) -> None:
        self.display.show_system_check(self.llm)

    def reset_tutorial(self) -> None:
        self.settings.clear_tutorial_completed()
        self.display.show_info("Tutorial will run on next launch.")

    def run(self, force_tutorial: bool = False) -> None:
        """Boot the session and run the input loop until the player quits."""
        self.display.show_title_screen()
        loop = self.turn_loop
        loop.boot(force_tutorial=force_tutorial)
        self._show_new_entries()

        while True:
            self._update_ambience()
            if not loop.state.is_tutorial_active:
                self.status_bar.render(loop.state, critical=loop.critical)
            if loop.state.in_combat and not loop.state.is_tutorial_active:
                self.display.show_combat_options(COMBAT_ACTIONS)

            prompt = tutorial_placeholder(loop.state) or "Type your command..."
            raw = self.display.get_input(f"{prompt}\n> ")
            command = raw.strip().lower()

            if command in QUIT_COMMANDS:
                self.display.show_info("Connection closed. See you in the static.")
                return
            if command == "reboot":
                loop.reset()
                self._show_new_entries()
                continue
            if command == "skip" and loop.state.is_tutorial_active:
                loop.skip_tutorial()
                self._show_new_entries()
                continue

            try:
                loop.submit(raw)
            except GlitchCityError as e:
                self.display.show_error(str(e))
                continue
            self._show_new_entries()

            if loop.critical:
                self._run_critical_recovery()
            if loop.session_over and not self._offer_reboot():
                return

    def _run_critical_recovery(self) -> None:
        self.display.show_critical()
        cooldown = self.config.get("game", {}).get("critical_cooldown_seconds", DEFAULT_CRITICAL_COOLDOWN)
        time.sleep(cooldown)
        self.turn_loop.recover()
        self._show_new_entries()

    def _offer_reboot(self) -> bool:
        self.display.show_game_over()
        answer = self.display.get_input("REBOOT SYSTEM? [y/N] > ").lower()
        if answer in ("y", "yes"):
            self.turn_loop.reset()
            self._show_new_entries()
            return True
        return False

    def _update_ambience(self) -> None:
        loop = self.turn_loop
        intent = ambience_for(loop.state, critical=loop.critical, session_over=loop.session_over)
        if intent != self.ambience:
            logger.debug("Ambience: %s -> %s", self.ambience, intent.value)
            self.ambience = intent

    def _show_new_entries(self) -> None:
        log = self.turn_loop.state.log
        shown = self._shown_log
        if log[: len(shown)] == shown:
            fresh = log[len(shown):]
        else:
            # State was replaced wholesale (reboot, tutorial restart).
            fresh = log
        self.display.show_log_entries(fresh)
        self._shown_log = log
