"""Game-master narrative service: one LLM call per turn, validated into a GameOutcome."""
from __future__ import annotations

import logging
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from glitch_city.llm.output_parser import OutputParser
from glitch_city.llm.provider import LLMProvider
from glitch_city.mechanics.encounters import COMBAT_ACTIONS
from glitch_city.mechanics.stalker import proximity_status
from glitch_city.models.llm_contract import GameOutcome, connection_lost_outcome
from glitch_city.models.state import GameState

logger = logging.getLogger(__name__)

PROMPTS_DIR = Path(__file__).parent / "prompts"


class NarrativeService:
    """Asks the game master what happens next. Never raises; failures become the fallback outcome."""

    def __init__(self, llm: LLMProvider, temperature: float = 0.8, max_tokens: int = 512):
        self.llm = llm
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.parser = OutputParser()
        self._jinja_env: Environment | None = None

    @property
    def jinja_env(self) -> Environment:
        if self._jinja_env is None:
            self._jinja_env = Environment(
                loader=FileSystemLoader(str(PROMPTS_DIR)),
                autoescape=False,
                trim_blocks=True,
                lstrip_blocks=True,
            )
        return self._jinja_env

    def build_prompt(self, state: GameState, action: str) -> tuple[str, str]:
        system_prompt = self.jinja_env.get_template("game_master_system.j2").render()
        recent = state.recent_log_texts(2)
        stalker = state.stalking_enemy
        prompt = self.jinja_env.get_template("game_master_turn.j2").render(
            state=state,
            action=action,
            combat_actions=", ".join(f"'{a}'" for a in COMBAT_ACTIONS),
            stalker_status=proximity_status(stalker.distance) if stalker else None,
            previous_event=recent[-2] if len(recent) > 1 else "System boot...",
            latest_event=recent[-1] if recent else "Awaiting input...",
        )
        return system_prompt, prompt

    def get_outcome(self, state: GameState, action: str) -> GameOutcome:
        try:
            system_prompt, prompt = self.build_prompt(state, action)
            raw = self.llm.generate_json(
                prompt, system_prompt, temperature=self.temperature, max_tokens=self.max_tokens,
            )
            outcome = self.parser.parse_outcome(raw)
        except Exception as e:
            logger.warning(f"Game master call failed, substituting connection-lost outcome: {e}")
            return connection_lost_outcome()
        logger.debug("Outcome for %r: %s", action, outcome.model_dump(by_alias=True))
        return outcome
