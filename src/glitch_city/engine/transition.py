"""Pure state transitions: (GameState, GameOutcome, rng) -> GameState.

Order of evaluation per turn:

1. Narrative line, then stats delta (clamped).
2. Combat resolution, when fighting and the outcome carries an encounter update.
3. Otherwise stalker pursuit, when a stalker is active and nothing is in direct combat.
4. Mission progression, when the turn did not start in combat.
5. Stalker spawning, when nothing is hunting the player and no fight ended this turn.

The connection-lost outcome stops after step 1.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from glitch_city.mechanics.encounters import maybe_spawn_stalker, resolve_encounter
from glitch_city.mechanics.missions import progress_missions
from glitch_city.mechanics.stalker import StalkerOutcome, advance_stalker
from glitch_city.mechanics.stats import apply_stats_change, is_critical, is_session_over, recovered_stats
from glitch_city.models.llm_contract import GameOutcome
from glitch_city.models.state import GameState

logger = logging.getLogger(__name__)

BOOT_LINES = (
    ":: [SYSTEM_BOOT] :: Welcome back to 404 City.",
    "HOW TO PLAY: Type actions like 'look around' or 'hack the terminal' and press EXECUTE.\n"
    "Type `help` for more commands.\n"
    "Type `tutorial` to replay the training simulation.",
)
REBOOT_TEXT = ":: SYSTEM REBOOT INITIATED ::"
KERNEL_PANIC_TEXT = ":: KERNEL_PANIC :: System integrity critical! Catastrophic failure imminent!"
RECOVERY_TEXT = ":: RECOVERY_MODE :: System integrity partially restored. User vitals compromised."
GAME_OVER_TEXT = ":: FATAL_EXCEPTION :: USER_INTEGRITY_COMPROMISED. SYSTEM_CRASHED."


@dataclass
class TransitionResult:
    state: GameState
    encounter_ended: bool = False
    engaged: bool = False
    evaded: bool = False
    spawned: bool = False
    mission_rotated: bool = False
    secondary_rotated: bool = False

    @property
    def session_over(self) -> bool:
        return is_session_over(self.state.stats)

    @property
    def critical(self) -> bool:
        return is_critical(self.state.stats)


def new_game_state() -> GameState:
    return GameState().with_log(*BOOT_LINES)


def reset_state() -> GameState:
    """Wholesale replacement used by the reboot command."""
    return GameState().with_log(REBOOT_TEXT)


def apply_outcome(state: GameState, outcome: GameOutcome, rng: random.Random) -> TransitionResult:
    """Compute the next state from one narrative outcome. *state* is left untouched."""
    if outcome.is_fallback:
        return apply_fallback(state, outcome)

    texts: list[str] = [outcome.description]
    stats = apply_stats_change(state.stats, outcome.stats_change)
    current_enemy = state.current_enemy
    stalking_enemy = state.stalking_enemy
    result = TransitionResult(state=state)

    if state.current_enemy is not None and outcome.encounter_update is not None:
        resolution = resolve_encounter(state.current_enemy, stats, outcome.encounter_update)
        current_enemy = resolution.current_enemy
        stats = resolution.stats
        result.encounter_ended = resolution.ended
        texts.extend(resolution.log_texts)
    elif state.stalking_enemy is not None and state.current_enemy is None:
        step = advance_stalker(state.stalking_enemy, outcome.stalker_update)
        texts.extend(step.log_texts)
        stalking_enemy = step.stalking_enemy
        if step.outcome == StalkerOutcome.ENGAGED:
            current_enemy = step.engaged_enemy
            result.engaged = True
        elif step.outcome == StalkerOutcome.EVADED:
            result.evaded = True

    mission = state.mission
    secondary_mission = state.secondary_mission
    # Gated on the turn's starting enemy: an engagement this turn still progresses missions.
    if state.current_enemy is None:
        progress = progress_missions(
            mission, secondary_mission, outcome.mission_completed, stats.glitch_level, rng,
        )
        mission = progress.mission
        secondary_mission = progress.secondary_mission
        result.mission_rotated = progress.main_rotated
        result.secondary_rotated = progress.secondary_rotated
        texts.extend(progress.log_texts)

        if state.stalking_enemy is None and stalking_enemy is None and not result.encounter_ended:
            stalking_enemy, spawn_texts = maybe_spawn_stalker(stats.glitch_level, rng)
            result.spawned = stalking_enemy is not None
            texts.extend(spawn_texts)

    next_state = state.model_copy(update={
        "mission": mission,
        "secondary_mission": secondary_mission,
        "stats": stats,
        "current_enemy": current_enemy,
        "stalking_enemy": stalking_enemy,
    }).with_log(*texts)
    result.state = next_state

    logger.debug(
        "Transition: stats=%s enemy=%s stalker=%s ended=%s engaged=%s evaded=%s spawned=%s",
        stats, current_enemy and current_enemy.name,
        stalking_enemy and (stalking_enemy.enemy.name, stalking_enemy.distance),
        result.encounter_ended, result.engaged, result.evaded, result.spawned,
    )
    return result


def apply_fallback(state: GameState, outcome: GameOutcome) -> TransitionResult:
    """Stats delta and narrative line only. Enemies and missions stay as they were."""
    stats = apply_stats_change(state.stats, outcome.stats_change)
    next_state = state.model_copy(update={"stats": stats}).with_log(outcome.description)
    return TransitionResult(state=next_state)


def enter_critical(state: GameState) -> GameState:
    return state.with_log(KERNEL_PANIC_TEXT)


def recover_from_critical(state: GameState) -> GameState:
    """Kernel-panic recovery: glitch back to 75, health -15 (clamped)."""
    recovered = state.model_copy(update={"stats": recovered_stats(state.stats)})
    return recovered.with_log(RECOVERY_TEXT)


def enter_game_over(state: GameState) -> GameState:
    return state.with_log(GAME_OVER_TEXT)
