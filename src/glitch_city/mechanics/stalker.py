"""Stalking-enemy pursuit state machine.

A stalker sits on an abstract distance scale (4 when first detected). Each
turn its distance moves by a delta chosen by the narrative service, or by a
default derived from its AI state:

    patrolling -> 0 per turn unless told otherwise
    hunting    -> -1 per turn unless told otherwise

Terminal transitions:

    distance <= 0 -> engaged (the stalker becomes the current enemy)
    distance >  5 -> evaded  (the stalker is dropped)
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from glitch_city.models.llm_contract import StalkerUpdate
from glitch_city.models.state import AiState, Enemy, StalkingEnemy

ENGAGE_DISTANCE = 0
EVADE_DISTANCE = 5
HUNTING_CLOSE_RATE = -1


class StalkerOutcome(str, Enum):
    PURSUING = "pursuing"
    ENGAGED = "engaged"
    EVADED = "evaded"


def proximity_status(distance: int) -> str:
    """Qualitative proximity bucket for a stalker distance."""
    if distance >= 4:
        return "Distant Signal"
    if distance == 3:
        return "Approaching Anomaly"
    if distance == 2:
        return "Dangerously Close"
    if distance == 1:
        return "Threat Imminent"
    return "Contact Unknown"


def default_distance_change(ai_state: AiState) -> int:
    return HUNTING_CLOSE_RATE if ai_state == AiState.HUNTING else 0


@dataclass
class StalkerStep:
    outcome: StalkerOutcome
    stalking_enemy: Optional[StalkingEnemy] = None
    engaged_enemy: Optional[Enemy] = None
    log_texts: list[str] = field(default_factory=list)


def advance_stalker(stalker: StalkingEnemy, update: Optional[StalkerUpdate] = None) -> StalkerStep:
    """Advance *stalker* by one turn. Must not be called during direct combat."""
    name = stalker.enemy.name
    distance_change = update.distance_change if update else None
    if distance_change is None:
        distance_change = default_distance_change(stalker.ai_state)
    new_ai_state = update.new_ai_state if update and update.new_ai_state else stalker.ai_state
    narration = update.description if update else None

    texts: list[str] = []
    if narration:
        texts.append(f":: {name.upper()} :: {narration}")
    if stalker.ai_state == AiState.PATROLLING and new_ai_state == AiState.HUNTING:
        texts.append(f":: TARGET_ACQUIRED :: The {name} has locked onto your signal!")

    new_distance = stalker.distance + distance_change

    if new_distance <= ENGAGE_DISTANCE:
        texts.append(f":: CONTACT IMMINENT :: The {name} engages you!")
        return StalkerStep(StalkerOutcome.ENGAGED, engaged_enemy=stalker.enemy, log_texts=texts)

    if new_distance > EVADE_DISTANCE:
        texts.append(f":: THREAT EVADED :: You lost the {name} in the city's static.")
        return StalkerStep(StalkerOutcome.EVADED, log_texts=texts)

    old_status = proximity_status(stalker.distance)
    new_status = proximity_status(new_distance)
    if old_status != new_status and not narration:
        texts.append(f":: PROXIMITY ALERT :: The {name} is now {new_status}.")

    moved = stalker.model_copy(update={"distance": new_distance, "ai_state": new_ai_state})
    return StalkerStep(StalkerOutcome.PURSUING, stalking_enemy=moved, log_texts=texts)
