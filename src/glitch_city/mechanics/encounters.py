"""Enemy catalog, combat resolution and stalker spawning."""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Optional

from glitch_city.mechanics.stats import VICTORY_GLITCH_REDUCTION, adjust_glitch
from glitch_city.models.llm_contract import EncounterUpdate
from glitch_city.models.state import AiState, Enemy, PlayerStats, StalkingEnemy

ENEMY_CATALOG: tuple[Enemy, ...] = (
    Enemy(name="Corrupted Garbage Collector",
          description="It's trying to 'clean up' your existence by freeing your memory. Permanently."),
    Enemy(name="Rogue Firewall Daemon",
          description="Blocks all your packets of thought with an IMPENETRABLE WALL OF `DENY ALL`."),
    Enemy(name="Lag Spike Elemental",
          description="A being of pure latency. Just looking at it makes reality stutter."),
    Enemy(name="Null Pointer Exception",
          description="A terrifying void that threatens to dereference your very being into nothingness."),
    Enemy(name="[object Object]",
          description="An amorphous, unhelpful entity that resists all attempts at identification."),
    Enemy(name="Syntax Serpent",
          description="A writhing mass of broken code. Its attacks don't just damage, they unravel "
                      "your reality, increasing your Glitch Level."),
    Enemy(name="Cache Phantom",
          description="An ethereal anomaly that flickers in and out of existence. Conventional attacks "
                      "seem to pass right through it, but a targeted 'DEBUG' might disrupt its state."),
    Enemy(name="Blue Screen Behemoth",
          description="A colossal, monolithic error message given terrifying form. Its very presence is "
                      "a critical failure, and its attacks are devastating system crashes."),
    Enemy(name="Recursive Rat King",
          description="A chittering swarm of processes endlessly calling themselves. They overwhelm with "
                      "sheer numbers, making it difficult to flee or focus on a single target."),
    Enemy(name="Zombie Process",
          description="An un-killable process that has defied termination. It moves slowly but "
                      "relentlessly, draining the life out of everything it touches."),
    Enemy(name="Cross-Site Script Kiddie",
          description="A digital gremlin riding a pop-up ad. It doesn't hit hard, but its chaotic "
                      "injections of code scramble your senses, rapidly increasing your Glitch Level."),
    Enemy(name="Floating Point Phantom",
          description="A shimmering distortion of mathematical certainty. Its attacks are unpredictable, "
                      "sometimes barely scratching you, other times causing catastrophic rounding "
                      "errors to your health."),
    Enemy(name="Polymorphic Virus",
          description="A constantly shifting entity of viral code. Just when you think you understand "
                      "its pattern, it mutates into something new."),
)

COMBAT_ACTIONS = ("ATTACK", "DEBUG", "FLEE")

SPAWN_DISTANCE = 4
# Stalkers spawn with probability glitch / 300.
SPAWN_CHANCE_DIVISOR = 300


@dataclass
class EncounterResolution:
    current_enemy: Optional[Enemy]
    stats: PlayerStats
    ended: bool = False
    log_texts: list[str] = field(default_factory=list)


def resolve_encounter(enemy: Enemy, stats: PlayerStats, update: EncounterUpdate) -> EncounterResolution:
    """Apply one combat outcome. Defeat takes precedence over a successful flee."""
    if update.enemy_defeated:
        return EncounterResolution(
            current_enemy=None,
            stats=adjust_glitch(stats, -VICTORY_GLITCH_REDUCTION),
            ended=True,
            log_texts=[
                f":: TARGET_DELETED :: You defeated the {enemy.name}! Glitch level stabilizing."
            ],
        )
    if update.flee_success:
        return EncounterResolution(
            current_enemy=None,
            stats=stats,
            ended=True,
            log_texts=[":: ESCAPE_VECTOR_CALCULATED :: You successfully fled."],
        )
    return EncounterResolution(current_enemy=enemy, stats=stats)


def spawn_chance(glitch_level: int) -> float:
    return glitch_level / SPAWN_CHANCE_DIVISOR


def maybe_spawn_stalker(
    glitch_level: int, rng: random.Random,
) -> tuple[Optional[StalkingEnemy], list[str]]:
    """Roll for a new stalker at the edge of detection range."""
    if rng.random() >= spawn_chance(glitch_level):
        return None, []
    enemy = rng.choice(ENEMY_CATALOG)
    stalker = StalkingEnemy(enemy=enemy, distance=SPAWN_DISTANCE, ai_state=AiState.PATROLLING)
    return stalker, [
        f":: UNEXPECTED_PROCESS :: You detect a {enemy.name} patrolling in the distance."
    ]
