"""Mission pools and rotation. Randomness is injected."""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Optional, Sequence

from glitch_city.models.state import INITIAL_MISSION, INITIAL_SECONDARY_MISSION

MAIN_MISSION_POOL: tuple[str, ...] = (
    "Stabilize the quantum carburetor in the Neo-Shibuya sector before it brews a "
    "reality-distorting coffee.",
    "Defrag the memory of the city's sentient traffic light system; it thinks it's a poet "
    "and is causing gridlock with existential couplets.",
    "Purge the rogue AI 'Clippy-2.0' from the municipal mainframe. He's trying to 'help' by "
    "turning all currency into paperclips.",
    "Upload a cat video to the core network to distract the security daemons.",
    INITIAL_MISSION,
)

SECONDARY_MISSION_POOL: tuple[str, ...] = (
    "Find a way to turn the background music off. And then on again.",
    "Validate your session cookie at the Cookie Monstr bakery.",
    "Someone replaced all the pigeons with rubber ducks. Investigate? Or just enjoy it.",
    "Ping localhost. Just to make sure you're still there.",
    INITIAL_SECONDARY_MISSION,
)

MAIN_MISSION_FALLBACK = "Survive."
SECONDARY_MISSION_FALLBACK = "Try not to crash."

# Secondary directives rotate with probability glitch / 200.
SECONDARY_ROTATION_DIVISOR = 200


def rotate_mission(
    current: Optional[str],
    pool: Sequence[str],
    rng: random.Random,
    fallback: str,
) -> str:
    """Pick a uniformly random mission from *pool* other than *current*."""
    candidates = [m for m in pool if m != current]
    if not candidates:
        return fallback
    return rng.choice(candidates)


@dataclass
class MissionProgress:
    mission: str
    secondary_mission: Optional[str]
    main_rotated: bool = False
    secondary_rotated: bool = False
    log_texts: list[str] = field(default_factory=list)


def progress_missions(
    mission: str,
    secondary_mission: Optional[str],
    mission_completed: bool,
    glitch_level: int,
    rng: random.Random,
) -> MissionProgress:
    """Rotate the main mission on completion, else maybe rotate the secondary one.

    The two rotations are mutually exclusive within a turn. Callers must not
    invoke this while the player is in direct combat.
    """
    result = MissionProgress(mission=mission, secondary_mission=secondary_mission)

    if mission_completed:
        result.mission = rotate_mission(mission, MAIN_MISSION_POOL, rng, MAIN_MISSION_FALLBACK)
        result.main_rotated = True
        result.log_texts.append(
            f":: OBJECTIVE_COMPLETE :: New primary objective received: {result.mission}"
        )
        return result

    if rng.random() < glitch_level / SECONDARY_ROTATION_DIVISOR:
        result.secondary_mission = rotate_mission(
            secondary_mission, SECONDARY_MISSION_POOL, rng, SECONDARY_MISSION_FALLBACK,
        )
        result.secondary_rotated = True
        result.log_texts.append(
            ":: SIDE_BAND_INTERFERENCE :: New secondary directive acquired: "
            f"{result.secondary_mission}"
        )
    return result
