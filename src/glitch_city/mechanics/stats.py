"""Bounded player stats: pure math, no I/O."""
from __future__ import annotations

from glitch_city.models.llm_contract import StatsChange
from glitch_city.models.state import STAT_MAX, STAT_MIN, PlayerStats

CRITICAL_GLITCH_THRESHOLD = 100
CRITICAL_RECOVERY_GLITCH = 75
CRITICAL_HEALTH_PENALTY = 15
VICTORY_GLITCH_REDUCTION = 5


def clamp(value: int, low: int = STAT_MIN, high: int = STAT_MAX) -> int:
    """Clamp *value* into [low, high]."""
    return max(low, min(high, value))


def apply_stats_change(stats: PlayerStats, change: StatsChange) -> PlayerStats:
    """Add each delta and clamp every stat independently."""
    return PlayerStats(
        health=clamp(stats.health + change.health),
        armor=clamp(stats.armor + change.armor),
        glitch_level=clamp(stats.glitch_level + change.glitch_level),
    )


def adjust_glitch(stats: PlayerStats, delta: int) -> PlayerStats:
    return stats.model_copy(update={"glitch_level": clamp(stats.glitch_level + delta)})


def is_session_over(stats: PlayerStats) -> bool:
    return stats.health <= STAT_MIN


def is_critical(stats: PlayerStats) -> bool:
    return stats.glitch_level >= CRITICAL_GLITCH_THRESHOLD


def recovered_stats(stats: PlayerStats) -> PlayerStats:
    """Stats after a kernel-panic recovery: glitch reset, health penalized."""
    return stats.model_copy(update={
        "glitch_level": CRITICAL_RECOVERY_GLITCH,
        "health": clamp(stats.health - CRITICAL_HEALTH_PENALTY),
    })
