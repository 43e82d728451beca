"""Heads-up display rendered before each prompt."""
from __future__ import annotations

from rich.console import Console
from rich.text import Text

from glitch_city.mechanics.stalker import proximity_status
from glitch_city.models.state import STAT_MAX, GameState

_BAR_WIDTH = 10


def _bar(value: int, width: int = _BAR_WIDTH) -> str:
    filled = int(value / STAT_MAX * width)
    return f"{'█' * filled}{'░' * (width - filled)}"


class StatusBar:
    """Stats, objectives and threat readout for the current state."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render(self, state: GameState, critical: bool = False) -> None:
        stats = state.stats
        line = Text()
        health_color = "green" if stats.health > 50 else ("yellow" if stats.health > 25 else "red")
        line.append("HEALTH ", style="bold")
        line.append(f"[{_bar(stats.health)}] {stats.health:>3}%", style=health_color)
        line.append(" | ", style="dim")
        line.append("ARMOR ", style="bold")
        line.append(f"[{_bar(stats.armor)}] {stats.armor:>3}%", style="blue")
        line.append(" | ", style="dim")
        line.append("GLITCH ", style="bold")
        glitch_style = "bold red blink" if critical else "magenta"
        line.append(f"[{_bar(stats.glitch_level)}] {stats.glitch_level:>3}%", style=glitch_style)
        self.console.print(line)

        objectives = Text()
        objectives.append("MISSION ", style="bold yellow")
        objectives.append(state.mission, style="yellow")
        if state.secondary_mission:
            objectives.append("\nSIDE    ", style="bold magenta")
            objectives.append(state.secondary_mission, style="magenta")
        self.console.print(objectives)

        if state.current_enemy is not None:
            threat = Text()
            threat.append("!! ENGAGED !! ", style="bold red")
            threat.append(state.current_enemy.name, style="bold white")
            threat.append(f": {state.current_enemy.description}", style="dim")
            self.console.print(threat)
        elif state.stalking_enemy is not None:
            stalker = state.stalking_enemy
            threat = Text()
            threat.append("SIGNAL ", style="bold yellow")
            threat.append(stalker.enemy.name, style="bold white")
            threat.append(f" | Status: {proximity_status(stalker.distance)}", style="yellow")
            threat.append(f" | {stalker.ai_state.value.upper()}", style="dim")
            self.console.print(threat)
