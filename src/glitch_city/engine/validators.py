"""Gatekeeping for player actions before they reach the narrative service."""
from __future__ import annotations

from glitch_city.models.state import GameState


def validate_action(
    state: GameState,
    raw_input: str,
    *,
    busy: bool = False,
    session_over: bool = False,
    critical: bool = False,
) -> tuple[bool, str]:
    """Validate whether an action can be taken right now."""
    if state.is_tutorial_active:
        return True, ""
    if not raw_input.strip():
        return False, "Type a command first."
    if busy:
        return False, "Awaiting server response..."
    if session_over:
        return False, "The system has crashed. Reboot to continue."
    if critical:
        return False, "!! KERNEL PANIC !! Input locked while the system recalibrates."
    return True, ""


def is_meta_command(raw_input: str, command: str) -> bool:
    return raw_input.strip().lower() == command
