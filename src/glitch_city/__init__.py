"""404 City: a glitch-metropolis text adventure driven by an LLM game master."""
from __future__ import annotations

__version__ = "0.1.0"
