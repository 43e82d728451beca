"""Abstract game-master LLM interface."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class ProviderError(RuntimeError):
    """The model could not be reached or produced no usable text."""


class LLMProvider(ABC):
    """A text model the narrative service can ask for one JSON outcome per turn.

    Implementations raise ``ProviderError`` instead of returning filler text so
    the caller can substitute its own fallback outcome.
    """

    @abstractmethod
    def generate(self, prompt: str, system_prompt: str | None = None,
                 temperature: float = 0.8, max_tokens: int = 512) -> str: ...

    @abstractmethod
    def generate_json(self, prompt: str, system_prompt: str | None = None,
                      temperature: float = 0.8, max_tokens: int = 512) -> dict[str, Any]: ...

    @abstractmethod
    def is_available(self) -> bool: ...

    @property
    @abstractmethod
    def model_name(self) -> str: ...
