"""
Provider transport interface and routing.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from copy_reviewer.errors import ConfigurationError


class Operation(str, Enum):
    REVIEW = "review"
    IMPROVE = "improve"


class TransportKind(str, Enum):
    NATIVE = "native"  # Anthropic SDK
    HTTP = "http"      # OpenAI-style chat completions endpoint


# Scoring wants determinism, rewriting wants variety.
OPERATION_TEMPERATURE = {
    Operation.REVIEW: 0.7,
    Operation.IMPROVE: 0.8,
}


@dataclass
class Completion:
    """Raw text returned by one provider call."""
    text: str
    model: str
    transport: TransportKind
    stop_reason: str = ""
    elapsed_ms: int = 0


class Transport(ABC):
    """One way of reaching a model. Exactly one network call per ``call``."""

    kind: TransportKind

    @abstractmethod
    def call(
        self,
        operation: Operation,
        system_prompt: str,
        user_prompt: str,
        prefill: str,
        model: str,
    ) -> Completion:
        """Send the prompts and return the completion text (without the prefill)."""

    def close(self) -> None:
        pass


def select_transport(model: Optional[str], provider: str) -> TransportKind:
    """Namespaced model ids ("vendor/model") always go over HTTP."""
    if (model and "/" in model) or provider == "openrouter":
        return TransportKind.HTTP
    if provider == "claude":
        return TransportKind.NATIVE
    raise ConfigurationError(f"Invalid AI provider specified: {provider!r}")


__all__ = [
    "Operation",
    "TransportKind",
    "OPERATION_TEMPERATURE",
    "Completion",
    "Transport",
    "select_transport",
]
