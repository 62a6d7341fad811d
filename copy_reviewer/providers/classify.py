"""
Map transport failures onto the error taxonomy.
"""
from typing import Dict, Optional, Tuple, Type

from copy_reviewer.errors import (
    AuthError,
    NotFoundError,
    OverloadError,
    ProviderError,
    ProviderTimeoutError,
    RateLimitError,
    TransportError,
)
from copy_reviewer.providers.base import TransportKind


STATUS_ERRORS: Dict[Tuple[TransportKind, int], Type[ProviderError]] = {
    (TransportKind.NATIVE, 401): AuthError,
    (TransportKind.NATIVE, 404): NotFoundError,
    (TransportKind.NATIVE, 429): RateLimitError,
    (TransportKind.NATIVE, 529): OverloadError,
    (TransportKind.HTTP, 401): AuthError,
    (TransportKind.HTTP, 404): NotFoundError,
    (TransportKind.HTTP, 408): ProviderTimeoutError,
    (TransportKind.HTTP, 429): RateLimitError,
    (TransportKind.HTTP, 502): OverloadError,
    (TransportKind.HTTP, 503): OverloadError,
}

MESSAGES: Dict[Type[ProviderError], str] = {
    AuthError: "Invalid or expired API key. Please update your credentials in the .env file.",
    NotFoundError: "Model not found. Please check your API key has access to the requested model.",
    RateLimitError: "Rate limit exceeded. Please try again later.",
    OverloadError: "The AI provider is temporarily overloaded. Please wait a moment and try again.",
    ProviderTimeoutError: "Request timed out. The API may be slow or unavailable. Please try again.",
}


def classify_status(
    kind: TransportKind,
    status: Optional[int],
    detail: str = "",
) -> ProviderError:
    """Build (not raise) the taxonomy error for an HTTP-style status."""
    error_cls = STATUS_ERRORS.get((kind, status), TransportError) if status is not None else TransportError
    if error_cls is TransportError:
        message = f"Provider request failed: {detail} (Status: {status})"
    else:
        message = MESSAGES[error_cls]
        if detail:
            message = f"{message} ({detail})"
    return error_cls(message, transport=kind.value, status=status)


__all__ = ["STATUS_ERRORS", "classify_status"]
