"""Provider adapter: routing plus one transport per backend."""

from copy_reviewer.config import Settings

from .base import Completion, Operation, Transport, TransportKind, select_transport
from .chat_completions import ChatCompletionsTransport
from .classify import classify_status
from .native import NativeTransport


def build_transport(kind: TransportKind, settings: Settings) -> Transport:
    if kind is TransportKind.NATIVE:
        return NativeTransport(
            settings.anthropic_api_key,
            timeout=settings.request_timeout,
            max_tokens=settings.max_tokens,
        )
    return ChatCompletionsTransport(
        settings.openrouter_api_key,
        url=settings.openrouter_url,
        timeout=settings.request_timeout,
        max_tokens=settings.max_tokens,
        site_url=settings.app_referer,
        site_name=settings.app_title,
    )


__all__ = [
    "Completion",
    "Operation",
    "Transport",
    "TransportKind",
    "select_transport",
    "classify_status",
    "build_transport",
    "NativeTransport",
    "ChatCompletionsTransport",
]
