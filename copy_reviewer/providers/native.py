"""
Native transport: Anthropic Messages API through the official SDK.
"""
import logging
import time
from typing import Any, Optional

import anthropic

from copy_reviewer.errors import (
    AuthError,
    ProviderTimeoutError,
    TransportError,
    TruncatedResponseError,
)
from copy_reviewer.providers.base import (
    OPERATION_TEMPERATURE,
    Completion,
    Operation,
    Transport,
    TransportKind,
)
from copy_reviewer.providers.classify import classify_status


log = logging.getLogger("copy_review_providers")


class NativeTransport(Transport):
    kind = TransportKind.NATIVE

    def __init__(
        self,
        api_key: Optional[str],
        *,
        timeout: float = 60.0,
        max_tokens: int = 3000,
        client: Optional[Any] = None,
    ) -> None:
        if client is None:
            if not api_key:
                raise AuthError(
                    "ANTHROPIC_API_KEY is not configured. Please add it to your .env file.",
                    transport=self.kind.value,
                )
            # Failures go straight back to the caller, who may resubmit.
            client = anthropic.Anthropic(api_key=api_key, timeout=timeout, max_retries=0)
        self._client = client
        self._timeout = timeout
        self._max_tokens = max_tokens

    def call(
        self,
        operation: Operation,
        system_prompt: str,
        user_prompt: str,
        prefill: str,
        model: str,
    ) -> Completion:
        log.info(
            "Anthropic request | op=%s model=%s system_len=%d user_len=%d timeout=%ss",
            operation.value,
            model,
            len(system_prompt),
            len(user_prompt),
            self._timeout,
        )
        started = time.time()
        try:
            message = self._client.messages.create(
                model=model,
                max_tokens=self._max_tokens,
                temperature=OPERATION_TEMPERATURE[operation],
                system=[
                    {
                        "type": "text",
                        "text": system_prompt,
                        "cache_control": {"type": "ephemeral"},
                    }
                ],
                messages=[
                    {"role": "user", "content": user_prompt},
                    {"role": "assistant", "content": prefill},
                ],
            )
        except anthropic.APITimeoutError as exc:
            log.error("Anthropic timeout | op=%s model=%s", operation.value, model)
            raise ProviderTimeoutError(
                f"Request timed out after {self._timeout:g} seconds. "
                "The API may be slow or unavailable. Please try again.",
                transport=self.kind.value,
            ) from exc
        except anthropic.APIStatusError as exc:
            error = classify_status(self.kind, exc.status_code, exc.message)
            log.error(
                "Anthropic error | op=%s model=%s status=%s classified=%s",
                operation.value,
                model,
                exc.status_code,
                type(error).__name__,
            )
            raise error from exc
        except anthropic.APIConnectionError as exc:
            log.error("Anthropic connection error | op=%s error=%s", operation.value, exc)
            raise TransportError(
                f"Failed to reach the Anthropic API: {exc}",
                transport=self.kind.value,
            ) from exc
        elapsed_ms = int((time.time() - started) * 1000)

        text = message.content[0].text if message.content else ""
        stop_reason = message.stop_reason or ""
        log.info(
            "Anthropic response | op=%s elapsed=%dms stop_reason=%s length=%d",
            operation.value,
            elapsed_ms,
            stop_reason,
            len(text),
        )

        if stop_reason == "max_tokens":
            log.warning("Response truncated by max_tokens | op=%s", operation.value)
            raise TruncatedResponseError(
                "Response was incomplete. The AI model hit the token limit. "
                "Please try with a shorter email.",
                transport=self.kind.value,
            )

        return Completion(
            text=text,
            model=model,
            transport=self.kind,
            stop_reason=stop_reason,
            elapsed_ms=elapsed_ms,
        )

    def close(self) -> None:
        close = getattr(self._client, "close", None)
        if callable(close):
            close()


__all__ = ["NativeTransport"]
