"""
HTTP transport: OpenAI-style chat completions endpoint (OpenRouter by default).

Model ids are namespaced by vendor, e.g. ``anthropic/claude-sonnet-4-5:beta``
or ``openai/gpt-4o``.
"""
import logging
import time
from typing import Optional

import httpx

from copy_reviewer.config import DEFAULT_OPENROUTER_URL
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


class ChatCompletionsTransport(Transport):
    kind = TransportKind.HTTP

    def __init__(
        self,
        api_key: Optional[str],
        *,
        url: str = DEFAULT_OPENROUTER_URL,
        timeout: float = 60.0,
        max_tokens: int = 3000,
        site_url: str = "",
        site_name: str = "",
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._api_key = api_key
        self._url = url
        self._timeout = timeout
        self._max_tokens = max_tokens
        self._site_url = site_url
        self._site_name = site_name
        self._client = client or httpx.Client(timeout=httpx.Timeout(timeout, connect=10.0))

    def _headers(self) -> dict:
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        if self._site_url:
            headers["HTTP-Referer"] = self._site_url
        if self._site_name:
            headers["X-Title"] = self._site_name
        return headers

    def call(
        self,
        operation: Operation,
        system_prompt: str,
        user_prompt: str,
        prefill: str,
        model: str,
    ) -> Completion:
        if not self._api_key:
            raise AuthError(
                "OPENROUTER_API_KEY is not configured. Please add it to your .env file.",
                transport=self.kind.value,
            )

        log.info(
            "Chat completions request | op=%s model=%s system_len=%d user_len=%d timeout=%ss",
            operation.value,
            model,
            len(system_prompt),
            len(user_prompt),
            self._timeout,
        )
        payload = {
            "model": model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
                {"role": "assistant", "content": prefill},
            ],
            "max_tokens": self._max_tokens,
            "temperature": OPERATION_TEMPERATURE[operation],
        }

        started = time.time()
        try:
            resp = self._client.post(self._url, headers=self._headers(), json=payload)
        except httpx.TimeoutException as exc:
            log.error("Chat completions timeout | op=%s model=%s", operation.value, model)
            raise ProviderTimeoutError(
                f"Request timed out after {self._timeout:g} seconds. "
                "The API may be slow or unavailable. Please try again.",
                transport=self.kind.value,
            ) from exc
        except httpx.HTTPError as exc:
            log.error("Chat completions transport error | op=%s error=%s", operation.value, exc)
            raise TransportError(
                f"Failed to reach {self._url}: {exc}",
                transport=self.kind.value,
            ) from exc
        elapsed_ms = int((time.time() - started) * 1000)

        if not resp.is_success:
            raise self._status_error(operation, resp.status_code, self._error_detail(resp))

        try:
            data = resp.json()
        except ValueError as exc:
            raise TransportError(
                "Provider returned a non-JSON body",
                transport=self.kind.value,
                status=resp.status_code,
            ) from exc
        if not isinstance(data, dict):
            raise TransportError(
                "Provider returned an unexpected body",
                transport=self.kind.value,
                status=resp.status_code,
            )

        # Upstream failures can arrive as 200 with an error object.
        if "error" in data and not data.get("choices"):
            error = data["error"] or {}
            code = error.get("code") if isinstance(error, dict) else None
            message = error.get("message", "") if isinstance(error, dict) else str(error)
            raise self._status_error(operation, code if isinstance(code, int) else None, message)

        try:
            choice = data["choices"][0]
            text = choice["message"]["content"] or ""
        except (KeyError, IndexError, TypeError) as exc:
            raise TransportError(
                "Provider response is missing choices[0].message.content",
                transport=self.kind.value,
                status=resp.status_code,
            ) from exc

        finish_reason = choice.get("finish_reason") or "stop"
        log.info(
            "Chat completions response | op=%s elapsed=%dms finish_reason=%s length=%d",
            operation.value,
            elapsed_ms,
            finish_reason,
            len(text),
        )

        if finish_reason == "length":
            log.warning("Response truncated by max_tokens | op=%s", operation.value)
            raise TruncatedResponseError(
                "Response was incomplete. The AI model hit the token limit. "
                "Please try with a shorter email.",
                transport=self.kind.value,
            )

        return Completion(
            text=text,
            model=data.get("model") or model,
            transport=self.kind,
            stop_reason=finish_reason,
            elapsed_ms=elapsed_ms,
        )

    def _status_error(self, operation: Operation, status: Optional[int], detail: str):
        error = classify_status(self.kind, status, detail)
        log.error(
            "Chat completions error | op=%s status=%s classified=%s detail=%s",
            operation.value,
            status,
            type(error).__name__,
            detail,
        )
        return error

    @staticmethod
    def _error_detail(resp: httpx.Response) -> str:
        try:
            body = resp.json()
        except ValueError:
            return resp.text[:300]
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        return resp.text[:300]

    def close(self) -> None:
        self._client.close()


__all__ = ["ChatCompletionsTransport"]
