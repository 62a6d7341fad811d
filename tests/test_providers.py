import json
from types import SimpleNamespace

import anthropic
import httpx
import pytest

from copy_reviewer.config import Settings
from copy_reviewer.errors import (
    AuthError,
    ConfigurationError,
    NotFoundError,
    OverloadError,
    ProviderTimeoutError,
    RateLimitError,
    TransportError,
    TruncatedResponseError,
)
from copy_reviewer.providers import (
    ChatCompletionsTransport,
    NativeTransport,
    Operation,
    TransportKind,
    build_transport,
    classify_status,
    select_transport,
)
from copy_reviewer.providers.classify import STATUS_ERRORS


URL = "https://router.test/api/v1/chat/completions"


# =============================================================================
# Routing
# =============================================================================

@pytest.mark.parametrize(
    "model, provider, expected",
    [
        (None, "claude", TransportKind.NATIVE),
        ("claude-sonnet-4-5-20250929", "claude", TransportKind.NATIVE),
        ("openai/gpt-4o", "claude", TransportKind.HTTP),
        ("anthropic/claude-sonnet-4-5:beta", "claude", TransportKind.HTTP),
        (None, "openrouter", TransportKind.HTTP),
        ("claude-sonnet-4-5-20250929", "openrouter", TransportKind.HTTP),
    ],
)
def test_select_transport(model, provider, expected):
    assert select_transport(model, provider) is expected


def test_unknown_provider_is_a_configuration_error():
    with pytest.raises(ConfigurationError):
        select_transport("claude-3", "gemini")


def test_namespaced_model_wins_over_unknown_provider():
    assert select_transport("openai/gpt-4o", "gemini") is TransportKind.HTTP


def test_build_transport_uses_settings():
    settings = Settings(openrouter_api_key="k", openrouter_url=URL, max_tokens=1200)
    transport = build_transport(TransportKind.HTTP, settings)
    try:
        assert isinstance(transport, ChatCompletionsTransport)
        assert transport.kind is TransportKind.HTTP
    finally:
        transport.close()


# =============================================================================
# Status classification
# =============================================================================

@pytest.mark.parametrize("key, error_cls", sorted(STATUS_ERRORS.items(), key=lambda kv: (kv[0][0].value, kv[0][1])))
def test_status_table(key, error_cls):
    kind, status = key
    error = classify_status(kind, status, "upstream said no")
    assert type(error) is error_cls
    assert error.status == status
    assert error.transport == kind.value


def test_native_only_statuses_fall_through_on_http():
    assert type(classify_status(TransportKind.HTTP, 529)) is TransportError
    assert type(classify_status(TransportKind.NATIVE, 503)) is TransportError


def test_unmapped_status_carries_detail():
    error = classify_status(TransportKind.HTTP, 418, "teapot")
    assert isinstance(error, TransportError)
    assert str(error) == "Provider request failed: teapot (Status: 418)"


# =============================================================================
# Native transport
# =============================================================================

class StubMessages:
    def __init__(self, outcome):
        self.outcome = outcome
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def _message(text="73, \"sections\": []}", stop_reason="end_turn"):
    return SimpleNamespace(content=[SimpleNamespace(type="text", text=text)], stop_reason=stop_reason)


def _native(outcome):
    messages = StubMessages(outcome)
    transport = NativeTransport(None, client=SimpleNamespace(messages=messages), max_tokens=3000)
    return transport, messages


def _api_request():
    return httpx.Request("POST", "https://api.anthropic.com/v1/messages")


def _status_error(status):
    response = httpx.Response(status, request=_api_request())
    return anthropic.APIStatusError("upstream failure", response=response, body=None)


def test_native_request_shape():
    transport, messages = _native(_message())
    completion = transport.call(Operation.REVIEW, "system text", "user text", "{\"a\":", "claude-x")

    assert completion.text == "73, \"sections\": []}"
    assert completion.stop_reason == "end_turn"
    assert completion.transport is TransportKind.NATIVE
    kwargs = messages.kwargs
    assert kwargs["model"] == "claude-x"
    assert kwargs["max_tokens"] == 3000
    assert kwargs["temperature"] == 0.7
    assert kwargs["system"][0]["cache_control"] == {"type": "ephemeral"}
    assert kwargs["system"][0]["text"] == "system text"
    assert kwargs["messages"] == [
        {"role": "user", "content": "user text"},
        {"role": "assistant", "content": "{\"a\":"},
    ]


def test_native_improve_uses_higher_temperature():
    transport, messages = _native(_message())
    transport.call(Operation.IMPROVE, "s", "u", "p", "claude-x")
    assert messages.kwargs["temperature"] == 0.8


def test_native_truncation_is_an_error():
    transport, _ = _native(_message(stop_reason="max_tokens"))
    with pytest.raises(TruncatedResponseError):
        transport.call(Operation.REVIEW, "s", "u", "p", "claude-x")


@pytest.mark.parametrize(
    "status, error_cls",
    [(401, AuthError), (404, NotFoundError), (429, RateLimitError), (529, OverloadError), (500, TransportError)],
)
def test_native_status_errors(status, error_cls):
    transport, _ = _native(_status_error(status))
    with pytest.raises(error_cls) as info:
        transport.call(Operation.REVIEW, "s", "u", "p", "claude-x")
    assert info.value.status == status


def test_native_timeout():
    transport, _ = _native(anthropic.APITimeoutError(request=_api_request()))
    with pytest.raises(ProviderTimeoutError):
        transport.call(Operation.REVIEW, "s", "u", "p", "claude-x")


def test_native_connection_error():
    transport, _ = _native(anthropic.APIConnectionError(request=_api_request()))
    with pytest.raises(TransportError):
        transport.call(Operation.REVIEW, "s", "u", "p", "claude-x")


def test_native_without_key_fails_before_any_call():
    with pytest.raises(AuthError):
        NativeTransport(None)


# =============================================================================
# Chat completions transport
# =============================================================================

def _chat_body(content="73}", finish_reason="stop", model="openai/gpt-4o"):
    return {
        "model": model,
        "choices": [{"message": {"role": "assistant", "content": content}, "finish_reason": finish_reason}],
    }


def _http(handler, api_key="or-key"):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return ChatCompletionsTransport(
        api_key,
        url=URL,
        timeout=60.0,
        max_tokens=3000,
        site_url="https://example.test",
        site_name="Copy Reviewer",
        client=client,
    )


def test_http_request_shape():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["headers"] = request.headers
        seen["payload"] = json.loads(request.content)
        return httpx.Response(200, json=_chat_body())

    completion = _http(handler).call(Operation.IMPROVE, "sys", "usr", "{\"x\":\"", "openai/gpt-4o")

    assert completion.text == "73}"
    assert completion.model == "openai/gpt-4o"
    assert completion.transport is TransportKind.HTTP
    assert seen["url"] == URL
    assert seen["headers"]["authorization"] == "Bearer or-key"
    assert seen["headers"]["http-referer"] == "https://example.test"
    assert seen["headers"]["x-title"] == "Copy Reviewer"
    payload = seen["payload"]
    assert payload["model"] == "openai/gpt-4o"
    assert payload["max_tokens"] == 3000
    assert payload["temperature"] == 0.8
    assert [m["role"] for m in payload["messages"]] == ["system", "user", "assistant"]
    assert payload["messages"][2]["content"] == "{\"x\":\""


def test_http_length_finish_is_truncation():
    transport = _http(lambda request: httpx.Response(200, json=_chat_body(finish_reason="length")))
    with pytest.raises(TruncatedResponseError):
        transport.call(Operation.REVIEW, "s", "u", "p", "openai/gpt-4o")


@pytest.mark.parametrize(
    "status, error_cls",
    [
        (401, AuthError),
        (404, NotFoundError),
        (408, ProviderTimeoutError),
        (429, RateLimitError),
        (502, OverloadError),
        (503, OverloadError),
        (500, TransportError),
    ],
)
def test_http_status_errors(status, error_cls):
    transport = _http(lambda request: httpx.Response(status, json={"error": {"message": "nope"}}))
    with pytest.raises(error_cls) as info:
        transport.call(Operation.REVIEW, "s", "u", "p", "openai/gpt-4o")
    assert info.value.status == status
    assert "nope" in str(info.value)


def test_http_error_object_in_success_body():
    body = {"error": {"code": 429, "message": "slow down"}}
    transport = _http(lambda request: httpx.Response(200, json=body))
    with pytest.raises(RateLimitError):
        transport.call(Operation.REVIEW, "s", "u", "p", "openai/gpt-4o")


def test_http_missing_choices():
    transport = _http(lambda request: httpx.Response(200, json={"model": "m"}))
    with pytest.raises(TransportError):
        transport.call(Operation.REVIEW, "s", "u", "p", "openai/gpt-4o")


def test_http_non_json_body():
    transport = _http(lambda request: httpx.Response(200, text="<html>gateway</html>"))
    with pytest.raises(TransportError):
        transport.call(Operation.REVIEW, "s", "u", "p", "openai/gpt-4o")


def test_http_timeout():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(ProviderTimeoutError):
        _http(handler).call(Operation.REVIEW, "s", "u", "p", "openai/gpt-4o")


def test_http_connection_failure():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(TransportError):
        _http(handler).call(Operation.REVIEW, "s", "u", "p", "openai/gpt-4o")


def test_http_missing_key_makes_no_request():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json=_chat_body())

    with pytest.raises(AuthError):
        _http(handler, api_key=None).call(Operation.REVIEW, "s", "u", "p", "openai/gpt-4o")
    assert calls == []
