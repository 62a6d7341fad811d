from importlib import import_module

import pytest
from fastapi.testclient import TestClient

from copy_reviewer.errors import (
    AuthError,
    NotFoundError,
    OverloadError,
    ProviderTimeoutError,
    RateLimitError,
    TransportError,
    TruncatedResponseError,
)
from tests.conftest import BODY, IMPROVE_OBJECT, REVIEW_OBJECT, SUBJECT


app_mod = import_module("copy_reviewer.api.app")


@pytest.fixture
def api(monkeypatch, make_service):
    """Start the app with a service backed by scripted answers."""

    def _start(*responses):
        service, transport = make_service(*responses)
        monkeypatch.setattr(app_mod, "build_service", lambda: service, raising=True)
        return transport

    return _start


def _payload(**extra):
    body = {"subjectLine": SUBJECT, "copy": BODY}
    body.update(extra)
    return body


# =============================================================================
# Health
# =============================================================================

def test_health(api):
    api()
    with TestClient(app_mod.app) as client:
        resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "provider": "claude"}


# =============================================================================
# Validation
# =============================================================================

@pytest.mark.parametrize(
    "path, body",
    [
        ("/api/review-copy", {"subjectLine": "", "copy": BODY}),
        ("/api/review-copy", {"subjectLine": SUBJECT, "copy": "   "}),
        ("/api/review-copy", {"copy": BODY}),
        ("/api/improve", {"subjectLine": SUBJECT, "copy": BODY}),
        ("/api/analyze-and-improve", {"subjectLine": SUBJECT}),
    ],
)
def test_invalid_requests_are_rejected_without_model_calls(api, path, body):
    transport = api()
    with TestClient(app_mod.app) as client:
        resp = client.post(path, json=body)
    assert resp.status_code == 422
    assert transport.calls == []


# =============================================================================
# Success paths
# =============================================================================

def test_review_copy(api, review_text):
    api(review_text)
    with TestClient(app_mod.app) as client:
        resp = client.post("/api/review-copy", json=_payload())
    assert resp.status_code == 200
    assert resp.json() == REVIEW_OBJECT


def test_review_copy_passes_model_through(api, review_text):
    transport = api(review_text)
    with TestClient(app_mod.app) as client:
        client.post("/api/review-copy", json=_payload(model="claude-haiku-4-5"))
    assert transport.calls[0]["model"] == "claude-haiku-4-5"


def test_improve(api, improve_text):
    api(improve_text)
    with TestClient(app_mod.app) as client:
        resp = client.post("/api/improve", json=_payload(review=REVIEW_OBJECT))
    assert resp.status_code == 200
    assert resp.json() == IMPROVE_OBJECT


def test_analyze_and_improve(api, review_text, improve_text):
    api(review_text, improve_text)
    with TestClient(app_mod.app) as client:
        resp = client.post("/api/analyze-and-improve", json=_payload())
    assert resp.status_code == 200
    data = resp.json()
    assert data["review"] == {"score": 73, "originalScore": 73}
    assert data["improved"]["score"] == 88
    assert data["improved"]["subjectLine"] == IMPROVE_OBJECT["improvedSubject"]
    assert data["original"] == {"subjectLine": SUBJECT, "copy": BODY}


# =============================================================================
# Failures
# =============================================================================

@pytest.mark.parametrize(
    "error, status",
    [
        (AuthError("bad key"), 401),
        (NotFoundError("no model"), 404),
        (RateLimitError("slow down"), 429),
        (OverloadError("busy"), 503),
        (ProviderTimeoutError("too slow"), 504),
        (TransportError("boom"), 500),
        (TruncatedResponseError("cut off"), 500),
    ],
)
def test_review_errors_map_to_status(api, error, status):
    api(error)
    with TestClient(app_mod.app) as client:
        resp = client.post("/api/review-copy", json=_payload())
    assert resp.status_code == status
    assert resp.json() == {"detail": {"error": "Review failed", "message": str(error)}}


def test_review_prose_is_not_an_error(api):
    api("Solid email, but the CTA could be softer.")
    with TestClient(app_mod.app) as client:
        resp = client.post("/api/review-copy", json=_payload())
    assert resp.status_code == 200
    assert resp.json()["overallScore"] == 50


def test_improve_parse_failure_is_500(api):
    api("Here's your improved email!")
    with TestClient(app_mod.app) as client:
        resp = client.post("/api/improve", json=_payload(review=REVIEW_OBJECT))
    assert resp.status_code == 500
    assert resp.json()["detail"]["error"] == "Improvement failed"


@pytest.mark.parametrize("error", [RateLimitError("slow down"), AuthError("bad key")])
def test_combined_failure_is_generic(api, error):
    api(error)
    with TestClient(app_mod.app) as client:
        resp = client.post("/api/analyze-and-improve", json=_payload())
    assert resp.status_code == 500
    assert resp.json() == {
        "detail": {
            "error": "Analysis failed",
            "message": "Failed to analyze and improve the copy. Please try again.",
        }
    }


def test_combined_failure_on_improve_step(api, review_text):
    transport = api(review_text, "not json")
    with TestClient(app_mod.app) as client:
        resp = client.post("/api/analyze-and-improve", json=_payload())
    assert resp.status_code == 500
    assert resp.json()["detail"]["error"] == "Analysis failed"
    assert len(transport.calls) == 2
