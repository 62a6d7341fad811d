"""
Shared fixtures: sample copy, canned model answers and a recording transport.
"""
import json
from typing import List, Optional

import pytest

from copy_reviewer.config import Settings
from copy_reviewer.errors import ProviderError
from copy_reviewer.providers import Completion, Operation, Transport, TransportKind
from copy_reviewer.service import CopyReviewService


SUBJECT = "Quick question about your sales process"
BODY = """Hey John,

Noticed you recently expanded to the midwest region. Congrats!

We helped a similar SaaS company reduce their sales cycle by 40%. They went from 90 to 54 days average close time.

Worth a quick chat to see if this applies to your team?

Best,
Alex"""

REVIEW_OBJECT = {
    "overallScore": 73,
    "sections": [
        {
            "title": "Subject Line Analysis",
            "content": "The subject line is moderate in length at 7 words",
            "items": [
                "Length is within optimal range",
                "Could benefit from more personalization",
            ],
            "highlight": {"title": "Key Improvement", "content": "Add company-specific personalization"},
        },
        {
            "title": "Call to Action",
            "content": "Soft ask, low commitment.",
            "items": ["Keep the question format"],
        },
    ],
}

IMPROVE_OBJECT = {
    "improvedSubject": "midwest reps",
    "improvedBody": "Hi John,\n\nCongrats on the midwest expansion.\n\nWorth a look?",
    "changes": [
        {
            "category": "Subject",
            "issue": "Generic phrase",
            "reason": "Tied to trigger",
            "why": "Specific subjects get opened more.",
            "summary": "Subject now references the expansion",
            "detail": "Replaced the generic question with the trigger event.",
            "signal": "Growth",
        }
    ],
    "furtherTips": ["Mention a midwest customer by name"],
    "expectedImpact": "Higher open and reply rates.",
}


def continuation(obj: dict, prefill_key: str) -> str:
    """What a model emits after the seeded prefill: the object minus its opening."""
    text = json.dumps(obj, indent=4)
    marker = f'"{prefill_key}":'
    rest = text[text.index(marker) + len(marker):]
    if prefill_key == "improvedSubject":
        # The improve prefill already opened the string value.
        rest = rest.lstrip()[1:]
    return rest


class FakeTransport(Transport):
    """Replays scripted answers and records every call."""

    def __init__(self, kind: TransportKind = TransportKind.NATIVE, responses: Optional[List] = None):
        self.kind = kind
        self.responses = list(responses or [])
        self.calls: List[dict] = []
        self.closed = False

    def call(self, operation, system_prompt, user_prompt, prefill, model) -> Completion:
        self.calls.append(
            {
                "operation": operation,
                "system": system_prompt,
                "user": user_prompt,
                "prefill": prefill,
                "model": model,
            }
        )
        response = self.responses.pop(0)
        if isinstance(response, ProviderError):
            raise response
        return Completion(text=response, model=model, transport=self.kind, stop_reason="end_turn", elapsed_ms=5)

    def operations(self) -> List[Operation]:
        return [call["operation"] for call in self.calls]

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        provider="claude",
        anthropic_api_key="test-anthropic",
        openrouter_api_key="test-openrouter",
        session_log_dir=str(tmp_path / "logs"),
    )


@pytest.fixture
def review_text() -> str:
    return continuation(REVIEW_OBJECT, "overallScore")


@pytest.fixture
def improve_text() -> str:
    return continuation(IMPROVE_OBJECT, "improvedSubject")


@pytest.fixture
def make_service(settings):
    def _make(*responses, kind: TransportKind = TransportKind.NATIVE):
        transport = FakeTransport(kind, list(responses))
        return CopyReviewService(settings, transports={kind: transport}), transport

    return _make
