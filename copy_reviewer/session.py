"""Request-scoped diagnostic record linking one review call and one improve call.

A ``CopySession`` is created by the service for every request and passed
explicitly through both steps, so concurrent requests never share one.
When a log directory is configured it writes a detailed log per call and a
``SUMMARY.md`` once both halves are attached; after that it is read-only.
"""

import json
import logging
import os
import re as pyre
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from copy_reviewer.prompts import BODY_END, BODY_START, SUBJECT_END, SUBJECT_START


log = logging.getLogger("copy_review")

RULE = "-" * 80
SUBJECT_RE = pyre.compile(pyre.escape(SUBJECT_START) + r"\n([\s\S]*?)\n" + pyre.escape(SUBJECT_END))
BODY_RE = pyre.compile(pyre.escape(BODY_START) + r"\n([\s\S]*?)\n" + pyre.escape(BODY_END))


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _new_session_id() -> str:
    stamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S-%f")
    return f"session_{stamp}_{uuid.uuid4().hex[:6]}"


@dataclass
class CallRecord:
    system_prompt: str
    user_prompt: str
    response: str
    model: str
    response_time_ms: int
    stop_reason: str
    parsed: Optional[Dict[str, Any]] = None
    review_data: Optional[Dict[str, Any]] = None
    timestamp: str = field(default_factory=_utc_now)

    @property
    def content_length(self) -> int:
        return len(self.response)


@dataclass
class CopySession:
    log_dir: Optional[str] = None
    session_id: str = field(default_factory=_new_session_id)
    started_at: float = field(default_factory=time.time)
    status: str = "awaiting_review"  # awaiting_review | awaiting_improve | done | failed
    review: Optional[CallRecord] = None
    improve: Optional[CallRecord] = None
    finalized: bool = False

    @property
    def session_dir(self) -> Optional[str]:
        if not self.log_dir:
            return None
        return os.path.join(self.log_dir, self.session_id)

    def attach(self, operation: str, record: CallRecord) -> None:
        if self.finalized:
            raise RuntimeError(f"Session {self.session_id} is finalized")
        if operation == "review":
            self.review = record
        elif operation == "improve":
            self.improve = record
        else:
            raise ValueError(f"Unknown operation: {operation}")

        self._write(f"{operation}_detailed.log", render_call_log(operation, record))

        if self.review and self.improve:
            self._write("SUMMARY.md", render_summary(self))
            self.finalized = True

    def _write(self, filename: str, content: str) -> None:
        session_dir = self.session_dir
        if not session_dir:
            return
        path = os.path.join(session_dir, filename)
        try:
            os.makedirs(session_dir, exist_ok=True)
            with open(path, "w", encoding="utf-8") as fh:
                fh.write(content)
        except OSError as exc:
            log.warning("Failed to write session log %s: %s", path, exc)
            return
        log.info("Session log written: %s", path)


# ----------------------------------------------------------------------
# Rendering
# ----------------------------------------------------------------------
def _block(title: str, body: str) -> List[str]:
    return [f"{title}:", RULE, body, RULE, ""]


def render_call_log(operation: str, record: CallRecord) -> str:
    lines = ["=" * 80, f"{operation.upper()} LOG", f"Generated: {_utc_now()}", "=" * 80, ""]
    lines += _block("SYSTEM PROMPT", record.system_prompt)
    lines += _block("USER PROMPT", record.user_prompt)
    if record.review_data is not None:
        lines += _block("REVIEW DATA (for improve step)", json.dumps(record.review_data, indent=2))
    lines += _block("AI RESPONSE", record.response)
    if record.parsed is not None:
        lines += _block("PARSED RESPONSE", json.dumps(record.parsed, indent=2))
    lines += _block(
        "METADATA",
        "\n".join(
            [
                f"Model: {record.model}",
                f"Response Time: {record.response_time_ms}ms",
                f"Stop Reason: {record.stop_reason}",
                f"Content Length: {record.content_length} characters",
            ]
        ),
    )
    return "\n".join(lines)


def _match(pattern, text: str) -> str:
    found = pattern.search(text)
    return found.group(1).strip() if found else "N/A"


def _key_issues(review: Optional[Dict[str, Any]]) -> str:
    if not review or not review.get("sections"):
        return "- No issues identified"
    issues = []
    for section in review["sections"][:5]:
        items = section.get("items") or []
        if items:
            issues.append(f"- **{section.get('title', '')}:** {items[0]}")
    return "\n".join(issues) or "- No specific issues identified"


def _key_changes(improve: Optional[Dict[str, Any]]) -> str:
    changes = (improve or {}).get("changes") or []
    lines = []
    for idx, change in enumerate(changes[:5], 1):
        if isinstance(change, dict):
            lines.append(f"{idx}. **{change.get('category', '')}:** {change.get('summary') or change.get('reason', '')}")
        else:
            lines.append(f"{idx}. {change}")
    return "\n".join(lines) or "- No changes documented"


def _further_tips(improve: Optional[Dict[str, Any]]) -> str:
    tips = (improve or {}).get("furtherTips") or []
    if not tips:
        return "- No additional tips provided"
    return "\n".join(f"{idx}. {tip}" for idx, tip in enumerate(tips, 1))


def render_summary(session: CopySession) -> str:
    review, improve = session.review, session.improve
    total_ms = int((time.time() - session.started_at) * 1000)
    parsed_review = review.parsed or {}
    parsed_improve = improve.parsed or {}

    lines = [
        "# Session Summary",
        "",
        f"**Session ID:** {session.session_id}",
        f"**Generated:** {_utc_now()}",
        f"**Total Time:** {total_ms}ms ({total_ms / 1000:.2f}s)",
        "",
        "---",
        "",
        "## Input",
        "",
        "### Original Subject Line",
        "```",
        _match(SUBJECT_RE, review.user_prompt),
        "```",
        "",
        "### Original Email Body",
        "```",
        _match(BODY_RE, review.user_prompt),
        "```",
        "",
        "---",
        "",
        "## Review Results",
        "",
        f"**Overall Score:** {parsed_review.get('overallScore', 0)}/100",
        f"**Model:** {review.model}",
        f"**Time:** {review.response_time_ms}ms",
        f"**Stop Reason:** {review.stop_reason}",
        "",
        "### Key Issues Identified",
        _key_issues(parsed_review),
        "",
        "---",
        "",
        "## Improved Version",
        "",
        "### Improved Subject Line",
        "```",
        parsed_improve.get("improvedSubject", "N/A"),
        "```",
        "",
        "### Improved Email Body",
        "```",
        parsed_improve.get("improvedBody", "N/A").replace("\\n\\n", "\n\n"),
        "```",
        "",
        f"**Model:** {improve.model}",
        f"**Time:** {improve.response_time_ms}ms",
        f"**Stop Reason:** {improve.stop_reason}",
        "",
        "### Key Changes Made",
        _key_changes(parsed_improve),
        "",
        "### Further Tips",
        _further_tips(parsed_improve),
        "",
        "---",
        "",
        "## Performance Metrics",
        "",
        "| Metric | Review | Improve | Total |",
        "|--------|--------|---------|-------|",
        f"| **Time** | {review.response_time_ms}ms | {improve.response_time_ms}ms | {total_ms}ms |",
        f"| **Model** | {review.model} | {improve.model} | - |",
        f"| **Response Length** | {review.content_length} chars | {improve.content_length} chars "
        f"| {review.content_length + improve.content_length} chars |",
        f"| **Stop Reason** | {review.stop_reason} | {improve.stop_reason} | - |",
        "",
    ]
    return "\n".join(lines)


__all__ = ["CallRecord", "CopySession", "render_call_log", "render_summary"]
