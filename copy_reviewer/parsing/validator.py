import logging
from numbers import Number
from typing import Any, Dict

from pydantic import ValidationError

from copy_reviewer.errors import StructureError
from copy_reviewer.models import ImproveResult, ReviewResult
from copy_reviewer.parsing.extractor import truncate


log = logging.getLogger("copy_review")


def _coerce_score(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"overallScore is not a number: {value!r}")
    if isinstance(value, Number):
        return int(round(value))
    if isinstance(value, str):
        return int(round(float(value.strip())))
    raise ValueError(f"overallScore is not a number: {value!r}")


def validate_review(data: Dict[str, Any]) -> ReviewResult:
    """Check the review shape and clamp ``overallScore`` into 0..100."""
    if data.get("overallScore") is None or not isinstance(data.get("sections"), list):
        raise StructureError("Invalid review response structure", raw_text=truncate(data))

    try:
        score = _coerce_score(data["overallScore"])
    except (ValueError, OverflowError) as exc:
        raise StructureError(str(exc), raw_text=truncate(data)) from exc

    payload = dict(data)
    payload["overallScore"] = max(0, min(100, score))
    # Non-object entries are kept as section text.
    payload["sections"] = [s if isinstance(s, dict) else {"content": s} for s in data["sections"]]
    try:
        return ReviewResult.model_validate(payload)
    except ValidationError as exc:
        log.warning("Review validate failed | DATA: %s\nERROR: %s", truncate(data), exc)
        raise StructureError("Invalid review response structure", raw_text=truncate(data)) from exc


def validate_improve(data: Dict[str, Any]) -> ImproveResult:
    """Require a non-empty subject and body; default list fields to []."""
    if not data.get("improvedSubject") or not data.get("improvedBody"):
        raise StructureError("Invalid improve response structure", raw_text=truncate(data))

    payload = dict(data)
    for key in ("furtherTips", "changes"):
        if not isinstance(payload.get(key), list):
            payload[key] = []
    try:
        return ImproveResult.model_validate(payload)
    except ValidationError as exc:
        log.warning("Improve validate failed | DATA: %s\nERROR: %s", truncate(data), exc)
        raise StructureError("Invalid improve response structure", raw_text=truncate(data)) from exc


__all__ = ["validate_review", "validate_improve"]
