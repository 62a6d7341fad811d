import json
import logging
import re as pyre
from typing import Any, Callable, Dict, List, Tuple

import regex

from copy_reviewer.errors import ParseError


log = logging.getLogger("copy_review")

FENCE_RE = pyre.compile(r"```(?:json)?", pyre.IGNORECASE)
TRAILING_COMMA_RE = pyre.compile(r",(\s*[}\]])")
# Greedy: first "{" through last "}".
JSON_SPAN_RE = regex.compile(r"\{.*\}", regex.DOTALL)


def truncate(v: Any, n: int = 800) -> str:
    try:
        if isinstance(v, (dict, list)):
            text = json.dumps(v, ensure_ascii=False)
        else:
            text = str(v)
    except Exception:
        text = repr(v)
    return (text[:n] + " …[truncated]") if len(text) > n else text


def strip_code_fences(text: str) -> str:
    """Drop every ```json / ``` marker, wherever it sits in the text."""
    return FENCE_RE.sub("", text).strip()


def remove_trailing_commas(text: str) -> str:
    return TRAILING_COMMA_RE.sub(r"\1", text)


def _repeats_prefill(text: str, prefill: str) -> bool:
    # Models reached over the HTTP transport sometimes ignore the seeded
    # turn and emit the whole object themselves.
    head = pyre.sub(r"\s+", "", text[: len(prefill) * 2])
    return head.startswith(pyre.sub(r"\s+", "", prefill).rstrip('"'))


def _as_is(text: str) -> str:
    return text


# Applied in order, each on top of the previous one, until a parse succeeds.
REPAIRS: List[Tuple[str, Callable[[str], str]]] = [
    ("as_is", _as_is),
    ("trailing_commas", remove_trailing_commas),
]


def extract_json(raw_text: str, prefill: str = "") -> Dict[str, Any]:
    """Recover the single JSON object a model answered with.

    The model continues from ``prefill`` without repeating it, so the
    fragment is put back in front of the cleaned text before the first
    ``{`` .. last ``}`` span is parsed. Raises ``ParseError`` once every
    entry of ``REPAIRS`` has been tried.
    """
    cleaned = strip_code_fences(raw_text or "")
    if prefill and not _repeats_prefill(cleaned, prefill):
        cleaned = prefill + cleaned

    match = JSON_SPAN_RE.search(cleaned)
    if not match:
        log.warning("No JSON object found | RAW: %s", truncate(raw_text))
        raise ParseError("No valid JSON found in response", raw_text=truncate(raw_text))

    candidate = match.group(0)
    last_error = None
    for name, repair in REPAIRS:
        candidate = repair(candidate)
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError as exc:
            last_error = exc
            log.info("JSON parse failed | repair=%s error=%s", name, exc)
            continue
        if name != "as_is":
            log.info("JSON recovered after repair=%s", name)
        return data

    log.warning(
        "JSON parse failed after %d attempts\nRAW: %s\nCLEANED: %s\nERROR: %s",
        len(REPAIRS),
        truncate(raw_text),
        truncate(candidate),
        last_error,
    )
    raise ParseError(f"Unable to parse response as JSON: {last_error}", raw_text=truncate(raw_text))


__all__ = ["extract_json", "strip_code_fences", "remove_trailing_commas", "truncate", "REPAIRS"]
