"""Best-effort extraction of a JSON object from free-form model output."""

import json
import re
from dataclasses import dataclass
from typing import Any

_JSON_FENCE = re.compile(r"```json\s*([\s\S]*?)\s*```", re.IGNORECASE)
_ANY_FENCE = re.compile(r"```[\w-]*\s*([\s\S]*?)\s*```")


@dataclass(frozen=True)
class Parsed:
    """The model output contained a JSON object."""

    document: dict[str, Any]


@dataclass(frozen=True)
class ParseFailed:
    """No JSON object could be extracted."""

    reason: str


ParseResult = Parsed | ParseFailed


def _candidate(text: str) -> str:
    """Pick the text most likely to hold the JSON payload.

    Prefers a ```json fence, then any fence, then the whole text.
    """
    match = _JSON_FENCE.search(text) or _ANY_FENCE.search(text)
    if match:
        return match.group(1)
    return text.strip()


def _outermost_object(text: str) -> str | None:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return None
    return text[start : end + 1]


def parse_model_json(raw: str) -> ParseResult:
    """Extract a JSON object from model output without raising.

    Unfenced replies may wrap the object in prose (for example a note that
    a web search is about to run), so a failed parse is retried on the span
    from the first ``{`` to the last ``}``.
    """
    if not raw or not raw.strip():
        return ParseFailed("model returned no text")

    candidate = _candidate(raw)
    try:
        document = json.loads(candidate)
    except json.JSONDecodeError as e:
        span = _outermost_object(candidate)
        if span is None or span == candidate:
            return ParseFailed(f"invalid JSON: {e.msg} at line {e.lineno}")
        try:
            document = json.loads(span)
        except json.JSONDecodeError:
            return ParseFailed(f"invalid JSON: {e.msg} at line {e.lineno}")

    if not isinstance(document, dict):
        return ParseFailed(
            f"expected a JSON object, got {type(document).__name__}"
        )
    return Parsed(document)
