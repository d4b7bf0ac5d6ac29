"""Schema-validating parser for completion replies.

A completion reply is untyped external input. ``parse_reply`` never raises:
it returns either a ``ParsedReply`` holding the validated model or a
``FallbackReply`` saying why the caller must build its own object.
"""

import json
import re
from dataclasses import dataclass
from typing import Generic, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

_T = TypeVar("_T", bound=BaseModel)

_FENCE = re.compile(r"^\s*```[a-zA-Z0-9_-]*\s*\n(.*?)\n?```\s*$", re.DOTALL)


@dataclass(frozen=True)
class ParsedReply(Generic[_T]):
    """The reply validated against the expected schema."""

    value: _T


@dataclass(frozen=True)
class FallbackReply:
    """The reply could not be used; ``reason`` says why."""

    reason: str
    raw_text: str


ReplyOutcome = Union[ParsedReply[_T], FallbackReply]


def _strip_code_fence(text: str) -> str:
    match = _FENCE.match(text)
    return match.group(1) if match else text


def _find_first_json_object(text: str) -> str:
    """Return the first balanced ``{...}`` span of ``text`` that is valid JSON."""
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for idx in range(start, len(text)):
            char = text[idx]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    candidate = text[start : idx + 1]
                    try:
                        json.loads(candidate)
                    except ValueError:
                        break
                    return candidate
        start = text.find("{", start + 1)
    raise ValueError("No JSON object found in reply")


def _describe(error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "reply"
    return f"schema mismatch at {location}: {first.get('msg', 'invalid value')}"


def parse_reply(text: str, model: Type[_T]) -> ReplyOutcome:
    """Parse a completion reply into ``model``.

    The whole reply (minus a Markdown code fence) is tried first, then the
    first JSON object embedded in surrounding prose.
    """
    if not text or not text.strip():
        return FallbackReply(reason="empty reply", raw_text=text or "")

    body = _strip_code_fence(text)
    try:
        return ParsedReply(model.model_validate_json(body))
    except ValidationError as e:
        first_error = e

    try:
        snippet = _find_first_json_object(body)
    except ValueError:
        if any(err.get("type") == "json_invalid" for err in first_error.errors()):
            return FallbackReply(reason="reply is not valid JSON", raw_text=text)
        return FallbackReply(reason=_describe(first_error), raw_text=text)

    try:
        return ParsedReply(model.model_validate_json(snippet))
    except ValidationError as e:
        return FallbackReply(reason=_describe(e), raw_text=text)
