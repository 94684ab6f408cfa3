"""Parser strategies for untrusted model output.

Each strategy is a pure ``text -> parsed JSON`` function that raises
``TaskParseError`` when it cannot produce a value.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

from wonderland.core.errors import TaskParseError

from .schemas import ExtractedTask, backfill_task


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise TaskParseError(f"invalid JSON: {exc.msg}") from exc


def parse_direct(text: str) -> Any:
    return _loads(text)


def parse_bracket_span(text: str) -> Any:
    start = text.find("[")
    end = text.rfind("]")
    if start != -1 and end > start:
        return _loads(text[start : end + 1])

    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        return [_loads(text[start : end + 1])]
    raise TaskParseError("no JSON span found")


def parse_fence_strip(text: str) -> Any:
    cleaned = text.replace("```json", "").replace("```", "").strip()
    start = cleaned.find("[")
    if start > 0:
        cleaned = cleaned[start:]
    end = cleaned.rfind("]")
    if 0 < end < len(cleaned) - 1:
        cleaned = cleaned[: end + 1]
    return _loads(cleaned)


PARSER_STRATEGIES: tuple[tuple[str, Callable[[str], Any]], ...] = (
    ("direct", parse_direct),
    ("bracket_span", parse_bracket_span),
    ("fence_strip", parse_fence_strip),
)


def to_task_list(parsed: Any) -> list[ExtractedTask]:
    if isinstance(parsed, dict):
        items = [parsed]
    elif isinstance(parsed, list):
        items = [item for item in parsed if isinstance(item, dict)]
    else:
        raise TaskParseError(f"expected a JSON array or object, got {type(parsed).__name__}")
    if not items:
        raise TaskParseError("no task objects in parsed output")
    return [backfill_task(item) for item in items]
