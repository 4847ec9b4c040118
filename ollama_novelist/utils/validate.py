"""
Storyline payload helpers.

Usage (inside other modules):
    from ollama_novelist.utils.validate import extract_json_block, parse_chapter_plan
    plan = parse_chapter_plan(extract_json_block(reply))   # raises PlanParseError
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, List

import jsonschema

from ollama_novelist.errors import PlanParseError
from ollama_novelist.models import ChapterPlan, ChapterPlanEntry

FENCE_RE = re.compile(r"```json\s*([\s\S]*?)\s*```")

# "Chapter 3 - The Tide Turns", also tolerates en dash / colon separators
KEY_RE = re.compile(r"^\s*Chapter\s+(\d+)\s*[-–:]\s*(.+?)\s*$", re.I)

# ─── schema: array of tagged records or legacy single-key objects ─────────
_RECORD = {
    "type": "object",
    "required": ["title", "overview"],
    "properties": {
        "index": {"type": ["integer", "string", "null"]},
        "title": {"type": "string"},
        "overview": {"type": "string"},
    },
}
_LEGACY = {
    "type": "object",
    "minProperties": 1,
    "maxProperties": 1,
    "additionalProperties": {"type": "string"},
}
SCHEMA_STORYLINE = {
    "type": "array",
    "minItems": 1,
    "items": {"anyOf": [_RECORD, _LEGACY]},
}


def extract_json_block(text: str) -> str:
    """Interior of the first ```json fence, trimmed; *text* unchanged when there is none."""
    m = FENCE_RE.search(text)
    if m and m.group(1):
        return m.group(1).strip()
    return text


def _maybe_unwrap(obj: Any) -> Any:
    """
    Models sometimes wrap the real payload:

        {"chapters": [ ... ]}

    Accept that pattern and unwrap it.  Otherwise return the object as-is.
    """
    if (
        isinstance(obj, dict)
        and len(obj) == 1
        and next(iter(obj)) in {"chapters", "storyline", "chapter_plan"}
    ):
        return next(iter(obj.values()))
    return obj


def _index(value: Any, pos: int) -> int:
    """Positive int or digit string as-is; anything else (0, "two", None) → position."""
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value)
    if isinstance(value, int) and not isinstance(value, bool) and value >= 1:
        return value
    return pos


def _entry(pos: int, item: Dict[str, Any]) -> ChapterPlanEntry:
    if "overview" in item and "title" in item:
        return ChapterPlanEntry(
            index=_index(item.get("index"), pos),
            title=item["title"].strip() or "Untitled",
            overview=item["overview"],
        )
    key, overview = next(iter(item.items()))
    m = KEY_RE.match(key)
    if m:
        return ChapterPlanEntry(index=int(m.group(1)) or pos, title=m.group(2), overview=overview)
    return ChapterPlanEntry(index=pos, title=key.strip() or "Untitled", overview=overview)


def parse_chapter_plan(text: str, source_text: str | None = None) -> ChapterPlan:
    """
    Decode *text* into a ChapterPlan.

    Any failure (bad JSON, wrong shape) is reported as PlanParseError carrying
    the offending text; callers recover with :func:`fallback_plan`.
    """
    try:
        data = _maybe_unwrap(json.loads(text))
        jsonschema.validate(data, SCHEMA_STORYLINE)
    except json.JSONDecodeError as e:
        raise PlanParseError(f"Storyline is not JSON: {e}", text) from e
    except jsonschema.ValidationError as e:
        raise PlanParseError(f"Storyline has the wrong shape: {e.message}", text) from e

    entries = [_entry(pos, item) for pos, item in enumerate(data, 1)]
    return ChapterPlan(entries=entries, source_text=text if source_text is None else source_text)


def fallback_plan(count: int, source_text: str = "") -> ChapterPlan:
    """Parse-free plan of exactly *count* placeholder chapters."""
    entries: List[ChapterPlanEntry] = [ChapterPlanEntry.placeholder(i) for i in range(1, count + 1)]
    return ChapterPlan(entries=entries, source_text=source_text, fallback=True)
