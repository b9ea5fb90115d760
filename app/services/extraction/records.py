from __future__ import annotations

import json
from typing import Any, List, Mapping, Optional

from app.models import Difficulty, Record


def decode_array(text: str) -> Optional[List[Any]]:
    """Decode repaired text into a list of loosely typed items, or None"""
    try:
        # strict=False tolerates raw newlines inside answer strings
        data = json.loads(text, strict=False)
    except (ValueError, RecursionError):
        return None
    return data if isinstance(data, list) else None


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def coerce_difficulty(value: Any) -> Difficulty:
    """Case-insensitive match on easy/medium/hard; anything else is medium"""
    if isinstance(value, str):
        try:
            return Difficulty(value.strip().lower())
        except ValueError:
            pass
    return Difficulty.medium


def validate_record(item: Any) -> Optional[Record]:
    """Build a Record from one decoded item, or None if it must be dropped."""
    if not isinstance(item, Mapping):
        return None
    question = _as_text(item.get("question"))
    answer = _as_text(item.get("answer"))
    if not question or not answer:
        return None
    return Record(
        question=question,
        answer=answer,
        difficulty=coerce_difficulty(item.get("difficulty")),
    )
