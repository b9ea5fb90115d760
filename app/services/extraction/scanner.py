"""
Balanced, string-aware scanning for JSON arrays in model output.

All scans are single forward passes that skip over quoted string literals,
so brackets and braces inside question/answer text never move the depth
counters. Both double and single quotes open a string; a single quote only
closes one when it is followed by a structural character (or the end of the
text), so apostrophes inside single-quoted values do not end them early.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

QUOTES = ('"', "'")
_AFTER_SINGLE_QUOTE = ",:}]"


@dataclass(frozen=True)
class CandidateSpan:
    start: int
    end: int
    truncated: bool = False

    def slice(self, text: str) -> str:
        return text[self.start:self.end]


def _single_quote_closes(text: str, pos: int) -> bool:
    n = len(text)
    while pos < n and text[pos].isspace():
        pos += 1
    return pos >= n or text[pos] in _AFTER_SINGLE_QUOTE


def read_string(text: str, start: int) -> Tuple[int, bool]:
    """Return (end, closed) for the string literal opening at ``start``.

    ``end`` is the index just past the closing quote, or ``len(text)`` when
    the literal runs off the end of the input.
    """
    quote = text[start]
    n = len(text)
    i = start + 1
    while i < n:
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote and (quote == '"' or _single_quote_closes(text, i + 1)):
            return i + 1, True
        i += 1
    return n, False


def locate_array(text: str) -> Optional[CandidateSpan]:
    """Find the first top-level JSON array in ``text``.

    Returns None when there is no ``[`` at all. When the array never closes
    the span runs to the end of the text and is marked truncated.
    """
    start = text.find("[")
    if start == -1:
        return None

    depth = 0
    i = start
    n = len(text)
    while i < n:
        ch = text[i]
        if ch in QUOTES:
            i, _ = read_string(text, i)
            continue
        if ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
            if depth == 0:
                return CandidateSpan(start, i + 1)
        i += 1
    return CandidateSpan(start, n, truncated=True)


def salvage_array(text: str, start: int) -> Optional[str]:
    """Close a truncated array after its last complete element object.

    ``start`` is the index of the array's opening ``[``. Returns None when
    not a single element object was completed.
    """
    nesting = 0
    last_record_end = -1
    i = start
    n = len(text)
    while i < n:
        ch = text[i]
        if ch in QUOTES:
            i, _ = read_string(text, i)
            continue
        if ch in "[{":
            nesting += 1
        elif ch in "]}":
            nesting -= 1
            if ch == "}" and nesting == 1:
                last_record_end = i + 1
        i += 1

    if last_record_end == -1:
        return None

    partial = text[start:last_record_end].rstrip()
    if partial.endswith(","):
        partial = partial[:-1]
    return partial + "]"
