"""
Strip reasoning blocks and markdown fences from raw model output
"""
import re
from typing import Optional

from app.services.extraction.scanner import QUOTES, read_string

_TAG_NAMES = ("thinking", "think", "reasoning")
_TAG_PATTERNS = [
    (re.compile(f"<{name}>", re.IGNORECASE), re.compile(f"</{name}>", re.IGNORECASE))
    for name in _TAG_NAMES
]
_HEADING_RE = re.compile(r"\*\*(?:Thinking|Analysis|Reasoning)[:*]*\*\*", re.IGNORECASE)
# Stops before "[" so a payload sharing the heading's line survives
_LINE_RE = re.compile(r"[ \t]*(?:Thinking|Analysis|Reasoning):[^\n\[]*", re.IGNORECASE)
_FENCE_RE = re.compile(r"```[A-Za-z0-9_+-]*[ \t]*\n?")


def _skip_to_payload(text: str, pos: int) -> int:
    bracket = text.find("[", pos)
    return bracket if bracket != -1 else len(text)


def _noise_end(text: str, pos: int) -> Optional[int]:
    """Return where the noise starting at ``pos`` ends, or None if there is none."""
    ch = text[pos]
    if ch == "<":
        for opener, closer in _TAG_PATTERNS:
            start = opener.match(text, pos)
            if start:
                end = closer.search(text, start.end())
                # Unterminated: drop up to the payload, if there is one
                return end.end() if end else _skip_to_payload(text, start.end())
    elif ch == "*":
        heading = _HEADING_RE.match(text, pos)
        if heading:
            return _skip_to_payload(text, heading.end())
    elif ch == "`":
        fence = _FENCE_RE.match(text, pos)
        if fence:
            return fence.end()
    if pos == 0 or text[pos - 1] == "\n":
        line = _LINE_RE.match(text, pos)
        if line:
            return line.end()
    return None


def strip_noise(raw_text: str) -> str:
    """Remove thinking blocks, reasoning headings and code fences.

    Recognized noise:
      - ``<thinking>``, ``<think>`` and ``<reasoning>`` blocks
      - ``**Thinking:**`` style headings, up to the next ``[``
      - lines starting with ``Thinking:``, ``Analysis:`` or ``Reasoning:``
      - markdown fence markers with an optional language tag

    Noise is only recognized outside brackets. Inside an array the text is
    copied as is, with string literals skipped whole, so card text that
    mentions a tag or a fence is never touched. Anything else is left for
    the locator.
    """
    if not raw_text:
        return ""
    text = raw_text.strip()
    parts = []
    depth = 0
    pos = 0
    n = len(text)
    while pos < n:
        if depth == 0:
            end = _noise_end(text, pos)
            if end is not None:
                pos = end
                continue
        ch = text[pos]
        if depth and ch in QUOTES:
            end, _ = read_string(text, pos)
            parts.append(text[pos:end])
            pos = end
            continue
        if ch == "[":
            depth += 1
        elif ch == "]" and depth:
            depth -= 1
        parts.append(ch)
        pos += 1
    return "".join(parts).strip()
