"""
Best-effort fixes for near-JSON produced by generative models
"""
from __future__ import annotations

from app.services.extraction.scanner import QUOTES, read_string

FIELD_NAMES = ("question", "answer", "difficulty")
_SINGLE_QUOTED_FIELDS = tuple(f"'{name}'" for name in FIELD_NAMES)


def _double_quote(body: str) -> str:
    out = []
    i = 0
    n = len(body)
    while i < n:
        ch = body[i]
        if ch == "\\" and i + 1 < n:
            nxt = body[i + 1]
            out.append("'" if nxt == "'" else ch + nxt)
            i += 2
            continue
        out.append('\\"' if ch == '"' else ch)
        i += 1
    return "".join(out)


def normalize_single_quotes(text: str) -> str:
    """Turn single-quoted field keys and values into JSON strings.

    Only runs when a single-quoted ``'question'``, ``'answer'`` or
    ``'difficulty'`` is present. Converts single-quoted tokens that either
    name one of those fields or follow a ``:``. Double-quoted strings are
    copied verbatim, so apostrophes in well-formed answers are untouched.
    """
    if not any(marker in text for marker in _SINGLE_QUOTED_FIELDS):
        return text

    out = []
    last = ""
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch in QUOTES:
            end, closed = read_string(text, i)
            token = text[i:end]
            if ch == "'":
                body = token[1:-1] if closed else token[1:]
                if body in FIELD_NAMES or last == ":":
                    token = '"' + _double_quote(body) + ('"' if closed else "")
            out.append(token)
            last = ch
            i = end
            continue
        if not ch.isspace():
            last = ch
        out.append(ch)
        i += 1
    return "".join(out)


def remove_trailing_commas(text: str) -> str:
    """Drop commas that are followed only by whitespace and a closing ] or }"""
    out = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch in QUOTES:
            end, _ = read_string(text, i)
            out.append(text[i:end])
            i = end
            continue
        if ch == ",":
            j = i + 1
            while j < n and (text[j].isspace() or text[j] == ","):
                j += 1
            run = text[i:j]
            if j < n and text[j] in "]}":
                run = run.replace(",", "")
            out.append(run)
            i = j
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def repair(candidate: str) -> str:
    """Apply all repairs. Idempotent: repair(repair(x)) == repair(x)."""
    return remove_trailing_commas(normalize_single_quotes(candidate)).strip()
