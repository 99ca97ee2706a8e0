# src/generation/extraction.py — v1
"""Lenient extraction of JSON from free-form model output.

Models are asked for "JSON only" but routinely wrap it in a fenced code
block or surround it with prose. Candidates are tried in this order, and the
first one that parses wins:

  1. the interior of the first fenced code block (```json ... ``` or ``` ... ```)
  2. the first top-level ``{...}`` or ``[...]`` span, matched with a
     string-aware bracket scan
  3. the whole trimmed text
"""

from __future__ import annotations

import json
import re
from typing import Any

from careerpath.core.errors import PayloadParseError

_FENCE_RE = re.compile(r"```[ \t]*(?:json|JSON)?[ \t]*\n?(.*?)\n?[ \t]*```", re.DOTALL)
_CLOSERS = {"{": "}", "[": "]"}


def fenced_block(text: str) -> str | None:
    """Interior of the first fenced code block, or None."""
    match = _FENCE_RE.search(text)
    if match is None:
        return None
    return match.group(1).strip()


def bracket_span(text: str) -> str | None:
    """First balanced top-level brace/bracket span, or None.

    Brackets inside JSON strings are ignored. If the first opener never
    closes cleanly, falls back to the opener through the last matching
    closer in the text.
    """
    start = next((i for i, ch in enumerate(text) if ch in _CLOSERS), None)
    if start is None:
        return None

    stack: list[str] = []
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in _CLOSERS:
            stack.append(_CLOSERS[ch])
        elif ch in ("}", "]"):
            if not stack or stack.pop() != ch:
                break
            if not stack:
                return text[start : i + 1]

    end = text.rfind(_CLOSERS[text[start]])
    if end > start:
        return text[start : end + 1]
    return None


def candidate_texts(text: str) -> list[str]:
    """All extraction candidates in priority order, without duplicates."""
    candidates: list[str] = []
    for candidate in (fenced_block(text), bracket_span(text), text.strip()):
        if candidate and candidate not in candidates:
            candidates.append(candidate)
    return candidates


def extract_json_text(text: str) -> str:
    """Highest-priority candidate string (may still be unparseable)."""
    candidates = candidate_texts(text)
    return candidates[0] if candidates else ""


def parse_json_payload(text: str) -> Any:
    """Parse the first candidate that is valid JSON.

    Raises:
        PayloadParseError: If no candidate parses.
    """
    last_error: json.JSONDecodeError | None = None
    for candidate in candidate_texts(text or ""):
        try:
            return json.loads(candidate)
        except json.JSONDecodeError as e:
            last_error = e
    preview = (text or "").strip()[:80]
    raise PayloadParseError(
        f"No parseable JSON in model output ({last_error or 'empty response'}): {preview!r}"
    )
