"""Lenient JSON extraction from model output."""

from __future__ import annotations

import json
import re
from typing import Any

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)


def parse_json(text: str | None) -> Any | None:
    """Parse JSON from raw model text.

    Tries the whole string, then fenced code blocks, then the outermost
    ``{...}`` span. Returns None when nothing parses.
    """
    if not text or not isinstance(text, str):
        return None

    candidates = [text.strip()]
    candidates.extend(m.strip() for m in _FENCE_RE.findall(text))
    start, end = text.find("{"), text.rfind("}")
    if 0 <= start < end:
        candidates.append(text[start : end + 1])

    for candidate in candidates:
        try:
            return json.loads(candidate)
        except json.JSONDecodeError:
            continue
    return None
