"""Helpers for recovering JSON objects from model output."""

from __future__ import annotations

import json
from typing import Any, Optional


def strip_code_fence(text: str) -> str:
    """Remove a surrounding markdown fence such as ```json ... ```."""

    stripped = text.strip()
    if not stripped.startswith("```"):
        return stripped
    lines = stripped.splitlines()
    if len(lines) < 2:
        return stripped.strip("`").strip()
    body = lines[1:]
    if body and body[-1].strip().startswith("```"):
        body = body[:-1]
    return "\n".join(body).strip()


def _extract_json_block(text: str) -> Optional[str]:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return None
    return text[start : end + 1].strip()


def parse_json_payload(text: Optional[str]) -> Optional[Any]:
    """Return a JSON object parsed from ``text`` when possible.

    Fenced blocks and prose around the object are tolerated; ``None`` is
    returned when nothing parseable remains.
    """

    if not text:
        return None
    candidates = [text.strip(), strip_code_fence(text)]
    extracted = _extract_json_block(text)
    if extracted:
        candidates.append(extracted)
    for candidate in candidates:
        if not candidate:
            continue
        try:
            return json.loads(candidate)
        except json.JSONDecodeError:
            continue
    return None


__all__ = ["parse_json_payload", "strip_code_fence"]
