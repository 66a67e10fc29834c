"""Locate a JSON object inside free-form model output."""

from __future__ import annotations

import json
from typing import Any


def find_json_object(text: str | None) -> str | None:
    """Return the first balanced ``{...}`` substring of ``text``.

    Braces inside JSON string literals are ignored, so
    ``'Voici: {"title": "a } b"} merci'`` yields ``'{"title": "a } b"}'``.
    Returns None when there is no opening brace or it is never closed.
    """
    if not text:
        return None

    start = text.find("{")
    if start < 0:
        return None

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
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
                return text[start : index + 1]
    return None


def extract_json_object(text: str | None) -> dict[str, Any] | None:
    """Decode the first embedded JSON object, or None if there is none or it is malformed."""
    candidate = find_json_object(text)
    if candidate is None:
        return None
    try:
        decoded = json.loads(candidate)
    except json.JSONDecodeError:
        return None
    if not isinstance(decoded, dict):
        return None
    return decoded
