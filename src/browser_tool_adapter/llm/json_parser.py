"""Utilities for parsing JSON out of LLM replies."""

from __future__ import annotations

import json
from typing import Any


def extract_json_object(text: str) -> dict[str, Any]:
    """Extract the first JSON object found in *text* and return it as a dict."""

    cleaned = _unfence(text)
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end == -1 or end <= start:
        raise ValueError("No JSON object found in LLM response")
    snippet = cleaned[start : end + 1]
    return json.loads(snippet)


def extract_json_list(text: str, key: str) -> list[Any]:
    """Return the list stored under ``key`` or a bare top-level JSON array."""

    cleaned = _unfence(text)
    if cleaned.startswith("["):
        parsed = json.loads(cleaned[: cleaned.rfind("]") + 1])
    else:
        parsed = extract_json_object(cleaned).get(key, [])
    if not isinstance(parsed, list):
        raise ValueError(f"Expected a JSON array under '{key}'")
    return parsed


def _unfence(text: str) -> str:
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = _strip_code_fence(cleaned).strip()
        if cleaned.startswith("json"):
            cleaned = cleaned[len("json") :].strip()
    return cleaned


def _strip_code_fence(block: str) -> str:
    parts = block.split("```")
    if len(parts) >= 3:
        return parts[1]
    return block.strip("`")
