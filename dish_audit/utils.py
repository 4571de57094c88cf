"""Utility functions."""

import json
import re
from typing import Any, Dict, Optional

DATA_URI_PREFIX = re.compile(r"^data:image/\w+;base64,")


def strip_data_uri(image_data: str) -> str:
    """Drop a leading data:image/...;base64, prefix if present."""
    return DATA_URI_PREFIX.sub("", image_data)


def extract_json(text: str) -> Dict[str, Any]:
    """
    Parse a JSON object out of model output.

    Tries the raw text first, then the text with ``` fences removed,
    then the span between the first { and the last }.
    """
    if not text:
        raise ValueError("Empty model output")

    try:
        parsed = json.loads(text.strip())
    except json.JSONDecodeError:
        # Keep fence contents: models wrap the whole answer in ```json ... ```
        cleaned = re.sub(r"```(?:json)?", "", text).strip()
        start = cleaned.find("{")
        end = cleaned.rfind("}")
        if start == -1 or end == -1:
            raise ValueError("No JSON object detected")
        parsed = json.loads(cleaned[start:end + 1])

    if not isinstance(parsed, dict):
        raise ValueError(f"Expected JSON object, got {type(parsed).__name__}")
    return parsed


_LEADING_NUMBER = re.compile(r"\s*[-+]?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?")


def to_number(value: Any) -> float:
    """Read a nutrient value that may be a number or a string like "250.4 kcal"."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        match = _LEADING_NUMBER.match(value)
        if match:
            return float(match.group(0))
    return 0.0


def to_text(value: Any) -> Optional[str]:
    """Scalars become strings; null, objects and arrays become None."""
    if value is None or isinstance(value, (dict, list)):
        return None
    return value if isinstance(value, str) else str(value)
