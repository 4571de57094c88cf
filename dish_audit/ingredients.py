import json
from typing import Any, List

DEFAULT_INGREDIENTS = ["Spices", "Main Ingredient"]
MAX_FREE_TEXT_INGREDIENTS = 5


def parse_ingredients(raw: Any) -> List[str]:
    """
    Normalize a RecipeDB ingredients field.

    RecipeDB returns lists, JSON-like strings ("['salt', 'oil']") or plain CSV
    depending on the record. Free text is capped at 5 entries.
    """
    if isinstance(raw, (list, tuple)):
        return [str(item) for item in raw]

    if not isinstance(raw, str):
        return list(DEFAULT_INGREDIENTS)

    text = raw.strip()
    if text.startswith("[") and text.endswith("]"):
        try:
            parsed = json.loads(text.replace("'", '"'))
        except json.JSONDecodeError:
            parsed = None
        if isinstance(parsed, list):
            return [str(item) for item in parsed]
        raw = text[1:-1]

    return [part.strip() for part in raw.split(",")[:MAX_FREE_TEXT_INGREDIENTS]]
