"""RecipeDB / FlavorDB lookups through the data proxy."""

import logging
import time
from typing import Any, Dict, Optional, Tuple

import requests

from dish_audit.config import AuditSettings
from dish_audit.models import DatabaseRecord, FlavorRecord
from dish_audit.utils import to_number, to_text

logger = logging.getLogger(__name__)

RECIPE_SEARCH_PATH = "/recipedb/recipe2-api/recipe/search"
FLAVOR_ALIAS_PATH = "/flavordb/entities/by-entity-alias-readable"


def recipe_from_payload(payload: Any) -> Optional[DatabaseRecord]:
    """Pick the first recipe of a search response ({"payload": {"data": [...]}} or a bare list)."""
    recipes = payload
    if isinstance(payload, dict):
        inner = payload.get("payload")
        if isinstance(inner, dict) and inner.get("data"):
            recipes = inner["data"]

    if not isinstance(recipes, list) or not recipes:
        return None
    raw = recipes[0]
    if not isinstance(raw, dict):
        return None

    return DatabaseRecord(
        title=to_text(raw.get("Recipe_title")),
        ingredients=raw.get("Ingredients") or raw.get("ingredients"),
        energy=to_number(raw.get("Energy") or raw.get("Calories")),
        protein=to_number(raw.get("Protein")),
        fat=to_number(raw.get("Total lipid (fat)")),
    )


def flavor_from_payload(payload: Any) -> Optional[FlavorRecord]:
    """
    Any OK body counts as a FlavorDB hit except null, false, 0 and "".

    Empty objects and lists are hits too; alias and category are only read
    from an object body.
    """
    if payload is None or (isinstance(payload, (bool, int, float, str)) and not payload):
        return None
    if not isinstance(payload, dict):
        return FlavorRecord(alias=None, category=None)
    return FlavorRecord(
        alias=to_text(payload.get("entity_alias_readable")) or None,
        category=to_text(payload.get("category_readable")) or None,
    )


class NutritionDbClient:
    def __init__(
        self,
        endpoint: str,
        token: str = "",
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.endpoint = endpoint.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, settings: AuditSettings) -> "NutritionDbClient":
        return cls(settings.proxy_endpoint, settings.db_token, settings.http_timeout_s)

    def _get(self, path: str, params: Dict[str, str]) -> Optional[Any]:
        """GET through the proxy. Non-OK status means no data; network errors propagate."""
        response = self.session.get(
            f"{self.endpoint}{path}",
            params=params,
            headers={"Authorization": f"Bearer {self.token}"},
            timeout=self.timeout,
        )
        if not response.ok:
            logger.warning("[DB] %s returned HTTP %s", path, response.status_code)
            return None
        return response.json()

    def search_recipe(self, dish_name: str) -> Optional[DatabaseRecord]:
        logger.info("[DB] Searching RecipeDB for %r", dish_name)
        recipe = recipe_from_payload(self._get(RECIPE_SEARCH_PATH, {"q": dish_name}))
        if recipe:
            logger.info("[DB] RecipeDB match found: %s", recipe.title)
        else:
            logger.info("[DB] RecipeDB: no match found.")
        return recipe

    def search_flavor(self, dish_name: str) -> Optional[FlavorRecord]:
        logger.info("[DB] Searching FlavorDB for %r", dish_name)
        flavor = flavor_from_payload(self._get(FLAVOR_ALIAS_PATH, {"alias": dish_name}))
        logger.info("[DB] FlavorDB data found: %s", "yes" if flavor else "no")
        return flavor

    def lookup(self, dish_name: str) -> Tuple[Optional[DatabaseRecord], Optional[FlavorRecord]]:
        """
        Recipe search, then FlavorDB enrichment, one after the other.

        A transport failure ends the lookup: whatever was found before it is
        kept and the rest counts as no data.
        """
        recipe = None
        flavor = None
        start = time.time()
        try:
            recipe = self.search_recipe(dish_name)
            flavor = self.search_flavor(dish_name)
        except (requests.RequestException, ValueError):
            logger.exception("[DB] Database search failed for %r", dish_name)
        logger.info("[DB] Lookups finished in %sms", round((time.time() - start) * 1000, 2))
        return recipe, flavor
