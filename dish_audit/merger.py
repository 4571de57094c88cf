"""
Priority rules for combining the classifier answer with database records.

Packaged snacks are not in RecipeDB, so the classifier's reading of the
label wins. For prepared dishes RecipeDB wins, then FlavorDB, and the
classifier only fills what the databases could not.
"""

import math
from typing import List, Optional

from dish_audit.ingredients import parse_ingredients
from dish_audit.models import AuditData, ClassificationResult, DatabaseRecord, FlavorRecord, Number

SCORE_RECIPE_MATCH = 92
SCORE_FLAVOR_MATCH = 88
SCORE_CLASSIFIER_ONLY = 85
SCORE_NO_ANALYSIS = 50

CATEGORY_PACKAGED = "Packaged Snack"
CATEGORY_GENERAL = "General Food"

UNKNOWN_INGREDIENTS = ["Unknown"]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _classifier_ingredients(classification: Optional[ClassificationResult]) -> List[str]:
    if classification is None or classification.ingredients is None:
        return list(UNKNOWN_INGREDIENTS)
    return list(classification.ingredients)


def _classifier_value(classification: Optional[ClassificationResult], field: str) -> Number:
    if classification is None:
        return 0
    return getattr(classification, field) or 0


def score_for(
    classification: Optional[ClassificationResult],
    recipe: Optional[DatabaseRecord],
    flavor: Optional[FlavorRecord],
) -> int:
    """Fixed trust tag for the caller, not a measured confidence."""
    if recipe:
        return SCORE_RECIPE_MATCH
    if flavor:
        return SCORE_FLAVOR_MATCH
    if classification:
        return SCORE_CLASSIFIER_ONLY
    return SCORE_NO_ANALYSIS


def merge_results(
    dish_name: str,
    classification: Optional[ClassificationResult],
    recipe: Optional[DatabaseRecord] = None,
    flavor: Optional[FlavorRecord] = None,
) -> AuditData:
    packaged = classification is not None and classification.is_packaged

    if packaged:
        ingredients = _classifier_ingredients(classification)
        calories = _classifier_value(classification, "calories")
    elif recipe:
        ingredients = parse_ingredients(recipe.ingredients)
        calories = round_half_up(recipe.energy)
    elif flavor:
        ingredients = [flavor.alias or dish_name]
        calories = 0
    else:
        ingredients = _classifier_ingredients(classification)
        calories = _classifier_value(classification, "calories")

    # Classifier estimate is the last resort on every path
    if calories == 0:
        calories = _classifier_value(classification, "calories")

    if recipe:
        recipe_name = recipe.title
        protein: Number = recipe.protein
        fat: Number = recipe.fat
    else:
        recipe_name = (flavor.alias if flavor else None) or dish_name
        protein = _classifier_value(classification, "protein")
        fat = _classifier_value(classification, "fat")

    if flavor and flavor.category:
        category = flavor.category
    elif packaged:
        category = CATEGORY_PACKAGED
    else:
        category = CATEGORY_GENERAL

    return AuditData(
        is_food=True,
        freshness=(classification.freshness if classification else None) or "fresh",
        score=score_for(classification, recipe, flavor),
        ingredients=ingredients,
        calories=calories,
        recipe_name=recipe_name,
        protein=protein,
        fat=fat,
        category=category,
    )
