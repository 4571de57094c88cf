"""Typed shapes flowing through the dish audit pipeline."""

from dataclasses import dataclass
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dish_audit.utils import to_number, to_text

PACKAGED = "packaged"
PREPARED = "prepared"

Number = Union[int, float]


class AuditRequest(BaseModel):
    """Body of POST /api/audit-dish. Fields are taken as sent, without validation."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    order_id: Any = Field(default=None, alias="orderId")
    photo_urls: Any = Field(default=None, alias="photoUrls")

    @property
    def first_photo(self) -> Optional[str]:
        if not isinstance(self.photo_urls, (list, tuple)) or not self.photo_urls:
            return None
        photo = self.photo_urls[0]
        if isinstance(photo, str) and photo:
            return photo
        return None


class ClassificationResult(BaseModel):
    """
    What a vision model said about the photo.

    Any JSON object a model returns is accepted: loosely typed fields are
    coerced rather than rejected, and only an explicit `"isFood": false`
    marks the photo as not food.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    is_food: bool = Field(default=True, alias="isFood")
    dish_name: Optional[str] = Field(default=None, alias="dishName")
    type: Optional[str] = None
    ingredients: Optional[List[str]] = None
    freshness: Optional[str] = None
    calories: Optional[Number] = None
    protein: Optional[Number] = None
    fat: Optional[Number] = None
    reason: Optional[str] = None
    error: Optional[str] = None

    @field_validator("is_food", mode="before")
    @classmethod
    def _only_false_is_not_food(cls, value: Any) -> bool:
        return value is not False

    @field_validator("dish_name", "type", "freshness", "reason", "error", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Optional[str]:
        return to_text(value)

    @field_validator("calories", "protein", "fat", mode="before")
    @classmethod
    def _coerce_number(cls, value: Any) -> Optional[Number]:
        if value is None or (isinstance(value, (int, float)) and not isinstance(value, bool)):
            return value
        return to_number(value)

    @field_validator("ingredients", mode="before")
    @classmethod
    def _stringify_ingredients(cls, value: Any) -> Optional[List[str]]:
        if isinstance(value, list):
            return [str(item) for item in value]
        return None

    @property
    def is_packaged(self) -> bool:
        return self.type == PACKAGED


@dataclass(frozen=True)
class DatabaseRecord:
    """A RecipeDB match. `ingredients` keeps the raw field for IngredientParser."""

    title: Optional[str]
    ingredients: Any
    energy: float
    protein: Number
    fat: Number


@dataclass(frozen=True)
class FlavorRecord:
    """A FlavorDB entity. FlavorDB carries no nutrient values."""

    alias: Optional[str]
    category: Optional[str]


class AuditData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_food: bool = Field(default=True, alias="isFood")
    freshness: str
    score: int
    ingredients: List[str]
    calories: Number
    recipe_name: Optional[str] = Field(default=None, alias="recipeName")
    protein: Number
    fat: Number
    category: str
