"""Nutrition payload models returned to clients."""

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ParseMode(StrEnum):
    """Extraction task selecting the system prompt."""

    PRODUCT = "Product"
    RECIPE = "Recipe"
    MEAL = "Meal"
    BARCODE = "Barcode"

    @classmethod
    def resolve(cls, raw: str) -> "ParseMode | None":
        """Map a client-supplied mode label to a mode, if known."""
        value = raw.strip()
        for mode in cls:
            if value == mode.value:
                return mode
        return _MODE_ALIASES.get(value)


# Labels sent by the mobile client.
_MODE_ALIASES: dict[str, ParseMode] = {
    "Продукт": ParseMode.PRODUCT,
    "Рецепт": ParseMode.RECIPE,
    "Прием пищи": ParseMode.MEAL,
    "Приём пищи": ParseMode.MEAL,
    "Штрихкод": ParseMode.BARCODE,
}


class ParseRequest(BaseModel):
    """Body of a parser request."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    mode: str | None = None
    text: str | None = None
    use_search: bool | None = Field(default=True, alias="useSearch")

    @field_validator("text", mode="before")
    @classmethod
    def _numeric_text(cls, value: object) -> object:
        """Accept barcodes sent as JSON numbers."""
        if isinstance(value, int | float) and not isinstance(value, bool):
            return str(value)
        return value


class NutritionItem(BaseModel):
    """Single food with macros, as produced by the model."""

    model_config = ConfigDict(extra="allow")

    name: str
    brand: str | None = None
    grams: float | None = None
    unit: Literal["g", "ml"] | None = None
    calories: float | None = None
    protein_grams: float | None = Field(default=None, alias="proteinGrams")
    fat_grams: float | None = Field(default=None, alias="fatGrams")
    carb_grams: float | None = Field(default=None, alias="carbGrams")


class RecipeResult(BaseModel):
    """Dish broken down into ingredients."""

    model_config = ConfigDict(extra="allow")

    recipe: str
    total_grams: float = Field(alias="totalGrams")
    ingredients: list[NutritionItem]


class MealTotals(BaseModel):
    """Aggregate macros for a meal."""

    model_config = ConfigDict(extra="allow")

    grams: float = 0
    calories: float = 0
    protein_grams: float = Field(default=0, alias="proteinGrams")
    fat_grams: float = Field(default=0, alias="fatGrams")
    carb_grams: float = Field(default=0, alias="carbGrams")


class MealResult(BaseModel):
    """Meal with its items and totals."""

    model_config = ConfigDict(extra="allow")

    meal_name: str = Field(alias="mealName")
    items: list[NutritionItem]
    totals: MealTotals


class NotFoundResult(BaseModel):
    """Barcode lookup that found nothing usable."""

    not_found: Literal[True] = Field(default=True, alias="notFound")


class ErrorResult(BaseModel):
    """Error body with optional diagnostics."""

    error: str
    raw: str | None = None
    data: dict[str, object] | None = None
    json_text: str | None = Field(default=None, alias="jsonText")
