"""Data schemas for the library's input and output boundary."""

from pydantic import BaseModel, ConfigDict, Field


class IngredientInput(BaseModel):
    """A structured ingredient, as emitted by an AI recipe parse."""

    model_config = ConfigDict(extra="ignore")

    name: str
    amount: str | float | None = None
    unit: str | None = None
    preparation: str | None = None


class IngredientGroup(BaseModel):
    """A named section of a recipe's ingredient list."""

    name: str = "Main"
    ingredients: list[str | IngredientInput] = Field(default_factory=list)


class RecipeIngredients(BaseModel):
    """One recipe's contribution to a shopping list."""

    title: str
    ingredient_groups: list[IngredientGroup] = Field(default_factory=list)
    scale_factor: float = Field(1.0, gt=0, description="Multiplier applied to every amount")
    recipe_yield: str | float | None = Field(None, description='Yield as written, e.g. "6-8 servings"')
    target_servings: float | None = Field(
        None, gt=0, description="Servings wanted; overrides scale_factor when the yield is readable"
    )


class ShoppingListItemRecord(BaseModel):
    """Flat, serializable shopping list row for persistence."""

    item_name: str
    quantity_amount: float | None = None
    quantity_unit: str | None = None
    grocery_category: str = "Other"
    source_recipe_title: str | None = None
    order_index: int = Field(ge=0)


class CategorizeRequest(BaseModel):
    """Request body for the external categorizer."""

    ingredients: list[str]


class CategorizeResponse(BaseModel):
    """Response body of the external categorizer.

    Maps ingredient name -> category, or category -> list of ingredient names.
    """

    categories: dict[str, str | list[str]] = Field(default_factory=dict)
