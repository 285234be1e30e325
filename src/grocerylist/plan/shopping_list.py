"""Shopping list generation from recipes."""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from pydantic import ValidationError

from grocerylist.config import Settings, get_settings
from grocerylist.logging_config import LoggingContext, get_logger
from grocerylist.normalize.amounts import parse_servings_value
from grocerylist.normalize.ingredients import (
    coerce_to_ingredient_groups,
    coerce_to_structured_ingredients,
    scale_ingredient,
)
from grocerylist.normalize.names import parse_display_name
from grocerylist.plan.aggregate import AggregatedItem, Aggregator, SourcedIngredient
from grocerylist.plan.categories import OTHER, sort_categories
from grocerylist.plan.staples import DEFAULT_HOUSEHOLD_STAPLES, is_household_staple
from grocerylist.schemas import IngredientInput, RecipeIngredients, ShoppingListItemRecord
from grocerylist.services.categorization import (
    CategoryProvider,
    HttpCategoryProvider,
    categorize_with_fallback,
)


@dataclass
class ShoppingList:
    """Complete shopping list for a set of recipes."""

    name: str
    items: list[AggregatedItem] = field(default_factory=list)

    # Grouped view
    items_by_category: dict[str, list[AggregatedItem]] = field(default_factory=dict)

    def add_item(self, item: AggregatedItem) -> None:
        """Add an item and update the category grouping."""
        self.items.append(item)

        category = item.category or OTHER
        if category not in self.items_by_category:
            self.items_by_category[category] = []
        self.items_by_category[category].append(item)

    def categories(self) -> list[str]:
        """Categories present in the list, in store-walk order."""
        return sort_categories(self.items_by_category)

    def ordered_items(self) -> list[AggregatedItem]:
        """Items grouped by category in store order, by name within a category."""
        ordered: list[AggregatedItem] = []
        for category in self.categories():
            ordered.extend(sorted(self.items_by_category[category], key=lambda i: i.name))
        return ordered

    def without_staples(self, staples: Iterable[str]) -> "ShoppingList":
        """Copy of the list without household staples; emptied categories are dropped."""
        staples = list(staples)
        filtered = ShoppingList(name=self.name)
        for item in self.items:
            if not is_household_staple(item.name, staples):
                filtered.add_item(item)
        return filtered

    def to_records(self) -> list[ShoppingListItemRecord]:
        """Flatten into persistence rows, numbered in store order."""
        return [
            ShoppingListItemRecord(
                item_name=item.name,
                quantity_amount=item.amount,
                quantity_unit=item.unit,
                grocery_category=item.category or OTHER,
                source_recipe_title=", ".join(item.source_recipe_titles) or None,
                order_index=index,
            )
            for index, item in enumerate(self.ordered_items())
        ]


class ShoppingListGenerator:
    """
    Generates shopping lists from recipes with:
    - Ingredient parsing for raw lines and structured entries
    - Removed and substituted ingredient handling
    - Recipe scaling by factor or target servings
    - Quantity aggregation across recipes
    - Grocery categorization with keyword-rule fallback
    - Optional household staple exclusion

    A provider the generator builds from settings is closed by close();
    an injected provider belongs to the caller.
    """

    def __init__(
        self,
        provider: CategoryProvider | None = None,
        settings: Settings | None = None,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
    ):
        self.settings = settings or get_settings()
        self._owns_provider = False
        if provider is None and self.settings.has_remote_categorizer:
            provider = HttpCategoryProvider(
                base_url=self.settings.categorizer_url,
                api_key=self.settings.categorizer_api_key,
                timeout=self.settings.categorizer_timeout,
                max_retries=self.settings.categorizer_max_retries,
            )
            self._owns_provider = True
        self.provider = provider
        self.logger = logger if logger is not None else get_logger(__name__)
        self.aggregator = Aggregator(self.settings.unitless_default_units, logger=self.logger)

    async def close(self) -> None:
        """Close the categorizer this generator created."""
        if self._owns_provider and isinstance(self.provider, HttpCategoryProvider):
            await self.provider.close()

    async def __aenter__(self) -> "ShoppingListGenerator":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def generate(
        self,
        name: str | None = None,
        recipes: Iterable[RecipeIngredients | dict[str, Any]] = (),
        list_id: str | None = None,
        staples: Iterable[str] | None = None,
    ) -> ShoppingList:
        """
        Generate a shopping list from recipes.

        Args:
            name: List name; defaults to the configured list name.
            recipes: RecipeIngredients models or equivalent dicts.
            list_id: Optional identifier attached to log records.
            staples: Household staples to leave off the list. Defaults to the
                configured staples when staple exclusion is enabled.

        Returns:
            ShoppingList with aggregated, categorized items.
        """
        list_name = (name or "").strip() or self.settings.list_default_name

        with LoggingContext(shopping_list_id=list_id):
            self.logger.info(f"Generating shopping list {list_name!r}")

            contributions: list[SourcedIngredient] = []
            recipe_count = 0
            for recipe in recipes:
                validated = self._validate_recipe(recipe)
                if validated is None:
                    continue
                recipe_count += 1
                with LoggingContext(recipe_title=validated.title):
                    contributions.extend(self._recipe_contributions(validated))

            items = self.aggregator.aggregate(contributions)
            staples = self._staples(staples)
            if staples:
                kept = [item for item in items if not is_household_staple(item.name, staples)]
                if len(kept) < len(items):
                    self.logger.info(f"Left {len(items) - len(kept)} household staples off the list")
                items = kept

            categories = await categorize_with_fallback(
                [item.name for item in items],
                provider=self.provider,
                timeout=self.settings.categorizer_timeout,
                log=self.logger,
            )

            shopping_list = ShoppingList(name=list_name)
            for item in items:
                item.category = categories.get(item.name, OTHER)
                shopping_list.add_item(item)

            self.logger.info(
                f"Generated shopping list: {len(shopping_list.items)} items from "
                f"{recipe_count} recipes in {len(shopping_list.items_by_category)} categories"
            )

        return shopping_list

    def _staples(self, staples: Iterable[str] | None) -> list[str]:
        if staples is not None:
            return [s for s in staples if isinstance(s, str) and s.strip()]
        if not self.settings.exclude_household_staples:
            return []
        return list(self.settings.household_staples or DEFAULT_HOUSEHOLD_STAPLES)

    def _validate_recipe(self, recipe: RecipeIngredients | dict[str, Any]) -> RecipeIngredients | None:
        """Validate one recipe, tolerating loosely-typed ingredient groups."""
        if isinstance(recipe, RecipeIngredients):
            return recipe
        if not isinstance(recipe, dict):
            self.logger.warning(f"Skipping recipe of unsupported type {type(recipe).__name__}")
            return None

        data = dict(recipe)
        data["ingredient_groups"] = coerce_to_ingredient_groups(
            data.get("ingredient_groups", data.get("ingredients"))
        )
        data.pop("ingredients", None)
        try:
            return RecipeIngredients.model_validate(data)
        except ValidationError as e:
            self.logger.warning(f"Skipping invalid recipe {recipe.get('title')!r}: {e.error_count()} errors")
            return None

    def _recipe_contributions(self, recipe: RecipeIngredients) -> list[SourcedIngredient]:
        """Parse, filter and scale one recipe's ingredients."""
        entries = []
        for group in recipe.ingredient_groups:
            for entry in group.ingredients:
                prepared = self._prepare_entry(entry)
                if prepared is not None:
                    entries.append(prepared)

        parsed = coerce_to_structured_ingredients(entries)
        factor = self._scale_factor(recipe)
        if factor != 1:
            parsed = [scale_ingredient(p, factor) for p in parsed]

        self.logger.debug(f"Parsed {len(parsed)} ingredients")
        return [SourcedIngredient.from_parsed(p, source=recipe.title) for p in parsed]

    def _scale_factor(self, recipe: RecipeIngredients) -> float:
        """Target servings over the recipe's yield when both are known, else scale_factor."""
        if recipe.target_servings is None:
            return recipe.scale_factor

        base_servings = parse_servings_value(recipe.recipe_yield)
        if base_servings is None:
            self.logger.warning(
                f"Cannot read servings from yield {recipe.recipe_yield!r}, "
                f"using scale factor {recipe.scale_factor}"
            )
            return recipe.scale_factor
        return recipe.target_servings / base_servings

    def _prepare_entry(self, entry: str | IngredientInput) -> str | IngredientInput | None:
        """Drop removed ingredients and strip substitution markers."""
        raw_name = entry if isinstance(entry, str) else entry.name
        display = parse_display_name(raw_name)

        if display.is_removed:
            self.logger.debug(f"Skipping removed ingredient {display.base_name!r}")
            return None
        if not display.is_substitution:
            return entry

        if isinstance(entry, str):
            return display.base_name
        return entry.model_copy(update={"name": display.base_name})
