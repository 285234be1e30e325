"""Aggregate, categorize and export shopping lists.

Shopping list assembly lives in grocerylist.plan.shopping_list; it depends on
the categorization service and is not imported here.
"""

from grocerylist.plan.aggregate import (
    AggregatedItem,
    Aggregator,
    SourcedIngredient,
    aggregate_ingredients,
    aggregate_parsed,
)
from grocerylist.plan.categories import (
    CATEGORY_RULES,
    GROCERY_CATEGORIES,
    categorize,
    categorize_all,
    sort_categories,
)
from grocerylist.plan.export import render_markdown, render_plain_text
from grocerylist.plan.staples import DEFAULT_HOUSEHOLD_STAPLES, is_household_staple, matches_staple

__all__ = [
    "CATEGORY_RULES",
    "DEFAULT_HOUSEHOLD_STAPLES",
    "GROCERY_CATEGORIES",
    "AggregatedItem",
    "Aggregator",
    "SourcedIngredient",
    "aggregate_ingredients",
    "aggregate_parsed",
    "categorize",
    "categorize_all",
    "is_household_staple",
    "matches_staple",
    "render_markdown",
    "render_plain_text",
    "sort_categories",
]
