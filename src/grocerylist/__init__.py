"""Turn recipe ingredient lists into an aggregated, categorized grocery list."""

import logging

from grocerylist.normalize import (
    ParsedIngredient,
    normalize_name,
    parse_amount,
    parse_display_name,
    parse_ingredient,
)
from grocerylist.plan import (
    AggregatedItem,
    aggregate_ingredients,
    categorize,
    render_markdown,
    render_plain_text,
)
from grocerylist.plan.shopping_list import ShoppingList, ShoppingListGenerator

__version__ = "0.1.0"

logging.getLogger("grocerylist").addHandler(logging.NullHandler())

__all__ = [
    "AggregatedItem",
    "ParsedIngredient",
    "ShoppingList",
    "ShoppingListGenerator",
    "aggregate_ingredients",
    "categorize",
    "normalize_name",
    "parse_amount",
    "parse_display_name",
    "parse_ingredient",
    "render_markdown",
    "render_plain_text",
]
