"""Household staples: pantry items a cook usually has and can leave off the list."""

import re
from typing import Iterable

from grocerylist.normalize.names import normalize_name

DEFAULT_HOUSEHOLD_STAPLES: tuple[str, ...] = (
    "salt",
    "black pepper",
    "ground pepper",
    "all purpose flour",
    "nonstick cooking spray",
    "granulated sugar",
    "brown sugar",
    "olive oil",
    "vegetable oil",
    "butter",
    "eggs",
    "milk",
    "onion",
    "garlic",
    "baking soda",
    "baking powder",
    "vanilla extract",
)

# A pepper staple never stands in for these
VEGETABLE_PEPPERS: tuple[str, ...] = (
    "bell pepper",
    "jalapeno",
    "poblano",
    "serrano",
    "habanero",
    "chili pepper",
    "hot pepper",
    "sweet pepper",
)

# Salts covered by a plain "salt" staple
BASIC_SALTS: tuple[str, ...] = (
    "sea salt",
    "himalayan",
    "kosher salt",
    "table salt",
)


def _contains_phrase(text: str, phrase: str) -> bool:
    return re.search(rf"(?<!\w){re.escape(phrase)}(?!\w)", text) is not None


def matches_staple(item_name: str, staple: str) -> bool:
    """
    Check whether a shopping list item is covered by a household staple.

    Both sides are normalized, so "eggs" covers "large eggs". The staple must
    appear in the item name as whole words. Pepper staples (other than bell
    pepper) never cover vegetable peppers, and "salt" covers only basic
    salts, not "garlic salt" or "celery salt".
    """
    if not isinstance(item_name, str) or not isinstance(staple, str):
        return False

    item = normalize_name(item_name)
    staple_name = normalize_name(staple)
    if not item or not staple_name or not _contains_phrase(item, staple_name):
        return False

    if "pepper" in staple_name and "bell" not in staple_name:
        return not any(pepper in item for pepper in VEGETABLE_PEPPERS)

    if staple_name == "salt":
        return item == "salt" or any(salt in item for salt in BASIC_SALTS)

    return True


def is_household_staple(item_name: str, staples: Iterable[str]) -> bool:
    """Check an item against every staple."""
    return any(matches_staple(item_name, staple) for staple in staples)
