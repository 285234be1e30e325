"""Parse and normalize ingredient text into comparable records."""

from grocerylist.normalize.amounts import (
    format_amount,
    parse_amount,
    parse_servings_value,
    scale_amount,
)
from grocerylist.normalize.ingredients import (
    ParsedIngredient,
    coerce_to_ingredient_groups,
    coerce_to_structured_ingredients,
    parse_ingredient,
    scale_ingredient,
)
from grocerylist.normalize.names import DisplayName, normalize_name, parse_display_name
from grocerylist.normalize.units import (
    UnitFamily,
    can_aggregate,
    canonicalize_unit,
    convert_units,
    identify_unit_type,
    unit_display_name,
)

__all__ = [
    "DisplayName",
    "ParsedIngredient",
    "UnitFamily",
    "can_aggregate",
    "canonicalize_unit",
    "coerce_to_ingredient_groups",
    "coerce_to_structured_ingredients",
    "convert_units",
    "format_amount",
    "identify_unit_type",
    "normalize_name",
    "parse_amount",
    "parse_display_name",
    "parse_ingredient",
    "parse_servings_value",
    "scale_amount",
    "scale_ingredient",
    "unit_display_name",
]
