"""Unit table: canonical cooking units, spellings and conversions."""

import math
import re
from enum import Enum


class UnitFamily(str, Enum):
    """Incompatible unit families. Conversion never crosses a family."""

    VOLUME = "volume"
    WEIGHT = "weight"
    COUNT = "count"


# =============================================================================
# Unit Conversion Tables
# =============================================================================

# Volume conversions (base unit: ml), exact US customary definitions
VOLUME_UNITS: dict[str, float] = {
    "ml": 1.0,
    "tsp": 4.92892159375,  # 1/3 tbsp
    "tbsp": 14.78676478125,  # 1/2 fl oz
    "fl oz": 29.5735295625,  # 1/8 cup
    "cup": 236.5882365,  # 1/2 pint
    "pint": 473.176473,  # 1/2 quart
    "quart": 946.352946,  # 1/4 gallon
    "gallon": 3785.411784,  # 231 cubic inches
    "liter": 1000.0,
}

# Weight conversions (base unit: g), exact avoirdupois definitions
WEIGHT_UNITS: dict[str, float] = {
    "g": 1.0,
    "kg": 1000.0,
    "oz": 28.349523125,
    "lb": 453.59237,
}

# Count-based units only merge with themselves
COUNT_UNITS: frozenset[str] = frozenset(
    {
        "each",
        "clove",
        "slice",
        "piece",
        "head",
        "bunch",
        "stalk",
        "sprig",
        "leaf",
        "can",
        "jar",
        "bottle",
        "package",
        "container",
        "bag",
        "box",
        "stick",
        "pinch",
        "dash",
        "splash",
        "handful",
    }
)

# Container nouns that take a size prefix ("14-oz can")
CONTAINER_UNITS: frozenset[str] = frozenset(
    {"can", "jar", "bottle", "package", "container", "bag", "box"}
)

# Spelling -> canonical unit. Lookups are lowercase except CASE_SENSITIVE_ALIASES.
UNIT_ALIASES: dict[str, str] = {
    # Volume
    "ml": "ml",
    "mls": "ml",
    "milliliter": "ml",
    "milliliters": "ml",
    "millilitre": "ml",
    "millilitres": "ml",
    "tsp": "tsp",
    "tsps": "tsp",
    "teaspoon": "tsp",
    "teaspoons": "tsp",
    "tbsp": "tbsp",
    "tbsps": "tbsp",
    "tbs": "tbsp",
    "tbl": "tbsp",
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    "fl oz": "fl oz",
    "fl. oz": "fl oz",
    "fl.oz": "fl oz",
    "fluid ounce": "fl oz",
    "fluid ounces": "fl oz",
    "cup": "cup",
    "cups": "cup",
    "pint": "pint",
    "pints": "pint",
    "pt": "pint",
    "quart": "quart",
    "quarts": "quart",
    "qt": "quart",
    "gallon": "gallon",
    "gallons": "gallon",
    "gal": "gallon",
    "l": "liter",
    "liter": "liter",
    "liters": "liter",
    "litre": "liter",
    "litres": "liter",
    # Weight
    "g": "g",
    "gr": "g",
    "gram": "g",
    "grams": "g",
    "kg": "kg",
    "kgs": "kg",
    "kilogram": "kg",
    "kilograms": "kg",
    "oz": "oz",
    "ounce": "oz",
    "ounces": "oz",
    "lb": "lb",
    "lbs": "lb",
    "pound": "lb",
    "pounds": "lb",
    # Count
    "each": "each",
    "ea": "each",
    "clove": "clove",
    "cloves": "clove",
    "slice": "slice",
    "slices": "slice",
    "piece": "piece",
    "pieces": "piece",
    "pc": "piece",
    "pcs": "piece",
    "head": "head",
    "heads": "head",
    "bunch": "bunch",
    "bunches": "bunch",
    "stalk": "stalk",
    "stalks": "stalk",
    "sprig": "sprig",
    "sprigs": "sprig",
    "leaf": "leaf",
    "leaves": "leaf",
    "can": "can",
    "cans": "can",
    "tin": "can",
    "tins": "can",
    "jar": "jar",
    "jars": "jar",
    "bottle": "bottle",
    "bottles": "bottle",
    "package": "package",
    "packages": "package",
    "pkg": "package",
    "pkgs": "package",
    "packet": "package",
    "packets": "package",
    "container": "container",
    "containers": "container",
    "bag": "bag",
    "bags": "bag",
    "box": "box",
    "boxes": "box",
    "stick": "stick",
    "sticks": "stick",
    "pinch": "pinch",
    "pinches": "pinch",
    "dash": "dash",
    "dashes": "dash",
    "splash": "splash",
    "splashes": "splash",
    "handful": "handful",
    "handfuls": "handful",
}

# Abbreviations whose meaning depends on case ("1 T" is a tablespoon, "1 t" a teaspoon)
CASE_SENSITIVE_ALIASES: dict[str, str] = {
    "T": "tbsp",
    "Tb": "tbsp",
    "Tbsp": "tbsp",
    "t": "tsp",
    "c": "cup",
    "C": "cup",
}

# Display forms: canonical -> (singular, plural)
DISPLAY_FORMS: dict[str, tuple[str, str]] = {
    "ml": ("ml", "ml"),
    "tsp": ("tsp", "tsp"),
    "tbsp": ("Tbsp", "Tbsp"),
    "fl oz": ("fl oz", "fl oz"),
    "cup": ("cup", "cups"),
    "pint": ("pint", "pints"),
    "quart": ("quart", "quarts"),
    "gallon": ("gallon", "gallons"),
    "liter": ("liter", "liters"),
    "g": ("g", "g"),
    "kg": ("kg", "kg"),
    "oz": ("oz", "oz"),
    "lb": ("lb", "lbs"),
    "each": ("each", "each"),
    "leaf": ("leaf", "leaves"),
    "bunch": ("bunch", "bunches"),
    "box": ("box", "boxes"),
    "pinch": ("pinch", "pinches"),
    "dash": ("dash", "dashes"),
    "splash": ("splash", "splashes"),
}

COMPOUND_UNIT_RE = re.compile(
    r"^(?P<size>\d+(?:\.\d+)?(?:/\d+)?)\s*-?\s*(?P<unit>[a-z. ]+?)\s+(?P<container>[a-z]+)$"
)


# =============================================================================
# Lookup Functions
# =============================================================================


def lookup_unit(spelling: str) -> str | None:
    """Map a single unit spelling to its canonical id, or None."""
    if not spelling:
        return None
    token = spelling.strip()
    if token in CASE_SENSITIVE_ALIASES:
        return CASE_SENSITIVE_ALIASES[token]
    token = token.lower().rstrip(".")
    if token in UNIT_ALIASES:
        return UNIT_ALIASES[token]
    return None


def make_compound_unit(size: str, unit: str, container: str) -> str | None:
    """Build a compound unit id like "14-oz can" from its parts."""
    canonical_unit = lookup_unit(unit)
    canonical_container = lookup_unit(container)
    if (
        canonical_unit is None
        or canonical_container not in CONTAINER_UNITS
        or canonical_unit not in VOLUME_UNITS
        and canonical_unit not in WEIGHT_UNITS
    ):
        return None
    return f"{size.strip()}-{canonical_unit} {canonical_container}"


def canonicalize_unit(raw: str | None) -> str | None:
    """
    Resolve a unit spelling to its canonical identifier.

    Compound container units are normalized as a whole:
    "14-ounce cans" -> "14-oz can". Unknown spellings return None.
    """
    if raw is None:
        return None
    text = " ".join(raw.split())
    if not text:
        return None

    canonical = lookup_unit(text)
    if canonical is not None:
        return canonical

    match = COMPOUND_UNIT_RE.match(text.lower())
    if match:
        return make_compound_unit(match.group("size"), match.group("unit"), match.group("container"))
    return None


def is_compound_unit(unit: str | None) -> bool:
    """Check whether a canonical unit is a sized container ("14-oz can")."""
    return bool(unit) and COMPOUND_UNIT_RE.match(unit) is not None


def identify_unit_type(unit: str | None) -> tuple[UnitFamily | None, float]:
    """
    Identify the unit family and conversion factor to the family's base unit.

    Returns:
        Tuple of (family, factor). Unknown units return (None, 1.0).
    """
    canonical = canonicalize_unit(unit)
    if canonical is None:
        return None, 1.0

    if canonical in VOLUME_UNITS:
        return UnitFamily.VOLUME, VOLUME_UNITS[canonical]

    if canonical in WEIGHT_UNITS:
        return UnitFamily.WEIGHT, WEIGHT_UNITS[canonical]

    return UnitFamily.COUNT, 1.0


def can_aggregate(unit1: str | None, unit2: str | None) -> bool:
    """
    Check if two units can be summed together.

    Identical units always can; otherwise both must be volume or both weight.
    Count units never convert into one another.
    """
    canonical1 = canonicalize_unit(unit1) or (unit1 or "").strip().lower() or None
    canonical2 = canonicalize_unit(unit2) or (unit2 or "").strip().lower() or None
    if canonical1 == canonical2:
        return True

    type1, _ = identify_unit_type(canonical1)
    type2, _ = identify_unit_type(canonical2)
    return type1 == type2 and type1 in (UnitFamily.VOLUME, UnitFamily.WEIGHT)


def convert_units(amount: float, from_unit: str, to_unit: str) -> float | None:
    """
    Convert an amount between two compatible units.

    Returns None for negative or NaN amounts, unknown units, or units in
    different families.
    """
    if amount is None or isinstance(amount, bool):
        return None
    try:
        amount = float(amount)
    except (TypeError, ValueError):
        return None
    if math.isnan(amount) or amount < 0:
        return None

    source = canonicalize_unit(from_unit)
    target = canonicalize_unit(to_unit)
    if source is None or target is None:
        return None
    if source == target:
        return amount
    if not can_aggregate(source, target):
        return None

    _, source_factor = identify_unit_type(source)
    _, target_factor = identify_unit_type(target)
    return amount * source_factor / target_factor


def unit_display_name(unit: str | None, amount: float | None = 1) -> str | None:
    """
    Get the display form of a canonical unit, pluralized for the amount.

    Amounts above one use the plural form ("1/2 cup", "1 cup", "2 cups");
    a missing amount uses the singular.
    """
    if not unit or unit == "null":
        return None

    canonical = canonicalize_unit(unit) or unit
    plural = amount is not None and amount > 1

    if canonical in DISPLAY_FORMS:
        singular_form, plural_form = DISPLAY_FORMS[canonical]
        return plural_form if plural else singular_form

    if canonical in COUNT_UNITS or is_compound_unit(canonical):
        return f"{canonical}s" if plural else canonical

    return canonical


def unit_spellings() -> list[str]:
    """All unit spellings, longest first, for prefix scanning."""
    return sorted(set(UNIT_ALIASES) | set(CASE_SENSITIVE_ALIASES), key=len, reverse=True)
