"""Ingredient line parsing: amount, unit, name and preparation."""

import re
from dataclasses import asdict, dataclass, replace
from typing import Any, Iterable

from pydantic import ValidationError

from grocerylist.logging_config import get_logger
from grocerylist.normalize.amounts import (
    APPROXIMATION,
    RANGE_AMOUNT,
    SINGLE_AMOUNT,
    format_amount,
    parse_amount,
    scale_amount,
)
from grocerylist.normalize.units import (
    CASE_SENSITIVE_ALIASES,
    CONTAINER_UNITS,
    UNIT_ALIASES,
    VOLUME_UNITS,
    WEIGHT_UNITS,
    canonicalize_unit,
    make_compound_unit,
    unit_display_name,
    unit_spellings,
)
from grocerylist.normalize.vocabulary import DESCRIPTIVE_ADJECTIVES
from grocerylist.schemas import IngredientGroup, IngredientInput

logger = get_logger(__name__)

DEFAULT_GROUP_NAME = "Main"


@dataclass(frozen=True)
class ParsedIngredient:
    """Structured form of one raw ingredient line."""

    amount_raw: str | None = None
    amount_value: float | None = None
    unit_raw: str | None = None
    unit_canonical: str | None = None
    unit_display: str | None = None
    name: str = ""
    preparation: str | None = None

    @property
    def amount(self) -> str | None:
        return self.amount_raw

    @property
    def unit(self) -> str | None:
        return self.unit_canonical

    @property
    def parsed_amount(self) -> float | None:
        return self.amount_value

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary."""
        return asdict(self)


# =============================================================================
# Patterns
# =============================================================================


def _alternation(spellings: Iterable[str]) -> str:
    return "|".join(re.escape(s) for s in sorted(spellings, key=len, reverse=True))


_CI_UNITS = _alternation(s for s in unit_spellings() if s in UNIT_ALIASES)
_CS_UNITS = _alternation(CASE_SENSITIVE_ALIASES)
_SIZE_UNITS = _alternation(
    s for s, canonical in UNIT_ALIASES.items() if canonical in VOLUME_UNITS or canonical in WEIGHT_UNITS
)
_CONTAINERS = _alternation(s for s, canonical in UNIT_ALIASES.items() if canonical in CONTAINER_UNITS)
_SIZE = r"\d+(?:\.\d+)?(?:/\d+)?"
_SIZE_WITH_UNIT = rf"(?P<size>{_SIZE})\s*-?\s*(?P<unit>{_SIZE_UNITS})(?![a-z])\.?"

# An amount is followed by whitespace, the end, a letter, or "-" and a letter ("14.5-ounce")
AMOUNT_RE = re.compile(
    rf"^(?P<amount>(?:{APPROXIMATION}\s*)?(?:{RANGE_AMOUNT}|{SINGLE_AMOUNT}))"
    r"(?=\s|$|[^\W\d_]|-[^\W\d_])",
    re.IGNORECASE,
)

# (pattern, default amount, unit)
SPECIAL_AMOUNT_PHRASES: list[tuple[re.Pattern[str], float | None, str | None]] = [
    (re.compile(r"^(?:a\s+)?pinch\s+of\b", re.IGNORECASE), 1.0, "pinch"),
    (re.compile(r"^(?:a\s+)?dash\s+of\b", re.IGNORECASE), 1.0, "dash"),
    (re.compile(r"^(?:a\s+)?splash\s+of\b", re.IGNORECASE), 1.0, "splash"),
    (re.compile(r"^(?:a\s+)?handful\s+of\b", re.IGNORECASE), 1.0, "handful"),
    (re.compile(r"^a\s+couple(?:\s+of)?\b", re.IGNORECASE), 2.0, None),
    (re.compile(r"^a\s+few\b", re.IGNORECASE), None, None),
    (re.compile(r"^a\s+little\b", re.IGNORECASE), None, None),
    (re.compile(r"^some\b", re.IGNORECASE), None, None),
]

CI_UNIT_RE = re.compile(rf"^(?P<unit>{_CI_UNITS})(?![a-z])\.?", re.IGNORECASE)
CS_UNIT_RE = re.compile(rf"^(?P<unit>{_CS_UNITS})(?![A-Za-z])\.?")
LEADING_OF_RE = re.compile(r"^of\s+", re.IGNORECASE)

COMPOUND_UNIT_PATTERNS: list[re.Pattern[str]] = [
    # "14-ounce cans", "14.5 oz can"
    re.compile(rf"^{_SIZE_WITH_UNIT}\s+(?P<container>{_CONTAINERS})(?![a-z])", re.IGNORECASE),
    # "(14 oz) can"
    re.compile(
        rf"^\(\s*{_SIZE_WITH_UNIT}\s*\)\s*(?P<container>{_CONTAINERS})(?![a-z])", re.IGNORECASE
    ),
    # "can (14 oz)"
    re.compile(
        rf"^(?P<container>{_CONTAINERS})(?![a-z])\s*\(\s*{_SIZE_WITH_UNIT}\s*\)", re.IGNORECASE
    ),
]

PARENTHETICAL_RE = re.compile(r"\(([^()]*)\)")
UNIT_INFO_RE = re.compile(
    rf"^(?:{APPROXIMATION}\s*)?(?:{RANGE_AMOUNT}|{SINGLE_AMOUNT})\s*-?\s*(?:{_CI_UNITS})(?![a-z])",
    re.IGNORECASE,
)
ALTERNATIVE_RE = re.compile(r"^or\b|(?<=[^\W\d])\s*/\s*(?=[^\W\d])", re.IGNORECASE)


# =============================================================================
# Parsing Stages
# =============================================================================


def _top_level_comma(text: str) -> int | None:
    depth = 0
    for index, char in enumerate(text):
        if char == "(":
            depth += 1
        elif char == ")":
            depth = max(depth - 1, 0)
        elif char == "," and depth == 0:
            return index
    return None


def _extract_preparation(text: str) -> tuple[str, str | None]:
    """
    Split off preparation notes.

    Takes the clause after the first top-level comma and any parenthetical
    that is neither unit information ("(14 oz)") nor an alternative
    ("(or to taste)", "(milk/cream)").
    """
    notes: list[str] = []

    comma = _top_level_comma(text)
    head, tail = (text[:comma], text[comma + 1 :]) if comma is not None else (text, "")

    def _take(match: re.Match[str]) -> str:
        content = " ".join(match.group(1).split())
        if not content or UNIT_INFO_RE.match(content) or ALTERNATIVE_RE.search(content):
            return match.group(0)
        notes.append(content)
        return " "

    head = PARENTHETICAL_RE.sub(_take, head)
    notes.append(tail)

    cleaned = [n.strip(" ,;") for n in notes]
    preparation = ", ".join(n for n in cleaned if n) or None
    return " ".join(head.split()), preparation


def _extract_amount(text: str) -> tuple[str | None, float | None, str | None, str]:
    """Return (amount_raw, amount_value, implied_unit, remainder)."""
    for pattern, default_amount, implied_unit in SPECIAL_AMOUNT_PHRASES:
        match = pattern.match(text)
        if match:
            return match.group(0), default_amount, implied_unit, text[match.end() :].strip()

    match = AMOUNT_RE.match(text)
    if match:
        raw = " ".join(match.group("amount").split())
        return raw, parse_amount(raw), None, text[match.end() :].lstrip(" -")

    return None, None, None, text


def _extract_compound_unit(text: str) -> tuple[str | None, str | None, str]:
    """Fold a sized container ("14-ounce cans") into one unit. Returns (raw, canonical, remainder)."""
    for pattern in COMPOUND_UNIT_PATTERNS:
        match = pattern.match(text)
        if not match:
            continue
        canonical = make_compound_unit(match.group("size"), match.group("unit"), match.group("container"))
        if canonical:
            return match.group(0), canonical, text[match.end() :].strip()
    return None, None, text


def _extract_unit(text: str) -> tuple[str | None, str | None, str]:
    """Longest-match unit scan. Returns (raw, canonical, remainder)."""
    first_word = text.split(" ", 1)[0].lower().strip(",.;:")
    if first_word in DESCRIPTIVE_ADJECTIVES:
        return None, None, text

    match = CI_UNIT_RE.match(text) or CS_UNIT_RE.match(text)
    if not match:
        return None, None, text

    canonical = canonicalize_unit(match.group("unit"))
    if canonical is None:
        return None, None, text

    remainder = LEADING_OF_RE.sub("", text[match.end() :].strip(), count=1)
    return match.group(0), canonical, remainder


def parse_ingredient(line: str | None) -> ParsedIngredient:
    """
    Parse one raw ingredient line.

    Stages run in order, each on the remainder of the previous one:
    preparation, amount, compound container unit, unit, name.

    Examples:
        "1/2 cup sugar" -> amount "1/2", unit "cup", name "sugar"
        "4 14-ounce cans white beans" -> amount "4", unit "14-oz can", name "white beans"
        "2 cups onions, diced" -> preparation "diced"
        "salt to taste" -> no amount, no unit, name "salt to taste"

    Never raises; unparseable input comes back as the name.
    """
    if not isinstance(line, str):
        return ParsedIngredient()

    original = " ".join(line.split())
    if not original:
        return ParsedIngredient()

    remainder, preparation = _extract_preparation(original)
    amount_raw, amount_value, unit_canonical, remainder = _extract_amount(remainder)
    unit_raw = unit_canonical

    if amount_raw is not None and unit_canonical is None:
        unit_raw, unit_canonical, remainder = _extract_compound_unit(remainder)
        if unit_canonical is None:
            unit_raw, unit_canonical, remainder = _extract_unit(remainder)

    name = remainder.strip(" ,;:-")

    if amount_raw is None and unit_raw is None and preparation is None:
        name = original
    elif not name:
        if unit_raw is not None:
            # "2 cloves": the unit word is all there is to name
            name, unit_raw, unit_canonical = unit_raw, None, None
        else:
            name = original

    unit_display = unit_display_name(unit_canonical, amount_value) if unit_canonical else None

    return ParsedIngredient(
        amount_raw=amount_raw,
        amount_value=amount_value,
        unit_raw=unit_raw,
        unit_canonical=unit_canonical,
        unit_display=unit_display,
        name=name,
        preparation=preparation,
    )


# =============================================================================
# Structured Input Coercion
# =============================================================================


def _from_input(item: IngredientInput) -> ParsedIngredient | None:
    name = " ".join(item.name.split())
    if not name:
        return None
    preparation = (item.preparation or "").strip() or None
    unit_raw = (item.unit or "").strip() or None

    if isinstance(item.amount, (int, float)):
        amount_value = float(item.amount) if item.amount >= 0 else None
        amount_raw = format_amount(amount_value)
    else:
        amount_raw = (item.amount or "").strip() or None
        amount_value = parse_amount(amount_raw)

    if amount_raw is None and unit_raw is None:
        # Some producers put the whole line into the name
        parsed = parse_ingredient(name)
        if parsed.amount_raw is not None:
            return replace(parsed, preparation=parsed.preparation or preparation)

    unit_canonical = canonicalize_unit(unit_raw)
    if unit_canonical:
        unit_display = unit_display_name(unit_canonical, amount_value)
    else:
        unit_display = unit_raw

    return ParsedIngredient(
        amount_raw=amount_raw,
        amount_value=amount_value,
        unit_raw=unit_raw,
        unit_canonical=unit_canonical,
        unit_display=unit_display,
        name=name,
        preparation=preparation,
    )


def _coerce_entry(entry: Any) -> str | IngredientInput | None:
    """Validate one ingredient entry into a raw line or an IngredientInput."""
    if isinstance(entry, str):
        return entry if entry.strip() else None
    if isinstance(entry, IngredientInput):
        return entry
    if isinstance(entry, dict):
        try:
            return IngredientInput.model_validate(entry)
        except ValidationError as e:
            logger.warning(f"Skipping invalid ingredient entry {entry!r}: {e.error_count()} errors")
            return None
    if entry is not None:
        logger.warning(f"Skipping ingredient entry of unsupported type {type(entry).__name__}")
    return None


def coerce_to_structured_ingredients(items: Any) -> list[ParsedIngredient]:
    """
    Turn a loosely-typed ingredient list into ParsedIngredients.

    Accepts raw strings, dicts with name/amount/unit/preparation,
    IngredientInput models and ParsedIngredients. Blank, None and invalid
    entries are skipped.
    """
    if items is None:
        return []
    if isinstance(items, (str, dict, IngredientInput, ParsedIngredient)):
        items = [items]

    result: list[ParsedIngredient] = []
    for item in items:
        if isinstance(item, ParsedIngredient):
            if item.name:
                result.append(item)
            continue

        entry = _coerce_entry(item)
        if entry is None:
            continue

        parsed = parse_ingredient(entry) if isinstance(entry, str) else _from_input(entry)
        if parsed is not None and parsed.name:
            result.append(parsed)

    return result


def coerce_to_ingredient_groups(groups: Any) -> list[IngredientGroup]:
    """
    Validate ingredient groups, e.g. from an AI recipe parse.

    Each group is {"name": ..., "ingredients": [...]}. Missing names default
    to "Main", invalid entries are dropped, and groups left empty are
    removed. Loose ingredients outside any group are collected into a
    leading "Main" group.
    """
    if groups is None:
        return []
    if isinstance(groups, (str, dict, IngredientGroup, IngredientInput)):
        groups = [groups]

    result: list[IngredientGroup] = []
    loose: list[str | IngredientInput] = []

    for group in groups:
        if isinstance(group, IngredientGroup):
            name, entries = group.name, group.ingredients
        elif isinstance(group, dict) and "ingredients" in group:
            name, entries = group.get("name"), group.get("ingredients")
        else:
            entry = _coerce_entry(group)
            if entry is not None:
                loose.append(entry)
            continue

        if isinstance(entries, (str, dict)):
            entries = [entries]
        ingredients = [e for e in map(_coerce_entry, entries or []) if e is not None]
        if not ingredients:
            logger.debug(f"Dropping empty ingredient group {name!r}")
            continue

        group_name = name.strip() if isinstance(name, str) and name.strip() else DEFAULT_GROUP_NAME
        result.append(IngredientGroup(name=group_name, ingredients=ingredients))

    if loose:
        result.insert(0, IngredientGroup(name=DEFAULT_GROUP_NAME, ingredients=loose))

    return result


# =============================================================================
# Scaling
# =============================================================================


def scale_ingredient(parsed: ParsedIngredient, factor: float) -> ParsedIngredient:
    """
    Scale an ingredient's amount, re-rendering the amount and unit display.

    Ingredients without a numeric amount and invalid factors are returned
    unchanged.
    """
    if parsed.amount_value is None:
        return parsed

    scaled = scale_amount(parsed.amount_value, factor)
    if scaled == parsed.amount_value:
        return parsed

    unit_display = parsed.unit_display
    if parsed.unit_canonical:
        unit_display = unit_display_name(parsed.unit_canonical, scaled)

    return replace(
        parsed,
        amount_raw=format_amount(scaled),
        amount_value=scaled,
        unit_display=unit_display,
    )
