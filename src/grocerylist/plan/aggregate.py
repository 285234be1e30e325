"""Quantity aggregation across recipes."""

import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

from grocerylist.logging_config import get_logger
from grocerylist.normalize.amounts import format_amount
from grocerylist.normalize.ingredients import ParsedIngredient
from grocerylist.normalize.names import normalize_name
from grocerylist.normalize.units import (
    UnitFamily,
    canonicalize_unit,
    convert_units,
    identify_unit_type,
    unit_display_name,
)

# Unit-less ingredients that recipes routinely write without their unit
DEFAULT_UNITLESS_UNITS: dict[str, str] = {"garlic": "clove"}

NO_UNIT_BUCKET = "none"


@dataclass(frozen=True)
class SourcedIngredient:
    """One ingredient contribution, tagged with the recipe it came from."""

    name: str
    amount: float | None = None
    unit: str | None = None
    source: str | None = None

    @classmethod
    def from_parsed(cls, parsed: ParsedIngredient, source: str | None = None) -> "SourcedIngredient":
        """Build from a parsed ingredient line."""
        return cls(
            name=parsed.name,
            amount=parsed.amount_value,
            unit=parsed.unit_canonical or parsed.unit_raw,
            source=source,
        )


@dataclass
class AggregatedItem:
    """An ingredient with its quantities merged across recipes."""

    name: str
    amount: float | None
    unit: str | None
    source_count: int = 1
    source_recipe_titles: list[str] = field(default_factory=list)
    category: str = "Other"

    @property
    def unit_display(self) -> str | None:
        """Pluralization-aware unit for display."""
        return unit_display_name(self.unit, self.amount)

    @property
    def display_text(self) -> str:
        """Human-readable line, e.g. "1 ½ cups flour"."""
        parts = [format_amount(self.amount, glyphs=True), self.unit_display, self.name]
        return " ".join(p for p in parts if p)


@dataclass(frozen=True)
class _Entry:
    """A contribution after normalization, ready for grouping."""

    name: str
    bucket: str
    amount: float | None
    unit: str | None
    factor: float
    source: str | None

    @property
    def sort_key(self) -> tuple:
        # Larger units first, so a group's unit is the largest one present
        return (
            self.name,
            self.bucket,
            -self.factor,
            self.unit or "",
            -1.0 if self.amount is None else self.amount,
            self.source or "",
        )


@dataclass
class _Group:
    name: str
    bucket: str
    unit: str | None
    amount: float | None = None
    source_count: int = 0
    sources: set[str] = field(default_factory=set)

    def add(self, entry: _Entry) -> None:
        self.source_count += 1
        if entry.source:
            self.sources.add(entry.source)

        if entry.amount is None:
            return
        amount = entry.amount
        if entry.unit != self.unit:
            converted = convert_units(amount, entry.unit, self.unit)
            if converted is None:
                return
            amount = converted
        self.amount = amount if self.amount is None else self.amount + amount

    def to_item(self) -> AggregatedItem:
        return AggregatedItem(
            name=self.name,
            amount=self.amount,
            unit=self.unit,
            source_count=self.source_count,
            source_recipe_titles=sorted(self.sources),
        )


def _bucket_for(unit: str | None) -> tuple[str, float]:
    """Group bucket and conversion factor for a canonical (or unknown) unit."""
    if unit is None:
        return NO_UNIT_BUCKET, 0.0
    family, factor = identify_unit_type(unit)
    if family in (UnitFamily.VOLUME, UnitFamily.WEIGHT):
        return family.value, factor
    if family == UnitFamily.COUNT:
        return f"count:{unit}", factor
    return f"other:{unit}", 0.0


class Aggregator:
    """
    Merges ingredient contributions into shopping list quantities.

    Items are grouped by (normalized name, unit bucket). Volume units merge
    with volume, weight with weight; count units and unknown units only
    merge with the identical unit. Incompatible units for the same name
    stay as separate items.

    The result does not depend on input order: contributions are processed
    in a canonical order, so each group's unit is the largest unit present
    and sums are taken in the same sequence.
    """

    def __init__(
        self,
        unitless_default_units: Mapping[str, str] | None = None,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
    ):
        if unitless_default_units is None:
            unitless_default_units = DEFAULT_UNITLESS_UNITS
        self.unitless_default_units = {
            normalize_name(name): canonicalize_unit(unit) or unit
            for name, unit in unitless_default_units.items()
        }
        self.logger = logger if logger is not None else get_logger(__name__)

    def _prepare(self, item: SourcedIngredient) -> _Entry | None:
        name = normalize_name(item.name)
        if not name:
            return None

        amount = item.amount
        if amount is not None:
            try:
                amount = float(amount)
            except (TypeError, ValueError):
                amount = None
        if amount is not None and (math.isnan(amount) or math.isinf(amount) or amount < 0):
            amount = None

        unit = None
        if isinstance(item.unit, str) and item.unit.strip():
            unit = canonicalize_unit(item.unit) or " ".join(item.unit.lower().split())
        if unit is None and name in self.unitless_default_units:
            unit = self.unitless_default_units[name]
            self.logger.debug(f"Assuming unit {unit!r} for unit-less {name!r}")

        bucket, factor = _bucket_for(unit)
        return _Entry(
            name=name,
            bucket=bucket,
            amount=amount,
            unit=unit,
            factor=factor,
            source=item.source.strip() if isinstance(item.source, str) and item.source.strip() else None,
        )

    def aggregate(self, items: Iterable[SourcedIngredient | None]) -> list[AggregatedItem]:
        """
        Aggregate contributions into shopping list items, sorted by name.

        Contributions with neither amount nor unit only record presence:
        they fold into the first quantified group of the same name, or form
        an amount-less item when the name has no quantified group.
        """
        entries = [e for e in (self._prepare(i) for i in items if i is not None) if e is not None]
        entries.sort(key=lambda e: e.sort_key)

        groups: dict[tuple[str, str], _Group] = {}
        presence_only: dict[str, list[_Entry]] = {}

        for entry in entries:
            if entry.amount is None and entry.unit is None:
                presence_only.setdefault(entry.name, []).append(entry)
                continue

            key = (entry.name, entry.bucket)
            group = groups.get(key)
            if group is None:
                group = groups[key] = _Group(name=entry.name, bucket=entry.bucket, unit=entry.unit)
            group.add(entry)

        for name, name_entries in presence_only.items():
            target = next((g for key, g in groups.items() if key[0] == name), None)
            if target is None:
                target = groups[(name, NO_UNIT_BUCKET)] = _Group(
                    name=name, bucket=NO_UNIT_BUCKET, unit=None
                )
            for entry in name_entries:
                target.add(entry)

        by_name: dict[str, list[_Group]] = {}
        for (name, _bucket), group in groups.items():
            by_name.setdefault(name, []).append(group)
        split_names = [name for name, name_groups in by_name.items() if len(name_groups) > 1]
        if split_names:
            self.logger.debug(f"Kept incompatible units separate for: {', '.join(sorted(split_names))}")

        result = [groups[key].to_item() for key in sorted(groups)]
        self.logger.debug(f"Aggregated {len(entries)} ingredients into {len(result)} items")
        return result


def aggregate_ingredients(
    items: Iterable[SourcedIngredient | None],
    unitless_default_units: Mapping[str, str] | None = None,
    logger: logging.Logger | logging.LoggerAdapter | None = None,
) -> list[AggregatedItem]:
    """Aggregate sourced ingredients with a one-off Aggregator."""
    return Aggregator(unitless_default_units, logger=logger).aggregate(items)


def aggregate_parsed(
    parsed: Sequence[ParsedIngredient],
    sources: Sequence[str | None] | str | None = None,
) -> list[AggregatedItem]:
    """
    Aggregate parsed ingredients.

    Args:
        parsed: Parsed ingredient lines.
        sources: One recipe title for all lines, or one title per line.
    """
    if sources is None or isinstance(sources, str):
        labels: Sequence[str | None] = [sources] * len(parsed)
    else:
        labels = list(sources) + [None] * (len(parsed) - len(sources))
    return aggregate_ingredients(
        SourcedIngredient.from_parsed(p, source) for p, source in zip(parsed, labels)
    )
