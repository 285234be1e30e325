"""Unit tests for ingredient aggregation across recipes."""

import itertools
from unittest.mock import MagicMock

import pytest

from grocerylist.normalize.ingredients import parse_ingredient
from grocerylist.plan.aggregate import (
    AggregatedItem,
    Aggregator,
    SourcedIngredient,
    aggregate_ingredients,
    aggregate_parsed,
)


def _summary(items):
    """Order-insensitive view of an aggregation result."""
    return sorted(
        (
            i.name,
            i.unit or "",
            None if i.amount is None else round(i.amount, 9),
            i.source_count,
            tuple(i.source_recipe_titles),
        )
        for i in items
    )


class TestAggregateIngredients:
    """Tests for aggregate_ingredients function."""

    def test_same_name_same_unit(self):
        """Test "onion" and "onions" in cups merge into one item."""
        result = aggregate_ingredients(
            [
                SourcedIngredient(name="onion", amount=1, unit="cup"),
                SourcedIngredient(name="onions", amount=0.5, unit="cup"),
            ]
        )

        assert len(result) == 1
        assert result[0].name == "onion"
        assert result[0].amount == pytest.approx(1.5)
        assert result[0].unit == "cup"
        assert result[0].source_count == 2

    def test_converts_into_largest_unit(self):
        """Test compatible units convert into the largest unit present."""
        result = aggregate_ingredients(
            [
                SourcedIngredient(name="flour", amount=2, unit="tbsp"),
                SourcedIngredient(name="flour", amount=1, unit="cup"),
            ]
        )

        assert len(result) == 1
        assert result[0].unit == "cup"
        assert result[0].amount == pytest.approx(1.125)

    def test_weight_conversion(self):
        """Test weight units merge."""
        result = aggregate_ingredients(
            [
                SourcedIngredient(name="ground beef", amount=8, unit="oz"),
                SourcedIngredient(name="ground beef", amount=1, unit="lb"),
            ]
        )

        assert len(result) == 1
        assert result[0].unit == "lb"
        assert result[0].amount == pytest.approx(1.5)

    def test_chili_plurals_merge(self):
        """Test "chilies", "chillies" and "chili" are one item."""
        result = aggregate_parsed(
            [parse_ingredient("2 chilies"), parse_ingredient("1 chili"), parse_ingredient("1 red chilli")],
            "Salsa",
        )

        assert _summary(result) == [
            ("chili", "", 3.0, 2, ("Salsa",)),
            ("red chili", "", 1.0, 1, ("Salsa",)),
        ]

    def test_canned_and_plain_merge(self):
        """Test processed forms merge with the plain item."""
        result = aggregate_ingredients(
            [
                SourcedIngredient(name="canned tomatoes", amount=1, unit="cup"),
                SourcedIngredient(name="tomatoes", amount=0.5, unit="cup"),
            ]
        )

        assert len(result) == 1
        assert result[0].name == "tomato"
        assert result[0].amount == pytest.approx(1.5)

    def test_count_and_volume_stay_separate(self):
        """Test a count unit and a volume unit are never merged."""
        result = aggregate_ingredients(
            [
                SourcedIngredient(name="onion", amount=2, unit="each"),
                SourcedIngredient(name="onion", amount=1, unit="cup"),
            ]
        )

        assert len(result) == 2
        assert {(i.unit, i.amount) for i in result} == {("each", 2.0), ("cup", 1.0)}

    def test_different_count_units_stay_separate(self):
        """Test cans and jars of the same item are separate items."""
        result = aggregate_ingredients(
            [
                SourcedIngredient(name="tomato sauce", amount=1, unit="can"),
                SourcedIngredient(name="tomato sauce", amount=1, unit="jar"),
            ]
        )

        assert len(result) == 2

    def test_volume_and_weight_stay_separate(self):
        """Test volume and weight of the same name are separate items."""
        result = aggregate_ingredients(
            [
                SourcedIngredient(name="sugar", amount=1, unit="cup"),
                SourcedIngredient(name="sugar", amount=100, unit="g"),
            ]
        )

        assert sorted(i.unit for i in result) == ["cup", "g"]

    def test_garlic_defaults_to_cloves(self):
        """Test unit-less garlic is counted in cloves."""
        result = aggregate_ingredients(
            [
                SourcedIngredient(name="garlic", amount=3),
                SourcedIngredient(name="garlic cloves", amount=2, unit="cloves"),
            ]
        )

        assert len(result) == 1
        assert result[0].name == "garlic"
        assert result[0].unit == "clove"
        assert result[0].amount == pytest.approx(5)

    def test_unitless_defaults_are_configurable(self):
        """Test the unit-less default table can be replaced."""
        result = aggregate_ingredients(
            [
                SourcedIngredient(name="garlic", amount=3),
                SourcedIngredient(name="garlic", amount=2, unit="clove"),
                SourcedIngredient(name="shallots", amount=2),
                SourcedIngredient(name="shallot", amount=1, unit="each"),
            ],
            unitless_default_units={"shallot": "each"},
        )

        by_key = {(i.name, i.unit): i.amount for i in result}
        assert by_key == {
            ("garlic", None): 3.0,
            ("garlic", "clove"): 2.0,
            ("shallot", "each"): 3.0,
        }

    def test_presence_only_folds_into_quantified_item(self):
        """Test an item without amount or unit only records presence."""
        result = aggregate_ingredients(
            [
                SourcedIngredient(name="salt", source="Soup"),
                SourcedIngredient(name="salt", amount=1, unit="tsp", source="Stew"),
            ]
        )

        assert len(result) == 1
        assert result[0].amount == 1.0
        assert result[0].unit == "tsp"
        assert result[0].source_count == 2
        assert result[0].source_recipe_titles == ["Soup", "Stew"]

    def test_presence_only_alone(self):
        """Test names that never have a quantity keep a null amount."""
        result = aggregate_ingredients(
            [SourcedIngredient(name="black pepper"), SourcedIngredient(name="ground black pepper")]
        )

        assert len(result) == 1
        assert result[0].name == "black pepper"
        assert result[0].amount is None
        assert result[0].unit is None
        assert result[0].source_count == 2

    def test_unknown_units_merge_with_themselves(self):
        """Test unrecognized units merge only when identical."""
        result = aggregate_ingredients(
            [
                SourcedIngredient(name="thyme", amount=2, unit="Sprig-ish"),
                SourcedIngredient(name="thyme", amount=1, unit="sprig-ish"),
            ]
        )

        assert len(result) == 1
        assert result[0].unit == "sprig-ish"
        assert result[0].amount == 3.0

    def test_invalid_amounts_ignored(self):
        """Test negative and NaN amounts count as missing."""
        result = aggregate_ingredients(
            [
                SourcedIngredient(name="milk", amount=-1, unit="cup"),
                SourcedIngredient(name="milk", amount=float("nan"), unit="cup"),
                SourcedIngredient(name="milk", amount=1, unit="cup"),
            ]
        )

        assert len(result) == 1
        assert result[0].amount == 1.0
        assert result[0].source_count == 3

    def test_source_titles_deduplicated_and_sorted(self):
        """Test titles are listed once each, sorted."""
        result = aggregate_ingredients(
            [
                SourcedIngredient(name="egg", amount=1, source="Pancakes"),
                SourcedIngredient(name="eggs", amount=2, source="Frittata"),
                SourcedIngredient(name="egg", amount=1, source="Pancakes"),
            ]
        )

        assert result[0].amount == 4.0
        assert result[0].source_count == 3
        assert result[0].source_recipe_titles == ["Frittata", "Pancakes"]

    def test_blank_names_and_none_skipped(self):
        """Test blank names and None entries are dropped."""
        result = aggregate_ingredients([None, SourcedIngredient(name="  "), SourcedIngredient(name="rice")])

        assert [i.name for i in result] == ["rice"]

    def test_result_sorted_by_name(self):
        """Test items come back sorted by name."""
        result = aggregate_ingredients(
            [SourcedIngredient(name=n, amount=1) for n in ("zucchini", "apple", "milk")]
        )

        assert [i.name for i in result] == ["apple", "milk", "zucchini"]

    def test_empty(self):
        """Test empty input."""
        assert aggregate_ingredients([]) == []


class TestAggregationOrderIndependence:
    """Permutation tests for aggregation."""

    ITEMS = [
        SourcedIngredient(name="onion", amount=1, unit="cup", source="A"),
        SourcedIngredient(name="onions", amount=2, unit="tbsp", source="B"),
        SourcedIngredient(name="garlic", amount=2, source="A"),
        SourcedIngredient(name="garlic", amount=1, unit="tbsp", source="C"),
        SourcedIngredient(name="milk", amount=200, unit="ml", source="B"),
        SourcedIngredient(name="milk", amount=1, unit="cup", source="C"),
    ]

    def test_all_permutations_agree(self):
        """Test every input order yields the same items."""
        expected = _summary(aggregate_ingredients(self.ITEMS))

        for permutation in itertools.permutations(self.ITEMS):
            assert _summary(aggregate_ingredients(permutation)) == expected

    def test_expected_totals(self):
        """Test the totals of the permutation fixture."""
        by_key = {(i.name, i.unit): i for i in aggregate_ingredients(self.ITEMS)}

        assert by_key[("onion", "cup")].amount == pytest.approx(1.125)
        assert by_key[("milk", "cup")].amount == pytest.approx(1 + 200 / 236.5882365)
        assert by_key[("garlic", "clove")].amount == 2.0
        assert by_key[("garlic", "tbsp")].amount == 1.0


class TestAggregatedItem:
    """Tests for AggregatedItem display helpers."""

    def test_display_text(self):
        """Test amount, unit and name are rendered together."""
        item = AggregatedItem(name="flour", amount=1.5, unit="cup")

        assert item.unit_display == "cups"
        assert item.display_text == "1 ½ cups flour"

    def test_display_text_without_quantity(self):
        """Test presence-only items show just the name."""
        assert AggregatedItem(name="salt", amount=None, unit=None).display_text == "salt"

    def test_display_compound_unit(self):
        """Test compound units pluralize the container."""
        item = AggregatedItem(name="white beans", amount=4, unit="14-oz can")

        assert item.display_text == "4 14-oz cans white beans"


class TestAggregator:
    """Tests for the Aggregator class."""

    def test_aggregate_parsed(self):
        """Test aggregating parsed lines with per-line titles."""
        parsed = [parse_ingredient("1 cup onion"), parse_ingredient("1/2 cup onions, diced")]

        result = aggregate_parsed(parsed, ["Soup", "Stew"])

        assert len(result) == 1
        assert result[0].amount == pytest.approx(1.5)
        assert result[0].source_recipe_titles == ["Soup", "Stew"]

    def test_aggregate_parsed_single_title(self):
        """Test one title applies to every line."""
        result = aggregate_parsed([parse_ingredient("2 eggs")], "Omelette")

        assert result[0].source_recipe_titles == ["Omelette"]

    def test_injected_logger(self):
        """Test the aggregator logs through an injected logger."""
        logger = MagicMock()
        aggregator = Aggregator(logger=logger)

        aggregator.aggregate([SourcedIngredient(name="garlic", amount=2)])

        assert logger.debug.called

    def test_from_parsed(self):
        """Test SourcedIngredient conversion from a parsed line."""
        item = SourcedIngredient.from_parsed(parse_ingredient("2 cups rice"), source="Pilaf")

        assert item == SourcedIngredient(name="rice", amount=2.0, unit="cup", source="Pilaf")
