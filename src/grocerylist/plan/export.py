"""Text exports of a shopping list."""

from datetime import date
from typing import TYPE_CHECKING, Collection

if TYPE_CHECKING:
    from grocerylist.plan.aggregate import AggregatedItem
    from grocerylist.plan.shopping_list import ShoppingList

DEFAULT_TITLE = "Grocery List"


def _recipe_suffix(item: "AggregatedItem") -> str:
    count = len(item.source_recipe_titles)
    return f" *(from {count} recipes)*" if count > 1 else ""


def _format_date(day: date) -> str:
    return f"{day:%B} {day.day}, {day.year}"


def _sections(shopping_list: "ShoppingList") -> list[tuple[str, list["AggregatedItem"]]]:
    sections = []
    for category in shopping_list.categories():
        items = sorted(shopping_list.items_by_category.get(category, []), key=lambda i: i.name)
        if items:
            sections.append((category, items))
    return sections


def render_markdown(
    shopping_list: "ShoppingList",
    checked: Collection[str] | None = None,
    generated_on: date | None = None,
) -> str:
    """
    Render a shopping list as a Markdown checklist.

    Args:
        shopping_list: The list to render.
        checked: Item names to render as checked.
        generated_on: Date shown under the title; defaults to today.
    """
    checked = set(checked or ())
    title = shopping_list.name or DEFAULT_TITLE
    lines = [f"# {title}", "", f"*Generated on {_format_date(generated_on or date.today())}*", ""]

    for category, items in _sections(shopping_list):
        lines.append(f"## {category}")
        lines.append("")
        for item in items:
            box = "[x]" if item.name in checked else "[ ]"
            lines.append(f"- {box} {item.display_text}{_recipe_suffix(item)}")
        lines.append("")

    return "\n".join(lines)


def render_plain_text(
    shopping_list: "ShoppingList",
    checked: Collection[str] | None = None,
) -> str:
    """Render a shopping list as plain text with check-box glyphs."""
    checked = set(checked or ())
    lines = [shopping_list.name or DEFAULT_TITLE, ""]

    for category, items in _sections(shopping_list):
        lines.append(category.upper())
        for item in items:
            box = "☑" if item.name in checked else "☐"
            lines.append(f"{box} {item.display_text}")
        lines.append("")

    return "\n".join(lines)
