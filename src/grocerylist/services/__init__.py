"""Boundary adapters for external services."""

from grocerylist.services.categorization import (
    CategorizerError,
    CategoryProvider,
    HttpCategoryProvider,
    RuleBasedCategoryProvider,
    categorize_with_fallback,
)

__all__ = [
    "CategorizerError",
    "CategoryProvider",
    "HttpCategoryProvider",
    "RuleBasedCategoryProvider",
    "categorize_with_fallback",
]
