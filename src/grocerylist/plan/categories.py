"""Rule-based grocery categorization, the fallback for the AI categorizer."""

import re
from dataclasses import dataclass, field
from typing import Iterable

PRODUCE = "Produce"
MEAT_SEAFOOD = "Meat & Seafood"
DAIRY_EGGS = "Dairy & Eggs"
PANTRY = "Pantry"
BAKERY = "Bakery"
FROZEN = "Frozen"
SPICES_HERBS = "Spices & Herbs"
CONDIMENTS_SAUCES = "Condiments & Sauces"
BEVERAGES = "Beverages"
SNACKS = "Snacks"
HEALTH_PERSONAL_CARE = "Health & Personal Care"
OTHER = "Other"

# Store-walk order; also the label set shared with the AI categorizer
GROCERY_CATEGORIES: tuple[str, ...] = (
    PRODUCE,
    MEAT_SEAFOOD,
    DAIRY_EGGS,
    PANTRY,
    BAKERY,
    FROZEN,
    SPICES_HERBS,
    CONDIMENTS_SAUCES,
    BEVERAGES,
    SNACKS,
    HEALTH_PERSONAL_CARE,
    OTHER,
)


@dataclass(frozen=True)
class CategoryRule:
    """
    Assigns a category when any keyword occurs in the name.

    Keywords match as whole words with an optional plural suffix; names in
    `exact` match only in full. A name containing any excluded keyword is
    never matched by a keyword.
    """

    category: str
    keywords: tuple[str, ...]
    exact: frozenset[str] = frozenset()
    exclude: tuple[str, ...] = ()
    _pattern: re.Pattern[str] | None = field(init=False, repr=False, compare=False)
    _exclude_pattern: re.Pattern[str] | None = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_pattern", _keyword_pattern(self.keywords) if self.keywords else None)
        object.__setattr__(
            self, "_exclude_pattern", _keyword_pattern(self.exclude) if self.exclude else None
        )

    def matches(self, name: str) -> bool:
        if name in self.exact:
            return True
        if self._exclude_pattern is not None and self._exclude_pattern.search(name):
            return False
        return self._pattern is not None and self._pattern.search(name) is not None


def _keyword_pattern(keywords: Iterable[str]) -> re.Pattern[str]:
    alternation = "|".join(re.escape(k) for k in sorted(keywords, key=len, reverse=True))
    return re.compile(rf"\b(?:{alternation})(?:s|es)?\b")


FRESH_HERBS = (
    "basil",
    "parsley",
    "cilantro",
    "mint",
    "dill",
    "thyme",
    "rosemary",
    "oregano",
    "sage",
    "tarragon",
    "chives",
)

# Ordered most-specific-first: the first matching rule wins
CATEGORY_RULES: tuple[CategoryRule, ...] = (
    # Produce items whose names contain pantry or spice words
    CategoryRule(
        PRODUCE,
        tuple(f"fresh {herb}" for herb in FRESH_HERBS)
        + ("green bean", "sugar snap pea", "snap pea", "snow pea", "bean sprout", "bell pepper"),
    ),
    CategoryRule(PANTRY, ("baking powder", "baking soda", "cocoa powder", "protein powder")),
    CategoryRule(
        SPICES_HERBS,
        (
            "powder",
            "salt",
            "black pepper",
            "white pepper",
            "peppercorn",
            "red pepper flakes",
            "chili flakes",
            "cayenne",
            "paprika",
            "cumin",
            "turmeric",
            "cinnamon",
            "nutmeg",
            "allspice",
            "cardamom",
            "coriander",
            "clove",
            "curry",
            "garam masala",
            "ground ginger",
            "seasoning",
            "spice",
            "oregano",
            "thyme",
            "rosemary",
            "sage",
            "marjoram",
            "tarragon",
            "bay leaf",
            "bay leaves",
            "herbes de provence",
            "mustard seed",
            "fennel seed",
            "celery seed",
            "saffron",
            "sumac",
            "za'atar",
            "star anise",
        ),
        exact=frozenset({"pepper"}),
    ),
    CategoryRule(PANTRY, ("broth", "stock", "bouillon")),
    CategoryRule(
        MEAT_SEAFOOD,
        (
            "chicken",
            "beef",
            "pork",
            "lamb",
            "turkey",
            "bacon",
            "sausage",
            "ham",
            "steak",
            "veal",
            "duck",
            "chorizo",
            "prosciutto",
            "pancetta",
            "salami",
            "pepperoni",
            "meatball",
            "salmon",
            "tuna",
            "shrimp",
            "prawn",
            "fish",
            "cod",
            "tilapia",
            "halibut",
            "crab",
            "lobster",
            "scallop",
            "mussel",
            "clam",
            "anchovy",
            "anchovies",
            "sardine",
        ),
        exclude=("sauce", "paste"),
    ),
    CategoryRule(
        CONDIMENTS_SAUCES,
        (
            "ketchup",
            "mustard",
            "mayonnaise",
            "mayo",
            "sauce",
            "salsa",
            "vinegar",
            "dressing",
            "relish",
            "sriracha",
            "hoisin",
            "pesto",
            "worcestershire",
            "jam",
            "jelly",
            "marinade",
            "miso",
            "mirin",
            "chutney",
            "anchovy paste",
            "curry paste",
        ),
    ),
    CategoryRule(
        PANTRY,
        (
            "oil",
            "flour",
            "sugar",
            "rice",
            "pasta",
            "spaghetti",
            "penne",
            "macaroni",
            "noodle",
            "bean",
            "lentil",
            "chickpea",
            "oat",
            "quinoa",
            "couscous",
            "breadcrumb",
            "bread crumb",
            "panko",
            "cornstarch",
            "cornmeal",
            "yeast",
            "vanilla",
            "extract",
            "honey",
            "syrup",
            "molasses",
            "peanut butter",
            "almond butter",
            "tahini",
            "coconut milk",
            "coconut cream",
            "almond milk",
            "oat milk",
            "nut",
            "almond",
            "walnut",
            "pecan",
            "cashew",
            "peanut",
            "pistachio",
            "raisin",
            "chocolate",
            "cocoa",
            "tomato paste",
            "crushed tomato",
            "canned",
            "can",
            "jar",
            "olive",
            "soup",
            "cereal",
            "gelatin",
            "sesame seed",
        ),
    ),
    CategoryRule(FROZEN, ("frozen", "ice cream", "ice", "sorbet", "popsicle")),
    CategoryRule(
        DAIRY_EGGS,
        (
            "milk",
            "buttermilk",
            "butter",
            "cheese",
            "cheddar",
            "mozzarella",
            "parmesan",
            "feta",
            "ricotta",
            "mascarpone",
            "gouda",
            "brie",
            "gruyere",
            "cream",
            "half and half",
            "yogurt",
            "egg",
            "ghee",
            "creme fraiche",
        ),
    ),
    CategoryRule(
        PRODUCE,
        (
            "onion",
            "garlic",
            "shallot",
            "scallion",
            "leek",
            "tomato",
            "potato",
            "carrot",
            "celery",
            "lettuce",
            "spinach",
            "kale",
            "arugula",
            "cabbage",
            "broccoli",
            "cauliflower",
            "zucchini",
            "squash",
            "pumpkin",
            "cucumber",
            "pepper",
            "jalapeno",
            "chili",
            "mushroom",
            "avocado",
            "lemon",
            "lime",
            "orange",
            "apple",
            "banana",
            "berry",
            "berries",
            "strawberry",
            "blueberry",
            "raspberry",
            "grape",
            "peach",
            "pear",
            "plum",
            "mango",
            "pineapple",
            "melon",
            "watermelon",
            "cherry",
            "corn",
            "ginger",
            "asparagus",
            "eggplant",
            "pea",
            "radish",
            "beet",
            "sprout",
            "bok choy",
            "fennel",
            "artichoke",
            "herb",
            "basil",
            "parsley",
            "cilantro",
            "mint",
            "dill",
            "chives",
            "lemongrass",
            "fruit",
            "vegetable",
            "greens",
        ),
        exclude=("tortilla", "chip", "starch", "syrup"),
    ),
    CategoryRule(
        BAKERY,
        (
            "bread",
            "baguette",
            "bun",
            "roll",
            "tortilla",
            "pita",
            "naan",
            "bagel",
            "croissant",
            "muffin",
            "pie crust",
            "brioche",
            "ciabatta",
            "focaccia",
            "sourdough",
            "pizza dough",
            "cake",
        ),
        exclude=("chip",),
    ),
    CategoryRule(
        BEVERAGES,
        (
            "water",
            "soda",
            "juice",
            "coffee",
            "tea",
            "wine",
            "beer",
            "vodka",
            "rum",
            "bourbon",
            "whiskey",
            "tequila",
            "sake",
            "kombucha",
            "lemonade",
        ),
    ),
    CategoryRule(
        SNACKS,
        (
            "tortilla chip",
            "chip",
            "cracker",
            "pretzel",
            "popcorn",
            "cookie",
            "granola",
            "candy",
            "jerky",
            "trail mix",
        ),
    ),
    CategoryRule(
        HEALTH_PERSONAL_CARE,
        ("vitamin", "supplement", "soap", "shampoo", "toothpaste", "tissue", "paper towel"),
    ),
)


def categorize(name: str | None) -> str:
    """
    Map an ingredient name to a grocery store section.

    Deterministic and side-effect-free; unknown names fall back to "Other".
    """
    if not isinstance(name, str):
        return OTHER
    text = " ".join(name.lower().split())
    if not text:
        return OTHER

    for rule in CATEGORY_RULES:
        if rule.matches(text):
            return rule.category
    return OTHER


def categorize_all(names: Iterable[str]) -> dict[str, str]:
    """Categorize several names, preserving their order."""
    return {name: categorize(name) for name in names if isinstance(name, str)}


def sort_categories(categories: Iterable[str]) -> list[str]:
    """Sort category labels in store-walk order; unknown labels follow alphabetically."""
    known = {label: index for index, label in enumerate(GROCERY_CATEGORIES)}
    unique = set(categories)
    return sorted(unique, key=lambda c: (0, known[c], "") if c in known else (1, 0, c))


def canonical_category(label: str | None) -> str | None:
    """Match a category label case-insensitively against GROCERY_CATEGORIES."""
    if not isinstance(label, str):
        return None
    wanted = " ".join(label.split()).lower()
    for category in GROCERY_CATEGORIES:
        if category.lower() == wanted:
            return category
    return None
