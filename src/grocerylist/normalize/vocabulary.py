"""Static word tables used by ingredient parsing and name normalization."""

# =============================================================================
# Ingredient Line Parser
# =============================================================================

# Leading words that describe the ingredient and are never a unit
DESCRIPTIVE_ADJECTIVES: frozenset[str] = frozenset(
    {
        "large",
        "medium",
        "small",
        "extra-large",
        "jumbo",
        "big",
        "fresh",
        "whole",
        "ripe",
        "baby",
        "thin",
        "thick",
    }
)

# =============================================================================
# Name Normalizer
# =============================================================================

# Phrases removed anywhere in a name
NOISE_PHRASES: tuple[str, ...] = (
    "or to taste",
    "to taste",
    "for garnish",
    "for garnishing",
    "for serving",
    "for frying",
    "for greasing",
    "for the pan",
    "plus more",
    "or more",
    "as needed",
    "if needed",
    "if desired",
    "optional",
    "divided",
    "at room temperature",
    "room temperature",
)

# Whole-phrase synonyms. Values are already in normalized form.
ALIASES: dict[str, str] = {
    # Garlic
    "garlic cloves": "garlic",
    "garlic clove": "garlic",
    "cloves garlic": "garlic",
    "clove garlic": "garlic",
    "cloves of garlic": "garlic",
    "clove of garlic": "garlic",
    "garlic bulb": "garlic",
    "head of garlic": "garlic",
    "heads of garlic": "garlic",
    # Onions
    "green onions": "scallion",
    "green onion": "scallion",
    "spring onions": "scallion",
    "spring onion": "scallion",
    "scallions": "scallion",
    # Oils
    "extra virgin olive oil": "olive oil",
    "virgin olive oil": "olive oil",
    "evoo": "olive oil",
    "light olive oil": "olive oil",
    # Salt and pepper
    "iodized salt": "table salt",
    "ground black pepper": "black pepper",
    "cracked black pepper": "black pepper",
    "black peppercorns ground": "black pepper",
    "ground pepper": "black pepper",
    "crushed red pepper flakes": "red pepper flakes",
    "crushed red pepper": "red pepper flakes",
    "chili flakes": "red pepper flakes",
    "chilli flakes": "red pepper flakes",
    # Herbs
    "coriander leaves": "cilantro",
    "fresh coriander": "fresh cilantro",
    "cilantro leaves": "cilantro",
    "parsley leaves": "parsley",
    "basil leaves": "basil",
    "mint leaves": "mint",
    "thyme leaves": "thyme",
    "flat leaf parsley": "parsley",
    "italian parsley": "parsley",
    # Produce
    "ginger root": "ginger",
    "root ginger": "ginger",
    "gingerroot": "ginger",
    "courgettes": "zucchini",
    "courgette": "zucchini",
    "aubergines": "eggplant",
    "aubergine": "eggplant",
    "capsicums": "bell pepper",
    "capsicum": "bell pepper",
    "rocket": "arugula",
    # Pantry
    "garbanzo beans": "chickpeas",
    "garbanzos": "chickpeas",
    "confectioners sugar": "powdered sugar",
    "confectioners' sugar": "powdered sugar",
    "icing sugar": "powdered sugar",
    "caster sugar": "superfine sugar",
    "bicarbonate of soda": "baking soda",
    "bicarb soda": "baking soda",
    "corn starch": "cornstarch",
    "cornflour": "cornstarch",
    "soya sauce": "soy sauce",
    "plain flour": "all purpose flour",
    "ap flour": "all purpose flour",
    "chicken stock": "chicken broth",
    "beef stock": "beef broth",
    "vegetable stock": "vegetable broth",
    "veggie stock": "vegetable broth",
    "veggie broth": "vegetable broth",
    # Dairy
    "heavy whipping cream": "heavy cream",
    "whipping cream": "heavy cream",
    "double cream": "heavy cream",
    "parmigiano reggiano": "parmesan",
    "parmesan cheese": "parmesan",
    "mozzarella cheese": "mozzarella",
    "cheddar cheese": "cheddar",
    "feta cheese": "feta",
    # Meat
    "minced beef": "ground beef",
    "beef mince": "ground beef",
    "minced pork": "ground pork",
    "pork mince": "ground pork",
}

# Adjectives irrelevant to what is bought
REMOVABLE_ADJECTIVES: frozenset[str] = frozenset(
    {
        "large",
        "medium",
        "small",
        "jumbo",
        "extra",
        "super",
        "big",
        "organic",
        "chopped",
        "diced",
        "minced",
        "crushed",
        "grated",
        "shredded",
        "canned",
        "pitted",
        "sliced",
        "cubed",
        "finely",
        "coarsely",
        "roughly",
        "thinly",
        "freshly",
        "fresh",
        "ripe",
        "peeled",
        "seeded",
        "deseeded",
        "trimmed",
        "halved",
        "quartered",
        "boneless",
        "skinless",
        "softened",
        "melted",
        "rinsed",
        "drained",
        "packed",
        "sifted",
        "heaping",
        "scant",
        "good",
        "quality",
        "cold",
        "warm",
        "lukewarm",
    }
)

# Removable adjective + following word pairs that name a different product
PRESERVED_PHRASES: frozenset[str] = frozenset(
    {
        "whole milk",
        "whole wheat",
        "whole grain",
        "extra firm",
        "extra sharp",
        "super firm",
        "cold brew",
        "small curd",
        "large curd",
    }
)

# "fresh" is kept before these: the fresh and dried/shelf forms differ
FRESH_DISTINCT_NOUNS: frozenset[str] = frozenset(
    {
        "basil",
        "parsley",
        "cilantro",
        "mint",
        "dill",
        "thyme",
        "rosemary",
        "oregano",
        "sage",
        "chives",
        "tarragon",
        "herbs",
        "herb",
        "mozzarella",
        "pasta",
    }
)

SPELLING_CORRECTIONS: dict[str, str] = {
    "tomatoe": "tomato",
    "tomatos": "tomatoes",
    "potatoe": "potato",
    "potatos": "potatoes",
    "jalapeño": "jalapeno",
    "jalapeños": "jalapenos",
    "brocolli": "broccoli",
    "broccolli": "broccoli",
    "zuchini": "zucchini",
    "zucchinni": "zucchini",
    "cinammon": "cinnamon",
    "cinamon": "cinnamon",
    "tumeric": "turmeric",
    "parmesean": "parmesan",
    "mozarella": "mozzarella",
    "worchestershire": "worcestershire",
    "worcestshire": "worcestershire",
    "yoghurt": "yogurt",
    "chilli": "chili",
    "chillies": "chilies",
    "vanila": "vanilla",
    "crème": "creme",
}

# Names, or head words, that are bought and listed in plural form
PLURAL_EXCEPTIONS: frozenset[str] = frozenset(
    {
        # Legumes
        "beans",
        "lentils",
        "chickpeas",
        "peas",
        "split peas",
        "black eyed peas",
        # Grains and cereals
        "oats",
        "rolled oats",
        "grits",
        "cornflakes",
        "rice krispies",
        # Sold as a bunch or bag
        "greens",
        "collard greens",
        "mixed greens",
        "sprouts",
        "brussels sprouts",
        "chives",
        "capers",
        "noodles",
        "chips",
        "fries",
        "flakes",
        "sprinkles",
        "breadcrumbs",
        "crumbs",
        "croutons",
        # Singular nouns ending in s
        "molasses",
        "leftovers",
        "hummus",
        "couscous",
        "asparagus",
        "citrus",
        "swiss",
        "bitters",
        "grains",
        "herbes",
    }
)

# Plural suffixes that mark items kept plural
PLURAL_EXCEPTION_SUFFIXES: tuple[str, ...] = ("berries", "seeds", "nuts")

IRREGULAR_SINGULARS: dict[str, str] = {
    "leaves": "leaf",
    "loaves": "loaf",
    "halves": "half",
    "cookies": "cookie",
    "brownies": "brownie",
    "veggies": "veggie",
    "smoothies": "smoothie",
    "pies": "pie",
    "chilies": "chili",
    "chilis": "chili",
}
