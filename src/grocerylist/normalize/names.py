"""Ingredient name normalization for aggregation, and the display name variant."""

import re
from dataclasses import dataclass

from grocerylist.normalize.amounts import RANGE_SEPARATOR, SINGLE_AMOUNT
from grocerylist.normalize.units import UNIT_ALIASES, unit_spellings
from grocerylist.normalize.vocabulary import (
    ALIASES,
    FRESH_DISTINCT_NOUNS,
    IRREGULAR_SINGULARS,
    NOISE_PHRASES,
    PLURAL_EXCEPTION_SUFFIXES,
    PLURAL_EXCEPTIONS,
    PRESERVED_PHRASES,
    REMOVABLE_ADJECTIVES,
    SPELLING_CORRECTIONS,
)

# =============================================================================
# Patterns
# =============================================================================

PARENTHETICAL_RE = re.compile(r"\([^()]*\)|\([^()]*$")
NOISE_RE = re.compile(
    r"\b(?:" + "|".join(re.escape(p) for p in sorted(NOISE_PHRASES, key=len, reverse=True)) + r")\b"
)
_AMOUNT = rf"(?:{SINGLE_AMOUNT})(?:{RANGE_SEPARATOR}(?:{SINGLE_AMOUNT}))?"
LEADING_MARKER_RE = re.compile(r"^(?:[-–~]|(?:about|approximately|approx|around|roughly)\b\.?)\s*")
LEADING_AMOUNT_RE = re.compile(rf"^{_AMOUNT}(?![\w/])\s*")
_UNIT_WORDS = "|".join(re.escape(s) for s in unit_spellings() if s in UNIT_ALIASES)
LEADING_QUANTITY_RE = re.compile(
    rf"^{_AMOUNT}\s*-?\s*(?:{_UNIT_WORDS})(?![a-z])\.?\s*(?:of\s+)?"
)
EDGE_PUNCTUATION_RE = re.compile(r"^[\W_]+|[\W_]+$")
LEADING_SEPARATOR_RE = re.compile(r"^[\s,;:]+")
ALIAS_RE = re.compile(
    r"(?<![\w'])(?:"
    + "|".join(re.escape(a) for a in sorted(ALIASES, key=len, reverse=True))
    + r")(?![\w'])"
)


# =============================================================================
# Pipeline Steps
# =============================================================================


def _clean(text: str) -> str:
    """Strip parentheticals, comma clauses, noise phrases and leading quantities."""
    text = PARENTHETICAL_RE.sub(" ", text)
    text = LEADING_SEPARATOR_RE.sub("", text)
    text = text.split(",", 1)[0]
    text = NOISE_RE.sub(" ", text)
    text = " ".join(text.split())

    marked = LEADING_MARKER_RE.sub("", text, count=1)
    while marked != text:
        # A marker takes its quantity with it
        text = marked
        if not LEADING_QUANTITY_RE.match(text):
            text = LEADING_AMOUNT_RE.sub("", text, count=1)
        marked = LEADING_MARKER_RE.sub("", text, count=1)

    previous = None
    while previous != text:
        previous = text
        text = LEADING_QUANTITY_RE.sub("", text, count=1).strip()

    text = text.replace("-", " ")
    text = EDGE_PUNCTUATION_RE.sub("", text)
    return " ".join(text.split())


def _apply_aliases(text: str) -> str:
    return ALIAS_RE.sub(lambda m: ALIASES[m.group(0)], text)


def _correct_spelling(text: str) -> str:
    return " ".join(SPELLING_CORRECTIONS.get(word, word) for word in text.split())


def _remove_adjectives(text: str) -> str:
    """
    Drop shopping-irrelevant adjectives.

    Each adjective is judged against the next word that is not itself
    removable, so "large fresh basil" keeps "fresh" and drops "large".
    """
    words = text.split()
    kept: list[str] = []
    for index, word in enumerate(words):
        if word not in REMOVABLE_ADJECTIVES:
            kept.append(word)
            continue

        following = next(
            (w for w in words[index + 1 :] if w not in REMOVABLE_ADJECTIVES),
            None,
        )
        if following is None:
            kept.append(word)
        elif f"{word} {following}" in PRESERVED_PHRASES:
            kept.append(word)
        elif word == "fresh" and following in FRESH_DISTINCT_NOUNS:
            kept.append(word)

    # Never reduce a name to nothing
    return " ".join(kept) if kept else text


def singularize(word: str) -> str:
    """Singularize one word, honoring the plural exception tables."""
    if word in PLURAL_EXCEPTIONS or word.endswith(PLURAL_EXCEPTION_SUFFIXES):
        return word
    if word in IRREGULAR_SINGULARS:
        return IRREGULAR_SINGULARS[word]
    if not word.endswith("s") or word.endswith(("ss", "us")):
        return word

    if word.endswith("ies") and len(word) > 4:
        singular = word[:-3] + "y"
    elif word.endswith("oes"):
        singular = word[:-2]
    elif word.endswith(("ches", "shes", "xes", "sses", "zzes")):
        singular = word[:-2]
    else:
        singular = word[:-1]

    # Implausibly short results keep the original word
    return singular if len(singular) >= 3 else word


def _singularize_head(text: str) -> str:
    if text in PLURAL_EXCEPTIONS:
        return text
    words = text.split()
    if not words:
        return text
    words[-1] = singularize(words[-1])
    return " ".join(words)


# =============================================================================
# Public API
# =============================================================================


def normalize_name(name: str | None) -> str:
    """
    Normalize an ingredient name into its aggregation key.

    Pipeline: lowercase; strip parentheticals, comma clauses, noise phrases
    and leading quantities; collapse aliases; drop irrelevant adjectives;
    correct spelling; singularize the head word.

    Examples:
        "Green Onions" -> "scallion"
        "2 cloves garlic, minced" -> "garlic"
        "roma tomatoes" -> "roma tomato"
        "black beans" -> "black beans"
    """
    if not isinstance(name, str):
        return ""

    lowered = " ".join(name.lower().split())
    if not lowered:
        return ""

    text = _clean(lowered)
    if not text:
        # Punctuation-only input passes through
        return lowered

    text = _correct_spelling(text)
    text = _apply_aliases(text)
    text = _remove_adjectives(text)
    text = _apply_aliases(text)
    text = _correct_spelling(text)
    text = _singularize_head(text)
    text = _apply_aliases(text)
    return " ".join(text.split())


@dataclass(frozen=True)
class DisplayName:
    """An ingredient name as written in the recipe, with its UI markers."""

    base_name: str
    is_removed: bool = False
    substituted_for: str | None = None
    alternatives: tuple[str, ...] = ()

    @property
    def is_substitution(self) -> bool:
        return self.substituted_for is not None


REMOVED_MARKER_RE = re.compile(r"\s*\(\s*removed\s*\)", re.IGNORECASE)
SUBSTITUTED_MARKER_RE = re.compile(r"\s*\(\s*substituted\s+for\s+([^()]*?)\s*\)", re.IGNORECASE)
ALTERNATIVE_SPLIT_RE = re.compile(r"\s+or\s+|(?<=[^\W\d])\s*/\s*(?=[^\W\d])", re.IGNORECASE)


def parse_display_name(name: str | None) -> DisplayName:
    """
    Parse UI markers from a recipe ingredient name.

    Detects "(removed)", "(substituted for X)" and "or"/slash alternatives.
    The wording is kept as written: no aliasing and no adjective stripping.
    """
    if not isinstance(name, str):
        return DisplayName(base_name="")

    text = " ".join(name.split())

    is_removed = bool(REMOVED_MARKER_RE.search(text))
    text = REMOVED_MARKER_RE.sub("", text)

    substituted_for = None
    match = SUBSTITUTED_MARKER_RE.search(text)
    if match:
        substituted_for = match.group(1).strip() or None
        text = SUBSTITUTED_MARKER_RE.sub("", text)

    base_name = " ".join(text.split())
    parts = [p.strip() for p in ALTERNATIVE_SPLIT_RE.split(base_name) if p.strip()]
    alternatives = tuple(parts) if len(parts) > 1 else ()

    return DisplayName(
        base_name=base_name,
        is_removed=is_removed,
        substituted_for=substituted_for,
        alternatives=alternatives,
    )
