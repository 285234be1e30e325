"""Quantity token parsing, fraction formatting and scaling."""

import math
import re
from fractions import Fraction

# =============================================================================
# Tables
# =============================================================================

UNICODE_FRACTIONS: dict[str, float] = {
    "½": 1 / 2,
    "⅓": 1 / 3,
    "⅔": 2 / 3,
    "¼": 1 / 4,
    "¾": 3 / 4,
    "⅕": 1 / 5,
    "⅖": 2 / 5,
    "⅗": 3 / 5,
    "⅘": 4 / 5,
    "⅙": 1 / 6,
    "⅚": 5 / 6,
    "⅛": 1 / 8,
    "⅜": 3 / 8,
    "⅝": 5 / 8,
    "⅞": 7 / 8,
}

# Display snapping table: eighths and thirds
COMMON_FRACTIONS: list[tuple[int, int]] = [
    (1, 8),
    (1, 4),
    (1, 3),
    (3, 8),
    (1, 2),
    (5, 8),
    (2, 3),
    (3, 4),
    (7, 8),
]

FRACTION_GLYPHS: dict[tuple[int, int], str] = {
    (1, 2): "½",
    (1, 3): "⅓",
    (2, 3): "⅔",
    (1, 4): "¼",
    (3, 4): "¾",
    (1, 8): "⅛",
    (3, 8): "⅜",
    (5, 8): "⅝",
    (7, 8): "⅞",
}

SNAP_TOLERANCE = 0.01
MAX_DENOMINATOR = 16

# =============================================================================
# Token Patterns
# =============================================================================

GLYPH = "[" + "".join(UNICODE_FRACTIONS) + "]"
NUMBER = r"(?:\d+(?:\.\d+)?|\.\d+)"
FRACTION = r"\d+\s*/\s*\d+"
MIXED = r"\d+(?:\s+|-)\d+\s*/\s*\d+"
UNICODE_MIXED = rf"\d+\s*{GLYPH}"
SINGLE_AMOUNT = rf"(?:{MIXED}|{UNICODE_MIXED}|{FRACTION}|{GLYPH}|{NUMBER})"
RANGE_SEPARATOR = r"(?:\s*[-–—]\s*|\s+to\s+)"
RANGE_AMOUNT = rf"{SINGLE_AMOUNT}{RANGE_SEPARATOR}{SINGLE_AMOUNT}"
APPROXIMATION = r"(?:~|about|approximately|approx\.?|around|roughly)"

APPROX_PREFIX_RE = re.compile(rf"^{APPROXIMATION}\s*", re.IGNORECASE)
MIXED_RE = re.compile(r"^(\d+)(?:\s+|-)(\d+)\s*/\s*(\d+)$")
UNICODE_MIXED_RE = re.compile(rf"^(\d+)\s*({GLYPH})$")
FRACTION_RE = re.compile(r"^(\d+)\s*/\s*(\d+)$")
GLYPH_RE = re.compile(rf"^({GLYPH})$")
NUMBER_RE = re.compile(rf"^{NUMBER}$")
SINGLE_AMOUNT_FULL_RE = re.compile(rf"^{SINGLE_AMOUNT}$")
RANGE_RE = re.compile(
    rf"^(?P<low>{SINGLE_AMOUNT}){RANGE_SEPARATOR}(?P<high>{SINGLE_AMOUNT})$", re.IGNORECASE
)
LEADING_NUMBER_RE = re.compile(rf"^({NUMBER})(?![\d/])")


def _parse_single(text: str) -> float | None:
    """Parse one quantity (no range). Zero denominators yield None."""
    match = MIXED_RE.match(text)
    if match:
        whole, num, den = (int(g) for g in match.groups())
        return whole + num / den if den else None

    match = UNICODE_MIXED_RE.match(text)
    if match:
        return int(match.group(1)) + UNICODE_FRACTIONS[match.group(2)]

    match = FRACTION_RE.match(text)
    if match:
        num, den = int(match.group(1)), int(match.group(2))
        return num / den if den else None

    match = GLYPH_RE.match(text)
    if match:
        return UNICODE_FRACTIONS[match.group(1)]

    if NUMBER_RE.match(text):
        return float(text)

    return None


def parse_amount(token: str | None) -> float | None:
    """
    Parse a quantity token into a number.

    Handles formats like:
    - "2", "1.5", ".5"
    - "3/4", "3⁄4"
    - "1 1/2", "1-1/2", "1 ½", "1½"
    - "2-3", "2 to 3" (range, returns the lower bound)
    - "~2", "about 2"

    Non-numeric phrases ("a pinch", "to taste") and malformed fractions
    ("1/0") return None.
    """
    if not isinstance(token, str):
        return None

    text = " ".join(token.replace("⁄", "/").split())
    text = APPROX_PREFIX_RE.sub("", text).strip()
    if not text:
        return None

    single = SINGLE_AMOUNT_FULL_RE.match(text)
    if single:
        return _parse_single(text)

    # The upper bound of a range is deliberately discarded
    match = RANGE_RE.match(text)
    if match:
        return _parse_single(" ".join(match.group("low").split()))

    match = LEADING_NUMBER_RE.match(text)
    if match:
        return float(match.group(1))

    return None


# =============================================================================
# Formatting
# =============================================================================


def _join(whole: int, num: int, den: int, glyphs: bool) -> str:
    if glyphs and (num, den) in FRACTION_GLYPHS:
        fraction = FRACTION_GLYPHS[(num, den)]
    else:
        fraction = f"{num}/{den}"
    return f"{whole} {fraction}" if whole else fraction


def format_amount(value: float | None, glyphs: bool = False) -> str | None:
    """
    Render a number as a human fraction string.

    The fractional part snaps to the nearest eighth or third, then to the
    best approximation with denominator <= 16, and finally falls back to
    two decimals. Examples: 1.5 -> "1 1/2", 0.333 -> "1/3", 2.03 -> "2.03".

    Args:
        value: Non-negative amount. None, NaN and negatives return None.
        glyphs: Use unicode fraction glyphs ("1 ½") where one exists.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        value = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(value) or math.isinf(value) or value < 0:
        return None
    if value == 0:
        return "0"

    whole = int(value)
    frac = value - whole

    if frac < SNAP_TOLERANCE:
        return str(whole)
    if 1 - frac < SNAP_TOLERANCE:
        return str(whole + 1)

    for num, den in COMMON_FRACTIONS:
        if abs(frac - num / den) < SNAP_TOLERANCE:
            return _join(whole, num, den, glyphs)

    approx = Fraction(frac).limit_denominator(MAX_DENOMINATOR)
    if 0 < approx < 1 and abs(float(approx) - frac) < SNAP_TOLERANCE:
        return _join(whole, approx.numerator, approx.denominator, glyphs)

    return f"{value:.2f}".rstrip("0").rstrip(".")


# =============================================================================
# Servings and Scaling
# =============================================================================

SERVINGS_RANGE_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(?:[-–—]|to)\s*(\d+(?:\.\d+)?)", re.IGNORECASE)
SERVINGS_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")


def parse_servings_value(text: str | int | float | None) -> float | None:
    """
    Extract a servings count from a recipe yield string.

    "Makes 4" -> 4, "about 10 tacos" -> 10, "6-8 servings" -> 7 (range
    midpoint, rounded half up).
    """
    if text is None or isinstance(text, bool):
        return None
    if isinstance(text, (int, float)):
        return float(text) if math.isfinite(text) and text > 0 else None

    match = SERVINGS_RANGE_RE.search(text)
    if match:
        low, high = float(match.group(1)), float(match.group(2))
        return float(math.floor((low + high) / 2 + 0.5))

    match = SERVINGS_NUMBER_RE.search(text)
    if match:
        return float(match.group(0))

    return None


def scale_amount(value: float | None, factor: float | None) -> float | None:
    """Multiply an amount by a scale factor. Invalid factors leave it unchanged."""
    if value is None:
        return None
    if factor is None or isinstance(factor, bool):
        return value
    try:
        factor = float(factor)
    except (TypeError, ValueError):
        return value
    if not math.isfinite(factor) or factor <= 0:
        return value
    return value * factor
