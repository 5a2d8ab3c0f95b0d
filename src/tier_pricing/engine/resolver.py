"""
Pricing Resolver - (sqft, tiers) -> PriceBreakdown | NoMatch.

Resolution order:
1. Validate square footage (InvalidInput on anything but a positive integer)
2. Select tiers whose [sqft_min, sqft_max] covers sqft, in listed order
3. No match -> NoMatch (coverage gaps are expected, not an error)
4. First match is the primary tier; classify as additive / legacy / flat
5. Report the primary tier's range (acreage only on the additive path)

Pure and deterministic: no I/O, no shared state.
"""
import math
import re
from numbers import Integral, Real
from typing import Optional, Sequence

from .models import (
    AdditiveBundle,
    NoMatch,
    PriceBreakdown,
    PricingTier,
    Resolution,
    ValidityRange,
)
from .tier_matcher import classify, find_matching_tiers

SQFT_PER_ACRE = 43560


class InvalidInput(ValueError):
    """Square footage is missing, non-numeric, zero or negative."""

    def __init__(self, value, reason: str = "square footage must be a positive integer"):
        self.value = value
        super().__init__(f"Invalid square footage {value!r}: {reason}")


def validate_sqft(sqft) -> int:
    """Return sqft as an int, or raise InvalidInput."""
    if sqft is None or isinstance(sqft, bool):
        raise InvalidInput(sqft)

    if isinstance(sqft, Integral):
        value = int(sqft)
    elif isinstance(sqft, Real):
        if not math.isfinite(sqft) or not float(sqft).is_integer():
            raise InvalidInput(sqft, "square footage must be a whole number")
        value = int(sqft)
    else:
        raise InvalidInput(sqft)

    if value <= 0:
        raise InvalidInput(sqft)
    return value


def resolve(sqft, tiers: Sequence[PricingTier]) -> Resolution:
    """
    Resolve the price breakdown for a square footage.

    Args:
        sqft: Positive integer square footage
        tiers: Tier records in source (row) order

    Returns:
        PriceBreakdown, or NoMatch when no tier covers sqft

    Raises:
        InvalidInput: sqft is not a positive integer
    """
    value = validate_sqft(sqft)
    steps = [("Input", "Square footage", f"{value}")]

    tier_list = list(tiers or [])
    if not tier_list:
        steps.append(("Match", "No pricing tiers available", None))
        return _no_match(value, steps)

    matched, match_trace = find_matching_tiers(value, tier_list)
    steps.extend(match_trace)

    if not matched:
        steps.append(("Fallback", "No tier covers this size, contact office", None))
        return _no_match(value, steps)

    primary = matched[0]
    pricing, reason = classify(matched)

    valid_range = ValidityRange(sqft_min=primary.sqft_min, sqft_max=primary.sqft_max)
    if isinstance(pricing, AdditiveBundle):
        valid_range.acreage = primary.acreage

    result = PriceBreakdown(sqft=value, pricing=pricing, valid_range=valid_range)
    for step, desc, val in steps:
        result.add_trace(step, desc, val)
    result.add_trace("Format", reason, pricing.kind)
    result.add_trace("Range", "Primary tier range", f"{primary.sqft_min}-{primary.sqft_max}")

    return result


def _no_match(sqft: int, steps: list[tuple]) -> NoMatch:
    result = NoMatch(sqft=sqft)
    for step, desc, val in steps:
        result.add_trace(step, desc, val)
    return result


_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_square_footage(text) -> Optional[int]:
    """
    Parse free-text sqft input by its leading integer ("2000 sq ft" -> 2000).

    Returns None when the text does not start with a number. Sign is kept,
    so "-5" parses to -5 and is rejected later by resolve().
    """
    if text is None:
        return None
    if isinstance(text, Integral) and not isinstance(text, bool):
        return int(text)
    match = _LEADING_INT.match(str(text))
    if not match:
        return None
    return int(match.group(1))


def acres_to_sqft(acres) -> int:
    """Convert acres to square feet, rounded half up to the nearest foot."""
    try:
        value = float(acres)
    except (TypeError, ValueError):
        raise InvalidInput(acres, "acreage must be a number")
    if not math.isfinite(value) or value <= 0:
        raise InvalidInput(acres, "acreage must be positive")
    sqft = value * SQFT_PER_ACRE
    if not math.isfinite(sqft):
        raise InvalidInput(acres, "acreage is too large")
    return int(math.floor(sqft + 0.5))


def sqft_to_acres(sqft) -> float:
    """Convert square feet to acres."""
    return validate_sqft(sqft) / SQFT_PER_ACRE
