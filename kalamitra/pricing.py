"""Heuristic price suggestion for handmade products.

The figures are rough rules of thumb (artisan wage, material cost, size) and
are meant to be replaced by a model trained on real sales once such data
exists.
"""
import math
import re
import sys
from typing import Optional

from .constants import (
    DEFAULT_DOMINANT_SIZE,
    DEFAULT_MATERIAL_FACTOR,
    HOURLY_WAGE_INR,
    LOCALITY_FACTOR,
    MATERIAL_FACTORS,
    MIN_ACCEPTABLE_RATIO,
    SIZE_FACTOR_MULTIPLIER,
)
from .models import PricingSuggestion, ProductAttributes

_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?")


def _round_half_up(value: float) -> int:
    if math.isnan(value):
        return 0
    if math.isinf(value):
        return sys.maxsize if value > 0 else -sys.maxsize
    return int(math.floor(value + 0.5))


def _format_number(value: float) -> str:
    return f"{value:g}"


def material_factor(material: str) -> int:
    return MATERIAL_FACTORS.get(material.strip().lower(), DEFAULT_MATERIAL_FACTOR)


def dominant_size(dimensions: str) -> float:
    """Return the first number in a free-text dimension string.

    "6-inch diameter" -> 6, "12cm x 15cm" -> 12, "no numbers" -> 5.
    """
    match = _NUMBER_RE.search(dimensions or "")
    if not match:
        return DEFAULT_DOMINANT_SIZE
    size = float(match.group(0))
    # Digit runs past the float range parse as inf.
    return size if math.isfinite(size) else DEFAULT_DOMINANT_SIZE


def base_cost(attributes: ProductAttributes) -> float:
    hours = attributes.time_to_make_hrs
    if not math.isfinite(hours):
        hours = 0
    size_factor = dominant_size(attributes.dimensions) * SIZE_FACTOR_MULTIPLIER
    return (
        hours * HOURLY_WAGE_INR
        + material_factor(attributes.material)
        + size_factor
    )


def estimate_price(
    attributes: ProductAttributes,
    market_adjustment: float = LOCALITY_FACTOR,
    historical_average: Optional[float] = None,
) -> PricingSuggestion:
    base = base_cost(attributes)
    min_acceptable = _round_half_up(base * MIN_ACCEPTABLE_RATIO)

    reference = historical_average if historical_average else base
    ai_suggested = _round_half_up(reference * market_adjustment)
    # A caller-supplied reference or adjustment must not undercut the floor.
    ai_suggested = max(ai_suggested, min_acceptable)

    reasoning = (
        f"Calculated based on ~{_format_number(attributes.time_to_make_hrs)} hours of work, "
        f"cost of {attributes.material}, "
        f"product size (~{_format_number(dominant_size(attributes.dimensions))}), "
        "and a standard market adjustment."
    )
    return PricingSuggestion(
        ai_suggested=ai_suggested,
        min_acceptable=min_acceptable,
        reasoning=reasoning,
    )
