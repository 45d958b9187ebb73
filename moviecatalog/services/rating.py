"""
⭐ Rating aggregation
====================

Pure helpers that turn a set of review scores into a movie's displayed
rating. No I/O; everything here is deterministic.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable, Optional, Union

Number = Union[int, float, Decimal, str]

ONE_DECIMAL = Decimal("0.1")
RATING_FLOOR = Decimal("0.0")
RATING_CEILING = Decimal("10.0")


def to_decimal(value: Number) -> Decimal:
    """Exact decimal for a score; floats go through `str` so 8.8 stays 8.8."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def round_rating(value: Decimal) -> Decimal:
    """Round half-up to one decimal and clamp into [0.0, 10.0]."""
    rounded = value.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)
    return min(max(rounded, RATING_FLOOR), RATING_CEILING)


def compute_aggregate(ratings: Iterable[Number]) -> Optional[Decimal]:
    """
    Aggregate rating for a movie.

    Returns the arithmetic mean of `ratings` rounded half-up to one decimal
    place and clamped to [0.0, 10.0], or ``None`` when there is nothing to
    aggregate.

    Examples
    --------
    >>> compute_aggregate([8.8, 8.6, 9.0])
    Decimal('8.8')
    >>> compute_aggregate([7, 8])
    Decimal('7.5')
    >>> compute_aggregate([]) is None
    True
    """
    values = [to_decimal(r) for r in ratings]
    if not values:
        return None
    try:
        mean = sum(values, Decimal(0)) / Decimal(len(values))
    except InvalidOperation as exc:
        raise ValueError(f"ratings are not finite numbers: {values!r}") from exc
    if not mean.is_finite():
        raise ValueError(f"ratings are not finite numbers: {values!r}")
    return round_rating(mean)


__all__ = ["compute_aggregate", "round_rating", "to_decimal"]
