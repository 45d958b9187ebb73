# tests/test_services/test_rating.py

from decimal import Decimal

import pytest

from moviecatalog.services.rating import compute_aggregate, round_rating, to_decimal


def test_three_reviews_average_to_one_decimal():
    assert compute_aggregate([8.8, 8.6, 9.0]) == Decimal("8.8")


def test_half_rounds_up():
    assert compute_aggregate([7, 8]) == Decimal("7.5")
    # 8.25 -> 8.3 (half-up, not banker's)
    assert compute_aggregate([8.2, 8.3]) == Decimal("8.3")
    assert compute_aggregate([8.0, 8.5]) == Decimal("8.3")


def test_empty_is_absent():
    assert compute_aggregate([]) is None
    assert compute_aggregate(iter(())) is None


def test_single_value_is_itself():
    assert compute_aggregate([10.0]) == Decimal("10.0")
    assert compute_aggregate([1]) == Decimal("1.0")


def test_result_always_in_range_and_one_decimal():
    samples = [[1.0], [10.0], [1.0, 10.0], [9.99, 9.99], [1.04, 1.05, 1.06], [3.333, 3.333, 3.334]]
    for ratings in samples:
        agg = compute_aggregate(ratings)
        assert Decimal("0.0") <= agg <= Decimal("10.0")
        assert agg == agg.quantize(Decimal("0.1"))


def test_order_does_not_matter():
    assert compute_aggregate([9.0, 8.6, 8.8]) == compute_aggregate([8.8, 9.0, 8.6])


def test_round_rating_clamps():
    assert round_rating(Decimal("10.04")) == Decimal("10.0")
    assert round_rating(Decimal("-0.3")) == Decimal("0.0")


def test_float_inputs_use_shortest_repr():
    # 8.15 as a binary float is slightly below 8.15; the decimal view is exact.
    assert to_decimal(8.15) == Decimal("8.15")
    assert round_rating(to_decimal(8.15)) == Decimal("8.2")


def test_non_finite_ratings_rejected():
    with pytest.raises(ValueError):
        compute_aggregate([float("nan"), 5.0])
    with pytest.raises(ValueError):
        compute_aggregate([float("inf")])
