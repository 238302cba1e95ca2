"""Unit tests for decimal and hashing helpers"""

from decimal import Decimal
from uuid import UUID

import pytest

from settleease.utils.decimal_utils import (TOLERANCE, is_negligible,
                                            round_decimal, sum_decimals,
                                            to_decimal)
from settleease.utils.hash_utils import compute_json_hash


class TestToDecimal:
    """Test lenient amount conversion"""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (10, Decimal("10")),
            ("12.50", Decimal("12.50")),
            (" 3.10 ", Decimal("3.10")),
            (Decimal("7.25"), Decimal("7.25")),
            (0.5, Decimal("0.5")),
        ],
    )
    def test_valid_values(self, value, expected):
        assert to_decimal(value) == expected

    @pytest.mark.parametrize(
        "value",
        [None, True, False, "abc", "", float("nan"), float("inf"), "Infinity", "NaN", [1], {}],
    )
    def test_invalid_values_become_zero(self, value):
        assert to_decimal(value) == Decimal("0")


class TestRoundDecimal:
    """Test rounding to cents"""

    def test_round_half_up(self):
        assert round_decimal(Decimal("2.345")) == Decimal("2.35")
        assert round_decimal(Decimal("-2.345")) == Decimal("-2.35")

    def test_custom_places(self):
        assert round_decimal(Decimal("1.23456"), 3) == Decimal("1.235")


class TestSumDecimals:
    """Test summing"""

    def test_sum(self):
        assert sum_decimals([Decimal("1.10"), Decimal("2.20")]) == Decimal("3.30")

    def test_empty_is_zero(self):
        result = sum_decimals([])

        assert result == Decimal("0")
        assert isinstance(result, Decimal)


class TestIsNegligible:
    """Test the tolerance check"""

    def test_within_tolerance(self):
        assert is_negligible(Decimal("0"))
        assert is_negligible(TOLERANCE)
        assert is_negligible(-TOLERANCE)

    def test_outside_tolerance(self):
        assert not is_negligible(Decimal("0.011"))
        assert not is_negligible(Decimal("-5"))


class TestComputeJsonHash:
    """Test canonical JSON hashing"""

    def test_key_order_does_not_matter(self):
        assert compute_json_hash({"a": 1, "b": [1, 2]}) == compute_json_hash({"b": [1, 2], "a": 1})

    def test_different_payloads_differ(self):
        assert compute_json_hash({"a": 1}) != compute_json_hash({"a": 2})

    def test_known_digest(self):
        # sha256 of '{"a":1}'
        assert compute_json_hash({"a": 1}) == (
            "015abd7f5cc57a2dd94b7590f04ad8084273905ee33ec5cebeae62276a97f862"
        )

    def test_non_json_types_serialized_as_strings(self):
        payload = {"id": UUID("12345678-1234-5678-1234-567812345678"), "amount": Decimal("1.50")}

        assert compute_json_hash(payload) == compute_json_hash(
            {"id": "12345678-1234-5678-1234-567812345678", "amount": "1.50"}
        )
