from decimal import Decimal

import pytest

from roomierules.core.exceptions import ValidationException
from roomierules.services.split import SplitPolicy, split_evenly, to_cents


class TestToCents:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (900, Decimal("900.00")),
            (19.999, Decimal("20.00")),
            ("0.005", Decimal("0.01")),
            (Decimal("12.344"), Decimal("12.34")),
        ],
    )
    def test_quantizes_to_two_places(self, value, expected):
        assert to_cents(value) == expected

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf"), "NaN", 1e300])
    def test_rejects_non_finite_and_oversized(self, value):
        with pytest.raises(ValidationException, match="Amount must be a finite number"):
            to_cents(value)


class TestRemainderToCreator:
    """Default policy: shares always add up to the amount"""

    def test_even_split(self):
        split = split_evenly(Decimal("900.00"), [1, 2, 3], creator_id=1)

        assert split.split_amount == Decimal("300.00")
        assert split.shares == {1: Decimal("300.00"), 2: Decimal("300.00"), 3: Decimal("300.00")}
        assert split.total == Decimal("900.00")

    def test_leftover_cents_go_to_creator(self):
        split = split_evenly(Decimal("100.00"), [1, 2, 3], creator_id=2)

        assert split.split_amount == Decimal("33.33")
        assert split.shares[1] == Decimal("33.33")
        assert split.shares[2] == Decimal("33.34")
        assert split.shares[3] == Decimal("33.33")
        assert split.total == Decimal("100.00")

    def test_creator_outside_members(self):
        """When the creator owes nothing the lowest member id takes the leftover"""
        split = split_evenly(Decimal("10.00"), [7, 4, 9], creator_id=1)

        assert split.shares[4] == Decimal("3.34")
        assert split.shares[7] == Decimal("3.33")
        assert split.total == Decimal("10.00")

    def test_single_member_owes_everything(self):
        split = split_evenly(Decimal("42.42"), [5], creator_id=5)

        assert split.shares == {5: Decimal("42.42")}

    def test_amount_smaller_than_member_count(self):
        split = split_evenly(Decimal("0.02"), [1, 2, 3], creator_id=3)

        assert split.shares == {1: Decimal("0.00"), 2: Decimal("0.00"), 3: Decimal("0.02")}
        assert split.total == Decimal("0.02")

    @pytest.mark.parametrize("count", [2, 3, 6, 7, 11])
    def test_total_is_preserved(self, count):
        members = list(range(1, count + 1))
        split = split_evenly(Decimal("1234.57"), members, creator_id=1)

        assert split.total == Decimal("1234.57")
        assert max(split.shares.values()) - min(split.shares.values()) < Decimal("0.01") * count


class TestRoundHalfUp:
    def test_equal_rounded_shares(self):
        split = split_evenly(
            Decimal("100.00"), [1, 2, 3], creator_id=1, policy=SplitPolicy.ROUND_HALF_UP
        )

        assert split.split_amount == Decimal("33.33")
        assert set(split.shares.values()) == {Decimal("33.33")}
        assert split.total == Decimal("99.99")

    def test_rounds_half_up(self):
        split = split_evenly(
            Decimal("0.05"), [1, 2], creator_id=1, policy=SplitPolicy.ROUND_HALF_UP
        )

        assert split.split_amount == Decimal("0.03")


class TestNoMembers:
    def test_empty_member_list_rejected(self):
        with pytest.raises(ValueError):
            split_evenly(Decimal("900.00"), [], creator_id=1)
