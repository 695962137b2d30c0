"""
Split a bill amount into per-member shares.

Amounts are handled as Decimal and settled to whole cents.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_DOWN, ROUND_HALF_UP
from enum import Enum

from roomierules.core.exceptions import ValidationException

CENT = Decimal("0.01")


class SplitPolicy(str, Enum):
    """
    How leftover cents are handled when an amount does not divide evenly.

    - REMAINDER_TO_CREATOR: every share is rounded down to the cent and
      the leftover cents go to the bill creator, so the shares always add
      up to the bill amount
    - ROUND_HALF_UP: every share is rounded half-up to the cent with no
      correction; the sum may drift from the amount by up to half a cent
      per member
    """

    REMAINDER_TO_CREATOR = "remainder_to_creator"
    ROUND_HALF_UP = "round_half_up"


@dataclass(frozen=True)
class Split:
    split_amount: Decimal
    shares: dict[int, Decimal]

    @property
    def total(self) -> Decimal:
        return sum(self.shares.values(), Decimal("0"))


def to_cents(value: float | Decimal | str) -> Decimal:
    """
    Convert a user-supplied amount to a Decimal with two places.

    Raises:
        ValidationException: NaN, infinite, or too large to hold in cents
    """
    try:
        amount = Decimal(str(value))
        if not amount.is_finite():
            raise ValidationException("Amount must be a finite number")
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationException("Amount must be a finite number")


def split_evenly(
    amount: Decimal,
    member_ids: list[int],
    creator_id: int,
    policy: SplitPolicy = SplitPolicy.REMAINDER_TO_CREATOR,
) -> Split:
    """
    Divide amount between member_ids.

    Args:
        amount: Bill amount, already in cents
        member_ids: Users who owe a share; must not be empty
        creator_id: Bill creator, receives the leftover cents when a member
        policy: Rounding policy

    Returns:
        Split with the nominal per-member share and each member's amount

    Raises:
        ValueError: If member_ids is empty
    """
    if not member_ids:
        raise ValueError("Cannot split a bill among zero members")

    count = len(member_ids)

    if policy == SplitPolicy.ROUND_HALF_UP:
        share = (amount / count).quantize(CENT, rounding=ROUND_HALF_UP)
        return Split(split_amount=share, shares={member_id: share for member_id in member_ids})

    base = (amount / count).quantize(CENT, rounding=ROUND_DOWN)
    remainder = amount - base * count
    shares = {member_id: base for member_id in member_ids}
    receiver = creator_id if creator_id in shares else min(member_ids)
    shares[receiver] += remainder
    return Split(split_amount=base, shares=shares)
