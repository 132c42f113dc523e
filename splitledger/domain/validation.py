"""Integrity checks applied to split records before they reach the calculator"""

from typing import Set

from splitledger.domain.models import Split
from splitledger.domain.exceptions import DataIntegrityError
from splitledger.utils.money import SPLIT_TOLERANCE, ensure_representable, total


def check_representable(split: Split) -> None:
    """
    Verify every amount on the split fits the fixed-point range.

    Raises:
        PrecisionOverflowError: On the first unrepresentable amount
    """
    ensure_representable(split.total_amount)
    for member in split.members:
        ensure_representable(member.owed_amount)


def validate_split(split: Split) -> None:
    """
    Validate a split's internal consistency.

    Requirements:
    - All amounts representable at ledger precision
    - No negative amounts
    - Members unique by participant
    - Member shares sum to total_amount within SPLIT_TOLERANCE

    Raises:
        PrecisionOverflowError: Amount outside fixed-point range
        DataIntegrityError: Any other violation
    """
    check_representable(split)

    if split.total_amount < 0:
        raise DataIntegrityError(f"Split {split.split_id} has negative total {split.total_amount}")

    seen: Set[str] = set()
    for member in split.members:
        if member.participant in seen:
            raise DataIntegrityError(
                f"Split {split.split_id} lists {member.participant} more than once"
            )
        seen.add(member.participant)

        if member.owed_amount < 0:
            raise DataIntegrityError(
                f"Split {split.split_id} has negative share for {member.participant}"
            )

    shares = total(m.owed_amount for m in split.members)
    if abs(shares - split.total_amount) > SPLIT_TOLERANCE:
        raise DataIntegrityError(
            f"Split {split.split_id} shares sum to {shares} but total is {split.total_amount}"
        )
