"""Balance calculator - reduces splits to one signed balance per participant"""

from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, Optional, Tuple

from splitledger.domain.models import BalanceMap, ParticipantId, Split
from splitledger.domain.exceptions import DataIntegrityError
from splitledger.utils.money import EPSILON, ensure_representable, is_zero, total


def calculate_balances(
    splits: Iterable[Split],
    perspective: Optional[ParticipantId] = None,
) -> BalanceMap:
    """
    Net signed balance per participant over a set of splits.

    Rules:
    - Settled splits contribute nothing, whatever their members' is_paid flags
    - Each unpaid member leg moves owed_amount from member (-) to payer (+)
    - Paid legs already moved outside the ledger and are skipped
    - The payer's own share on their split nets to zero and is skipped

    Positive = owed money (creditor), negative = owes money (debtor).
    Balances with |value| < EPSILON are dropped from the result.

    `perspective` is accepted for callers that label results for a viewer;
    it never affects the arithmetic.

    Raises:
        PrecisionOverflowError: Unrepresentable owed amount
        DataIntegrityError: Balances do not sum to zero
    """
    balances: Dict[ParticipantId, Decimal] = defaultdict(Decimal)

    for split in splits:
        if split.is_settled:
            continue

        for member in split.members:
            if member.is_paid or member.participant == split.payer:
                continue

            amount = ensure_representable(member.owed_amount)
            balances[member.participant] -= amount
            balances[split.payer] += amount

    # Conservation holds by construction; anything else means corrupted input
    imbalance = total(balances.values())
    if abs(imbalance) > EPSILON:
        raise DataIntegrityError(f"Balances do not net to zero (off by {imbalance})")

    return {p: b for p, b in balances.items() if not is_zero(b)}


def summarize_participant(
    splits: Iterable[Split],
    participant: ParticipantId,
) -> Tuple[Decimal, Decimal]:
    """
    Raw dues for one participant, straight from split membership.

    Returns: (owed_by_participant, owed_to_participant)
    - owed_by: unpaid shares where participant is a member on someone else's split
    - owed_to: unpaid shares of other members on splits the participant paid
    """
    owed_by = Decimal(0)
    owed_to = Decimal(0)

    for split in splits:
        if split.is_settled:
            continue

        for member in split.members:
            if member.is_paid or member.participant == split.payer:
                continue
            if member.participant == participant:
                owed_by += member.owed_amount
            elif split.payer == participant:
                owed_to += member.owed_amount

    return owed_by, owed_to
