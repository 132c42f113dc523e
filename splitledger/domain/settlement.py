"""Settlement solver - greedy debt simplification over a balance map"""

import heapq
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from splitledger.domain.balances import calculate_balances
from splitledger.domain.exceptions import DataIntegrityError
from splitledger.domain.models import BalanceMap, ParticipantId, SettlementResult, Split, Transaction
from splitledger.domain.naming import DisplayName, describe_transaction
from splitledger.domain.validation import validate_split
from splitledger.utils.money import EPSILON, is_zero, quantize, total


def settle_balances(
    balances: Mapping[ParticipantId, Decimal],
    *,
    perspective: Optional[ParticipantId] = None,
    display_name: Optional[DisplayName] = None,
) -> List[Transaction]:
    """
    Derive an ordered list of transfers that zeroes every balance.

    Algorithm (greedy, deterministic):
    1. Quantize balances to ledger precision, drop near-zero ones; the
       input must sum to less than EPSILON
    2. Creditors on a max-heap, debtors on a min-heap (most negative first),
       ties broken by participant id
    3. Pop the largest creditor and largest debtor, transfer
       min(credit, |debt|) from debtor to creditor, push back whichever
       side still has a balance
    4. Stop when either heap is empty; what remains may only be the drift
       quantization introduced in step 1

    Each step zeroes at least one participant, so n nonzero balances yield
    at most n - 1 transactions.

    This is a heuristic. Finding the true minimum number of transfers is
    NP-hard; do not swap in an exact solver without revisiting cost bounds.

    Raises:
        DataIntegrityError: Balances do not sum to zero, or a balance is
            left with no counterpart
    """
    # Rounding introduced here is the only drift the loop may absorb
    working: Dict[ParticipantId, Decimal] = {}
    rounding = Decimal(0)
    for participant, balance in balances.items():
        amount = quantize(balance)
        if is_zero(balance) or is_zero(amount):
            rounding += abs(balance)
            continue
        rounding += abs(balance - amount)
        working[participant] = amount

    imbalance = abs(total(balances.values()))
    if imbalance >= EPSILON:
        raise DataIntegrityError(
            f"Cannot settle: balances sum to {imbalance} across {len(balances)} participants"
        )

    # Heap keys: (-credit, id) pops the largest creditor; (debt, id) pops the most negative debtor
    creditors: List[Tuple[Decimal, ParticipantId]] = []
    debtors: List[Tuple[Decimal, ParticipantId]] = []
    for participant, amount in working.items():
        if amount > 0:
            creditors.append((-amount, participant))
        else:
            debtors.append((amount, participant))
    heapq.heapify(creditors)
    heapq.heapify(debtors)

    transactions: List[Transaction] = []
    while creditors and debtors:
        credit_neg, creditor = heapq.heappop(creditors)
        debt, debtor = heapq.heappop(debtors)

        credit = -credit_neg
        owed = -debt
        amount = min(credit, owed)

        transactions.append(
            Transaction(
                from_participant=debtor,
                to_participant=creditor,
                amount=amount,
                description=describe_transaction(
                    debtor,
                    creditor,
                    amount,
                    perspective=perspective,
                    display_name=display_name,
                ),
            )
        )

        remaining_credit = quantize(credit - amount)
        remaining_debt = quantize(owed - amount)
        if remaining_credit >= EPSILON:
            heapq.heappush(creditors, (-remaining_credit, creditor))
        if remaining_debt >= EPSILON:
            heapq.heappush(debtors, (-remaining_debt, debtor))

    # Leftovers are forced to zero only up to the drift rounding put there
    leftover = [(p, -key) for key, p in creditors] + [(p, key) for key, p in debtors]
    if total(abs(amount) for _, amount in leftover) > imbalance + rounding:
        participant, amount = leftover[0]
        raise DataIntegrityError(
            f"Unresolved balance {amount} for {participant} has no counterpart"
        )

    return transactions


def apply_transactions(
    balances: Mapping[ParticipantId, Decimal],
    transactions: Iterable[Transaction],
) -> BalanceMap:
    """Balances after paying out the transactions in order"""
    residual: Dict[ParticipantId, Decimal] = dict(balances)
    for txn in transactions:
        residual[txn.from_participant] = residual.get(txn.from_participant, Decimal(0)) + txn.amount
        residual[txn.to_participant] = residual.get(txn.to_participant, Decimal(0)) - txn.amount
    return residual


def compute_group_settlement(
    splits: Sequence[Split],
    *,
    perspective: Optional[ParticipantId] = None,
    display_name: Optional[DisplayName] = None,
) -> SettlementResult:
    """
    Main entry point for one scope: validate, balance, settle.

    The scope is whatever the caller passes in - one group's splits, or a
    pooled set spanning several groups.

    Raises:
        PrecisionOverflowError: A split carries an unrepresentable amount
        DataIntegrityError: A split is malformed or balances cannot be settled
    """
    for split in splits:
        validate_split(split)

    balances = calculate_balances(splits, perspective=perspective)
    transactions = settle_balances(balances, perspective=perspective, display_name=display_name)

    residual = {
        participant: Decimal(0) if is_zero(amount) else amount
        for participant, amount in apply_transactions(balances, transactions).items()
    }

    return SettlementResult(
        transactions=transactions,
        balances=balances,
        residual=residual,
    )
