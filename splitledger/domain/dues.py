"""Dues aggregation - per-group and pooled settlement views for one user"""

import logging
from collections import OrderedDict
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from splitledger.domain.balances import summarize_participant
from splitledger.domain.exceptions import DomainException, PrecisionOverflowError
from splitledger.domain.models import (
    DuesReport,
    GroupDues,
    ParticipantId,
    RejectedSplit,
    Split,
    Transaction,
)
from splitledger.domain.naming import DisplayName
from splitledger.domain.settlement import compute_group_settlement
from splitledger.domain.validation import check_representable

logger = logging.getLogger(__name__)


def group_splits_by_group(splits: Iterable[Split]) -> Dict[str, List[Split]]:
    """Bucket a flat split list by group_id, keeping input order within each group"""
    grouped: Dict[str, List[Split]] = OrderedDict()
    for split in splits:
        grouped.setdefault(split.group_id, []).append(split)
    return grouped


def _involving(transactions: Iterable[Transaction], participant: ParticipantId) -> List[Transaction]:
    return [t for t in transactions if t.involves(participant)]


def compute_user_dues(
    participant: ParticipantId,
    splits_by_group: Mapping[str, Sequence[Split]],
    *,
    display_name: Optional[DisplayName] = None,
) -> DuesReport:
    """
    Build the dues report for one participant.

    Flow:
    1. Drop splits with unrepresentable amounts (listed in rejected_splits)
    2. Per group: raw totals from membership, then settle the group and keep
       only transactions the participant sends or receives
    3. Pool the splits of every healthy group and settle once more for the
       global view; pooling can cancel debts no single group can see
    4. Report totals come from raw membership, not from the solver

    Failures degrade the report instead of aborting it: a group that cannot
    be settled is returned with `error` set, and a failed global pass sets
    `global_error`.
    """
    rejected: List[RejectedSplit] = []
    screened: Dict[str, List[Split]] = OrderedDict()

    for group_id in sorted(splits_by_group):
        kept = screened.setdefault(group_id, [])
        for split in splits_by_group[group_id]:
            try:
                check_representable(split)
            except PrecisionOverflowError as e:
                logger.warning(
                    "Split rejected",
                    extra={"split_id": split.split_id, "group_id": group_id, "reason": str(e)},
                )
                rejected.append(RejectedSplit(split_id=split.split_id, group_id=group_id, reason=str(e)))
                continue
            kept.append(split)

    total_owed = Decimal(0)
    total_owed_to_user = Decimal(0)
    groups: List[GroupDues] = []
    pooled: List[Split] = []

    for group_id, splits in screened.items():
        owed, owed_to_user = summarize_participant(splits, participant)
        total_owed += owed
        total_owed_to_user += owed_to_user

        entry = GroupDues(
            group_id=group_id,
            group_name=next((s.group_name for s in splits if s.group_name), ""),
            amount_owed=owed,
            amount_owed_to_user=owed_to_user,
            net_amount=owed_to_user - owed,
        )

        try:
            result = compute_group_settlement(splits, perspective=participant, display_name=display_name)
        except DomainException as e:
            logger.warning(
                "Group settlement failed",
                extra={"participant": participant, "group_id": group_id, "error": str(e)},
            )
            entry.error = str(e)
            groups.append(entry)
            continue

        entry.transactions = _involving(result.transactions, participant)
        pooled.extend(splits)

        # Nothing pending for this user in the group
        if owed == 0 and owed_to_user == 0 and not entry.transactions:
            continue
        groups.append(entry)

    report = DuesReport(
        participant=participant,
        total_owed=total_owed,
        total_owed_to_user=total_owed_to_user,
        net_balance=total_owed_to_user - total_owed,
        groups=groups,
        rejected_splits=rejected,
    )

    try:
        global_result = compute_group_settlement(pooled, perspective=participant, display_name=display_name)
    except DomainException as e:
        logger.warning(
            "Global settlement failed",
            extra={"participant": participant, "error": str(e)},
        )
        report.global_error = str(e)
        return report

    report.global_transactions = _involving(global_result.transactions, participant)
    return report
