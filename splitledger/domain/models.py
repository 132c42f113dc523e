"""Domain models - pure Python dataclasses representing ledger entities"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

# Wallet address or equivalent; compared case-sensitively, never normalized here
ParticipantId = str

BalanceMap = Dict[ParticipantId, Decimal]


class SplitStatus(str, Enum):
    """Lifecycle state of a split as stored by the datastore"""

    ACTIVE = "ACTIVE"
    SETTLED = "SETTLED"


class PaymentMethod(str, Enum):
    """How a member settled their share outside the ledger"""

    MANUAL = "MANUAL"
    ONCHAIN = "ONCHAIN"


@dataclass
class SplitMember:
    """One participant's share of a split"""

    participant: ParticipantId
    owed_amount: Decimal
    is_paid: bool = False


@dataclass
class Split:
    """Single shared expense: one payer, one or more owing members"""

    split_id: str
    group_id: str
    payer: ParticipantId
    total_amount: Decimal
    members: List[SplitMember]
    status: SplitStatus = SplitStatus.ACTIVE
    title: str = ""
    group_name: str = ""

    @property
    def is_settled(self) -> bool:
        return self.status == SplitStatus.SETTLED


@dataclass(frozen=True)
class Transaction:
    """Recommended transfer from a net debtor to a net creditor"""

    from_participant: ParticipantId
    to_participant: ParticipantId
    amount: Decimal
    description: str = ""

    def involves(self, participant: ParticipantId) -> bool:
        return participant in (self.from_participant, self.to_participant)


@dataclass
class SettlementResult:
    """Output of the solver for one scope of splits"""

    transactions: List[Transaction]
    balances: BalanceMap
    residual: BalanceMap

    @property
    def total_amount(self) -> Decimal:
        return sum((t.amount for t in self.transactions), Decimal(0))


@dataclass
class GroupDues:
    """Per-group slice of a dues report"""

    group_id: str
    amount_owed: Decimal
    amount_owed_to_user: Decimal
    net_amount: Decimal
    group_name: str = ""
    transactions: List[Transaction] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def errored(self) -> bool:
        return self.error is not None


@dataclass
class RejectedSplit:
    """Split dropped from a report because its amounts are unrepresentable"""

    split_id: str
    group_id: str
    reason: str


@dataclass
class DuesReport:
    """Everything a user owes and is owed, with recommended transactions"""

    participant: ParticipantId
    total_owed: Decimal
    total_owed_to_user: Decimal
    net_balance: Decimal
    groups: List[GroupDues] = field(default_factory=list)
    global_transactions: List[Transaction] = field(default_factory=list)
    rejected_splits: List[RejectedSplit] = field(default_factory=list)
    global_error: Optional[str] = None

    @property
    def errored_groups(self) -> List[str]:
        return [g.group_id for g in self.groups if g.errored]


@dataclass(frozen=True)
class SplitScope:
    """Query scope for the datastore: a single group, or every group of a participant"""

    group_id: Optional[str] = None
    participant: Optional[ParticipantId] = None

    def __post_init__(self) -> None:
        if (self.group_id is None) == (self.participant is None):
            raise ValueError("SplitScope needs exactly one of group_id or participant")

    @classmethod
    def for_group(cls, group_id: str) -> "SplitScope":
        return cls(group_id=group_id)

    @classmethod
    def for_participant(cls, participant: ParticipantId) -> "SplitScope":
        return cls(participant=participant)
