"""Pydantic schemas for API request/response validation"""

from decimal import Decimal
from pydantic import BaseModel, Field
from typing import Dict, List, Optional

from splitledger.domain.models import (
    DuesReport,
    GroupDues,
    PaymentMethod,
    RejectedSplit,
    SettlementResult,
    Transaction,
)


class TransactionSchema(BaseModel):
    """Recommended transfer between two participants"""

    from_participant: str
    to_participant: str
    amount: Decimal
    description: str

    @classmethod
    def from_domain(cls, txn: Transaction) -> "TransactionSchema":
        return cls(
            from_participant=txn.from_participant,
            to_participant=txn.to_participant,
            amount=txn.amount,
            description=txn.description,
        )


class SettlementResponse(BaseModel):
    """Response for GET /v1/groups/{group_id}/settlement"""

    group_id: str
    balances: Dict[str, Decimal]
    transactions: List[TransactionSchema]

    @classmethod
    def from_domain(cls, group_id: str, result: SettlementResult) -> "SettlementResponse":
        return cls(
            group_id=group_id,
            balances=dict(result.balances),
            transactions=[TransactionSchema.from_domain(t) for t in result.transactions],
        )


class GroupDuesSchema(BaseModel):
    """Single group entry in a dues report"""

    group_id: str
    group_name: str = ""
    amount_owed: Decimal
    amount_owed_to_user: Decimal
    net_amount: Decimal
    transactions: List[TransactionSchema]
    error: Optional[str] = None

    @classmethod
    def from_domain(cls, group: GroupDues) -> "GroupDuesSchema":
        return cls(
            group_id=group.group_id,
            group_name=group.group_name,
            amount_owed=group.amount_owed,
            amount_owed_to_user=group.amount_owed_to_user,
            net_amount=group.net_amount,
            transactions=[TransactionSchema.from_domain(t) for t in group.transactions],
            error=group.error,
        )


class RejectedSplitSchema(BaseModel):
    """Split excluded from a report"""

    split_id: str
    group_id: str
    reason: str

    @classmethod
    def from_domain(cls, rejected: RejectedSplit) -> "RejectedSplitSchema":
        return cls(split_id=rejected.split_id, group_id=rejected.group_id, reason=rejected.reason)


class DuesResponse(BaseModel):
    """Response for GET /v1/dues/{participant}"""

    participant: str
    total_owed: Decimal
    total_owed_to_user: Decimal
    net_balance: Decimal
    pending_groups: List[GroupDuesSchema]
    global_transactions: List[TransactionSchema]
    rejected_splits: List[RejectedSplitSchema] = []
    global_error: Optional[str] = None

    @classmethod
    def from_domain(cls, report: DuesReport) -> "DuesResponse":
        return cls(
            participant=report.participant,
            total_owed=report.total_owed,
            total_owed_to_user=report.total_owed_to_user,
            net_balance=report.net_balance,
            pending_groups=[GroupDuesSchema.from_domain(g) for g in report.groups],
            global_transactions=[TransactionSchema.from_domain(t) for t in report.global_transactions],
            rejected_splits=[RejectedSplitSchema.from_domain(r) for r in report.rejected_splits],
            global_error=report.global_error,
        )


class PaymentRequest(BaseModel):
    """Request body for POST /v1/splits/{split_id}/payments"""

    participant: str = Field(..., min_length=1, description="Member whose share was paid")
    amount: Optional[Decimal] = Field(None, gt=0, description="Amount paid; defaults to the owed share")
    method: PaymentMethod = PaymentMethod.MANUAL
    transaction_hash: Optional[str] = Field(None, min_length=1, description="On-chain transaction hash")


class PaymentResponse(BaseModel):
    """Response for POST /v1/splits/{split_id}/payments"""

    payment_id: str
    split_id: str
    participant: str
    amount: Decimal
    method: PaymentMethod
    status: str
    transaction_hash: Optional[str] = None
    recorded: bool = True
