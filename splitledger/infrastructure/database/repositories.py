"""Data access layer for splits and participants"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload
from splitledger.infrastructure.database.models import (
    GroupRecord,
    ParticipantRecord,
    PaymentRecord,
    SplitMemberRecord,
    SplitRecord,
)
from splitledger.domain.exceptions import DataIntegrityError
from splitledger.domain.models import PaymentMethod, Split, SplitMember, SplitScope, SplitStatus
from splitledger.domain.validation import validate_split
from splitledger.utils.money import AmountLike, to_amount


def to_domain_split(record: SplitRecord) -> Split:
    """Flatten an ORM split graph into a plain Split record"""
    return Split(
        split_id=record.id,
        group_id=record.group_id,
        payer=record.payer,
        total_amount=Decimal(record.total_amount),
        members=[
            SplitMember(
                participant=m.participant,
                owed_amount=Decimal(m.owed_amount),
                is_paid=bool(m.is_paid),
            )
            for m in record.members
        ],
        status=SplitStatus(record.status),
        title=record.title or "",
        group_name=record.group.name if record.group is not None else "",
    )


class SplitRepository:
    """Repository for splits, their members, and participant names"""

    def __init__(self, db: Session):
        self.db = db

    def fetch_active_splits(self, scope: SplitScope) -> List[Split]:
        """
        Snapshot every non-settled split in scope.

        Scope is either one group, or every split a participant paid for or
        is a member of (across all groups).
        """
        query = (
            self.db.query(SplitRecord)
            .options(selectinload(SplitRecord.members), selectinload(SplitRecord.group))
            .filter(SplitRecord.status != SplitStatus.SETTLED.value)
        )

        if scope.group_id is not None:
            query = query.filter(SplitRecord.group_id == scope.group_id)
        else:
            query = query.filter(
                or_(
                    SplitRecord.payer == scope.participant,
                    SplitRecord.members.any(SplitMemberRecord.participant == scope.participant),
                )
            )

        records = query.order_by(SplitRecord.created_at, SplitRecord.id).all()
        return [to_domain_split(r) for r in records]

    def create_split(
        self,
        group_id: str,
        payer: str,
        total_amount: AmountLike,
        members: List[SplitMember],
        title: str = "",
        status: SplitStatus = SplitStatus.ACTIVE,
        group_name: Optional[str] = None,
    ) -> SplitRecord:
        """
        Validate and persist a split, creating its group on first use.

        group_name names a newly created group (default: its id) and is
        ignored for existing groups.

        Raises:
            PrecisionOverflowError: Amount not representable at ledger precision
            DataIntegrityError: Split fails validation
        """
        total_amount = to_amount(total_amount)
        members = [
            SplitMember(
                participant=m.participant,
                owed_amount=to_amount(m.owed_amount),
                is_paid=m.is_paid,
            )
            for m in members
        ]
        validate_split(
            Split(
                split_id="<new>",
                group_id=group_id,
                payer=payer,
                total_amount=total_amount,
                members=members,
                status=status,
                title=title,
            )
        )

        if self.db.get(GroupRecord, group_id) is None:
            self.db.add(GroupRecord(id=group_id, name=group_name or group_id))
            self.db.flush()

        db_split = SplitRecord(
            group_id=group_id,
            title=title,
            payer=payer,
            total_amount=total_amount,
            status=status.value,
        )
        self.db.add(db_split)
        self.db.flush()  # Get ID without committing

        for position, member in enumerate(members):
            self.db.add(
                SplitMemberRecord(
                    split_id=db_split.id,
                    participant=member.participant,
                    position=position,
                    owed_amount=member.owed_amount,
                    is_paid=member.is_paid,
                )
            )
        self.db.flush()

        return db_split

    def record_payment(
        self,
        split_id: str,
        participant: str,
        amount: Optional[AmountLike] = None,
        method: PaymentMethod = PaymentMethod.MANUAL,
        transaction_hash: Optional[str] = None,
    ) -> Optional[PaymentRecord]:
        """
        Record a payment toward a participant's share and mark the share paid.

        amount defaults to the member's owed share. Returns None when the
        participant has no unpaid share on that split.

        Raises:
            PrecisionOverflowError: Amount not representable at ledger precision
            DataIntegrityError: Amount is not positive
        """
        member = (
            self.db.query(SplitMemberRecord)
            .filter(
                SplitMemberRecord.split_id == split_id,
                SplitMemberRecord.participant == participant,
                SplitMemberRecord.is_paid.is_(False),
            )
            .first()
        )
        if member is None:
            return None

        paid = Decimal(member.owed_amount) if amount is None else to_amount(amount)
        if paid <= 0:
            raise DataIntegrityError(f"Payment amount must be positive, got {paid}")

        payment = PaymentRecord(
            split_id=split_id,
            from_participant=participant,
            amount=paid,
            method=method.value,
            status="COMPLETED",
            transaction_hash=transaction_hash,
            description=f"Payment for split {split_id}",
        )
        self.db.add(payment)

        member.is_paid = True
        member.paid_at = datetime.now(timezone.utc)
        self.db.flush()
        return payment

    def upsert_participant(
        self,
        wallet_address: str,
        display_name: Optional[str] = None,
        ens_name: Optional[str] = None,
    ) -> ParticipantRecord:
        """Create a participant or update the names it carries"""
        record = self.db.get(ParticipantRecord, wallet_address)
        if record is None:
            record = ParticipantRecord(wallet_address=wallet_address)
            self.db.add(record)

        if display_name is not None:
            record.display_name = display_name
        if ens_name is not None:
            record.ens_name = ens_name

        self.db.flush()
        return record

    def get_display_name(self, wallet_address: str) -> Optional[str]:
        """Display name if set, otherwise ENS name, otherwise None"""
        record = self.db.get(ParticipantRecord, wallet_address)
        if record is None:
            return None
        return record.display_name or record.ens_name
