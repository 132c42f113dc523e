"""SQLAlchemy ORM models for participants, groups and splits"""

import uuid
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Integer, Numeric, Text
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()

# Wide enough for MAX_INTEGER_DIGITS integer digits plus ledger precision
AMOUNT_TYPE = Numeric(precision=38, scale=6, asdecimal=True)


def _new_id() -> str:
    return str(uuid.uuid4())


class ParticipantRecord(Base):
    """Wallet identity with optional human-readable names"""

    __tablename__ = "participant"

    wallet_address = Column(Text, primary_key=True)
    display_name = Column(Text, nullable=True)
    ens_name = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class GroupRecord(Base):
    """Expense group"""

    __tablename__ = "expense_group"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    splits = relationship("SplitRecord", back_populates="group", cascade="all, delete-orphan")


class SplitRecord(Base):
    """Shared expense paid by one participant"""

    __tablename__ = "split"

    id = Column(String(36), primary_key=True, default=_new_id)
    group_id = Column(String(36), ForeignKey("expense_group.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(Text, nullable=False, default="")
    payer = Column(Text, nullable=False, index=True)
    total_amount = Column(AMOUNT_TYPE, nullable=False)
    status = Column(Text, nullable=False, default="ACTIVE")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    group = relationship("GroupRecord", back_populates="splits")
    members = relationship(
        "SplitMemberRecord",
        back_populates="split",
        cascade="all, delete-orphan",
        order_by="SplitMemberRecord.position",
    )
    payments = relationship("PaymentRecord", back_populates="split", cascade="all, delete-orphan")


class SplitMemberRecord(Base):
    """One participant's share of a split"""

    __tablename__ = "split_member"

    id = Column(String(36), primary_key=True, default=_new_id)
    split_id = Column(String(36), ForeignKey("split.id", ondelete="CASCADE"), nullable=False, index=True)
    participant = Column(Text, nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    owed_amount = Column(AMOUNT_TYPE, nullable=False)
    is_paid = Column(Boolean, nullable=False, default=False)
    paid_at = Column(DateTime(timezone=True), nullable=True)

    split = relationship("SplitRecord", back_populates="members")


class PaymentRecord(Base):
    """Money a member reports having paid toward their share of a split"""

    __tablename__ = "payment"

    id = Column(String(36), primary_key=True, default=_new_id)
    split_id = Column(String(36), ForeignKey("split.id", ondelete="CASCADE"), nullable=False, index=True)
    from_participant = Column(Text, nullable=False, index=True)
    amount = Column(AMOUNT_TYPE, nullable=False)
    method = Column(Text, nullable=False, default="MANUAL")
    status = Column(Text, nullable=False, default="COMPLETED")
    transaction_hash = Column(Text, nullable=True)
    description = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    split = relationship("SplitRecord", back_populates="payments")
