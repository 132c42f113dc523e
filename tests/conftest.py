"""Pytest fixtures for testing"""

import pytest
from decimal import Decimal
from typing import Callable, Generator, Sequence, Tuple, Union
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from splitledger.api.main import create_app
from splitledger.infrastructure.database.models import Base
from splitledger.infrastructure.database.session import get_db
from splitledger.domain.models import Split, SplitMember, SplitStatus


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# (participant, owed_amount) or (participant, owed_amount, is_paid)
MemberSpec = Union[Tuple[str, str], Tuple[str, str, bool]]


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def make_split() -> Callable[..., Split]:
    """
    Factory for Split records.

    make_split("g1", "A", [("A", "30"), ("B", "30"), ("C", "30", True)])
    builds a split whose total is the sum of the member shares.
    """
    counter = {"n": 0}

    def _make(
        group_id: str,
        payer: str,
        members: Sequence[MemberSpec],
        status: SplitStatus = SplitStatus.ACTIVE,
        total_amount: Union[str, None] = None,
        split_id: Union[str, None] = None,
    ) -> Split:
        counter["n"] += 1
        split_members = [
            SplitMember(
                participant=m[0],
                owed_amount=Decimal(m[1]),
                is_paid=m[2] if len(m) > 2 else False,
            )
            for m in members
        ]
        return Split(
            split_id=split_id or f"split_{counter['n']}",
            group_id=group_id,
            payer=payer,
            total_amount=(
                Decimal(total_amount)
                if total_amount is not None
                else sum((m.owed_amount for m in split_members), Decimal(0))
            ),
            members=split_members,
            status=status,
        )

    return _make
