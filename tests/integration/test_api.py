"""Integration tests for API endpoints"""

import pytest
from decimal import Decimal
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session
from splitledger.domain.models import SplitMember
from splitledger.infrastructure.database.repositories import SplitRepository


@pytest.fixture
def seeded(db: Session) -> dict:
    """Two groups whose debts between A and B cancel only when pooled"""
    repo = SplitRepository(db)
    dinner = repo.create_split(
        "g1",
        "0xA",
        Decimal("90"),
        [
            SplitMember("0xA", Decimal("30")),
            SplitMember("0xB", Decimal("30")),
            SplitMember("0xC", Decimal("30")),
        ],
    )
    repo.create_split("g2", "0xB", Decimal("30"), [SplitMember("0xA", Decimal("30"))], group_name="Taxis")
    repo.upsert_participant("0xA", display_name="Alice")
    db.commit()
    return {"dinner_id": dinner.id}


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "splitledger_settlement" in response.text


def test_request_id_round_trip(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"

    minted = client.get("/health")
    assert minted.headers["X-Request-ID"]


def test_group_settlement_endpoint(client: TestClient, seeded: dict):
    """Test GET /v1/groups/{group_id}/settlement"""
    response = client.get("/v1/groups/g1/settlement", params={"perspective": "0xB"})

    assert response.status_code == 200
    data = response.json()
    assert {p: Decimal(b) for p, b in data["balances"].items()} == {
        "0xA": Decimal("60"),
        "0xB": Decimal("-30"),
        "0xC": Decimal("-30"),
    }
    assert [(t["from_participant"], t["to_participant"], Decimal(t["amount"])) for t in data["transactions"]] == [
        ("0xB", "0xA", Decimal("30")),
        ("0xC", "0xA", Decimal("30")),
    ]
    assert data["transactions"][0]["description"] == "You pay Alice 30.000000"


def test_group_settlement_unknown_group_is_empty(client: TestClient, seeded: dict):
    response = client.get("/v1/groups/nope/settlement")

    assert response.status_code == 200
    assert response.json()["transactions"] == []


def test_dues_endpoint_pools_across_groups(client: TestClient, seeded: dict):
    """Test GET /v1/dues/{participant}"""
    response = client.get("/v1/dues/0xB")

    assert response.status_code == 200
    data = response.json()
    assert Decimal(data["total_owed"]) == Decimal("30")
    assert Decimal(data["total_owed_to_user"]) == Decimal("30")
    assert Decimal(data["net_balance"]) == Decimal("0")

    groups = {g["group_id"]: g for g in data["pending_groups"]}
    assert [(t["from_participant"], t["to_participant"]) for t in groups["g1"]["transactions"]] == [("0xB", "0xA")]
    assert [(t["from_participant"], t["to_participant"]) for t in groups["g2"]["transactions"]] == [("0xA", "0xB")]
    assert groups["g1"]["group_name"] == "g1"
    assert groups["g2"]["group_name"] == "Taxis"

    # B's debt in g1 and credit in g2 cancel once pooled
    assert data["global_transactions"] == []
    assert data["rejected_splits"] == []
    assert data["global_error"] is None


def test_dues_endpoint_unknown_participant(client: TestClient, seeded: dict):
    response = client.get("/v1/dues/0xNobody")

    assert response.status_code == 200
    data = response.json()
    assert data["pending_groups"] == []
    assert Decimal(data["net_balance"]) == Decimal("0")


def test_payment_updates_next_computation(client: TestClient, seeded: dict):
    """Test POST /v1/splits/{split_id}/payments"""
    response = client.post(
        f"/v1/splits/{seeded['dinner_id']}/payments",
        json={"participant": "0xC"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["recorded"] is True
    assert data["method"] == "MANUAL"
    assert Decimal(data["amount"]) == Decimal("30")
    assert data["payment_id"]

    settlement = client.get("/v1/groups/g1/settlement").json()
    assert [(t["from_participant"], t["to_participant"]) for t in settlement["transactions"]] == [("0xB", "0xA")]

    again = client.post(
        f"/v1/splits/{seeded['dinner_id']}/payments",
        json={"participant": "0xC"},
    )
    assert again.status_code == 404


def test_payment_requires_participant(client: TestClient, seeded: dict):
    response = client.post(f"/v1/splits/{seeded['dinner_id']}/payments", json={"participant": ""})
    assert response.status_code == 422


def test_onchain_payment_keeps_hash(client: TestClient, seeded: dict):
    response = client.post(
        f"/v1/splits/{seeded['dinner_id']}/payments",
        json={"participant": "0xB", "amount": "30", "method": "ONCHAIN", "transaction_hash": "0xabc123"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["method"] == "ONCHAIN"
    assert data["transaction_hash"] == "0xabc123"
    assert data["status"] == "COMPLETED"


def test_payment_amount_must_be_positive(client: TestClient, seeded: dict):
    response = client.post(
        f"/v1/splits/{seeded['dinner_id']}/payments",
        json={"participant": "0xB", "amount": "-5"},
    )
    assert response.status_code == 422


def test_oversized_payment_amount_rejected(client: TestClient, seeded: dict):
    response = client.post(
        f"/v1/splits/{seeded['dinner_id']}/payments",
        json={"participant": "0xB", "amount": "1e19"},
    )
    assert response.status_code == 422
