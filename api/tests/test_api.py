"""HTTP tests for the scoring and address validation endpoints."""

import pytest
from fastapi.testclient import TestClient

from chainscore.dependencies import get_narrator
from chainscore.main import app
from conftest import POLKADOT_ADDRESS, STELLAR_ADDRESS


@pytest.fixture
def client():
    app.dependency_overrides[get_narrator] = lambda: None
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _body(**overrides):
    body = {
        "stellar": {
            "address": STELLAR_ADDRESS,
            "transaction_count": 50,
            "total_volume": 1000,
            "payment_count": 25,
            "account_age": 70,
            "asset_diversity": 4,
            "liquidity_provided": 0,
        },
        "polkadot": {
            "address": POLKADOT_ADDRESS,
            "governance_votes": 20,
            "staking_amount": 0,
            "staking_duration": 0,
            "validator_nominations": 0,
            "parachain_interactions": 3,
            "account_age": 200,
            "identity_verified": True,
        },
    }
    for chain, fields in overrides.items():
        body[chain].update(fields)
    return body


class TestScoreEndpoint:
    def test_scores_metrics(self, client):
        response = client.post("/api/v1/reputation/score", json=_body())
        assert response.status_code == 200
        data = response.json()
        assert data["stellar"]["score"] == 100
        assert data["polkadot"]["score"] == 248  # 150 + 28 weeks + 70 identity
        assert data["overall_score"] == data["stellar"]["score"] + data["polkadot"]["score"]
        assert data["profile"] == "Governor"
        assert data["insights"]["profile"] == "Governor"
        assert data["insights"]["summary_source"] == "template"
        assert data["score_tier"] == "Building"
        assert set(data["breakdown"]) == {
            "transaction_consistency",
            "governance_participation",
            "staking_behavior",
            "liquidity_provision",
            "account_age",
            "asset_diversity",
        }
        assert "X-Request-ID" in response.headers

    def test_empty_metrics_default_to_zero(self, client):
        response = client.post(
            "/api/v1/reputation/score",
            json={"stellar": {"address": STELLAR_ADDRESS}, "polkadot": {"address": POLKADOT_ADDRESS}},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["overall_score"] == 0
        assert data["profile"] == "Newcomer"

    def test_invalid_stellar_address_rejected(self, client):
        response = client.post(
            "/api/v1/reputation/score", json=_body(stellar={"address": "not-an-address"})
        )
        assert response.status_code == 422

    def test_invalid_polkadot_address_rejected(self, client):
        response = client.post(
            "/api/v1/reputation/score", json=_body(polkadot={"address": "0xdeadbeef"})
        )
        assert response.status_code == 422

    def test_negative_metric_rejected(self, client):
        response = client.post(
            "/api/v1/reputation/score", json=_body(stellar={"transaction_count": -1})
        )
        assert response.status_code == 422


class TestValidateEndpoint:
    def test_both_valid(self, client):
        response = client.get(
            "/api/v1/addresses/validate",
            params={"stellar_address": STELLAR_ADDRESS, "polkadot_address": POLKADOT_ADDRESS},
        )
        assert response.status_code == 200
        assert response.json() == {
            "stellar": {"provided": True, "valid": True},
            "polkadot": {"provided": True, "valid": True},
            "can_scan": True,
        }

    def test_missing_and_invalid(self, client):
        response = client.get(
            "/api/v1/addresses/validate", params={"stellar_address": "GABC"}
        )
        assert response.json() == {
            "stellar": {"provided": True, "valid": False},
            "polkadot": {"provided": False, "valid": False},
            "can_scan": False,
        }


class TestOperationalEndpoints:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_metrics_exposes_reputation_counter(self, client):
        client.post("/api/v1/reputation/score", json=_body())
        response = client.get("/metrics")
        assert response.status_code == 200
        assert "chainscore_reputation_records_total" in response.text
