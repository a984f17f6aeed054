import base64

import pytest
from fastapi.testclient import TestClient

from src.api.dependencies import get_wallet_service
from src.core.exceptions import AirdropError, AirdropStage, RpcExhaustedError
from src.intent.extractor import IntentExtractor
from src.main import app
from src.services.wallet import WalletService
from src.wallet.models import AirdropResult


@pytest.fixture
def reader(mocker):
    reader = mocker.Mock()
    reader.fetch_balance = mocker.AsyncMock(return_value=1_500_000_000)
    return reader


@pytest.fixture
def airdrop(mocker):
    airdrop = mocker.Mock()
    airdrop.run = mocker.AsyncMock()
    return airdrop


@pytest.fixture
def client(fake_llm, make_intent_json, valid_address, reader, airdrop):
    """TestClient whose wallet service answers every query with the given completion"""
    completions = {"value": make_intent_json("get_balance", valid_address, "false")}

    def service() -> WalletService:
        return WalletService(
            IntentExtractor(fake_llm(completions["value"])), reader, lambda: airdrop)

    app.dependency_overrides[get_wallet_service] = service
    test_client = TestClient(app)
    test_client.completions = completions
    yield test_client
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_get_balance(client, valid_address):
    response = client.get(f"/api/wallet/balance/{valid_address}")

    assert response.status_code == 200
    assert response.json() == {
        "publicKey": valid_address,
        "balanceInLamports": 1_500_000_000,
        "balanceInSOL": 1.5,
        "message": "Balance fetched successfully",
    }


def test_get_balance_invalid_address(client, reader):
    response = client.get("/api/wallet/balance/not-a-valid-address")

    assert response.status_code == 400
    assert response.json()["error"] == "invalid_address"
    reader.fetch_balance.assert_not_awaited()


def test_get_balance_rpc_exhausted(client, reader, valid_address):
    reader.fetch_balance.side_effect = RpcExhaustedError(5, ConnectionError("node down"))

    response = client.get(f"/api/wallet/balance/{valid_address}")

    assert response.status_code == 502
    body = response.json()
    assert body["error"] == "balance_fetch_failed"
    assert "node down" in body["message"]


def test_airdrop(client, airdrop, valid_address):
    airdrop.run.return_value = AirdropResult(
        address=valid_address,
        signature="5sig",
        requested_amount=1,
        requested_lamports=1_000_000_000,
        initial_balance=0,
        new_balance=1_000_000_000,
        delta=1_000_000_000,
    )

    response = client.post("/api/wallet/airdrop", json={"publicKey": valid_address, "amount": 1})

    assert response.status_code == 200
    assert response.json() == {
        "publicKey": valid_address,
        "signature": "5sig",
        "requestedAmount": 1.0,
        "initialBalanceSOL": 0.0,
        "newBalanceSOL": 1.0,
        "actualChangeSOL": 1.0,
        "message": "Airdrop successful",
        "status": "confirmed",
    }
    airdrop.run.assert_awaited_once_with(valid_address, 1.0)


def test_airdrop_failure_reports_stage(client, airdrop, valid_address):
    airdrop.run.side_effect = AirdropError(
        AirdropStage.CONFIRM, "Transaction failed: {'err': 1}", signature="5sig")

    response = client.post("/api/wallet/airdrop", json={"publicKey": valid_address, "amount": 1})

    assert response.status_code == 502
    body = response.json()
    assert body["error"] == "airdrop_failed"
    assert body["stage"] == "confirm"
    assert body["signature"] == "5sig"


@pytest.mark.parametrize("payload", [
    {},
    {"publicKey": "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"},
    {"publicKey": "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM", "amount": 0},
])
def test_airdrop_validation_error(client, payload):
    response = client.post("/api/wallet/airdrop", json=payload)

    assert response.status_code == 422


@pytest.mark.parametrize("amount", [1e-10, 0.0000000015])
def test_airdrop_rejects_fractional_lamports(client, airdrop, valid_address, amount):
    response = client.post(
        "/api/wallet/airdrop", json={"publicKey": valid_address, "amount": amount})

    assert response.status_code == 422
    airdrop.run.assert_not_awaited()


def test_natural_balance_needs_address(client, make_intent_json, reader):
    client.completions["value"] = make_intent_json("get_balance", "none", "true")

    response = client.post("/api/natural/balance", json={"query": "What's my balance?"})

    assert response.status_code == 200
    assert response.json() == {
        "status": "needs_address",
        "message": "Please provide a Solana wallet address to check the balance",
    }
    reader.fetch_balance.assert_not_awaited()


def test_natural_balance_with_address(client, valid_address):
    response = client.post(
        "/api/natural/balance", json={"query": f"Check balance for {valid_address}"})

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert body["publicKey"] == valid_address
    assert body["balanceInLamports"] == 1_500_000_000
    assert body["balanceInSOL"] == 1.5


def test_natural_balance_unparseable_model_output(client):
    client.completions["value"] = "I cannot help with that"

    response = client.post("/api/natural/balance", json={"query": "What's my balance?"})

    assert response.status_code == 500
    assert response.json()["error"] == "processing_failed"


def test_natural_balance_missing_query(client):
    response = client.post("/api/natural/balance", json={})

    assert response.status_code == 422


def test_natural_intent(client, valid_address):
    response = client.post(
        "/api/natural/intent", json={"query": f"Check balance for {valid_address}"})

    assert response.status_code == 200
    assert response.json() == {
        "action": "get_balance",
        "publicKey": valid_address,
        "needsAddress": False,
    }


def test_create_wallet(client):
    response = client.post("/api/wallet/create")

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "New wallet created successfully"
    assert len(base64.b64decode(body["secretKey"])) == 64
