"""
Test suite for the exchange endpoint.

Wires a real ExchangeService over the in-memory store through
dependency_overrides so status codes and bodies are checked end to end.

System role: Verification of exchange HTTP API
"""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from convoquota.api.deps import get_account_id, get_exchange_service
from convoquota.api.routers.exchange import router as exchange_router
from convoquota.application.services.exchange_service import ExchangeService
from convoquota.core.classifier import HeuristicAnswerClassifier
from convoquota.core.exceptions import StoreUnavailableError
from tests.conftest import BILLABLE_ANSWER, CLARIFYING_ANSWER


@pytest.fixture
def app():
    app = FastAPI()
    app.include_router(exchange_router)
    app.dependency_overrides[get_account_id] = lambda: None
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def inference():
    return AsyncMock(return_value=BILLABLE_ANSWER)


@pytest.fixture
def exchange_service(memory_store, enforcer, inference):
    return ExchangeService(
        store=memory_store,
        enforcer=enforcer,
        classifier=HeuristicAnswerClassifier(),
        inference=inference,
    )


@pytest.fixture
def wired_client(client, exchange_service):
    client.app.dependency_overrides[get_exchange_service] = lambda: exchange_service
    return client


def test_answered_exchange(wired_client):
    response = wired_client.post("/exchange", json={"session_id": "s-1", "message": "Tips?"})

    assert response.status_code == 200
    data = response.json()
    assert data["usage_count"] == 1
    assert data["remaining"] == 9
    assert data["billable"] is True
    assert data["answer_text"].startswith("Here is a plan")


def test_non_billable_exchange(wired_client, inference):
    inference.return_value = CLARIFYING_ANSWER

    response = wired_client.post("/exchange", json={"session_id": "s-1", "message": "Help"})

    assert response.status_code == 200
    assert response.json()["usage_count"] == 0
    assert response.json()["billable"] is False


def test_limit_reached_returns_403(wired_client):
    for index in range(10):
        assert wired_client.post(
            "/exchange", json={"session_id": "s-1", "message": f"q{index}"}
        ).status_code == 200

    response = wired_client.post("/exchange", json={"session_id": "s-1", "message": "one more"})

    assert response.status_code == 403
    data = response.json()
    assert data["limit_reached"] is True
    assert data["remaining"] == 0
    assert data["usage_count"] == 10


def test_linked_account_bypasses_limit(wired_client, app):
    for index in range(10):
        wired_client.post("/exchange", json={"session_id": "s-1", "message": f"q{index}"})
    app.dependency_overrides[get_account_id] = lambda: "acct-1"

    response = wired_client.post("/exchange", json={"session_id": "s-1", "message": "signed in"})

    assert response.status_code == 200
    assert response.json()["remaining"] is None


def test_inference_failure_returns_502(wired_client, inference):
    inference.side_effect = RuntimeError("model down")

    response = wired_client.post("/exchange", json={"session_id": "s-1", "message": "Tips?"})

    assert response.status_code == 502
    data = response.json()
    assert data["usage_count"] == 0
    assert data["remaining"] == 10
    assert "error" in data


def test_store_unavailable_returns_503(client, enforcer):
    store = AsyncMock()
    store.create_if_absent.side_effect = StoreUnavailableError("down", operation="create")
    service = ExchangeService(
        store=store,
        enforcer=enforcer,
        classifier=HeuristicAnswerClassifier(),
        inference=AsyncMock(return_value=BILLABLE_ANSWER),
    )
    client.app.dependency_overrides[get_exchange_service] = lambda: service

    response = client.post("/exchange", json={"session_id": "s-1", "message": "Tips?"})

    assert response.status_code == 503
    assert response.json()["error"] == "Failed to process message"


@pytest.mark.parametrize(
    "payload",
    [
        {"session_id": "s-1"},
        {"message": "hi"},
        {"session_id": "", "message": "hi"},
        {"session_id": "s-1", "message": ""},
        {"session_id": "s-1", "message": "   "},
        {"session_id": "s-1", "message": "x" * 4001},
    ],
)
def test_invalid_payload_returns_422(wired_client, inference, payload):
    response = wired_client.post("/exchange", json=payload)
    assert response.status_code == 422
    inference.assert_not_awaited()
