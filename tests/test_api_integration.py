"""
Integration tests for the ATM Simulator API
Tests end-to-end workflows using FastAPI TestClient
"""

import pytest
from fastapi.testclient import TestClient

from atm_simulator.api import create_app, ERROR_STATUS
from atm_simulator.persistence import InMemoryPersistence
from atm_simulator.results import ErrorKind
from atm_simulator.system import ATMSystem


@pytest.fixture
def system():
    atm = ATMSystem(InMemoryPersistence())
    atm.start()
    return atm


@pytest.fixture
def client(system):
    """Create a test client around an in-memory, seeded ATM system"""
    return TestClient(create_app(system))


class TestHealthEndpoints:

    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        data = r.json()
        assert data["status"] == "healthy"
        assert data["accounts"] == 3
        assert data["logged_in"] is False


class TestRegistration:

    def test_register(self, client):
        r = client.post("/accounts", json={"name": "Alice", "pin": "1111", "initial_deposit": "100"})
        assert r.status_code == 201
        data = r.json()
        assert data["message"] == "Account created successfully!"
        assert data["account"]["name"] == "Alice"
        assert data["account"]["balance"]["amount"] == "100.00"
        assert data["account"]["balance"]["currency"] == "INR"

    def test_register_short_pin(self, client):
        r = client.post("/accounts", json={"name": "Bob", "pin": 22, "initial_deposit": 50})
        assert r.status_code == 400
        assert r.json()["detail"]["error"] == "invalid_input"

    def test_register_duplicate_pin(self, client):
        r = client.post("/accounts", json={"name": "Someone", "pin": 1234, "initial_deposit": 5})
        assert r.status_code == 409
        assert r.json()["detail"]["error"] == "duplicate_pin"


class TestSessionFlow:

    def test_login_and_current(self, client):
        r = client.post("/session", json={"pin": 1234})
        assert r.status_code == 200
        assert r.json()["message"] == "Welcome, Shivang Chauhan!"

        r = client.get("/session")
        assert r.status_code == 200
        assert r.json()["account"]["balance"]["display"] == "₹10,000.00"

    def test_invalid_pin(self, client):
        r = client.post("/session", json={"pin": 4040})
        assert r.status_code == 401
        assert r.json()["detail"]["message"] == "Invalid PIN! Try again."

    def test_second_login_conflicts(self, client):
        client.post("/session", json={"pin": 1234})
        r = client.post("/session", json={"pin": 5678})
        assert r.status_code == 409
        assert r.json()["detail"]["error"] == "session_active"

    def test_logout(self, client):
        client.post("/session", json={"pin": 1234})
        r = client.delete("/session")
        assert r.status_code == 200
        assert r.json()["was_logged_in"] is True
        assert client.get("/session").status_code == 401

    def test_operations_require_session(self, client):
        assert client.get("/session/balance").status_code == 401
        assert client.get("/session/history").status_code == 401
        assert client.post("/session/deposit", json={"amount": "5"}).status_code == 401


class TestTransactionsFlow:

    def test_deposit_withdraw_history(self, client, system):
        client.post("/accounts", json={"name": "Alice", "pin": 1111, "initial_deposit": "100"})
        client.post("/session", json={"pin": 1111})

        r = client.post("/session/deposit", json={"amount": "50"})
        assert r.status_code == 200
        assert r.json()["message"] == "Deposit Successful!"
        assert r.json()["balance"]["amount"] == "150.00"

        r = client.post("/session/withdraw", json={"amount": 200})
        assert r.status_code == 422
        assert r.json()["detail"]["error"] == "insufficient_funds"

        r = client.get("/session/balance")
        assert r.json()["amount"] == "150.00"

        r = client.get("/session/history")
        data = r.json()
        assert data["entries"] == ["Deposited 50"]
        assert data["text"] == "Last Transactions for Alice:\n- Deposited 50\n"

        assert system.persistence.load().lookup(1111).value.history == ["Deposited 50"]

    def test_invalid_amount(self, client):
        client.post("/session", json={"pin": 1234})
        r = client.post("/session/deposit", json={"amount": "abc"})
        assert r.status_code == 400
        assert r.json()["detail"]["error"] == "invalid_amount"

    def test_oversized_amount(self, client):
        client.post("/session", json={"pin": 1234})
        r = client.post("/session/deposit", json={"amount": "1e30"})
        assert r.status_code == 400
        assert r.json()["detail"]["error"] == "invalid_amount"
        assert client.get("/session/balance").json()["amount"] == "10000.00"

    def test_empty_history(self, client):
        client.post("/session", json={"pin": 5678})
        r = client.get("/session/history")
        assert r.json()["entries"] == []
        assert r.json()["text"] == "No transactions yet."


def test_every_error_kind_has_a_status():
    assert set(ERROR_STATUS) == set(ErrorKind)
