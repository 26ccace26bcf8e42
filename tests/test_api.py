from decimal import Decimal

from kraken_helper.main import app, get_notifier

from .fake_kraken import BrokenNotifier


def test_status(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.text == "Kraken Helper service is running and ready."


def test_buy_success(client, kraken):
    resp = client.post("/buy")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "success"
    assert body["order"]["volume"] == "0.04166666"
    assert len(kraken.orders) == 1


def test_buy_insufficient_funds(client, kraken, notifier):
    kraken.balances["ZEUR"] = Decimal("1.00")
    resp = client.post("/buy")
    assert resp.status_code == 500
    assert resp.json()["status"] == "error"
    assert "Insufficient fiat" in resp.json()["message"]
    assert notifier.messages[-1].startswith("Error:")


def test_buy_still_succeeds_when_notifier_fails(client):
    broken = BrokenNotifier()
    app.dependency_overrides[get_notifier] = lambda: broken
    resp = client.post("/buy")
    assert resp.status_code == 200
    assert resp.json()["status"] == "success"
    assert broken.attempts == 1


def test_withdraw_success(client, kraken):
    resp = client.post("/withdraw")
    assert resp.status_code == 200
    assert resp.json()["withdrawal"] == {"asset": "XBT", "key": "cold-wallet", "amount": "0.0025"}


def test_withdraw_skipped(client, kraken):
    kraken.balances["XXBT"] = Decimal("0.0019")
    resp = client.post("/withdraw")
    assert resp.status_code == 200
    assert resp.json()["status"] == "skipped"


def test_remote_error_is_500(client, kraken):
    kraken.fail_on.add("Withdraw")
    resp = client.post("/withdraw")
    assert resp.status_code == 500
    assert "EGeneral:Internal error" in resp.json()["message"]


def test_unexpected_error_is_generic_500(client, kraken, notifier):
    def explode():
        raise KeyError("boom")
    kraken.get_balances = explode
    resp = client.post("/withdraw")
    assert resp.status_code == 500
    assert resp.json()["message"] == "An unexpected error occurred in the withdraw endpoint."
    assert notifier.messages[-1].startswith("Error:")
    assert "boom" in notifier.messages[-1]


def test_bad_configuration_is_500(monkeypatch):
    from fastapi.testclient import TestClient
    monkeypatch.setenv("EUR_BUY_AMOUNT", "five")
    app.dependency_overrides.clear()
    resp = TestClient(app).post("/buy")
    assert resp.status_code == 500
    assert "EUR_BUY_AMOUNT" in resp.json()["message"]
