import pytest
from decimal import Decimal
from fastapi.testclient import TestClient

from kraken_helper.config import Settings
from kraken_helper.main import app, get_kraken_client, get_notifier, get_settings

from .fake_kraken import FakeKraken, RecordingNotifier


@pytest.fixture
def settings():
    return Settings(
        kraken_api_key="key",
        kraken_api_secret="c2VjcmV0",
        slack_webhook_url="https://hooks.slack.com/services/T000/B000/XXXX",
        withdrawal_key="cold-wallet",
        buy_amount=Decimal("5.00"),
    )


@pytest.fixture
def kraken():
    return FakeKraken(ask="100.00", balances={"ZEUR": "50.00", "XXBT": "0.0025"})


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(settings, kraken, notifier):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_kraken_client] = lambda: kraken
    app.dependency_overrides[get_notifier] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()
