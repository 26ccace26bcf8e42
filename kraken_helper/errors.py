from __future__ import annotations
from decimal import Decimal
from typing import Any


class KrakenHelperError(Exception):
    """Base class for failures that end a /buy or /withdraw invocation."""


class ConfigurationError(KrakenHelperError):
    pass


class RemoteCallError(KrakenHelperError):
    def __init__(self, method: str, detail: Any):
        self.method = method
        self.detail = detail
        super().__init__(f"Kraken {method} failed: {detail}")


class InsufficientFunds(KrakenHelperError):
    def __init__(self, volume: Decimal, price: Decimal, available: Decimal):
        self.volume = volume
        self.price = price
        self.available = available
        super().__init__(
            f"Insufficient fiat for transaction error. Tried to buy {volume} BTC "
            f"for {price} EUR with {available} EUR available"
        )


class InvalidVolume(KrakenHelperError):
    def __init__(self, volume: Decimal, price: Decimal):
        self.volume = volume
        self.price = price
        super().__init__(f"Computed order volume {volume} is not positive at price {price}")


class NotificationError(KrakenHelperError):
    # never surfaced to HTTP callers, see notifier.notify_safely
    pass
