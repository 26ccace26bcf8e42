from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
import os

from dotenv import load_dotenv

from .errors import ConfigurationError


def _bool_env(name: str, default: bool = False) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return v.strip().lower() in ("1", "true", "yes", "y", "on")


def _decimal_env(name: str, default: str) -> Decimal:
    raw = os.getenv(name, default).strip()
    try:
        value = Decimal(raw)
    except InvalidOperation:
        raise ConfigurationError(f"{name} must be a decimal number, got {raw!r}")
    # amounts, buffers, thresholds and timeouts are all strictly positive
    if not value.is_finite() or value <= 0:
        raise ConfigurationError(f"{name} must be a positive number, got {raw!r}")
    return value


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, str(default)).strip()
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


def load_environment() -> None:
    # .env is for local development; deployed containers get real env vars
    if os.getenv("APP_ENV", "development").strip().lower() != "production":
        load_dotenv()


@dataclass(frozen=True)
class Settings:
    kraken_api_key: str = ""
    kraken_api_secret: str = ""
    kraken_base_url: str = "https://api.kraken.com"
    slack_webhook_url: str = ""
    withdrawal_key: str = ""

    buy_amount: Decimal = Decimal("5.00")
    pair: str = "XBTEUR"
    fiat_asset: str = "ZEUR"
    crypto_asset: str = "XXBT"
    withdraw_asset: str = "XBT"
    price_buffer: Decimal = Decimal("20")
    min_balance_for_adjustment: Decimal = Decimal("4")
    withdrawal_threshold: Decimal = Decimal("0.002")

    dry_run: bool = False
    request_timeout: float = 10.0
    port: int = 8080
    log_level: str = "INFO"
    app_env: str = "development"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            kraken_api_key=os.getenv("KRAKEN_API_KEY", "").strip(),
            kraken_api_secret=os.getenv("KRAKEN_API_SECRET", "").strip(),
            kraken_base_url=os.getenv("KRAKEN_BASE_URL", "https://api.kraken.com").strip(),
            slack_webhook_url=os.getenv("SLACK_WEBHOOK_URL", "").strip(),
            withdrawal_key=os.getenv("KRAKEN_WALLET_NAME", "").strip(),
            buy_amount=_decimal_env("EUR_BUY_AMOUNT", "5.00"),
            pair=os.getenv("PAIR", "XBTEUR").strip(),
            fiat_asset=os.getenv("FIAT_ASSET", "ZEUR").strip(),
            crypto_asset=os.getenv("CRYPTO_ASSET", "XXBT").strip(),
            withdraw_asset=os.getenv("WITHDRAW_ASSET", "XBT").strip(),
            price_buffer=_decimal_env("PRICE_BUFFER", "20"),
            min_balance_for_adjustment=_decimal_env("MIN_BALANCE_FOR_ADJUSTMENT", "4"),
            withdrawal_threshold=_decimal_env("WITHDRAWAL_THRESHOLD", "0.002"),
            dry_run=_bool_env("DRY_RUN", False),
            request_timeout=float(_decimal_env("REQUEST_TIMEOUT", "10")),
            port=_int_env("PORT", 8080),
            log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
            app_env=os.getenv("APP_ENV", "development").strip().lower(),
        )

    def require(self, *names: str) -> None:
        missing = [n for n in names if not getattr(self, n, None)]
        if missing:
            raise ConfigurationError(f"Missing configuration: {', '.join(missing)}")


BUY_REQUIRED = ("kraken_api_key", "kraken_api_secret", "slack_webhook_url")
WITHDRAW_REQUIRED = BUY_REQUIRED + ("withdrawal_key",)
