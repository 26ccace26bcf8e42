"""Manual check of Kraken credentials: prints the ask, balances and the order a
/buy would place, validated by Kraken but never executed."""
from decimal import Decimal

from .config import Settings, load_environment
from .execution.policy import size_limit_buy
from .execution.types import OrderIntent
from .kraken_client import KrakenClient, KrakenCredentials

def build_client(settings: Settings) -> KrakenClient:
    if not (settings.kraken_api_key and settings.kraken_api_secret):
        raise SystemExit("Missing KRAKEN_API_KEY / KRAKEN_API_SECRET")
    creds = KrakenCredentials(api_key=settings.kraken_api_key, api_secret=settings.kraken_api_secret)
    return KrakenClient(creds, settings.kraken_base_url, timeout=settings.request_timeout)

def validate_buy(kraken: KrakenClient, settings: Settings):
    ask = kraken.get_ask_price(settings.pair)
    balances = kraken.get_balances()
    available = balances.get(settings.fiat_asset, Decimal("0"))

    print("pair:", settings.pair)
    print("ask:", ask, "buffer:", settings.price_buffer)
    print("balances:", {k: str(v) for k, v in balances.items()})
    print("budget:", settings.buy_amount, "available:", available)

    price, volume = size_limit_buy(
        settings.buy_amount,
        ask,
        available,
        buffer=settings.price_buffer,
        min_balance_for_adjustment=settings.min_balance_for_adjustment,
    )
    print("computed order:", f"{volume} @ {price}")
    return kraken.add_limit_buy(OrderIntent(pair=settings.pair, price=price, volume=volume), validate=True)

def main():
    load_environment()
    settings = Settings.from_env()
    kraken = build_client(settings)
    resp = validate_buy(kraken, settings)
    print("\nAddOrder (validate) response:\n", resp)

if __name__ == "__main__":
    main()
