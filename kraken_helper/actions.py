from __future__ import annotations
import logging
from decimal import Decimal
from typing import Any, Dict

from .config import BUY_REQUIRED, WITHDRAW_REQUIRED, Settings
from .errors import KrakenHelperError
from .execution.policy import decide_withdrawal, size_limit_buy
from .execution.types import OrderIntent, WithdrawalIntent
from .kraken_client import KrakenClient
from .notifier import Notifier, notify_safely

logger = logging.getLogger(__name__)


def _report_failure(notifier: Notifier, action: str, e: Exception) -> None:
    if isinstance(e, KrakenHelperError):
        logger.error("%s failed: %s", action, e)
    else:
        logger.exception("%s failed unexpectedly", action)
    notify_safely(notifier, f"Error: {e}")


def buy_bitcoin(settings: Settings, kraken: KrakenClient, notifier: Notifier) -> Dict[str, Any]:
    try:
        settings.require(*BUY_REQUIRED)

        ask = kraken.get_ask_price(settings.pair)
        balances = kraken.get_balances()
        available = balances.get(settings.fiat_asset, Decimal("0"))
        logger.info("Ask %s for %s, %s available %s", ask, settings.pair, settings.fiat_asset, available)

        price, volume = size_limit_buy(
            settings.buy_amount,
            ask,
            available,
            buffer=settings.price_buffer,
            min_balance_for_adjustment=settings.min_balance_for_adjustment,
        )
        order = OrderIntent(pair=settings.pair, price=price, volume=volume)
        result = kraken.add_limit_buy(order, validate=settings.dry_run)
    except Exception as e:
        _report_failure(notifier, "buy", e)
        raise

    message = "Order validated (dry run)." if settings.dry_run else "Order placed successfully."
    notify_safely(notifier, {"message": message, "result": result})
    return {
        "status": "success",
        "message": message,
        "dry_run": settings.dry_run,
        "order": {"pair": order.pair, "price": str(order.price), "volume": str(order.volume)},
        "result": result,
    }


def withdraw_bitcoin(settings: Settings, kraken: KrakenClient, notifier: Notifier) -> Dict[str, Any]:
    try:
        settings.require(*WITHDRAW_REQUIRED)

        balances = kraken.get_balances()
        held = balances.get(settings.crypto_asset, Decimal("0"))
        decision = decide_withdrawal(held, settings.withdrawal_threshold)
        logger.info("%s balance %s -> %s", settings.crypto_asset, held, decision.action)

        if not decision.should_withdraw:
            notify_safely(notifier, decision.reason)
            return {"status": "skipped", "message": decision.reason, "balance": str(held)}

        intent = WithdrawalIntent(asset=settings.withdraw_asset, key=settings.withdrawal_key, amount=decision.amount)
        # Kraken has no validate-only withdrawal, dry runs stop before the call
        result = {} if settings.dry_run else kraken.withdraw(intent)
    except Exception as e:
        _report_failure(notifier, "withdraw", e)
        raise

    message = "Withdrawal skipped (dry run)." if settings.dry_run else "Withdrawal initiated successfully."
    notify_safely(notifier, {"message": message, "result": result})
    return {
        "status": "success",
        "message": message,
        "dry_run": settings.dry_run,
        "withdrawal": {"asset": intent.asset, "key": intent.key, "amount": str(intent.amount)},
        "result": result,
    }
