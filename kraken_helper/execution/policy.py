from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP
from typing import Tuple

from ..errors import InsufficientFunds, InvalidVolume
from .types import WithdrawalDecision

PRICE_STEP = Decimal("0.01")
VOLUME_STEP = Decimal("0.00000001")  # 1 satoshi


def round_price(value: Decimal) -> Decimal:
    return value.quantize(PRICE_STEP, rounding=ROUND_HALF_UP)


def round_volume(value: Decimal) -> Decimal:
    # truncate so the order never costs more than the money behind it
    return value.quantize(VOLUME_STEP, rounding=ROUND_DOWN)


def size_limit_buy(
    budget: Decimal,
    raw_ask_price: Decimal,
    available_fiat: Decimal,
    *,
    buffer: Decimal,
    min_balance_for_adjustment: Decimal,
) -> Tuple[Decimal, Decimal]:
    """Return (price, volume) for a limit buy worth `budget` at the buffered ask.

    When the fiat balance cannot cover the full budget but is still at least
    `min_balance_for_adjustment`, the whole balance is spent instead.
    Everything is compared on the rounded values that are sent to Kraken.
    """
    price = round_price(raw_ask_price + buffer)
    volume = round_volume(budget / price)

    if available_fiat < price * volume:
        if available_fiat >= min_balance_for_adjustment:
            volume = round_volume(available_fiat / price)
        else:
            raise InsufficientFunds(volume, price, available_fiat)

    if volume <= 0:
        raise InvalidVolume(volume, price)
    return price, volume


def decide_withdrawal(held_balance: Decimal, threshold: Decimal) -> WithdrawalDecision:
    if held_balance >= threshold:
        return WithdrawalDecision(
            action="withdraw",
            amount=held_balance,
            reason=f"Balance {held_balance} reached threshold {threshold}",
        )
    return WithdrawalDecision(
        action="noop",
        amount=Decimal("0"),
        reason=(
            f"No withdrawal initiated. Insufficient balance: {held_balance} held, "
            f"{threshold} required ({threshold - held_balance} short)."
        ),
    )
