from dataclasses import dataclass
from decimal import Decimal
from typing import Literal

Side = Literal["buy", "sell"]
OrderType = Literal["limit", "market"]
WithdrawalAction = Literal["withdraw", "noop"]

@dataclass(frozen=True)
class OrderIntent:
    pair: str
    price: Decimal
    volume: Decimal
    side: Side = "buy"
    order_type: OrderType = "limit"

    def as_params(self) -> dict:
        return {
            "pair": self.pair,
            "type": self.side,
            "ordertype": self.order_type,
            "price": str(self.price),
            "volume": str(self.volume),
        }

@dataclass(frozen=True)
class WithdrawalIntent:
    asset: str
    key: str
    amount: Decimal

    def as_params(self) -> dict:
        return {"asset": self.asset, "key": self.key, "amount": str(self.amount)}

@dataclass(frozen=True)
class WithdrawalDecision:
    action: WithdrawalAction
    amount: Decimal
    reason: str

    @property
    def should_withdraw(self) -> bool:
        return self.action == "withdraw"
