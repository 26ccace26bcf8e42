"""
Order sizing and withdrawal threshold rules.
"""

import pytest
from decimal import Decimal as D

from kraken_helper.errors import InsufficientFunds, InvalidVolume
from kraken_helper.execution.policy import decide_withdrawal, size_limit_buy


def size(budget, ask, available, buffer="20", minimum="4"):
    return size_limit_buy(D(budget), D(ask), D(available), buffer=D(buffer), min_balance_for_adjustment=D(minimum))


class TestSizeLimitBuy:

    def test_buffer_added_to_ask(self):
        price, _ = size("5.00", "100.00", "100.00")
        assert price == D("120.00")

    def test_price_rounded_to_cents(self):
        price, _ = size("5.00", "100.005", "100.00")
        assert price == D("120.01")
        assert price.as_tuple().exponent == -2

    def test_volume_from_budget_when_funds_cover_it(self):
        _, volume = size("5.00", "100.00", "100.00")
        assert volume == D("0.04166666")

    def test_volume_truncated_to_eight_decimals(self):
        _, volume = size("5.00", "100.00", "100.00")
        assert volume.as_tuple().exponent == -8
        assert volume * D("120.00") <= D("5.00")

    def test_adjusts_to_available_balance_when_short(self):
        price, volume = size("20.00", "100.00", "10.00")
        assert price == D("120.00")
        assert volume == D("0.08333333")

    def test_adjustment_minimum_is_inclusive(self):
        _, volume = size("20.00", "100.00", "4.00")
        assert volume == D("0.03333333")

    def test_insufficient_funds_below_minimum(self):
        with pytest.raises(InsufficientFunds) as exc:
            size("20.00", "100.00", "3.99")
        assert exc.value.volume == D("0.16666666")
        assert exc.value.price == D("120.00")
        assert exc.value.available == D("3.99")
        assert "Insufficient fiat" in str(exc.value)

    def test_comparison_uses_rounded_values(self):
        # 120.00 * 0.04166666 == 4.9999992, so this balance covers the rounded order
        price, volume = size("5.00", "100.00", "4.9999992", minimum="10")
        assert (price, volume) == (D("120.00"), D("0.04166666"))

    def test_zero_volume_is_rejected(self):
        with pytest.raises(InvalidVolume):
            size("5.00", "1000000000000", "100.00")

    def test_zero_balance_is_insufficient(self):
        with pytest.raises(InsufficientFunds):
            size("5.00", "100.00", "0")


class TestDecideWithdrawal:

    def test_below_threshold_is_noop(self):
        decision = decide_withdrawal(D("0.0019"), D("0.002"))
        assert decision.action == "noop"
        assert not decision.should_withdraw
        assert "0.0001" in decision.reason
        assert "Insufficient balance" in decision.reason

    def test_threshold_is_inclusive(self):
        decision = decide_withdrawal(D("0.002"), D("0.002"))
        assert decision.should_withdraw
        assert decision.amount == D("0.002")

    def test_withdraws_entire_balance(self):
        decision = decide_withdrawal(D("0.5"), D("0.002"))
        assert decision.action == "withdraw"
        assert decision.amount == D("0.5")

    def test_empty_balance(self):
        assert decide_withdrawal(D("0"), D("0.002")).action == "noop"
