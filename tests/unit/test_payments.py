"""Unit tests for partial payment validation and remaining balance"""

import pytest
from datetime import date
from decimal import Decimal
from credit_settlement.domain.models import PaymentMode, SettlementCalculation, TierType
from credit_settlement.domain.payments import (
    full_payment_intent,
    minimum_partial_amount,
    remaining_balance,
    validate_partial_payment,
)
from credit_settlement.domain.result import ErrorKind


@pytest.fixture
def settlement() -> SettlementCalculation:
    """Neutral-tier quote with a payable of exactly 10000"""
    return SettlementCalculation(
        purchase_id="cp_7",
        base_amount=Decimal("10000"),
        purchase_date=date(2026, 1, 1),
        evaluation_date=date(2026, 3, 17),
        days_elapsed=75,
        tier_type=TierType.NEUTRAL,
        applied_rate=Decimal("0"),
        tier_label="Standard Rate",
        adjustment_amount=Decimal("0.00"),
        final_payable=Decimal("10000.00"),
    )


def test_below_minimum_partial_payment(settlement):
    result = validate_partial_payment(Decimal("499"), settlement, 5)

    assert result.kind == ErrorKind.BELOW_MINIMUM_PARTIAL_PAYMENT
    assert result.detail["minimum_amount"] == Decimal("500")
    assert result.detail["requested_amount"] == Decimal("499")
    assert "at least 5%" in result.message


def test_minimum_partial_payment_accepted(settlement):
    intent = validate_partial_payment(Decimal("500"), settlement, 5).unwrap()

    assert intent.mode == PaymentMode.PARTIAL
    assert intent.amount == Decimal("500")
    assert intent.remaining_balance == Decimal("9500.00")


def test_nearly_full_snaps_to_full_payment(settlement):
    """Within one unit of the payable counts as paying in full"""
    intent = validate_partial_payment("9999.50", settlement, 5).unwrap()

    assert intent.mode == PaymentMode.FULL
    assert intent.amount == Decimal("10000.00")
    assert intent.remaining_balance == Decimal("0.00")


def test_amount_exceeding_payable(settlement):
    result = validate_partial_payment(10001, settlement, 5)

    assert result.kind == ErrorKind.AMOUNT_EXCEEDS_PAYABLE
    assert result.detail["final_payable"] == Decimal("10000.00")


@pytest.mark.parametrize("amount", [0, -50, "abc", "", None, "NaN", float("inf"), True])
def test_invalid_amounts(settlement, amount):
    result = validate_partial_payment(amount, settlement, 5)

    assert result.kind == ErrorKind.INVALID_AMOUNT


def test_checks_short_circuit_in_order(settlement):
    """A negative amount is reported as invalid, not as below the minimum"""
    assert validate_partial_payment(-1, settlement).kind == ErrorKind.INVALID_AMOUNT


def test_configurable_minimum_percent(settlement):
    assert validate_partial_payment(999, settlement, 10).kind == ErrorKind.BELOW_MINIMUM_PARTIAL_PAYMENT
    assert validate_partial_payment(1000, settlement, 10).ok


def test_float_amount_is_not_binary_rounded(settlement):
    intent = validate_partial_payment(1234.56, settlement).unwrap()

    assert intent.amount == Decimal("1234.56")
    assert intent.remaining_balance == Decimal("8765.44")


@pytest.mark.parametrize("amount", ["500.005", Decimal("9999.999")])
def test_sub_cent_amounts_are_rejected(settlement, amount):
    result = validate_partial_payment(amount, settlement)

    assert result.kind == ErrorKind.INVALID_AMOUNT
    assert result.detail["requested_amount"] == str(amount)


def test_trailing_zero_decimals_are_accepted(settlement):
    intent = validate_partial_payment("500.000", settlement).unwrap()

    assert intent.amount + intent.remaining_balance == settlement.final_payable


def test_minimum_rounds_up_to_whole_unit():
    assert minimum_partial_amount(Decimal("9000.10"), Decimal("5")) == Decimal("451")
    assert minimum_partial_amount(Decimal("316.66"), Decimal("5")) == Decimal("16")


def test_small_balance_can_be_cleared_below_minimum():
    """A payable of 10 has a minimum of 1, but 9.20 is nearly full anyway"""
    small = SettlementCalculation(
        purchase_id="cp_8",
        base_amount=Decimal("10"),
        purchase_date=date(2026, 1, 1),
        evaluation_date=date(2026, 3, 17),
        days_elapsed=75,
        tier_type=TierType.NEUTRAL,
        applied_rate=Decimal("0"),
        tier_label="Standard Rate",
        adjustment_amount=Decimal("0.00"),
        final_payable=Decimal("10.00"),
    )

    assert validate_partial_payment("9.20", small).unwrap().mode == PaymentMode.FULL


def test_remaining_balance_uses_adjusted_payable():
    """Principal 10000 at 10% discount is payable 9000; paying 6000 leaves 3000, not 4000"""
    assert remaining_balance(Decimal("10000"), Decimal("6000")) == Decimal("4000")
    assert remaining_balance(Decimal("9000.00"), Decimal("6000")) == Decimal("3000.00")


def test_full_payment_intent(settlement):
    intent = full_payment_intent(settlement)

    assert intent.mode == PaymentMode.FULL
    assert intent.amount == settlement.final_payable
    assert intent.full_payable == settlement.final_payable
