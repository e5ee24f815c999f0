"""Payment intent validation - partial payment floor and remaining balance disclosure"""

import math
from decimal import Decimal
from typing import Any

from credit_settlement.domain.models import (
    DEFAULT_MIN_PARTIAL_PAYMENT_PERCENT,
    PaymentIntent,
    PaymentMode,
    SettlementCalculation,
)
from credit_settlement.domain.result import Err, ErrorKind, Ok, Result
from credit_settlement.utils.money import format_rate, quantize_currency, to_decimal

# Requests within one currency unit of the payable count as full payment
NEARLY_FULL_TOLERANCE = Decimal("1")


def minimum_partial_amount(final_payable: Decimal, min_partial_payment_percent: Decimal) -> Decimal:
    """Smallest accepted partial payment, rounded up to a whole currency unit"""
    return Decimal(math.ceil(final_payable * Decimal(str(min_partial_payment_percent)) / Decimal(100)))


def is_nearly_full(requested_amount: Decimal, final_payable: Decimal) -> bool:
    return requested_amount >= final_payable - NEARLY_FULL_TOLERANCE


def remaining_balance(final_payable: Decimal, requested_amount: Decimal) -> Decimal:
    """
    What is still owed after paying requested_amount now.

    Computed against the tier-adjusted payable, not the original principal.
    Informational only; the system of record keeps the authoritative balance.
    """
    return quantize_currency(final_payable - requested_amount)


def full_payment_intent(settlement: SettlementCalculation) -> PaymentIntent:
    return PaymentIntent(
        purchase_id=settlement.purchase_id,
        mode=PaymentMode.FULL,
        amount=settlement.final_payable,
        full_payable=settlement.final_payable,
        remaining_balance=Decimal("0.00"),
    )


def validate_partial_payment(
    requested_amount: Any,
    settlement: SettlementCalculation,
    min_partial_payment_percent: Decimal | int | str = DEFAULT_MIN_PARTIAL_PAYMENT_PERCENT,
) -> Result:
    """
    Validate a partial settlement request against the current payable amount.

    Checks run in order and the first failure wins:
    1. Amount must be a positive number
    2. Amount must not exceed the payable, and must be in whole cents
    3. Amount must reach the minimum percentage, unless it is within one
       currency unit of the full payable

    A nearly-full request is snapped to a full payment of exactly the payable.

    Returns:
        Ok(PaymentIntent), or Err with kind INVALID_AMOUNT,
        AMOUNT_EXCEEDS_PAYABLE or BELOW_MINIMUM_PARTIAL_PAYMENT
    """
    amount = to_decimal(requested_amount)
    if amount is None or amount <= 0:
        return Err(
            ErrorKind.INVALID_AMOUNT,
            "Payment amount must be a positive number",
            {"requested_amount": str(requested_amount)},
        )

    final_payable = settlement.final_payable
    if amount > final_payable:
        return Err(
            ErrorKind.AMOUNT_EXCEEDS_PAYABLE,
            f"Payment amount ({amount}) exceeds the payable amount ({final_payable})",
            {"requested_amount": amount, "final_payable": final_payable},
        )

    # Bounded by the payable above, so quantizing cannot overflow
    if amount != quantize_currency(amount):
        return Err(
            ErrorKind.INVALID_AMOUNT,
            "Payment amount cannot have more than 2 decimal places",
            {"requested_amount": str(requested_amount)},
        )

    if is_nearly_full(amount, final_payable):
        return Ok(full_payment_intent(settlement))

    percent = Decimal(str(min_partial_payment_percent))
    minimum = minimum_partial_amount(final_payable, percent)
    if amount < minimum:
        return Err(
            ErrorKind.BELOW_MINIMUM_PARTIAL_PAYMENT,
            f"Partial payment must be at least {format_rate(percent)}% of the total payable amount "
            f"(minimum {minimum})",
            {
                "minimum_amount": minimum,
                "requested_amount": amount,
                "min_partial_payment_percent": percent,
            },
        )

    return Ok(
        PaymentIntent(
            purchase_id=settlement.purchase_id,
            mode=PaymentMode.PARTIAL,
            amount=amount,
            full_payable=final_payable,
            remaining_balance=remaining_balance(final_payable, amount),
        )
    )
