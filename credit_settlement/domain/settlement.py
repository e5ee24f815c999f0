"""Settlement engine - tiered discount/interest quotes and the forward projection schedule"""

import logging
from datetime import date, datetime, tzinfo
from decimal import Decimal
from typing import Iterator, Optional

from credit_settlement.domain.exceptions import ConfigurationError
from credit_settlement.domain.models import (
    ProjectionPoint,
    Purchase,
    RateTierTable,
    SettlementCalculation,
    TierResolution,
    TierType,
)
from credit_settlement.domain.result import Err, ErrorKind, Ok, Result
from credit_settlement.domain.tiers import max_defined_day, resolve_validated, validate_tier_table
from credit_settlement.utils.date_utils import add_days, as_date, days_between
from credit_settlement.utils.money import quantize_currency

logger = logging.getLogger(__name__)

DAY0_MESSAGE = (
    "Repayment cannot be processed on the same day as purchase (Day 0). "
    "Credit cycle starts from Day 1."
)
DAY0_GUIDANCE = (
    "You can start repaying from tomorrow onwards. "
    "Your credit cycle begins the day after your purchase."
)


def check_evaluation_date(
    requested: date | datetime | None,
    today: date | datetime,
    tz: tzinfo | None = None,
) -> Result:
    """
    Reject a caller-supplied repayment date that is not today.

    Repayments are always priced as of the current date; backdating or
    future-dating would let a caller pick a better tier.
    """
    if requested is None or as_date(requested, tz) == as_date(today, tz):
        return Ok(as_date(today, tz))
    return Err(
        ErrorKind.INVALID_EVALUATION_DATE,
        "Repayments can only be processed for the current date",
        {
            "provided_date": as_date(requested, tz).isoformat(),
            "server_date": as_date(today, tz).isoformat(),
        },
    )


def check_day_zero(days_elapsed: int, purchase_date: date | datetime, tz: tzinfo | None = None) -> Result:
    """Block settlement on the calendar day of purchase"""
    if days_elapsed != 0:
        return Ok(days_elapsed)
    return Err(
        ErrorKind.DAY0_RESTRICTION,
        DAY0_MESSAGE,
        {
            "is_day0": True,
            "purchase_date": as_date(purchase_date, tz).isoformat(),
            "earliest_repayment_date": add_days(purchase_date, 1, tz).isoformat(),
            "guidance": DAY0_GUIDANCE,
        },
    )


def apply_tier(base_amount: Decimal, resolution: TierResolution) -> tuple[Decimal, Decimal]:
    """
    Apply a tier rate to the base amount.

    The adjustment is rounded to currency precision once, and the final
    payable is derived from the rounded adjustment so the two always reconcile.

    Returns: (adjustment_amount, final_payable)
    """
    adjustment = quantize_currency(base_amount * resolution.applied_rate / Decimal(100))
    if resolution.tier_type == TierType.DISCOUNT:
        final_payable = base_amount - adjustment
    elif resolution.tier_type == TierType.INTEREST:
        final_payable = base_amount + adjustment
    else:
        adjustment = Decimal("0.00")
        final_payable = base_amount
    return adjustment, quantize_currency(final_payable)


def calculate_settlement(
    purchase: Purchase,
    table: RateTierTable,
    evaluation_date: date | datetime,
    tz: tzinfo | None = None,
) -> Result:
    """
    Quote the amount payable to settle a purchase on the evaluation date.

    The evaluation date is always supplied by the caller; this function never
    reads the clock. Aware timestamps are compared as calendar dates in tz
    (server local time when None).

    Returns:
        Ok(SettlementCalculation), or Err with kind DAY0_RESTRICTION,
        INVALID_EVALUATION_DATE or CONFIGURATION_ERROR
    """
    try:
        validate_tier_table(table)
    except ConfigurationError as e:
        logger.error(
            f"Rejected malformed rate tier table: {e}",
            extra={"purchase_id": purchase.purchase_id, "step": "tier_validation"},
        )
        return Err(ErrorKind.CONFIGURATION_ERROR, str(e))

    purchase_date = as_date(purchase.created_at, tz)
    days_elapsed = days_between(purchase.created_at, evaluation_date, tz)
    if days_elapsed < 0:
        return Err(
            ErrorKind.INVALID_EVALUATION_DATE,
            "Evaluation date is before the purchase date",
            {
                "purchase_date": purchase_date.isoformat(),
                "evaluation_date": as_date(evaluation_date, tz).isoformat(),
            },
        )

    day_zero = check_day_zero(days_elapsed, purchase_date)
    if not day_zero.ok:
        return day_zero

    resolution = resolve_validated(days_elapsed, table)
    adjustment, final_payable = apply_tier(purchase.principal_amount, resolution)

    return Ok(
        SettlementCalculation(
            purchase_id=purchase.purchase_id,
            base_amount=purchase.principal_amount,
            purchase_date=purchase_date,
            evaluation_date=as_date(evaluation_date, tz),
            days_elapsed=days_elapsed,
            tier_type=resolution.tier_type,
            applied_rate=resolution.applied_rate,
            tier_label=resolution.tier_label,
            adjustment_amount=adjustment,
            final_payable=final_payable,
            tier_id=resolution.tier_id,
        )
    )


class Projection:
    """
    Day-by-day settlement schedule for a purchase.

    Iterating yields one ProjectionPoint per day from day 1 through the last
    day the tier table defines (or an explicit horizon). Each iteration starts
    over from day 1, and points are computed only as they are consumed.
    """

    first_day = 1

    def __init__(
        self,
        purchase: Purchase,
        table: RateTierTable,
        horizon_days: Optional[int] = None,
        tz: tzinfo | None = None,
    ):
        validate_tier_table(table)
        if horizon_days is not None and horizon_days < 0:
            raise ValueError(f"horizon_days must be non-negative, got {horizon_days}")
        self.purchase = purchase
        self.table = table
        self.purchase_date = as_date(purchase.created_at, tz)
        self.last_day = max_defined_day(table) if horizon_days is None else horizon_days

    def __iter__(self) -> Iterator[ProjectionPoint]:
        for day in range(self.first_day, self.last_day + 1):
            resolution = resolve_validated(day, self.table)
            _, final_payable = apply_tier(self.purchase.principal_amount, resolution)
            yield ProjectionPoint(
                day=day,
                date=add_days(self.purchase_date, day),
                final_payable=final_payable,
                tier_type=resolution.tier_type,
                rate=resolution.applied_rate,
            )

    def __len__(self) -> int:
        return max(self.last_day - self.first_day + 1, 0)


def get_projection(
    purchase: Purchase,
    table: RateTierTable,
    horizon_days: Optional[int] = None,
    tz: tzinfo | None = None,
) -> Projection:
    """
    Build the forward-looking settlement schedule for a purchase.

    Raises:
        ConfigurationError: if the table is malformed
    """
    return Projection(purchase, table, horizon_days, tz)
