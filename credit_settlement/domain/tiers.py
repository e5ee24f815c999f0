"""Rate tier resolution - maps days since purchase to a discount, neutral or interest rate"""

from decimal import Decimal
from typing import List

from credit_settlement.domain.exceptions import ConfigurationError
from credit_settlement.domain.models import RateTier, RateTierTable, TierResolution, TierType
from credit_settlement.utils.money import format_rate

STANDARD_RATE_LABEL = "Standard Rate"


def _describe(tier: RateTier) -> str:
    end = "open" if tier.end is None else tier.end
    return f"[{tier.start}-{end}]"


def _check_sorted(tiers: tuple, kind: str) -> None:
    starts = [t.start for t in tiers]
    if starts != sorted(starts):
        raise ConfigurationError(f"{kind} tiers must be sorted ascending by start: {starts}")


def validate_tier_table(table: RateTierTable) -> None:
    """
    Reject malformed tier tables instead of guessing.

    Raises:
        ConfigurationError: negative or inverted ranges, negative rates,
            discounts above 100%,
            open-ended discount tiers, unsorted lists, interest tiers that
            begin inside the discount window, or any overlap across both lists
    """
    for kind, tiers in (("discount", table.discount_tiers), ("interest", table.interest_tiers)):
        for tier in tiers:
            if tier.start < 0:
                raise ConfigurationError(f"{kind} tier {_describe(tier)} starts before day 0")
            if tier.end is not None and tier.end < tier.start:
                raise ConfigurationError(f"{kind} tier {_describe(tier)} ends before it starts")
            if tier.rate < 0:
                raise ConfigurationError(f"{kind} tier {_describe(tier)} has negative rate {tier.rate}")
        _check_sorted(tiers, kind)

    for tier in table.discount_tiers:
        if tier.rate > 100:
            raise ConfigurationError(f"discount tier {_describe(tier)} exceeds 100% ({tier.rate})")

    if any(t.open_ended for t in table.discount_tiers):
        raise ConfigurationError("discount tiers must have a bounded end day")

    if table.discount_tiers and table.interest_tiers:
        last_discount_end = max(t.end for t in table.discount_tiers)
        if table.interest_tiers[0].start <= last_discount_end:
            raise ConfigurationError(
                f"interest tier {_describe(table.interest_tiers[0])} begins inside the discount window "
                f"(ends day {last_discount_end})"
            )

    combined: List[RateTier] = sorted(
        table.discount_tiers + table.interest_tiers, key=lambda t: t.start
    )
    for previous, current in zip(combined, combined[1:]):
        if previous.end is None or previous.end >= current.start:
            raise ConfigurationError(
                f"tiers {_describe(previous)} and {_describe(current)} overlap"
            )

    if table.min_partial_payment_percent < 0 or table.min_partial_payment_percent > 100:
        raise ConfigurationError(
            f"min partial payment percent must be within 0-100, got {table.min_partial_payment_percent}"
        )


def max_defined_day(table: RateTierTable) -> int:
    """Highest day the table explicitly describes (an open-ended tier counts from its start)"""
    bounds = [t.start if t.end is None else t.end for t in table.discount_tiers + table.interest_tiers]
    return max(bounds) if bounds else 0


def tier_label(tier_type: TierType, rate: Decimal) -> str:
    if tier_type == TierType.DISCOUNT:
        return f"{format_rate(rate)}% Early Pay Discount"
    if tier_type == TierType.INTEREST:
        return f"{format_rate(rate)}% Late Fee"
    return STANDARD_RATE_LABEL


def _resolution(tier_type: TierType, tier: RateTier) -> TierResolution:
    return TierResolution(
        tier_type=tier_type,
        applied_rate=tier.rate,
        tier_label=tier.name or tier_label(tier_type, tier.rate),
        tier_id=tier.tier_id,
    )


def resolve_validated(days_elapsed: int, table: RateTierTable) -> TierResolution:
    """Resolve against a table that has already passed validate_tier_table"""
    if days_elapsed < 0:
        raise ValueError(f"days_elapsed must be non-negative, got {days_elapsed}")

    for tier in table.discount_tiers:
        if tier.contains(days_elapsed):
            return _resolution(TierType.DISCOUNT, tier)

    for tier in table.interest_tiers:
        if tier.contains(days_elapsed):
            return _resolution(TierType.INTEREST, tier)

    # Past every defined bound, the last late fee keeps applying
    if table.interest_tiers and days_elapsed > max_defined_day(table):
        return _resolution(TierType.INTEREST, table.interest_tiers[-1])

    return TierResolution(
        tier_type=TierType.NEUTRAL,
        applied_rate=Decimal("0"),
        tier_label=STANDARD_RATE_LABEL,
    )


def resolve_tier(days_elapsed: int, table: RateTierTable) -> TierResolution:
    """
    Map days since purchase to a tier classification and rate.

    Discount tiers are checked first, then interest tiers. Days in a gap
    between tiers are neutral (rate 0).

    Raises:
        ConfigurationError: if the table is malformed
        ValueError: if days_elapsed is negative
    """
    validate_tier_table(table)
    return resolve_validated(days_elapsed, table)
