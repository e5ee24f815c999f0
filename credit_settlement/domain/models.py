"""Domain models - pure Python dataclasses representing settlement entities"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple

from credit_settlement.domain.exceptions import InvalidPurchaseError
from credit_settlement.utils.money import to_decimal

DEFAULT_MIN_PARTIAL_PAYMENT_PERCENT = Decimal("5")
# Keeps every 2dp amount within the default 28-digit decimal context
MAX_PRINCIPAL_AMOUNT = Decimal("1e15")


class TierType(str, Enum):
    DISCOUNT = "discount"
    NEUTRAL = "neutral"
    INTEREST = "interest"


class PaymentMode(str, Enum):
    FULL = "full"
    PARTIAL = "partial"


@dataclass(frozen=True)
class Purchase:
    """Credit purchase snapshot from the system of record"""

    purchase_id: str
    principal_amount: Decimal
    created_at: datetime

    def __post_init__(self) -> None:
        amount = to_decimal(self.principal_amount)
        if amount is None or amount <= 0:
            raise InvalidPurchaseError(
                f"Purchase {self.purchase_id} principal must be positive, got {self.principal_amount!r}"
            )
        if amount > MAX_PRINCIPAL_AMOUNT:
            raise InvalidPurchaseError(
                f"Purchase {self.purchase_id} principal {amount} exceeds the supported maximum"
            )
        object.__setattr__(self, "principal_amount", amount)


@dataclass(frozen=True)
class RateTier:
    """Inclusive day range with a percent rate; end=None means open-ended"""

    start: int
    end: Optional[int]
    rate: Decimal
    name: Optional[str] = None
    tier_id: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "rate", Decimal(str(self.rate)))

    @property
    def open_ended(self) -> bool:
        return self.end is None

    def contains(self, day: int) -> bool:
        if day < self.start:
            return False
        return self.end is None or day <= self.end


@dataclass(frozen=True)
class RateTierTable:
    """Discount and interest schedules plus the partial payment floor"""

    discount_tiers: Tuple[RateTier, ...] = ()
    interest_tiers: Tuple[RateTier, ...] = ()
    min_partial_payment_percent: Decimal = DEFAULT_MIN_PARTIAL_PAYMENT_PERCENT

    def __post_init__(self) -> None:
        object.__setattr__(self, "discount_tiers", tuple(self.discount_tiers))
        object.__setattr__(self, "interest_tiers", tuple(self.interest_tiers))
        object.__setattr__(
            self, "min_partial_payment_percent", Decimal(str(self.min_partial_payment_percent))
        )


@dataclass(frozen=True)
class TierResolution:
    """Tier classification for a given settlement day"""

    tier_type: TierType
    applied_rate: Decimal
    tier_label: str
    tier_id: Optional[str] = None


@dataclass(frozen=True)
class SettlementCalculation:
    """Quote for settling a purchase on the evaluation date"""

    purchase_id: str
    base_amount: Decimal
    purchase_date: date
    evaluation_date: date
    days_elapsed: int
    tier_type: TierType
    applied_rate: Decimal
    tier_label: str
    adjustment_amount: Decimal
    final_payable: Decimal
    tier_id: Optional[str] = None

    @property
    def discount_amount(self) -> Decimal:
        return self.adjustment_amount if self.tier_type == TierType.DISCOUNT else Decimal("0.00")

    @property
    def interest_amount(self) -> Decimal:
        return self.adjustment_amount if self.tier_type == TierType.INTEREST else Decimal("0.00")

    @property
    def summary(self) -> str:
        if self.tier_type == TierType.DISCOUNT:
            return f"You save {self.adjustment_amount} by paying on day {self.days_elapsed}"
        if self.tier_type == TierType.INTEREST:
            return f"Late payment adds {self.adjustment_amount} on day {self.days_elapsed}"
        return f"No adjustment applies on day {self.days_elapsed}"


@dataclass(frozen=True)
class ProjectionPoint:
    """Payable amount if the purchase were settled on a given day"""

    day: int
    date: date
    final_payable: Decimal
    tier_type: TierType
    rate: Decimal


@dataclass(frozen=True)
class PaymentIntent:
    """Validated request to settle a purchase, ready for the payment gateway"""

    purchase_id: str
    mode: PaymentMode
    amount: Decimal
    full_payable: Decimal
    remaining_balance: Decimal = field(default=Decimal("0.00"))
