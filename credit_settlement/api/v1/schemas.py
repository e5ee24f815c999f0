"""Pydantic schemas for API request/response validation"""

from datetime import date
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, Field


class CalculateRequest(BaseModel):
    """Request body for POST /v1/repayment/calculate"""

    purchase_id: str = Field(..., min_length=1, description="Credit purchase identifier")
    repayment_date: Optional[date] = Field(
        None, description="Must be today if provided; repayments cannot be backdated or future-dated"
    )


class SettlementResponse(BaseModel):
    """Settlement quote for a purchase"""

    purchase_id: str
    base_amount: Decimal
    purchase_date: date
    evaluation_date: date
    days_elapsed: int
    tier_type: str
    tier_applied: str
    tier_id: Optional[str] = None
    applied_rate: Decimal
    discount_amount: Decimal
    interest_amount: Decimal
    adjustment_amount: Decimal
    final_payable: Decimal
    summary: str


class ProjectionPointSchema(BaseModel):
    """Single day in a projection schedule"""

    day: int
    date: date
    final_payable: Decimal
    tier_type: str
    rate: Decimal


class ProjectionResponse(BaseModel):
    """Response for GET /v1/repayment/{purchase_id}/projection"""

    purchase_id: str
    base_amount: Decimal
    points: List[ProjectionPointSchema]


class ValidatePaymentRequest(BaseModel):
    """Request body for POST /v1/repayment/{purchase_id}/validate; omit amount to pay in full"""

    # Left untyped so non-numeric input reaches the domain validator as INVALID_AMOUNT
    amount: Optional[Any] = Field(None, description="Partial amount to pay now")


class PaymentIntentResponse(BaseModel):
    """Validated payment intent ready for the payment gateway"""

    purchase_id: str
    mode: str
    amount: Decimal
    full_payable: Decimal
    remaining_balance: Decimal
    is_partial: bool
    settlement: SettlementResponse


class RateTierSchema(BaseModel):
    """Single discount or interest tier"""

    id: Optional[str] = None
    name: str
    start: int
    end: Optional[int] = None
    rate: Decimal
    is_open_ended: bool = False


class RulesResponse(BaseModel):
    """Response for GET /v1/repayment/rules"""

    discount_tiers: List[RateTierSchema]
    interest_tiers: List[RateTierSchema]
    min_partial_payment_percent: Decimal

