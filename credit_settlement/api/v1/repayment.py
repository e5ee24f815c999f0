"""Credit repayment endpoints - quotes, projection schedule, payment validation and rules"""

import logging
import time
from datetime import date, tzinfo
from decimal import Decimal
from typing import NoReturn, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.encoders import jsonable_encoder

from credit_settlement.api.dependencies import (
    get_purchase_client,
    get_request_id,
    get_settlement_timezone,
    get_tier_table,
    get_today,
)
from credit_settlement.api.v1.schemas import (
    CalculateRequest,
    PaymentIntentResponse,
    ProjectionPointSchema,
    ProjectionResponse,
    RateTierSchema,
    RulesResponse,
    SettlementResponse,
    ValidatePaymentRequest,
)
from credit_settlement.domain.exceptions import (
    ConfigurationError,
    PurchaseAlreadyRepaidError,
    PurchaseNotFoundError,
    PurchaseServiceError,
)
from credit_settlement.domain.models import (
    PaymentMode,
    Purchase,
    RateTier,
    RateTierTable,
    SettlementCalculation,
    TierType,
)
from credit_settlement.domain.payments import full_payment_intent, validate_partial_payment
from credit_settlement.domain.result import Err, ErrorKind
from credit_settlement.domain.settlement import calculate_settlement, check_evaluation_date, get_projection
from credit_settlement.domain.tiers import tier_label
from credit_settlement.infrastructure.clients.purchases import PurchaseClient
from credit_settlement.infrastructure.observability.logging import log_settlement_quote, log_settlement_refusal
from credit_settlement.infrastructure.observability.metrics import (
    purchase_fetch_failures_counter,
    record_payment_intent,
    record_quote,
    record_refusal,
)

router = APIRouter(prefix="/repayment")

CONFIGURATION_MESSAGE = "Repayment rules are temporarily unavailable. Please contact support."


async def _fetch_purchase(client: PurchaseClient, purchase_id: str, request_id: str) -> Purchase:
    try:
        return await client.get_purchase(purchase_id)
    except PurchaseNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PurchaseAlreadyRepaidError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PurchaseServiceError as e:
        purchase_fetch_failures_counter.inc()
        logging.error(f"Purchase service error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Purchase service unavailable")


def _refuse(err: Err, request_id: str, purchase_id: str) -> NoReturn:
    """Turn a domain refusal into an HTTP error; configuration faults are hidden from the caller"""
    record_refusal(err.kind.value)

    if err.kind == ErrorKind.CONFIGURATION_ERROR:
        logging.error(
            f"Rate tier configuration error: {err.message}",
            extra={"request_id": request_id, "purchase_id": purchase_id},
        )
        raise HTTPException(
            status_code=500,
            detail={"kind": err.kind.value, "message": CONFIGURATION_MESSAGE},
        )

    log_settlement_refusal(request_id, purchase_id, err.kind.value, err.message)
    detail = {"kind": err.kind.value, "message": err.message, **err.detail}
    raise HTTPException(status_code=400, detail=jsonable_encoder(detail, custom_encoder={Decimal: str}))


def _settlement_response(settlement: SettlementCalculation) -> SettlementResponse:
    return SettlementResponse(
        purchase_id=settlement.purchase_id,
        base_amount=settlement.base_amount,
        purchase_date=settlement.purchase_date,
        evaluation_date=settlement.evaluation_date,
        days_elapsed=settlement.days_elapsed,
        tier_type=settlement.tier_type.value,
        tier_applied=settlement.tier_label,
        tier_id=settlement.tier_id,
        applied_rate=settlement.applied_rate,
        discount_amount=settlement.discount_amount,
        interest_amount=settlement.interest_amount,
        adjustment_amount=settlement.adjustment_amount,
        final_payable=settlement.final_payable,
        summary=settlement.summary,
    )


def _quote(
    purchase: Purchase,
    table: RateTierTable,
    today: date,
    tz: Optional[tzinfo],
    request_id: str,
) -> SettlementCalculation:
    start_time = time.time()
    result = calculate_settlement(purchase, table, today, tz)
    if not result.ok:
        _refuse(result, request_id, purchase.purchase_id)

    settlement = result.value
    record_quote(settlement.tier_type.value)
    log_settlement_quote(
        request_id,
        purchase.purchase_id,
        settlement.days_elapsed,
        settlement.tier_type.value,
        str(settlement.final_payable),
        (time.time() - start_time) * 1000,
    )
    return settlement


@router.post("/calculate", response_model=SettlementResponse)
async def calculate_repayment(
    request_body: CalculateRequest,
    request: Request,
    today: date = Depends(get_today),
    tz: Optional[tzinfo] = Depends(get_settlement_timezone),
    table: RateTierTable = Depends(get_tier_table),
    purchase_client: PurchaseClient = Depends(get_purchase_client),
):
    """
    Quote the amount payable to settle a credit purchase today.

    Flow:
    1. Reject any repayment date other than today
    2. Fetch the purchase from the system of record
    3. Refuse Day 0, otherwise apply the matching discount/interest tier
    """
    request_id = get_request_id(request)

    date_check = check_evaluation_date(request_body.repayment_date, today, tz)
    if not date_check.ok:
        _refuse(date_check, request_id, request_body.purchase_id)

    purchase = await _fetch_purchase(purchase_client, request_body.purchase_id, request_id)
    return _settlement_response(_quote(purchase, table, today, tz, request_id))


@router.get("/rules", response_model=RulesResponse)
def get_repayment_rules(table: RateTierTable = Depends(get_tier_table)):
    """Active discount and interest tiers plus the partial payment floor"""

    def to_schema(tier: RateTier, tier_type: TierType) -> RateTierSchema:
        return RateTierSchema(
            id=tier.tier_id,
            name=tier.name or tier_label(tier_type, tier.rate),
            start=tier.start,
            end=tier.end,
            rate=tier.rate,
            is_open_ended=tier.open_ended,
        )

    return RulesResponse(
        discount_tiers=[to_schema(t, TierType.DISCOUNT) for t in table.discount_tiers],
        interest_tiers=[to_schema(t, TierType.INTEREST) for t in table.interest_tiers],
        min_partial_payment_percent=table.min_partial_payment_percent,
    )


@router.get("/{purchase_id}/projection", response_model=ProjectionResponse)
async def get_repayment_projection(
    purchase_id: str,
    request: Request,
    tz: Optional[tzinfo] = Depends(get_settlement_timezone),
    table: RateTierTable = Depends(get_tier_table),
    purchase_client: PurchaseClient = Depends(get_purchase_client),
):
    """Day-by-day payable amounts across the whole tier schedule"""
    request_id = get_request_id(request)
    purchase = await _fetch_purchase(purchase_client, purchase_id, request_id)

    try:
        projection = get_projection(purchase, table, tz=tz)
    except ConfigurationError as e:
        _refuse(Err(ErrorKind.CONFIGURATION_ERROR, str(e)), request_id, purchase_id)

    return ProjectionResponse(
        purchase_id=purchase.purchase_id,
        base_amount=purchase.principal_amount,
        points=[
            ProjectionPointSchema(
                day=point.day,
                date=point.date,
                final_payable=point.final_payable,
                tier_type=point.tier_type.value,
                rate=point.rate,
            )
            for point in projection
        ],
    )


@router.post("/{purchase_id}/validate", response_model=PaymentIntentResponse)
async def validate_repayment(
    purchase_id: str,
    request_body: ValidatePaymentRequest,
    request: Request,
    today: date = Depends(get_today),
    tz: Optional[tzinfo] = Depends(get_settlement_timezone),
    table: RateTierTable = Depends(get_tier_table),
    purchase_client: PurchaseClient = Depends(get_purchase_client),
):
    """
    Validate a full or partial repayment before it is sent to the payment gateway.

    Omitting the amount requests full settlement. Partial amounts must reach the
    configured minimum percentage unless they are within one unit of the full payable.
    """
    request_id = get_request_id(request)
    purchase = await _fetch_purchase(purchase_client, purchase_id, request_id)
    settlement = _quote(purchase, table, today, tz, request_id)

    if request_body.amount is None:
        intent = full_payment_intent(settlement)
    else:
        result = validate_partial_payment(request_body.amount, settlement, table.min_partial_payment_percent)
        if not result.ok:
            _refuse(result, request_id, purchase_id)
        intent = result.value

    record_payment_intent(intent.mode.value)

    return PaymentIntentResponse(
        purchase_id=intent.purchase_id,
        mode=intent.mode.value,
        amount=intent.amount,
        full_payable=intent.full_payable,
        remaining_balance=intent.remaining_balance,
        is_partial=intent.mode == PaymentMode.PARTIAL,
        settlement=_settlement_response(settlement),
    )
