"""Dependency injection for FastAPI endpoints"""

from datetime import date, datetime, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from credit_settlement.config import settings
from credit_settlement.domain.models import RateTierTable
from credit_settlement.infrastructure.clients.purchases import PurchaseClient
from credit_settlement.infrastructure.database.repositories import RateTierRepository
from credit_settlement.infrastructure.database.session import get_db


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_purchase_client() -> PurchaseClient:
    """Provide purchase service client instance"""
    return PurchaseClient()


def get_settlement_timezone() -> Optional[tzinfo]:
    """Timezone in which calendar days are counted; None means server local time"""
    if settings.settlement_timezone:
        return ZoneInfo(settings.settlement_timezone)
    return None


def get_today(tz: Optional[tzinfo] = Depends(get_settlement_timezone)) -> date:
    """Server-side current date; repayments are always priced as of today"""
    return datetime.now(tz).date()


def get_tier_table(db: Session = Depends(get_db)) -> RateTierTable:
    """Load the active rate tier configuration"""
    return RateTierRepository(db).load_table()
