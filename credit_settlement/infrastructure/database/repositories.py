"""Data access layer for repayment rate tiers"""

import logging
from decimal import Decimal
from typing import List

from sqlalchemy.orm import Session

from credit_settlement.config import settings
from credit_settlement.domain.models import RateTier, RateTierTable, TierType
from credit_settlement.infrastructure.database.models import RateTierRecord

logger = logging.getLogger(__name__)

# (tier_type, start, end, rate, description)
DEFAULT_TIERS = [
    (TierType.DISCOUNT, 0, 30, Decimal("10"), "Settle within 30 days"),
    (TierType.DISCOUNT, 31, 60, Decimal("5"), "Settle within 60 days"),
    (TierType.INTEREST, 91, None, Decimal("2"), "Settled after 90 days"),
]


def _to_domain(record: RateTierRecord) -> RateTier:
    return RateTier(
        start=record.period_start,
        end=None if record.is_open_ended else record.period_end,
        rate=Decimal(str(record.rate)),
        name=record.tier_name,
        tier_id=str(record.id),
    )


class RateTierRepository:
    """Repository for discount and interest tiers"""

    def __init__(self, db: Session):
        self.db = db

    def get_active_tiers(self, tier_type: TierType) -> List[RateTierRecord]:
        """Fetch active tiers of one type, ordered by start day"""
        return (
            self.db.query(RateTierRecord)
            .filter(RateTierRecord.tier_type == tier_type.value)
            .filter(RateTierRecord.is_active.is_(True))
            .order_by(RateTierRecord.period_start.asc())
            .all()
        )

    def create_tier(
        self,
        tier_type: TierType,
        start: int,
        end: int | None,
        rate: Decimal,
        name: str | None = None,
        description: str | None = None,
    ) -> RateTierRecord:
        """Persist a tier definition"""
        record = RateTierRecord(
            tier_type=tier_type.value,
            tier_name=name,
            period_start=start,
            period_end=end,
            is_open_ended=end is None,
            rate=rate,
            description=description,
            is_active=True,
        )
        self.db.add(record)
        self.db.flush()
        return record

    def has_tiers(self) -> bool:
        return self.db.query(RateTierRecord.id).first() is not None

    def seed_defaults(self) -> None:
        """Insert the standard tier table if no tiers are configured"""
        if self.has_tiers():
            return
        for tier_type, start, end, rate, description in DEFAULT_TIERS:
            self.create_tier(tier_type, start, end, rate, description=description)
        self.db.commit()
        logger.info("Seeded default repayment rate tiers", extra={"tier_count": len(DEFAULT_TIERS)})

    def load_table(self, min_partial_payment_percent: Decimal | None = None) -> RateTierTable:
        """Build the active tier table; validation happens in the settlement engine"""
        if min_partial_payment_percent is None:
            min_partial_payment_percent = settings.min_partial_payment_percent
        return RateTierTable(
            discount_tiers=tuple(_to_domain(r) for r in self.get_active_tiers(TierType.DISCOUNT)),
            interest_tiers=tuple(_to_domain(r) for r in self.get_active_tiers(TierType.INTEREST)),
            min_partial_payment_percent=min_partial_payment_percent,
        )
