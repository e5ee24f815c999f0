"""SQLAlchemy ORM models for repayment rate configuration"""

import uuid
from sqlalchemy import Column, Boolean, DateTime, Integer, Numeric, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class RateTierRecord(Base):
    """Discount or interest tier applied to credit repayments"""

    __tablename__ = "repayment_rate_tier"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    tier_type = Column(Text, nullable=False, index=True)  # "discount" or "interest"
    tier_name = Column(Text, nullable=True)
    period_start = Column(Integer, nullable=False)
    period_end = Column(Integer, nullable=True)  # NULL when open-ended
    is_open_ended = Column(Boolean, nullable=False, default=False)
    rate = Column(Numeric(6, 2), nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
