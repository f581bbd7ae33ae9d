from sqlalchemy import Column, Integer, String, Date, UniqueConstraint

from quoteday.core.db import Base


class RateLimitCounter(Base):
    """AI-invoking searches per user and day. Never decremented."""

    __tablename__ = "rate_limit_counters"
    __table_args__ = (UniqueConstraint("user_id", "day", name="uq_rate_limit_user_day"),)

    id = Column(Integer, primary_key=True)
    user_id = Column(String(36), nullable=False, index=True)
    day = Column(Date, nullable=False)
    count = Column(Integer, nullable=False, default=0)
