from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, UniqueConstraint, func

from quoteday.core.db import Base


class QuoteHistoryEntry(Base):
    __tablename__ = "quote_history"
    __table_args__ = (UniqueConstraint("user_id", "quote_id", "shown_on", name="uq_history_user_quote_day"),)

    id = Column(Integer, primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    quote_id = Column(Integer, nullable=False)
    shown_on = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
