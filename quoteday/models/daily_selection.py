from sqlalchemy import Column, Integer, String, Date, DateTime, UniqueConstraint, func

from quoteday.core.db import Base


class DailySelection(Base):
    """The quote shown to every client for one (day, language)."""

    __tablename__ = "daily_selections"
    __table_args__ = (UniqueConstraint("day", "language", name="uq_daily_selection_day_language"),)

    id = Column(Integer, primary_key=True)
    day = Column(Date, nullable=False, index=True)
    language = Column(String(8), nullable=False)
    quote_id = Column(Integer, nullable=False)
    selected_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
