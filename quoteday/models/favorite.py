from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, UniqueConstraint, func

from quoteday.core.db import Base


class Favorite(Base):
    __tablename__ = "favorites"
    __table_args__ = (UniqueConstraint("user_id", "quote_id", name="uq_favorite_user_quote"),)

    id = Column(Integer, primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    # No FK: a favorite may outlive its quote and is skipped when listed
    quote_id = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
