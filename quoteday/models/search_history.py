from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from quoteday.core.db import Base


class SearchHistoryEntry(Base):
    __tablename__ = "search_history"

    id = Column(Integer, primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    context_id = Column(Integer, ForeignKey("search_contexts.id"), nullable=False)
    searched_at = Column(DateTime(timezone=True), nullable=False, index=True)
