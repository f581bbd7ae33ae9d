from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, func

from quoteday.core.db import Base


class SearchContext(Base):
    """A normalized search query in one language, learned from resolved searches."""

    __tablename__ = "search_contexts"
    __table_args__ = (UniqueConstraint("normalized_query", "language", name="uq_search_context_query_language"),)

    id = Column(Integer, primary_key=True)
    search_query = Column(Text, nullable=False)
    normalized_query = Column(String(255), nullable=False)
    language = Column(String(8), nullable=False, index=True)
    search_count = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), nullable=False)
    last_used_at = Column(DateTime(timezone=True), nullable=False)


class QuoteContextMapping(Base):
    """Quote judged relevant to a search context, scored 0-100."""

    __tablename__ = "quote_context_mappings"
    __table_args__ = (UniqueConstraint("context_id", "quote_id", name="uq_mapping_context_quote"),)

    id = Column(Integer, primary_key=True)
    context_id = Column(Integer, ForeignKey("search_contexts.id"), nullable=False, index=True)
    # No FK, same as favorites
    quote_id = Column(Integer, nullable=False, index=True)
    relevance_score = Column(Integer, nullable=False)
    is_generated = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
