from pydantic import BaseModel, Field
from typing import List, Optional

from .base import RateLimitInfo
from .quote import QuoteRead


class SearchResponse(BaseModel):
    quotes: List[QuoteRead]
    source: str  # local, synonym, ai, insufficient
    has_more: bool
    rate_limit: Optional[RateLimitInfo] = None
    error: Optional[str] = None


class LoadMoreRequest(BaseModel):
    query: str = Field(min_length=1, max_length=500)
    language: str = "en"
    seen_ids: List[int] = []
    session_token: Optional[str] = None
