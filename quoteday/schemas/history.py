from pydantic import BaseModel
from typing import List, Optional

from .quote import QuoteRead


class HistoryRecordRequest(BaseModel):
    user_id: str
    quote_id: int
    session_token: Optional[str] = None


class HistoryRecordResponse(BaseModel):
    success: bool = True
    already_recorded: bool = False


class HistoryEntryRead(BaseModel):
    shown_on: str
    quote: QuoteRead


class HistoryListResponse(BaseModel):
    success: bool = True
    entries: List[HistoryEntryRead]


class SearchHistoryQuoteRead(QuoteRead):
    relevance_score: int


class SearchHistoryEntryRead(BaseModel):
    query: str
    searched_at: str
    quotes: List[SearchHistoryQuoteRead]


class SearchHistoryResponse(BaseModel):
    success: bool = True
    searches: List[SearchHistoryEntryRead]
