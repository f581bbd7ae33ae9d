from pydantic import BaseModel
from typing import List, Optional


class QuoteRead(BaseModel):
    id: int
    text: str
    author: Optional[str] = None
    reference: Optional[str] = None
    category: Optional[str] = None
    language: str
    is_premium: bool = False
    context: str = ""
    explanation: str = ""
    situations: List[str] = []
    tags: List[str] = []
    provenance: Optional[str] = None


class DailyQuoteResponse(BaseModel):
    quote: Optional[QuoteRead] = None
    source: str
    needs_selection: bool


class EnsureDailyRequest(BaseModel):
    language: str = "en"


class EnsureDailyResponse(BaseModel):
    quote: Optional[QuoteRead] = None
    already_existed: bool
    error: Optional[str] = None
