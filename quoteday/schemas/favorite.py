from pydantic import BaseModel
from typing import List, Optional

from .quote import QuoteRead


class FavoriteRequest(BaseModel):
    user_id: str
    quote_id: int
    session_token: Optional[str] = None


class FavoriteResponse(BaseModel):
    success: bool = True
    already_favorited: bool = False


class FavoritesListResponse(BaseModel):
    success: bool = True
    quotes: List[QuoteRead]
