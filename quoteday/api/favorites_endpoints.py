"""Per-user favorites. Every call passes the session gate."""

from typing import Optional

from fastapi import APIRouter, Depends

from quoteday.api._common import supported_language
from quoteday.core.dependencies import get_favorites_manager
from quoteday.core.exceptions import ErrorCode, QuoteNotFoundError, UnauthorizedError
from quoteday.schemas.base import ErrorResponse
from quoteday.schemas.favorite import FavoriteRequest, FavoriteResponse, FavoritesListResponse
from quoteday.services.favorites_service import FavoriteResult, FavoritesManager

router = APIRouter(
    prefix="/favorites",
    tags=["favorites"],
    responses={
        401: {"model": ErrorResponse, "description": "Missing or invalid session"},
        404: {"model": ErrorResponse, "description": "Quote not found"},
    },
)


def _raise_for(result: FavoriteResult, quote_id: int) -> None:
    if result.error == ErrorCode.UNAUTHORIZED.value:
        raise UnauthorizedError()
    if result.error == ErrorCode.NOT_FOUND.value:
        raise QuoteNotFoundError(quote_id)


@router.post("", response_model=FavoriteResponse)
async def add_favorite(payload: FavoriteRequest, manager: FavoritesManager = Depends(get_favorites_manager)):
    result = manager.add_favorite(payload.user_id, payload.quote_id, payload.session_token)
    _raise_for(result, payload.quote_id)
    return FavoriteResponse(already_favorited=result.already_favorited)


@router.delete("", response_model=FavoriteResponse)
async def remove_favorite(
    user_id: str,
    quote_id: int,
    session_token: Optional[str] = None,
    manager: FavoritesManager = Depends(get_favorites_manager),
):
    result = manager.remove_favorite(user_id, quote_id, session_token)
    _raise_for(result, quote_id)
    return FavoriteResponse()


@router.get("", response_model=FavoritesListResponse)
async def list_favorites(
    user_id: str,
    session_token: Optional[str] = None,
    language: Optional[str] = None,
    manager: FavoritesManager = Depends(get_favorites_manager),
):
    result = manager.list_favorites(user_id, session_token, supported_language(language) if language else None)
    if not result.success:
        raise UnauthorizedError()
    return FavoritesListResponse(quotes=result.quotes)
