"""Reading history."""

from typing import Optional

from fastapi import APIRouter, Depends

from quoteday.api._common import supported_language
from quoteday.config.settings import settings
from quoteday.core.clock import Clock
from quoteday.core.dependencies import get_clock, get_history_recorder, get_session_authority
from quoteday.schemas.base import ErrorResponse
from quoteday.schemas.history import (
    HistoryListResponse,
    HistoryRecordRequest,
    HistoryRecordResponse,
    SearchHistoryResponse,
)
from quoteday.services.history_recorder import HistoryRecorder
from quoteday.services.session_authority import SessionAuthority

router = APIRouter(
    prefix="/history",
    tags=["history"],
    responses={401: {"model": ErrorResponse, "description": "Missing or invalid session"}},
)


@router.post("", response_model=HistoryRecordResponse)
async def record_shown(
    payload: HistoryRecordRequest,
    authority: SessionAuthority = Depends(get_session_authority),
    history: HistoryRecorder = Depends(get_history_recorder),
    clock: Clock = Depends(get_clock),
):
    authority.require_session(payload.user_id, payload.session_token)
    result = history.record_shown(payload.user_id, payload.quote_id, clock.today())
    return HistoryRecordResponse(already_recorded=result.already_recorded)


@router.get("", response_model=HistoryListResponse)
async def list_history(
    user_id: str,
    session_token: Optional[str] = None,
    language: Optional[str] = None,
    authority: SessionAuthority = Depends(get_session_authority),
    history: HistoryRecorder = Depends(get_history_recorder),
):
    """Recent history, capped lower for free accounts."""
    session = authority.require_session(user_id, session_token)
    limit = settings.quotes.history_limit_premium if session.is_premium else settings.quotes.history_limit_free
    entries = history.list_recent(user_id, limit, supported_language(language) if language else None)
    return HistoryListResponse(entries=entries)


@router.get("/searches", response_model=SearchHistoryResponse)
async def list_search_history(
    user_id: str,
    session_token: Optional[str] = None,
    language: Optional[str] = None,
    authority: SessionAuthority = Depends(get_session_authority),
    history: HistoryRecorder = Depends(get_history_recorder),
):
    """Recent searches with their top quotes, same caps as the reading history."""
    session = authority.require_session(user_id, session_token)
    limit = settings.quotes.history_limit_premium if session.is_premium else settings.quotes.history_limit_free
    searches = history.list_searches(
        user_id, limit, settings.quotes.page_size, supported_language(language) if language else None
    )
    return SearchHistoryResponse(searches=searches)
