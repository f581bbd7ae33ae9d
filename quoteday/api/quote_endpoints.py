"""Daily quote and single-quote lookup."""
import logging
from typing import Optional

from fastapi import APIRouter, Depends

from quoteday.api._common import supported_language
from quoteday.core.clock import Clock
from quoteday.core.dependencies import (
    get_clock,
    get_daily_selector,
    get_history_recorder,
    get_quote_lookup,
    get_session_authority,
)
from quoteday.core.exceptions import QuoteNotFoundError
from quoteday.schemas.base import ErrorResponse
from quoteday.schemas.quote import DailyQuoteResponse, EnsureDailyRequest, EnsureDailyResponse, QuoteRead
from quoteday.services.daily_selector import DailySelector
from quoteday.services.history_recorder import HistoryRecorder
from quoteday.services.quote_repository import QuoteLookupService
from quoteday.services.session_authority import SessionAuthority

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/quotes",
    tags=["quotes"],
    responses={
        400: {"model": ErrorResponse, "description": "Unsupported language"},
        404: {"model": ErrorResponse, "description": "Quote not found"},
    },
)


@router.get("/daily", response_model=DailyQuoteResponse)
async def get_daily_quote(
    language: str = "en",
    user_id: Optional[str] = None,
    session_token: Optional[str] = None,
    selector: DailySelector = Depends(get_daily_selector),
    authority: SessionAuthority = Depends(get_session_authority),
    history: HistoryRecorder = Depends(get_history_recorder),
    clock: Clock = Depends(get_clock),
):
    """Today's stored quote. Shown quotes land in the caller's history when a valid session is passed."""
    language = supported_language(language)
    today = clock.today()
    result = selector.get_daily_quote(today, language)
    if result.quote is not None and user_id and session_token:
        if authority.validate_session(user_id, session_token).valid:
            history.record_shown(user_id, result.quote["id"], today)
    return DailyQuoteResponse(quote=result.quote, source=result.source, needs_selection=result.needs_selection)


@router.post("/daily/ensure", response_model=EnsureDailyResponse)
async def ensure_daily_quote(payload: EnsureDailyRequest, selector: DailySelector = Depends(get_daily_selector)):
    result = selector.ensure_daily_quote(supported_language(payload.language))
    return EnsureDailyResponse(quote=result.quote, already_existed=result.already_existed, error=result.error)


@router.get("/{quote_id}", response_model=QuoteRead)
async def get_quote(quote_id: int, language: str = "en", lookup: QuoteLookupService = Depends(get_quote_lookup)):
    quote = lookup.get_quote(quote_id, supported_language(language))
    if quote is None:
        raise QuoteNotFoundError(quote_id)
    return quote
