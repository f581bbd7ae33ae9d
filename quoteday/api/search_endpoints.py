"""Free-text quote search."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from quoteday.api._common import supported_language
from quoteday.core.dependencies import get_search_resolver
from quoteday.schemas.base import ErrorResponse
from quoteday.schemas.search import LoadMoreRequest, SearchResponse
from quoteday.services.search_resolver import SearchResolver, SearchResult

router = APIRouter(
    prefix="/search",
    tags=["search"],
    responses={
        400: {"model": ErrorResponse, "description": "Unsupported language"},
        422: {"model": ErrorResponse, "description": "Validation error"},
    },
)


def _response(result: SearchResult) -> SearchResponse:
    return SearchResponse(
        quotes=result.quotes,
        source=result.source,
        has_more=result.has_more,
        rate_limit=result.rate_limit,
        error=result.error,
    )


@router.get("", response_model=SearchResponse)
async def search_quotes(
    query: str = Query(..., min_length=1, max_length=500),
    language: str = "en",
    session_token: Optional[str] = None,
    resolver: SearchResolver = Depends(get_search_resolver),
):
    result = await resolver.search(query, supported_language(language), session_token)
    return _response(result)


@router.post("/more", response_model=SearchResponse)
async def load_more(payload: LoadMoreRequest, resolver: SearchResolver = Depends(get_search_resolver)):
    result = await resolver.load_more(
        payload.query,
        supported_language(payload.language),
        payload.seen_ids,
        payload.session_token,
    )
    return _response(result)
