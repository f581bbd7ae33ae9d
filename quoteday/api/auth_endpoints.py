"""Registration, login and logout."""

from fastapi import APIRouter, Depends

from quoteday.core.dependencies import get_session_authority
from quoteday.core.exceptions import UnauthorizedError
from quoteday.schemas.base import ErrorResponse, SuccessResponse
from quoteday.schemas.user import LoginRequest, LogoutRequest, SessionRead, UserCreate
from quoteday.services.session_authority import IssuedSession, SessionAuthority

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
    responses={
        401: {"model": ErrorResponse, "description": "Invalid credentials or session"},
        409: {"model": ErrorResponse, "description": "Email already registered"},
        422: {"model": ErrorResponse, "description": "Validation error"},
    },
)


def _session_read(issued: IssuedSession) -> SessionRead:
    return SessionRead(
        user_id=issued.user_id,
        email=issued.email,
        name=issued.name,
        is_premium=issued.is_premium,
        session_token=issued.session_token,
        expires_at=issued.expires_at,
    )


@router.post("/register", response_model=SessionRead, status_code=201)
async def register_user(payload: UserCreate, authority: SessionAuthority = Depends(get_session_authority)):
    return _session_read(authority.register(payload.email, payload.password, payload.name))


@router.post("/login", response_model=SessionRead)
async def login_user(payload: LoginRequest, authority: SessionAuthority = Depends(get_session_authority)):
    return _session_read(authority.login(payload.email, payload.password))


@router.post("/logout", response_model=SuccessResponse)
async def logout_user(payload: LogoutRequest, authority: SessionAuthority = Depends(get_session_authority)):
    if not authority.revoke_session(payload.user_id, payload.session_token):
        raise UnauthorizedError()
    return SuccessResponse()
