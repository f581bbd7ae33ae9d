from pydantic import BaseModel
from typing import Any, Dict, Optional


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    message: Optional[str] = None
    details: Optional[Dict[str, Any]] = None
    request_id: Optional[str] = None


class SuccessResponse(BaseModel):
    success: bool = True


class RateLimitInfo(BaseModel):
    used: int
    max: int
    remaining: int
