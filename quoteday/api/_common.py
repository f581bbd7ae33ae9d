from fastapi import HTTPException

from quoteday.config.settings import settings


def supported_language(language: str) -> str:
    """Normalize ``language`` or reject it with 400."""
    code = (language or "").strip().lower()
    if code not in settings.quotes.supported_languages:
        raise HTTPException(status_code=400, detail=f"Unsupported language '{language}'")
    return code
