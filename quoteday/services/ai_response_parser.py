"""
Parsing and validation of generated quote payloads.

Model output is often almost-JSON: wrapped in code fences, surrounded by
prose or carrying trailing commas. Parsing walks an ordered list of
strategies; each returns the decoded value or None, and the first success
wins. Validation is all-or-nothing: one bad entry rejects the whole response.
"""
import json
import logging
import re
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from quoteday.config.settings import settings
from quoteday.core.exceptions import GenerationFailedError

logger = logging.getLogger(__name__)

_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)
_TRAILING_COMMA = re.compile(r",\s*([\]}])")


class GeneratedVariant(BaseModel):
    """One language version of a generated quote."""

    text: str
    context: str = Field(min_length=1)
    explanation: str = Field(min_length=1)
    situations: List[str]
    tags: List[str]
    reference: Optional[str] = None
    author: Optional[str] = None
    type: Optional[str] = None

    @field_validator("text")
    @classmethod
    def text_long_enough(cls, v: str) -> str:
        v = v.strip()
        if len(v) < settings.generation.min_text_length:
            raise ValueError(f"text shorter than {settings.generation.min_text_length} characters")
        return v


class GeneratedQuote(BaseModel):
    variants: Dict[str, GeneratedVariant]

    def primary(self, language: str) -> GeneratedVariant:
        return self.variants[language]


def parse_direct(content: str) -> Optional[Any]:
    try:
        return json.loads(content)
    except ValueError:
        return None


def parse_cleaned(content: str) -> Optional[Any]:
    """Drop code fences, text around the JSON body and trailing commas."""
    cleaned = _FENCE.sub("", content).strip()
    starts = [i for i in (cleaned.find("["), cleaned.find("{")) if i != -1]
    if not starts:
        return None
    start = min(starts)
    end = max(cleaned.rfind("]"), cleaned.rfind("}"))
    if end <= start:
        return None
    body = _TRAILING_COMMA.sub(r"\1", cleaned[start:end + 1])
    return parse_direct(body)


def parse_first_balanced(content: str) -> Optional[Any]:
    """Decode the first balanced JSON object or array found in ``content``."""
    for start, ch in enumerate(content):
        if ch not in "[{":
            continue
        end = _balanced_end(content, start)
        if end is None:
            continue
        body = _TRAILING_COMMA.sub(r"\1", content[start:end + 1])
        value = parse_direct(body)
        if value is not None:
            return value
    return None


def _balanced_end(content: str, start: int) -> Optional[int]:
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(content)):
        ch = content[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in "[{":
            depth += 1
        elif ch in "]}":
            depth -= 1
            if depth == 0:
                return i
    return None


PARSE_STRATEGIES: List[Callable[[str], Optional[Any]]] = [
    parse_direct,
    parse_cleaned,
    parse_first_balanced,
]


def extract_payload(content: str) -> Any:
    for strategy in PARSE_STRATEGIES:
        value = strategy(content)
        if value is not None:
            logger.debug(f"Generated payload decoded by {strategy.__name__}")
            return value
    raise GenerationFailedError("Generated response is not valid JSON")


def _entries(payload: Any) -> List[Any]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        if isinstance(payload.get("quotes"), list):
            return payload["quotes"]
        return [payload]
    raise GenerationFailedError("Generated response has an unexpected shape")


def parse_generated_quotes(content: str, languages: List[str]) -> List[GeneratedQuote]:
    """Decode ``content`` and validate every entry in every one of ``languages``.

    Raises:
        GenerationFailedError: nothing decodable, no entries, or any invalid entry
    """
    entries = _entries(extract_payload(content))
    if not entries:
        raise GenerationFailedError("Generated response contains no quotes")

    quotes = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise GenerationFailedError("Generated entry is not an object", {"index": index})
        missing = [lang for lang in languages if lang not in entry]
        if missing:
            logger.warning("Generated entry missing languages", extra={"index": index, "missing": missing})
            raise GenerationFailedError("Generated entry is missing a language", {"index": index, "missing": missing})
        try:
            quotes.append(GeneratedQuote(variants={lang: entry[lang] for lang in languages}))
        except ValidationError as e:
            logger.warning("Generated entry failed validation", extra={"index": index, "errors": e.error_count()})
            raise GenerationFailedError("Generated entry failed validation", {"index": index}) from e

    logger.info("Generated response accepted", extra={"entries": len(quotes)})
    return quotes
