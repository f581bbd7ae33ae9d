"""
Text-generation provider used by the AI search tier.

Talks to an OpenRouter-compatible chat completions endpoint.
"""

import logging
from typing import List, Optional

import httpx

from quoteday.config.settings import get_settings
from quoteday.core.exceptions import GenerationFailedError

logger = logging.getLogger(__name__)


class GenerationProvider:
    """Interface: turn a prompt into raw completion text, or raise GenerationFailedError."""

    async def complete(self, prompt: str) -> str:
        raise NotImplementedError


class OpenRouterProvider(GenerationProvider):
    """Chat completions over HTTP."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None):
        self.settings = get_settings().generation
        self.api_url = self.settings.api_url
        self.api_key = self.settings.api_key
        self._client = client

        if not self.api_key:
            logger.warning(
                "Generation API key not configured. "
                "Set GENERATION_API_KEY in .env file."
            )

    def _get_headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": self.settings.referer,
            "X-Title": self.settings.app_title,
        }

    def _payload(self, prompt: str) -> dict:
        return {
            "model": self.settings.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.settings.temperature,
            "max_tokens": self.settings.max_tokens,
        }

    async def complete(self, prompt: str) -> str:
        if not self.api_key:
            raise GenerationFailedError("Generation provider is not configured")

        try:
            if self._client is not None:
                response = await self._client.post(self.api_url, json=self._payload(prompt), headers=self._get_headers())
            else:
                async with httpx.AsyncClient(timeout=self.settings.timeout_seconds) as client:
                    response = await client.post(self.api_url, json=self._payload(prompt), headers=self._get_headers())
        except httpx.TimeoutException as e:
            logger.warning("Generation request timed out")
            raise GenerationFailedError("Generation request timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"Generation request failed: {e}")
            raise GenerationFailedError("Generation request failed", {"reason": type(e).__name__}) from e

        if response.status_code != 200:
            logger.warning(f"Generation API returned {response.status_code}")
            raise GenerationFailedError(
                f"Generation API error: {response.status_code}",
                {"status_code": response.status_code},
            )

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"] or ""
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise GenerationFailedError("Generation API returned an unexpected body") from e

        logger.info("Generation completed", extra={"response_chars": len(content)})
        return content


def build_search_prompt(query: str, languages: List[str], count: int) -> str:
    """Prompt asking for ``count`` quotes matching ``query``, each in every one of ``languages``."""
    primary, secondary = languages
    lang_list = " AND ".join(f'"{lang}"' for lang in languages)
    return f"""Find {count} meaningful quotes, Bible verses, or sayings for: "{query}"

For EACH quote you MUST provide both {lang_list} versions.
If ANY quote is missing either language, the ENTIRE response will be REJECTED.

Requirements:
- Authentic quotes with proper attribution, diverse types
- Every language section needs a non-empty "text" of at least 10 characters,
  plus "context", "explanation", "situations" and "tags"

Return ONLY a valid JSON array, no explanations before or after.

[
  {{
    "{primary}": {{
      "text": "Quote",
      "reference": "Proverbs 3:5 or null",
      "author": "Author or null",
      "type": "quote",
      "context": "Context (2-3 sentences)",
      "explanation": "Explanation (2-3 sentences)",
      "situations": ["situation1", "situation2"],
      "tags": ["tag1", "tag2"]
    }},
    "{secondary}": {{
      "text": "...",
      "reference": "...",
      "context": "...",
      "explanation": "...",
      "situations": ["..."],
      "tags": ["..."]
    }}
  }}
]

Types: "bible", "quote", "saying", "poem"
"""
