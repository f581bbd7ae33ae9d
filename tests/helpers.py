"""Test doubles and payload builders shared by unit and integration tests."""
import asyncio
import json
from datetime import datetime, timedelta

from quoteday.core.clock import Clock
from quoteday.core.exceptions import GenerationFailedError
from quoteday.services.generation_provider import GenerationProvider


class FixedClock(Clock):
    def __init__(self, now: datetime):
        self._now = now

    def now(self) -> datetime:
        return self._now

    def advance(self, **kwargs) -> None:
        self._now = self._now + timedelta(**kwargs)


class FakeProvider(GenerationProvider):
    """Returns queued responses in order; an exception in the queue is raised instead."""

    def __init__(self, *responses, delay: float = 0.0):
        self.responses = list(responses)
        self.prompts = []
        self.delay = delay

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.delay:
            await asyncio.sleep(self.delay)
        if not self.responses:
            raise GenerationFailedError("no scripted response")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class FakeCache:
    """In-memory stand-in for CacheClient's JSON helpers."""

    def __init__(self):
        self.store = {}

    async def get_json(self, key):
        raw = self.store.get(key)
        return json.loads(raw) if raw is not None else None

    async def set_json(self, key, value, ttl_seconds=None):
        self.store[key] = json.dumps(value)
        return True

    async def ping(self):
        return True


def variant(text, **overrides):
    data = {
        "text": text,
        "context": "Some context for this quote.",
        "explanation": "Some explanation for this quote.",
        "situations": ["everyday life"],
        "tags": ["general"],
    }
    data.update(overrides)
    return data


def generated_entry(en_text, de_text, type_="quote", **en_overrides):
    return {
        "en": dict(variant(en_text, **en_overrides), type=type_, author="Anonymous"),
        "de": variant(de_text, context="Etwas Kontext.", explanation="Eine Erklärung."),
    }


