"""Injectable time and randomness sources."""
import random
from datetime import date, datetime, timezone
from typing import Optional


class Clock:
    """Wall clock in UTC. Replace with a fixed clock in tests."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def today(self) -> date:
        return self.now().date()


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes read back from SQLite."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


system_clock = Clock()
system_rng = random.SystemRandom()
