"""Time Source — the only place the core reads the wall clock.

Invariants:
    - A Clock returns a timezone-aware datetime (UTC by default)

Design Decisions:
    - Plain callable over a class: tests inject a lambda or a stepping fixture
"""

from datetime import datetime, timezone
from typing import Callable


Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
