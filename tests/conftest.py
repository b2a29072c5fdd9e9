"""Root conftest — shared test configuration and fixtures."""

import os
from datetime import datetime, timedelta, timezone

import pytest

# Ensure tests don't pick up a developer's .env overrides
os.environ["PRIVILEGED_IDENTITY"] = "CONTRACT_OWNER"
os.environ["MAX_COLLABORATORS"] = "20"

OWNER = "CONTRACT_OWNER"
EPOCH = datetime(2024, 1, 1, tzinfo=timezone.utc)


class SteppingClock:
    """Deterministic clock: each call returns one second later than the last."""

    def __init__(self, start: datetime = EPOCH):
        self.current = start

    def __call__(self) -> datetime:
        self.current = self.current + timedelta(seconds=1)
        return self.current


@pytest.fixture
def clock() -> SteppingClock:
    return SteppingClock()
