"""Shared fixtures: temporary databases and a controllable clock."""

from datetime import UTC, datetime, timedelta

import pytest

from game_saver.db import AccountType, open_database
from game_saver.db.repositories import AccountRepository
from game_saver.leasing import LeaseService


START = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = START) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> None:
        self.now += timedelta(**delta)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
async def database(tmp_path):
    """Database in a temporary directory, disposed after the test."""
    db = await open_database(tmp_path / "test.db")
    yield db
    await db.dispose()


@pytest.fixture
def repo(database):
    return AccountRepository(database)


@pytest.fixture
def service(repo, clock):
    return LeaseService(repo, clock=clock)


@pytest.fixture
async def online_account(repo):
    return await repo.create(
        game_id="g1",
        type=AccountType.ONLINE,
        username="steam_online",
        secret="hunter2",
        guard_link="https://guard.example/abc",
    )


@pytest.fixture
async def offline_account(repo):
    return await repo.create(
        game_id="g1",
        type=AccountType.OFFLINE,
        username="steam_offline",
        secret="pw",
    )
