"""Concurrent assigns against one SQLite file."""

import asyncio

import pytest

from game_saver.db import AccountType, open_database
from game_saver.db.repositories import AccountRepository
from game_saver.exceptions import LeaseConflictError
from game_saver.leasing import LeaseService


@pytest.mark.asyncio
async def test_only_one_concurrent_assign_wins(tmp_path):
    """Many users racing for the same account: exactly one gets it."""
    database = await open_database(tmp_path / "race.db")
    try:
        repo = AccountRepository(database)
        service = LeaseService(repo)
        account = await repo.create("g1", AccountType.ONLINE, "contested", "pw")

        results = await asyncio.gather(
            *(service.assign(account.id, f"user-{i}", 1) for i in range(8)),
            return_exceptions=True,
        )

        winners = [r for r in results if not isinstance(r, BaseException)]
        losers = [r for r in results if isinstance(r, BaseException)]
        assert len(winners) == 1
        assert all(isinstance(e, LeaseConflictError) for e in losers)

        stored = await repo.get(account.id)
        assert stored.lease_holder == winners[0].lease_holder
        assert all(e.holder_id == stored.lease_holder for e in losers)
    finally:
        await database.dispose()


@pytest.mark.asyncio
async def test_two_services_share_one_store(tmp_path):
    """Separate engines on the same file still see each other's leases."""
    path = tmp_path / "shared.db"
    first_db = await open_database(path)
    second_db = await open_database(path)
    try:
        first = LeaseService(AccountRepository(first_db))
        second = LeaseService(AccountRepository(second_db))
        account = await AccountRepository(first_db).create(
            "g1", AccountType.ONLINE, "shared", "pw"
        )

        await first.assign(account.id, "u1", 1)
        with pytest.raises(LeaseConflictError):
            await second.assign(account.id, "u2", 1)

        status = await second.status(account.id)
        assert status.holder_id == "u1"
    finally:
        await first_db.dispose()
        await second_db.dispose()
