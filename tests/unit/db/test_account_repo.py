"""Tests for AccountRepository."""

from datetime import UTC, datetime, timedelta

import pytest

from game_saver.core.time import ensure_utc
from game_saver.db import AccountType
from game_saver.exceptions import DuplicateAccountError


NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


@pytest.mark.asyncio
async def test_create_account(repo):
    """Test creating an account via repository."""
    account = await repo.create(
        game_id="g1",
        type=AccountType.ONLINE,
        username="player_one",
        secret="secret",
        guard_link="https://guard.example/1",
    )
    assert account.id
    assert account.game_id == "g1"
    assert account.type == AccountType.ONLINE
    assert account.lease_holder is None
    assert account.lease_expires_at is None


@pytest.mark.asyncio
async def test_create_duplicate_username(repo):
    """Usernames are unique across games."""
    await repo.create("g1", AccountType.OFFLINE, "dup", "a")
    with pytest.raises(DuplicateAccountError):
        await repo.create("g2", AccountType.ONLINE, "dup", "b")


@pytest.mark.asyncio
async def test_create_blank_guard_link_is_stored_as_none(repo):
    account = await repo.create("g1", AccountType.OFFLINE, "u", "p", guard_link="")
    assert account.guard_link is None


@pytest.mark.asyncio
async def test_get_account(repo, online_account):
    """Test retrieving an account."""
    account = await repo.get(online_account.id)
    assert account is not None
    assert account.username == "steam_online"
    assert account.type == AccountType.ONLINE


@pytest.mark.asyncio
async def test_get_nonexistent_account(repo):
    """Test retrieving nonexistent account returns None."""
    assert await repo.get("does-not-exist") is None


@pytest.mark.asyncio
async def test_list_by_game_only_returns_that_game(repo):
    first = await repo.create("g1", AccountType.OFFLINE, "a", "p")
    second = await repo.create("g1", AccountType.ONLINE, "b", "p")
    await repo.create("g2", AccountType.ONLINE, "c", "p")

    accounts = await repo.list_by_game("g1")
    assert [a.id for a in accounts] == [first.id, second.id]
    assert await repo.list_by_game("unknown") == []


@pytest.mark.asyncio
async def test_list_all_filters_by_type(repo, online_account, offline_account):
    assert len(await repo.list_all()) == 2
    online = await repo.list_all(type=AccountType.ONLINE)
    assert [a.id for a in online] == [online_account.id]


@pytest.mark.asyncio
async def test_update_details_keeps_lease(repo, online_account):
    await repo.try_acquire_lease(online_account.id, "u1", NOW + timedelta(hours=1), NOW)

    updated = await repo.update_details(
        online_account.id, username="renamed", secret="new-secret"
    )
    assert updated is not None
    assert updated.username == "renamed"
    assert updated.secret == "new-secret"
    assert updated.guard_link == "https://guard.example/abc"
    assert updated.lease_holder == "u1"


@pytest.mark.asyncio
async def test_update_details_empty_guard_link_clears_it(repo, online_account):
    updated = await repo.update_details(online_account.id, guard_link="")
    assert updated is not None
    assert updated.guard_link is None


@pytest.mark.asyncio
async def test_update_details_rejects_taken_username(
    repo, online_account, offline_account
):
    with pytest.raises(DuplicateAccountError):
        await repo.update_details(online_account.id, username="steam_offline")


@pytest.mark.asyncio
async def test_update_details_missing_account(repo):
    assert await repo.update_details("missing", secret="x") is None


@pytest.mark.asyncio
async def test_delete_account(repo, online_account):
    """Test deleting an account."""
    assert await repo.delete(online_account.id) is True
    assert await repo.get(online_account.id) is None
    assert await repo.delete(online_account.id) is False


class TestLeaseWrites:
    """Conditional lease updates."""

    @pytest.mark.asyncio
    async def test_acquire_free_account(self, repo, online_account):
        expires = NOW + timedelta(hours=2)
        account = await repo.try_acquire_lease(online_account.id, "u1", expires, NOW)
        assert account is not None
        assert account.lease_holder == "u1"
        assert ensure_utc(account.lease_expires_at) == expires

    @pytest.mark.asyncio
    async def test_acquire_leased_account_fails(self, repo, online_account):
        expires = NOW + timedelta(hours=2)
        await repo.try_acquire_lease(online_account.id, "u1", expires, NOW)

        later = NOW + timedelta(minutes=30)
        assert (
            await repo.try_acquire_lease(
                online_account.id, "u2", later + timedelta(hours=1), later
            )
            is None
        )
        stored = await repo.get(online_account.id)
        assert stored.lease_holder == "u1"

    @pytest.mark.asyncio
    async def test_acquire_after_expiry_succeeds(self, repo, online_account):
        await repo.try_acquire_lease(
            online_account.id, "u1", NOW + timedelta(hours=1), NOW
        )
        # expiry equal to now counts as lapsed
        at_expiry = NOW + timedelta(hours=1)
        account = await repo.try_acquire_lease(
            online_account.id, "u2", at_expiry + timedelta(hours=1), at_expiry
        )
        assert account is not None
        assert account.lease_holder == "u2"

    @pytest.mark.asyncio
    async def test_acquire_offline_account_fails(self, repo, offline_account):
        assert (
            await repo.try_acquire_lease(
                offline_account.id, "u1", NOW + timedelta(hours=1), NOW
            )
            is None
        )

    @pytest.mark.asyncio
    async def test_acquire_missing_account_fails(self, repo):
        assert (
            await repo.try_acquire_lease("missing", "u1", NOW + timedelta(hours=1), NOW)
            is None
        )

    @pytest.mark.asyncio
    async def test_release_by_holder(self, repo, online_account):
        await repo.try_acquire_lease(
            online_account.id, "u1", NOW + timedelta(hours=1), NOW
        )
        account = await repo.try_release_lease(online_account.id, "u1", NOW)
        assert account is not None
        assert account.lease_holder is None
        assert account.lease_expires_at is None

    @pytest.mark.asyncio
    async def test_release_by_other_user_fails(self, repo, online_account):
        await repo.try_acquire_lease(
            online_account.id, "u1", NOW + timedelta(hours=1), NOW
        )
        assert await repo.try_release_lease(online_account.id, "u2", NOW) is None

    @pytest.mark.asyncio
    async def test_release_after_expiry_fails(self, repo, online_account):
        await repo.try_acquire_lease(
            online_account.id, "u1", NOW + timedelta(hours=1), NOW
        )
        later = NOW + timedelta(hours=2)
        assert await repo.try_release_lease(online_account.id, "u1", later) is None

    @pytest.mark.asyncio
    async def test_list_held_by_skips_expired(self, repo):
        short = await repo.create("g1", AccountType.ONLINE, "short", "p")
        long = await repo.create("g1", AccountType.ONLINE, "long", "p")
        await repo.try_acquire_lease(long.id, "u1", NOW + timedelta(hours=5), NOW)
        await repo.try_acquire_lease(short.id, "u1", NOW + timedelta(hours=1), NOW)

        held = await repo.list_held_by("u1", NOW)
        assert [a.id for a in held] == [short.id, long.id]

        held_later = await repo.list_held_by("u1", NOW + timedelta(hours=2))
        assert [a.id for a in held_later] == [long.id]
        assert await repo.list_held_by("u2", NOW) == []

    @pytest.mark.asyncio
    async def test_clear_expired_leases(self, repo):
        expired = await repo.create("g1", AccountType.ONLINE, "expired", "p")
        live = await repo.create("g1", AccountType.ONLINE, "live", "p")
        await repo.try_acquire_lease(expired.id, "u1", NOW + timedelta(hours=1), NOW)
        await repo.try_acquire_lease(live.id, "u2", NOW + timedelta(hours=3), NOW)

        cleared = await repo.clear_expired_leases(NOW + timedelta(hours=2))
        assert cleared == 1
        assert (await repo.get(expired.id)).lease_holder is None
        assert (await repo.get(live.id)).lease_holder == "u2"
