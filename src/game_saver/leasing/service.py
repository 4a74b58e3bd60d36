"""Leasing engine for online game accounts.

An online account is leased when it has a holder and an expiry in the
future. Expiry is evaluated lazily: every read compares the stored expiry
with the clock, so a lapsed lease reads as available even if its columns
have not been cleared yet.
"""

from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any

import structlog

from game_saver.core.time import ensure_utc, seconds_until, utc_now
from game_saver.db.models import GameAccount
from game_saver.db.repositories import AccountRepository
from game_saver.exceptions import (
    AccountNotFoundError,
    ForbiddenError,
    InvalidArgumentError,
    LeaseConflictError,
)
from game_saver.leasing.models import AccountStatus
from game_saver.leasing.validation import validate_lease_hours


logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]

DEFAULT_MIN_HOURS = 1
DEFAULT_MAX_HOURS = 24


def is_leased(account: GameAccount, now: datetime) -> bool:
    """Whether `account` has a live lease at `now`."""
    if not account.is_online or account.lease_holder is None:
        return False
    expires_at = ensure_utc(account.lease_expires_at)
    return expires_at is not None and now < expires_at


def build_status(account: GameAccount, now: datetime) -> AccountStatus:
    """Availability view of `account` at `now`."""
    if not is_leased(account, now):
        return AccountStatus(
            id=account.id,
            game_id=account.game_id,
            type=account.type,
            username=account.username,
            available=True,
            checked_at=now,
        )

    expires_at = ensure_utc(account.lease_expires_at)
    return AccountStatus(
        id=account.id,
        game_id=account.game_id,
        type=account.type,
        username=account.username,
        available=False,
        holder_id=account.lease_holder,
        lease_expires_at=expires_at,
        time_remaining=seconds_until(expires_at, now),
        checked_at=now,
    )


class LeaseService:
    """Assigns, releases and reports leases on shared game accounts.

    Args:
        repository: Account store
        clock: Returns the current aware UTC time; injectable for tests
        min_hours: Shortest lease a requester may ask for
        max_hours: Longest lease a requester may ask for
    """

    def __init__(
        self,
        repository: AccountRepository,
        *,
        clock: Clock = utc_now,
        min_hours: int = DEFAULT_MIN_HOURS,
        max_hours: int = DEFAULT_MAX_HOURS,
    ) -> None:
        self._repository = repository
        self._clock = clock
        self.min_hours = min_hours
        self.max_hours = max_hours

    def _now(self) -> datetime:
        return ensure_utc(self._clock())

    async def _require(self, account_id: str) -> GameAccount:
        account = await self._repository.get(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    async def get_account(self, account_id: str) -> GameAccount:
        """Return the account or raise `AccountNotFoundError`."""
        return await self._require(account_id)

    def holds_lease(self, account: GameAccount, requester_id: str) -> bool:
        """Whether `requester_id` holds a live lease on `account` right now."""
        return is_leased(account, self._now()) and account.lease_holder == requester_id

    async def assign(
        self, account_id: str, requester_id: str, hours: Any
    ) -> GameAccount:
        """Lease an online account to `requester_id` for `hours` hours.

        Raises:
            InvalidArgumentError: Hours out of range or not an integer, or
                the account is offline
            AccountNotFoundError: Unknown account
            LeaseConflictError: Someone holds a live lease, including the
                requester itself
        """
        hours = validate_lease_hours(hours, self.min_hours, self.max_hours)

        account = await self._require(account_id)
        if not account.is_online:
            raise InvalidArgumentError(
                "Offline accounts do not need to be assigned",
                details={"account_id": account_id, "type": account.type.value},
            )

        now = self._now()
        expires_at = now + timedelta(hours=hours)
        updated = await self._repository.try_acquire_lease(
            account_id, requester_id, expires_at, now
        )
        if updated is not None:
            logger.info(
                "lease_assigned",
                account_id=account_id,
                holder_id=requester_id,
                hours=hours,
                expires_at=expires_at.isoformat(),
            )
            return updated

        # The conditional write matched nothing: report who holds it.
        current = await self._require(account_id)
        current_expiry = ensure_utc(current.lease_expires_at)
        logger.info(
            "lease_conflict",
            account_id=account_id,
            requester_id=requester_id,
            holder_id=current.lease_holder,
        )
        raise LeaseConflictError(
            account_id,
            holder_id=current.lease_holder,
            expires_at=current_expiry,
            time_remaining=(
                seconds_until(current_expiry, now) if current_expiry else None
            ),
        )

    async def release(self, account_id: str, requester_id: str) -> GameAccount:
        """End the requester's live lease on an online account.

        Raises:
            AccountNotFoundError: Unknown account
            ForbiddenError: The requester does not hold a live lease on it
        """
        account = await self._require(account_id)
        now = self._now()

        if not is_leased(account, now) or account.lease_holder != requester_id:
            logger.info(
                "lease_release_denied",
                account_id=account_id,
                requester_id=requester_id,
            )
            raise ForbiddenError(
                "You are not using this account",
                details={"account_id": account_id},
            )

        updated = await self._repository.try_release_lease(
            account_id, requester_id, now
        )
        if updated is None:
            # lost to a concurrent release/delete between read and write
            raise ForbiddenError(
                "You are not using this account",
                details={"account_id": account_id},
            )

        logger.info("lease_released", account_id=account_id, holder_id=requester_id)
        return updated

    async def status(self, account_id: str) -> AccountStatus:
        """Availability of one account. Never mutates."""
        account = await self._require(account_id)
        return build_status(account, self._now())

    async def list_statuses_for_game(self, game_id: str) -> list[AccountStatus]:
        """Availability of every account of a game, in store order."""
        accounts = await self._repository.list_by_game(game_id)
        now = self._now()
        return [build_status(account, now) for account in accounts]

    async def list_active_for_user(self, user_id: str) -> list[GameAccount]:
        """Accounts on which `user_id` holds a live lease, soonest expiry first."""
        return await self._repository.list_held_by(user_id, self._now())

    async def sweep_expired(self) -> int:
        """Clear lease columns of lapsed leases. Reads never depend on this."""
        cleared = await self._repository.clear_expired_leases(self._now())
        if cleared:
            logger.info("expired_leases_cleared", count=cleared)
        return cleared
