"""Game account repository for database operations."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import datetime

import structlog
from sqlalchemy import or_, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import col, select

from game_saver.core.time import utc_now
from game_saver.db.engine import Database
from game_saver.db.models import AccountType, GameAccount
from game_saver.exceptions import DuplicateAccountError, StoreError


logger = structlog.get_logger(__name__)


class AccountRepository:
    """Repository for GameAccount operations.

    The two `try_*_lease` methods are the only writers of the lease columns.
    Each is a single UPDATE whose WHERE clause carries the precondition, so
    the check and the write cannot be separated by a concurrent writer.
    """

    def __init__(self, database: Database) -> None:
        self._database = database

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncGenerator[AsyncSession, None]:
        """Open a session and surface driver failures as `StoreError`."""
        try:
            async with self._database.session() as session:
                yield session
        except SQLAlchemyError as e:
            logger.error("account_store_failure", operation=operation, error=str(e))
            raise StoreError(f"Account store failure during {operation}") from e

    async def _username_taken(
        self, session: AsyncSession, username: str, exclude_id: str | None = None
    ) -> bool:
        query = select(GameAccount.id).where(GameAccount.username == username)
        if exclude_id is not None:
            query = query.where(GameAccount.id != exclude_id)
        result = await session.execute(query)
        return result.first() is not None

    async def create(
        self,
        game_id: str,
        type: AccountType,
        username: str,
        secret: str,
        guard_link: str | None = None,
    ) -> GameAccount:
        """Create a new account with no lease.

        Raises:
            DuplicateAccountError: If the username is already registered
        """
        async with self._session("create") as session:
            if await self._username_taken(session, username):
                raise DuplicateAccountError(username)
            account = GameAccount(
                game_id=game_id,
                type=type,
                username=username,
                secret=secret,
                guard_link=guard_link or None,
            )
            session.add(account)
            try:
                await session.commit()
            except IntegrityError as e:
                raise DuplicateAccountError(username) from e
            await session.refresh(account)
            return account

    async def get(self, account_id: str) -> GameAccount | None:
        """Get an account by id."""
        async with self._session("get") as session:
            result = await session.execute(
                select(GameAccount).where(GameAccount.id == account_id)
            )
            return result.scalar_one_or_none()

    async def list_by_game(self, game_id: str) -> list[GameAccount]:
        """List a game's accounts in creation order."""
        async with self._session("list_by_game") as session:
            result = await session.execute(
                select(GameAccount)
                .where(GameAccount.game_id == game_id)
                .order_by(col(GameAccount.created_at), col(GameAccount.id))
            )
            return list(result.scalars().all())

    async def list_all(self, type: AccountType | None = None) -> list[GameAccount]:
        """List all accounts, newest first, optionally of a single type."""
        async with self._session("list_all") as session:
            query = select(GameAccount).order_by(col(GameAccount.created_at).desc())
            if type is not None:
                query = query.where(GameAccount.type == type)
            result = await session.execute(query)
            return list(result.scalars().all())

    async def list_held_by(self, holder_id: str, now: datetime) -> list[GameAccount]:
        """List accounts whose lease is held by `holder_id` and not expired at `now`."""
        async with self._session("list_held_by") as session:
            result = await session.execute(
                select(GameAccount)
                .where(
                    GameAccount.type == AccountType.ONLINE,
                    GameAccount.lease_holder == holder_id,
                    col(GameAccount.lease_expires_at) > now,
                )
                .order_by(col(GameAccount.lease_expires_at))
            )
            return list(result.scalars().all())

    async def update_details(
        self,
        account_id: str,
        *,
        username: str | None = None,
        secret: str | None = None,
        guard_link: str | None = None,
    ) -> GameAccount | None:
        """Update credential fields. Lease fields and type are never touched.

        Returns None if the account does not exist.

        Raises:
            DuplicateAccountError: If the new username belongs to another account
        """
        async with self._session("update_details") as session:
            result = await session.execute(
                select(GameAccount).where(GameAccount.id == account_id)
            )
            account = result.scalar_one_or_none()
            if account is None:
                return None

            if username is not None and username != account.username:
                if await self._username_taken(session, username, exclude_id=account_id):
                    raise DuplicateAccountError(username)
                account.username = username
            if secret is not None:
                account.secret = secret
            if guard_link is not None:
                # empty string clears the link
                account.guard_link = guard_link or None
            account.updated_at = utc_now()

            session.add(account)
            try:
                await session.commit()
            except IntegrityError as e:
                raise DuplicateAccountError(username or account.username) from e
            await session.refresh(account)
            return account

    async def delete(self, account_id: str) -> bool:
        """Delete an account regardless of lease state. Returns True if deleted."""
        async with self._session("delete") as session:
            result = await session.execute(
                select(GameAccount).where(GameAccount.id == account_id)
            )
            account = result.scalar_one_or_none()
            if account:
                await session.delete(account)
                await session.commit()
                return True
            return False

    async def try_acquire_lease(
        self,
        account_id: str,
        holder_id: str,
        expires_at: datetime,
        now: datetime,
    ) -> GameAccount | None:
        """Set the lease if the online account is free at `now`.

        Returns the updated account, or None when no row matched (missing,
        offline, or leased with an expiry after `now`).
        """
        stmt = (
            update(GameAccount)
            .where(
                col(GameAccount.id) == account_id,
                col(GameAccount.type) == AccountType.ONLINE,
                or_(
                    col(GameAccount.lease_holder).is_(None),
                    col(GameAccount.lease_expires_at).is_(None),
                    col(GameAccount.lease_expires_at) <= now,
                ),
            )
            .values(lease_holder=holder_id, lease_expires_at=expires_at, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        async with self._session("try_acquire_lease") as session:
            result = await session.execute(stmt)
            if result.rowcount != 1:
                return None
            await session.commit()
            return await session.get(GameAccount, account_id, populate_existing=True)

    async def try_release_lease(
        self,
        account_id: str,
        holder_id: str,
        now: datetime,
    ) -> GameAccount | None:
        """Clear the lease if `holder_id` holds it and it has not expired at `now`.

        Returns the updated account, or None when no row matched.
        """
        stmt = (
            update(GameAccount)
            .where(
                col(GameAccount.id) == account_id,
                col(GameAccount.type) == AccountType.ONLINE,
                col(GameAccount.lease_holder) == holder_id,
                col(GameAccount.lease_expires_at) > now,
            )
            .values(lease_holder=None, lease_expires_at=None, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        async with self._session("try_release_lease") as session:
            result = await session.execute(stmt)
            if result.rowcount != 1:
                return None
            await session.commit()
            return await session.get(GameAccount, account_id, populate_existing=True)

    async def clear_expired_leases(self, now: datetime) -> int:
        """Clear lease columns of leases that expired at or before `now`. Returns count."""
        stmt = (
            update(GameAccount)
            .where(
                col(GameAccount.lease_holder).is_not(None),
                or_(
                    col(GameAccount.lease_expires_at).is_(None),
                    col(GameAccount.lease_expires_at) <= now,
                ),
            )
            .values(lease_holder=None, lease_expires_at=None, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        async with self._session("clear_expired_leases") as session:
            result = await session.execute(stmt)
            await session.commit()
            return int(result.rowcount or 0)
