"""SQLModel database models."""

from datetime import datetime
from enum import StrEnum
from uuid import uuid4

from sqlmodel import Field, SQLModel

from game_saver.core.time import utc_now


class AccountType(StrEnum):
    """Shared credential kinds."""

    OFFLINE = "offline"  # usable by everyone, never leased
    ONLINE = "online"  # one holder at a time


class GameAccount(SQLModel, table=True):
    """Shared Steam credential attached to a game.

    Lease fields are only written through the conditional updates in
    `AccountRepository.try_acquire_lease` / `try_release_lease`.
    """

    __tablename__ = "game_accounts"

    id: str = Field(default_factory=lambda: uuid4().hex, primary_key=True)
    game_id: str = Field(index=True)
    type: AccountType = Field(index=True)

    # Opaque credential payload
    username: str = Field(unique=True, index=True)
    secret: str
    guard_link: str | None = None

    # Current lease; stale values are ignored once lease_expires_at passes
    lease_holder: str | None = Field(default=None, index=True)
    lease_expires_at: datetime | None = None

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def is_online(self) -> bool:
        return self.type == AccountType.ONLINE
