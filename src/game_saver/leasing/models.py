"""Availability views returned by the leasing engine."""

from datetime import datetime

from pydantic import BaseModel, Field

from game_saver.db.models import AccountType


class AccountStatus(BaseModel):
    """Availability of one account, evaluated at `checked_at`.

    Offline accounts are always available and never carry lease fields.
    """

    id: str
    game_id: str
    type: AccountType
    username: str
    available: bool
    holder_id: str | None = Field(
        default=None, description="Current lease holder when not available"
    )
    lease_expires_at: datetime | None = None
    time_remaining: int | None = Field(
        default=None, ge=0, description="Seconds until the lease expires"
    )
    checked_at: datetime
