"""Request and response bodies for the HTTP API."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from game_saver.core.time import ensure_utc
from game_saver.db.models import AccountType
from game_saver.leasing.models import AccountStatus


class AccountResponse(BaseModel):
    """Full account record, credentials included."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    game_id: str
    type: AccountType
    username: str
    password: str | None = Field(validation_alias="secret")
    guard_link: str | None = None
    lease_holder: str | None = None
    lease_expires_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    @field_validator("lease_expires_at", "created_at", "updated_at")
    @classmethod
    def as_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_utc(value)


class AssignRequest(BaseModel):
    """Body of an assign call.

    `hours` is deliberately untyped; range and integer checks happen in the
    leasing engine so every bad value yields the same error.
    """

    hours: Any = None


class CreateAccountRequest(BaseModel):
    type: AccountType
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)
    guard_link: str | None = None


class UpdateAccountRequest(BaseModel):
    username: str | None = Field(default=None, min_length=1)
    password: str | None = Field(default=None, min_length=1)
    guard_link: str | None = None


class SweepResult(BaseModel):
    cleared: int


class ApiResponse(BaseModel):
    """Success envelope shared by every endpoint."""

    success: bool = True
    data: Any = None
    message: str | None = None


def account_payload(account: Any, *, include_password: bool = True) -> dict[str, Any]:
    payload = AccountResponse.model_validate(account).model_dump(mode="json")
    if not include_password:
        payload["password"] = None
    return payload


def status_payload(status: AccountStatus) -> dict[str, Any]:
    return status.model_dump(mode="json")
