"""Per-game account routes."""

import structlog
from fastapi import APIRouter, status

from game_saver.api.dependencies import (
    AccountRepositoryDep,
    AdminDep,
    LeaseServiceDep,
    RequesterDep,
)
from game_saver.api.schemas import (
    ApiResponse,
    CreateAccountRequest,
    account_payload,
    status_payload,
)


logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/games", tags=["games"])


@router.get("/{game_id}/accounts", response_model=ApiResponse)
async def list_game_accounts(
    game_id: str, service: LeaseServiceDep, requester: RequesterDep
) -> ApiResponse:
    """Availability of every shared account of a game."""
    statuses = await service.list_statuses_for_game(game_id)
    return ApiResponse(data=[status_payload(s) for s in statuses])


@router.post(
    "/{game_id}/accounts",
    response_model=ApiResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_game_account(
    game_id: str,
    body: CreateAccountRequest,
    repository: AccountRepositoryDep,
    admin: AdminDep,
) -> ApiResponse:
    """Register a shared account for a game.

    Raises:
        DuplicateAccountError 409: Username already registered
    """
    account = await repository.create(
        game_id=game_id,
        type=body.type,
        username=body.username,
        secret=body.password,
        guard_link=body.guard_link,
    )
    logger.info(
        "account_created",
        account_id=account.id,
        game_id=game_id,
        type=account.type.value,
        admin_id=admin.user_id,
    )
    return ApiResponse(
        data=account_payload(account), message="Account created successfully"
    )
