"""Account lease and management routes.

Endpoints:
    GET    /api/accounts/{account_id}          - Account record
    GET    /api/accounts/{account_id}/status   - Availability view
    POST   /api/accounts/{account_id}/assign   - Lease an online account
    POST   /api/accounts/{account_id}/release  - End the caller's lease
    PATCH  /api/accounts/{account_id}          - Update credentials (admin)
    DELETE /api/accounts/{account_id}          - Delete account (admin)
"""

import structlog
from fastapi import APIRouter

from game_saver.api.dependencies import (
    AccountRepositoryDep,
    AdminDep,
    LeaseServiceDep,
    RequesterDep,
)
from game_saver.api.schemas import (
    ApiResponse,
    AssignRequest,
    UpdateAccountRequest,
    account_payload,
    status_payload,
)
from game_saver.exceptions import AccountNotFoundError


logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/accounts", tags=["accounts"])


@router.get("/{account_id}", response_model=ApiResponse)
async def get_account(
    account_id: str, service: LeaseServiceDep, requester: RequesterDep
) -> ApiResponse:
    """Account record; an online password is shown only to its holder or an admin."""
    account = await service.get_account(account_id)
    show_password = (
        requester.is_admin
        or not account.is_online
        or service.holds_lease(account, requester.user_id)
    )
    return ApiResponse(data=account_payload(account, include_password=show_password))


@router.get("/{account_id}/status", response_model=ApiResponse)
async def get_account_status(
    account_id: str, service: LeaseServiceDep, requester: RequesterDep
) -> ApiResponse:
    status = await service.status(account_id)
    return ApiResponse(data=status_payload(status))


@router.post("/{account_id}/assign", response_model=ApiResponse)
async def assign_account(
    account_id: str,
    body: AssignRequest,
    service: LeaseServiceDep,
    requester: RequesterDep,
) -> ApiResponse:
    """Lease an online account to the caller for `hours` hours.

    Raises:
        InvalidArgumentError 400: Hours outside the allowed range, or offline account
        AccountNotFoundError 404: Unknown account
        LeaseConflictError 409: Account currently in use
    """
    account = await service.assign(account_id, requester.user_id, body.hours)
    return ApiResponse(
        data=account_payload(account),
        message=f"Account assigned for {body.hours} hour(s)",
    )


@router.post("/{account_id}/release", response_model=ApiResponse)
async def release_account(
    account_id: str, service: LeaseServiceDep, requester: RequesterDep
) -> ApiResponse:
    """End the caller's lease.

    Raises:
        ForbiddenError 403: The caller does not hold a live lease on the account
    """
    account = await service.release(account_id, requester.user_id)
    return ApiResponse(
        data=account_payload(account), message="Account released successfully"
    )


@router.patch("/{account_id}", response_model=ApiResponse)
async def update_account(
    account_id: str,
    body: UpdateAccountRequest,
    repository: AccountRepositoryDep,
    admin: AdminDep,
) -> ApiResponse:
    account = await repository.update_details(
        account_id,
        username=body.username,
        secret=body.password,
        guard_link=body.guard_link,
    )
    if account is None:
        raise AccountNotFoundError(account_id)
    logger.info("account_updated", account_id=account_id, admin_id=admin.user_id)
    return ApiResponse(
        data=account_payload(account), message="Account updated successfully"
    )


@router.delete("/{account_id}", response_model=ApiResponse)
async def delete_account(
    account_id: str, repository: AccountRepositoryDep, admin: AdminDep
) -> ApiResponse:
    if not await repository.delete(account_id):
        raise AccountNotFoundError(account_id)
    logger.info("account_deleted", account_id=account_id, admin_id=admin.user_id)
    return ApiResponse(message="Account deleted successfully")
