"""Per-user lease routes."""

from fastapi import APIRouter

from game_saver.api.dependencies import LeaseServiceDep, RequesterDep
from game_saver.api.schemas import ApiResponse, account_payload
from game_saver.exceptions import ForbiddenError


router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/{user_id}/active-accounts", response_model=ApiResponse)
async def list_active_accounts(
    user_id: str, service: LeaseServiceDep, requester: RequesterDep
) -> ApiResponse:
    """Accounts the user currently holds. Users only see their own."""
    if requester.user_id != user_id and not requester.is_admin:
        raise ForbiddenError("Forbidden: You can only view your own active accounts")
    accounts = await service.list_active_for_user(user_id)
    return ApiResponse(data=[account_payload(a) for a in accounts])
