"""Admin-only account routes."""

import structlog
from fastapi import APIRouter

from game_saver.api.dependencies import AccountRepositoryDep, AdminDep, LeaseServiceDep
from game_saver.api.schemas import ApiResponse, SweepResult, account_payload
from game_saver.db.models import AccountType


logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/accounts", response_model=ApiResponse)
async def list_all_accounts(
    repository: AccountRepositoryDep,
    admin: AdminDep,
    type: AccountType | None = None,
) -> ApiResponse:
    accounts = await repository.list_all(type=type)
    return ApiResponse(data=[account_payload(a) for a in accounts])


@router.post("/accounts/sweep", response_model=ApiResponse)
async def sweep_expired_leases(
    service: LeaseServiceDep, admin: AdminDep
) -> ApiResponse:
    """Clear stored lease columns of expired leases."""
    cleared = await service.sweep_expired()
    logger.info("lease_sweep_requested", admin_id=admin.user_id, cleared=cleared)
    return ApiResponse(data=SweepResult(cleared=cleared).model_dump())
