"""FastAPI dependencies resolving services and the requester."""

from typing import Annotated

from fastapi import Depends, Request

from game_saver.auth import Requester
from game_saver.db.repositories import AccountRepository
from game_saver.exceptions import AuthenticationError, ForbiddenError
from game_saver.leasing import LeaseService


def get_lease_service(request: Request) -> LeaseService:
    service: LeaseService = request.app.state.lease_service
    return service


def get_account_repository(request: Request) -> AccountRepository:
    repository: AccountRepository = request.app.state.account_repository
    return repository


def get_requester(request: Request) -> Requester:
    """Requester stored by `SessionAuthMiddleware`.

    Raises:
        AuthenticationError: If no valid session accompanied the request
    """
    requester: Requester | None = getattr(request.state, "requester", None)
    if requester is None:
        raise AuthenticationError("Unauthorized: login required")
    return requester


def require_admin(requester: Annotated[Requester, Depends(get_requester)]) -> Requester:
    if not requester.is_admin:
        raise ForbiddenError("Forbidden: admin access required")
    return requester


AccountRepositoryDep = Annotated[AccountRepository, Depends(get_account_repository)]
LeaseServiceDep = Annotated[LeaseService, Depends(get_lease_service)]
RequesterDep = Annotated[Requester, Depends(get_requester)]
AdminDep = Annotated[Requester, Depends(require_admin)]
