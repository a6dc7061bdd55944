from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import Response

from ..ad.exceptions import LDAPConnectionError, MoreThanOneResult, NoItemFound
from ..ad.models import User, UserSearchScope
from ..deps import get_user_service, require_basic_auth
from ..schema import UserResponse
from ..services.lookup import LookupService
from ..webapi import render

router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(require_basic_auth)])
log = logging.getLogger(__name__)

PARTIAL_HEADER = "X-Partial-Result"


def _render(request: Request, payload, status_code: int = 200, headers: dict | None = None) -> Response:
    return render(request, payload, item_tag="user", list_tag="users", status_code=status_code, headers=headers)


@router.get("/{username}")
def get_one(request: Request, username: str, service: LookupService[User] = Depends(get_user_service)):
    log.debug("Called get_one(%s)", username)
    try:
        user = service.get(username, UserSearchScope.USERNAME)
    except NoItemFound:
        return _render(request, UserResponse(error=f"User '{username}' not found"), status.HTTP_404_NOT_FOUND)
    except MoreThanOneResult:
        return _render(
            request, UserResponse(error=f"Username '{username}' is ambiguous"), status.HTTP_500_INTERNAL_SERVER_ERROR
        )
    except LDAPConnectionError:
        return _render(request, UserResponse(error="Could not connect to Active Directory"), status.HTTP_502_BAD_GATEWAY)
    return _render(request, UserResponse.from_user(user))


@router.get("/")
def get_list(request: Request, service: LookupService[User] = Depends(get_user_service)):
    log.debug("Called get_list()")
    try:
        res = service.lookup_all()
    except LDAPConnectionError:
        return _render(
            request, [UserResponse(error="Could not connect to Active Directory")], status.HTTP_502_BAD_GATEWAY
        )
    headers = {PARTIAL_HEADER: "true"} if res.partial else None
    return _render(request, [UserResponse.from_user(u) for u in res.items], headers=headers)
