from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import Response

from ..ad.exceptions import LDAPConnectionError, MoreThanOneResult, NoItemFound
from ..ad.models import Computer, ComputerSearchScope
from ..deps import get_computer_service, require_basic_auth
from ..schema import ComputerResponse
from ..services.lookup import LookupService
from ..webapi import render
from .users import PARTIAL_HEADER

router = APIRouter(prefix="/computers", tags=["computers"], dependencies=[Depends(require_basic_auth)])
log = logging.getLogger(__name__)


def _render(request: Request, payload, status_code: int = 200, headers: dict | None = None) -> Response:
    return render(request, payload, item_tag="computer", list_tag="computers", status_code=status_code, headers=headers)


@router.get("/{name}")
def get_one(request: Request, name: str, service: LookupService[Computer] = Depends(get_computer_service)):
    log.debug("Called get_one(%s)", name)
    try:
        computer = service.get(name, ComputerSearchScope.NAME)
    except NoItemFound:
        return _render(request, ComputerResponse(error=f"Computer '{name}' not found"), status.HTTP_404_NOT_FOUND)
    except MoreThanOneResult:
        return _render(
            request,
            ComputerResponse(error=f"Computer name '{name}' is ambiguous"),
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    except LDAPConnectionError:
        return _render(
            request, ComputerResponse(error="Could not connect to Active Directory"), status.HTTP_502_BAD_GATEWAY
        )
    return _render(request, ComputerResponse.from_computer(computer))


@router.get("/")
def get_list(request: Request, service: LookupService[Computer] = Depends(get_computer_service)):
    log.debug("Called get_list()")
    try:
        res = service.lookup_all()
    except LDAPConnectionError:
        return _render(
            request, [ComputerResponse(error="Could not connect to Active Directory")], status.HTTP_502_BAD_GATEWAY
        )
    headers = {PARTIAL_HEADER: "true"} if res.partial else None
    return _render(request, [ComputerResponse.from_computer(c) for c in res.items], headers=headers)
