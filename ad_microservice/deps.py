from __future__ import annotations

import logging
import secrets

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from .ad.models import Computer, User
from .services.lookup import LookupService

log = logging.getLogger(__name__)

_basic = HTTPBasic(realm="ad-microservice")


def require_basic_auth(request: Request, credentials: HTTPBasicCredentials = Depends(_basic)) -> str:
    """Check HTTP Basic credentials against the single configured account.

    These are the service's own credentials, not directory credentials.
    """
    env = request.app.state.env
    user_ok = secrets.compare_digest(credentials.username.encode("utf-8"), env.security_username.encode("utf-8"))
    pass_ok = secrets.compare_digest(credentials.password.encode("utf-8"), env.security_password.encode("utf-8"))
    if not (user_ok and pass_ok):
        log.debug("Credentials are invalid for '%s'", credentials.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Basic"},
        )
    return credentials.username


def get_user_service(request: Request) -> LookupService[User]:
    return request.app.state.user_service


def get_computer_service(request: Request) -> LookupService[Computer]:
    return request.app.state.computer_service
