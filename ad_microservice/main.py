from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI

from . import __version__
from .ad.builders import ComputerBuilder, UserBuilder
from .ad.connection import ConnectionFactory
from .ad.models import Computer, User
from .ad.paging import PagedSearch
from .env_settings import EnvSettings, get_env
from .log_config import setup_logging
from .routers import computers, index, users
from .services.lookup import LookupService

log = logging.getLogger(__name__)


def create_app(
    env: Optional[EnvSettings] = None,
    *,
    user_service: Optional[LookupService[User]] = None,
    computer_service: Optional[LookupService[Computer]] = None,
) -> FastAPI:
    """Composition root: one connection factory, one paged search, one lookup service per entity."""
    env = env or get_env()

    if user_service is None or computer_service is None:
        cfg = env.ad_config()
        log.info("Using domain controller %s, search base %s", cfg.domain_controller, cfg.search_base)
        connections = ConnectionFactory(cfg)
        paged_search = PagedSearch()
        if user_service is None:
            user_service = LookupService(UserBuilder(), connections, cfg.search_base, paged_search)
        if computer_service is None:
            computer_service = LookupService(ComputerBuilder(), connections, cfg.search_base, paged_search)

    app = FastAPI(
        title="ActiveDirectory Microservice",
        version=__version__,
        description="Read-only access to users and computers of a Microsoft Active Directory",
    )
    app.state.env = env
    app.state.user_service = user_service
    app.state.computer_service = computer_service

    app.include_router(index.router)
    app.include_router(users.router)
    app.include_router(computers.router)
    return app


def run() -> None:
    """Console entry point: configure logging and serve with uvicorn."""
    import uvicorn

    env = get_env()
    setup_logging(level=env.log_level, log_dir=env.log_dir, retention_days=env.log_retention_days)
    log.info("Starting up...")
    uvicorn.run(create_app(env), host=env.http_host, port=env.http_port, log_config=None)


if __name__ == "__main__":
    run()
