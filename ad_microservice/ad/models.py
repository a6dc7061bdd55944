from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from ..ad_utils import split_host_port
from .utils import format_timestamp

# userAccountControl bit: ACCOUNTDISABLE
UAC_ACCOUNTDISABLE = 0x2


@dataclass
class ADConfig:
    domain_controller: str
    bind_username: str
    bind_password: str
    search_base: str
    use_ssl: bool = False
    tls_validate: bool = True
    connect_timeout_s: Optional[float] = None
    receive_timeout_s: Optional[float] = None

    @property
    def host(self) -> str:
        return split_host_port(self.domain_controller, self.use_ssl)[0]

    @property
    def port(self) -> int:
        return split_host_port(self.domain_controller, self.use_ssl)[1]

    def __repr__(self) -> str:
        return (
            f"ADConfig(domain_controller={self.domain_controller!r}, bind_username={self.bind_username!r}, "
            f"search_base={self.search_base!r}, use_ssl={self.use_ssl!r}, tls_validate={self.tls_validate!r})"
        )


class SearchScope(Enum):
    """Base of the per-entity search scopes.

    Every entity has its own subclass; a builder only accepts members of its own.
    """


class UserSearchScope(SearchScope):
    USERNAME = "username"
    EMAIL = "email"


class ComputerSearchScope(SearchScope):
    NAME = "name"


def _is_disabled(user_account_control: Optional[int]) -> bool:
    return bool((user_account_control or 0) & UAC_ACCOUNTDISABLE)


@dataclass(frozen=True)
class User:
    username: str
    givenname: Optional[str] = None
    mail: Optional[str] = None
    cn: Optional[str] = None
    sn: Optional[str] = None
    display_name: Optional[str] = None
    user_account_control: Optional[int] = None
    last_logon: Optional[datetime] = None
    when_created: Optional[datetime] = None
    guid: Optional[uuid.UUID] = None

    @property
    def disabled(self) -> bool:
        """Account is disabled if bit 2 of userAccountControl is set."""
        return _is_disabled(self.user_account_control)

    @property
    def last_logon_formatted(self) -> Optional[str]:
        return format_timestamp(self.last_logon)

    @property
    def when_created_formatted(self) -> Optional[str]:
        return format_timestamp(self.when_created)


@dataclass(frozen=True)
class Computer:
    cn: Optional[str] = None
    user_account_control: Optional[int] = None
    logon_count: Optional[int] = None
    operating_system: Optional[str] = None
    operating_system_version: Optional[str] = None
    last_logon: Optional[datetime] = None
    when_created: Optional[datetime] = None
    guid: Optional[uuid.UUID] = None

    @property
    def disabled(self) -> bool:
        return _is_disabled(self.user_account_control)

    @property
    def last_logon_formatted(self) -> Optional[str]:
        return format_timestamp(self.last_logon)

    @property
    def when_created_formatted(self) -> Optional[str]:
        return format_timestamp(self.when_created)
