"""Active Directory (LDAP) query core.

Public API:
    - ADConfig, User, Computer, UserSearchScope, ComputerSearchScope
    - ConnectionFactory
    - PagedSearch, PagedSearchResult
    - UserBuilder, ComputerBuilder
"""

from .builders import ComputerBuilder, EntityBuilder, UserBuilder
from .connection import ConnectionFactory, close_connection
from .exceptions import (
    ActiveDirectoryError,
    EntityBuildError,
    InvalidSearchScope,
    LDAPConnectionError,
    MoreThanOneResult,
    NoItemFound,
    TimestampParseError,
)
from .models import ADConfig, Computer, ComputerSearchScope, SearchScope, User, UserSearchScope
from .paging import PAGE_SIZE, PagedSearch, PagedSearchResult

__all__ = [
    "ADConfig",
    "User",
    "Computer",
    "SearchScope",
    "UserSearchScope",
    "ComputerSearchScope",
    "ConnectionFactory",
    "close_connection",
    "PAGE_SIZE",
    "PagedSearch",
    "PagedSearchResult",
    "EntityBuilder",
    "UserBuilder",
    "ComputerBuilder",
    "ActiveDirectoryError",
    "LDAPConnectionError",
    "InvalidSearchScope",
    "NoItemFound",
    "MoreThanOneResult",
    "EntityBuildError",
    "TimestampParseError",
]
