from __future__ import annotations

from typing import Any, Sequence


class ActiveDirectoryError(Exception):
    """Base class for all directory lookup failures."""


class LDAPConnectionError(ActiveDirectoryError):
    """Could not open or bind an LDAP session to the domain controller."""

    def __init__(self, server: str, reason: str = "") -> None:
        self.server = server
        self.reason = reason
        msg = f"Could not connect to LDAP server {server}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class InvalidSearchScope(ActiveDirectoryError):
    """A search scope of another entity type was passed to a filter builder."""

    def __init__(self, expected: str, got: Any = None) -> None:
        self.expected = expected
        self.got = got
        super().__init__(f"Invalid search scope {got!r}, use {expected} instead.")


class NoItemFound(ActiveDirectoryError):
    def __init__(self, message: str = "No such item found") -> None:
        super().__init__(message)


class MoreThanOneResult(ActiveDirectoryError):
    """A unique lookup matched several entries.

    `items` keeps the whole conflicting set for diagnostics.
    """

    def __init__(self, items: Sequence[Any]) -> None:
        self.items = list(items)
        super().__init__(f"Found more than one result ({len(self.items)}): {self.items}")


class EntityBuildError(ActiveDirectoryError):
    """A directory entry lacks an attribute the entity cannot exist without."""

    def __init__(self, entity: str, attribute: str, dn: str = "") -> None:
        self.entity = entity
        self.attribute = attribute
        self.dn = dn
        super().__init__(f"Cannot build {entity} from '{dn}': required attribute '{attribute}' is missing")


class TimestampParseError(ValueError):
    """Malformed LDAP generalized time string."""
