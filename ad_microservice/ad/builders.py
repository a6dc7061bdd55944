"""Per-entity knowledge: filters, requested attributes and entity assembly."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Generic, Optional, TypeVar

from .attributes import RawResult, get_binary, get_int, get_text
from .exceptions import EntityBuildError, InvalidSearchScope
from .models import Computer, ComputerSearchScope, SearchScope, User, UserSearchScope
from .utils import decode_filetime, decode_generalized_time, decode_guid, escape_ldap_filter_value

log = logging.getLogger(__name__)

T = TypeVar("T")


def last_logon(result: RawResult) -> Optional[datetime]:
    """Latest of lastLogon (per DC) and lastLogonTimestamp (replicated); 0 is absent."""
    values = []
    for name in ("lastLogon", "lastLogonTimestamp"):
        raw = get_int(result, name)
        if raw is None:
            continue
        dt = decode_filetime(raw)
        if dt is not None:
            values.append(dt)
    return max(values) if values else None


def generalized_time(result: RawResult, name: str) -> Optional[datetime]:
    raw = get_text(result, name)
    if raw is None:
        return None
    return decode_generalized_time(raw)


class EntityBuilder(Generic[T]):
    """Filters and attribute list of one entity type, plus raw entry -> entity mapping.

    Subclasses set the class attributes and implement `build`.
    """

    entity_name: str = ""
    base_filter: str = ""
    attributes: tuple[str, ...] = ()
    scope_type: type[SearchScope] = SearchScope
    # scope member -> attribute compared against the search value
    scope_attributes: dict[SearchScope, str] = {}
    default_scope: SearchScope

    def _scope_attribute(self, scope: SearchScope) -> str:
        if not isinstance(scope, self.scope_type) or scope not in self.scope_attributes:
            raise InvalidSearchScope(self.scope_type.__name__, scope)
        return self.scope_attributes[scope]

    def build_filter(self, value: str, scope: SearchScope) -> str:
        attr = self._scope_attribute(scope)
        flt = f"(&{self.base_filter}({attr}={escape_ldap_filter_value(value)}))"
        log.debug("Built filter for searching %s by %s for '%s': %s", self.entity_name, scope.name, value, flt)
        return flt

    def build_filter_all(self) -> str:
        """Presence filter on the default scope attribute: every entity of this type."""
        attr = self._scope_attribute(self.default_scope)
        return f"(&{self.base_filter}({attr}=*))"

    def build(self, result: RawResult) -> T:
        raise NotImplementedError


class UserBuilder(EntityBuilder[User]):
    entity_name = "user"
    base_filter = "(objectCategory=Person)(objectClass=User)"
    attributes = (
        "sAMAccountName",
        "givenName",
        "sn",
        "cn",
        "mail",
        "displayName",
        "userAccountControl",
        "lastLogon",
        "lastLogonTimestamp",
        "whenCreated",
        "objectGUID",
    )
    scope_type = UserSearchScope
    scope_attributes = {
        UserSearchScope.USERNAME: "samaccountname",
        UserSearchScope.EMAIL: "mail",
    }
    default_scope = UserSearchScope.USERNAME

    def build(self, result: RawResult) -> User:
        username = get_text(result, "sAMAccountName")
        if username is None:
            raise EntityBuildError(self.entity_name, "sAMAccountName", result.dn)

        return User(
            username=username,
            givenname=get_text(result, "givenName"),
            mail=get_text(result, "mail"),
            cn=get_text(result, "cn"),
            sn=get_text(result, "sn"),
            display_name=get_text(result, "displayName"),
            user_account_control=get_int(result, "userAccountControl"),
            last_logon=last_logon(result),
            when_created=generalized_time(result, "whenCreated"),
            guid=decode_guid(get_binary(result, "objectGUID")),
        )


class ComputerBuilder(EntityBuilder[Computer]):
    entity_name = "computer"
    base_filter = "(objectCategory=Computer)(objectClass=Computer)"
    attributes = (
        "cn",
        "userAccountControl",
        "lastLogon",
        "lastLogonTimestamp",
        "whenCreated",
        "logonCount",
        "operatingSystem",
        "operatingSystemVersion",
        "objectGUID",
    )
    scope_type = ComputerSearchScope
    scope_attributes = {
        ComputerSearchScope.NAME: "name",
    }
    default_scope = ComputerSearchScope.NAME

    def build(self, result: RawResult) -> Computer:
        return Computer(
            cn=get_text(result, "cn"),
            user_account_control=get_int(result, "userAccountControl"),
            logon_count=get_int(result, "logonCount"),
            operating_system=get_text(result, "operatingSystem"),
            operating_system_version=get_text(result, "operatingSystemVersion"),
            last_logon=last_logon(result),
            when_created=generalized_time(result, "whenCreated"),
            guid=decode_guid(get_binary(result, "objectGUID")),
        )
