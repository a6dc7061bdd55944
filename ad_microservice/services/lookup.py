from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Generic, Optional, TypeVar

from ..ad.builders import EntityBuilder
from ..ad.connection import ConnectionFactory
from ..ad.exceptions import MoreThanOneResult, NoItemFound
from ..ad.models import SearchScope
from ..ad.paging import PagedSearch

log = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class LookupResult(Generic[T]):
    """Entities of one query plus whether paging stopped early."""

    items: list[T] = field(default_factory=list)
    partial: bool = False
    error: Optional[BaseException] = None


class LookupService(Generic[T]):
    """Filter + paged search + builder for one entity type.

    Each call opens its own connection, so one instance is safe to share
    between concurrent requests.
    """

    def __init__(
        self,
        builder: EntityBuilder[T],
        connections: ConnectionFactory,
        search_base: str,
        paged_search: Optional[PagedSearch] = None,
    ) -> None:
        self.builder = builder
        self.connections = connections
        self.search_base = search_base
        self.paged_search = paged_search or PagedSearch()

    @property
    def entity_name(self) -> str:
        return self.builder.entity_name

    def _query(self, search_filter: str) -> LookupResult[T]:
        conn = self.connections.connect()
        res = self.paged_search.search(conn, self.search_base, search_filter, self.builder.attributes)
        items = [self.builder.build(raw) for raw in res.entries]
        if res.partial:
            log.warning(
                "Returning partial %s result for %s: %d entries before error '%s'",
                self.entity_name, search_filter, len(items), res.error,
            )
        return LookupResult(items=items, partial=res.partial, error=res.error)

    def lookup_all(self) -> LookupResult[T]:
        log.debug("Getting all %ss...", self.entity_name)
        return self._query(self.builder.build_filter_all())

    def lookup(self, value: str, scope: SearchScope) -> LookupResult[T]:
        log.debug("Getting all %ss with %s='%s'...", self.entity_name, scope.name, value)
        return self._query(self.builder.build_filter(value, scope))

    def get_all(self) -> list[T]:
        items = self.lookup_all().items
        log.debug("Got %d %ss", len(items), self.entity_name)
        return items

    def get_all_by(self, value: str, scope: SearchScope) -> list[T]:
        items = self.lookup(value, scope).items
        log.debug("Got %d %ss with %s='%s'", len(items), self.entity_name, scope.name, value)
        return items

    def get(self, value: str, scope: SearchScope) -> T:
        """Exactly one entity, else NoItemFound / MoreThanOneResult."""
        items = self.get_all_by(value, scope)
        if not items:
            raise NoItemFound(f"No {self.entity_name} found with {scope.name}='{value}'")
        if len(items) > 1:
            raise MoreThanOneResult(items)

        item = items[0]
        log.debug("Got %s %s='%s': %s", self.entity_name, scope.name, value, item)
        return item
