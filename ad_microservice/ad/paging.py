"""Paged LDAP search (RFC 2696 simple paged results control)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence

from ldap3 import SUBTREE, Connection
from ldap3.core.exceptions import LDAPException

from .attributes import RawResult
from .connection import close_connection

log = logging.getLogger(__name__)

PAGE_SIZE = 1000
PAGED_RESULTS_OID = "1.2.840.113556.1.4.319"


@dataclass
class PagedSearchResult:
    """Outcome of a paged search.

    `error` is set when paging stopped on a network/protocol/server error;
    `entries` then hold whatever pages arrived before it.
    """

    entries: list[RawResult] = field(default_factory=list)
    pages: int = 0
    error: Optional[BaseException] = None

    @property
    def partial(self) -> bool:
        return self.error is not None


def _response_cookie(result: dict[str, Any] | None) -> Optional[bytes]:
    controls = (result or {}).get("controls") or {}
    page_control = controls.get(PAGED_RESULTS_OID) or {}
    return (page_control.get("value") or {}).get("cookie") or None


class PagedSearch:
    """Runs one search over an open connection, page by page, and closes it."""

    def __init__(
        self,
        page_size: int = PAGE_SIZE,
        closer: Callable[[Connection], None] = close_connection,
    ) -> None:
        self.page_size = int(page_size)
        self._close = closer

    def search(
        self,
        conn: Connection,
        search_base: str,
        search_filter: str,
        attributes: Sequence[str],
    ) -> PagedSearchResult:
        out = PagedSearchResult()
        cookie: Optional[bytes] = None
        try:
            while True:
                # The first request tolerates servers without paging support;
                # once a cookie was issued the server must keep honouring it.
                critical = cookie is not None
                log.debug(
                    "Fetching page %d (criticality=%s, cookie=%s) for %s",
                    out.pages + 1, critical, "yes" if cookie else "no", search_filter,
                )
                conn.search(
                    search_base=search_base,
                    search_filter=search_filter,
                    search_scope=SUBTREE,
                    attributes=list(attributes),
                    paged_size=self.page_size,
                    paged_cookie=cookie,
                    paged_criticality=critical,
                )
                out.pages += 1

                n = 0
                for entry in conn.response or []:
                    if entry.get("type") != "searchResEntry":
                        continue
                    out.entries.append(RawResult.from_response(entry))
                    n += 1
                log.debug("Page %d: got %d entries", out.pages, n)

                cookie = _response_cookie(conn.result)
                if not cookie:
                    break
        except (LDAPException, OSError) as e:
            log.warning(
                "Paged search for %s failed on page %d, returning %d entries collected so far: %s",
                search_filter, out.pages + 1, len(out.entries), e,
                exc_info=True,
            )
            out.error = e
        finally:
            self._close(conn)

        log.debug("Paged search for %s done: %d entries in %d pages", search_filter, len(out.entries), out.pages)
        return out
