from __future__ import annotations

from typing import Any, Optional

import pytest
from ldap3.core.exceptions import LDAPSocketReceiveError

from ad_microservice.ad.paging import PAGED_RESULTS_OID


# ---------- filter evaluation ----------

def _unescape(value: str) -> str:
    out = []
    i = 0
    while i < len(value):
        if value[i] == "\\":
            out.append(chr(int(value[i + 1:i + 3], 16)))
            i += 3
            continue
        out.append(value[i])
        i += 1
    return "".join(out)


def _parse(flt: str, i: int = 0) -> tuple[Any, int]:
    assert flt[i] == "(", f"bad filter at {i}: {flt}"
    i += 1
    if flt[i] == "&":
        i += 1
        children = []
        while flt[i] == "(":
            child, i = _parse(flt, i)
            children.append(child)
        assert flt[i] == ")"
        return ("and", children), i + 1
    end = flt.index(")", i)
    attr, _, value = flt[i:end].partition("=")
    if value == "*":
        return ("present", attr.lower()), end + 1
    return ("eq", attr.lower(), _unescape(value)), end + 1


def _text(v: Any) -> str:
    return v.decode("utf-8", errors="replace") if isinstance(v, bytes) else str(v)


def _matches(node: Any, entry: dict[str, list]) -> bool:
    kind = node[0]
    if kind == "and":
        return all(_matches(c, entry) for c in node[1])
    values = entry.get(node[1], [])
    if kind == "present":
        return bool(values)
    return any(_text(v).lower() == node[2].lower() for v in values)


# ---------- fake directory ----------

class FakeDirectory:
    """In-memory directory that answers simple AND/equality/presence filters page by page."""

    def __init__(self, entries: Optional[list[tuple[str, dict[str, Any]]]] = None, paging: bool = True) -> None:
        self.entries: list[tuple[str, dict[str, list]]] = []
        self.paging = paging
        for dn, attrs in entries or []:
            self.add(dn, attrs)

    def add(self, dn: str, attrs: dict[str, Any]) -> None:
        norm = {}
        for k, v in attrs.items():
            vals = v if isinstance(v, list) else [v]
            norm[k] = [x if isinstance(x, bytes) else str(x).encode("utf-8") for x in vals]
        self.entries.append((dn, norm))

    def matching(self, flt: str) -> list[tuple[str, dict[str, list]]]:
        node, _ = _parse(flt)
        out = []
        for dn, attrs in self.entries:
            lowered = {k.lower(): v for k, v in attrs.items()}
            if _matches(node, lowered):
                out.append((dn, attrs))
        return out


class FakeConnection:
    """Stands in for an ldap3 Connection: records search calls, serves paged responses."""

    def __init__(self, directory: FakeDirectory, fail_on_page: Optional[int] = None) -> None:
        self.directory = directory
        self.fail_on_page = fail_on_page
        self.calls: list[dict[str, Any]] = []
        self.response: list[dict[str, Any]] = []
        self.result: dict[str, Any] = {}
        self.closed = False
        self._cookies: dict[bytes, int] = {}

    def search(self, search_base, search_filter, search_scope=None, attributes=None,
               paged_size=None, paged_cookie=None, paged_criticality=False, **kwargs):
        self.calls.append({
            "search_base": search_base,
            "search_filter": search_filter,
            "attributes": list(attributes or []),
            "paged_size": paged_size,
            "paged_cookie": paged_cookie,
            "paged_criticality": paged_criticality,
        })
        if self.fail_on_page is not None and len(self.calls) == self.fail_on_page:
            raise LDAPSocketReceiveError("connection reset by peer")

        found = self.directory.matching(search_filter)
        if not self.directory.paging or not paged_size:
            start, end = 0, len(found)
        else:
            start = self._cookies[paged_cookie] if paged_cookie else 0
            end = min(start + paged_size, len(found))

        wanted = {a.lower() for a in attributes or []}
        self.response = [
            {
                "type": "searchResEntry",
                "dn": dn,
                "raw_attributes": {k: v for k, v in attrs.items() if k.lower() in wanted},
            }
            for dn, attrs in found[start:end]
        ]
        # referrals are mixed into real responses and must be skipped
        self.response.append({"type": "searchResRef", "uri": ["ldap://other.example.com/DC=OTHER"]})

        self.result = {"result": 0, "description": "success"}
        if self.directory.paging and paged_size:
            cookie = b""
            if end < len(found):
                cookie = f"cookie-{len(self.calls)}".encode("ascii")
                self._cookies[cookie] = end
            self.result["controls"] = {
                PAGED_RESULTS_OID: {"description": "Paged Results", "criticality": False,
                                    "value": {"size": 0, "cookie": cookie}},
            }
        return bool(self.response)

    def unbind(self):
        self.closed = True
        return True


class FakeConnectionFactory:
    def __init__(self, directory: FakeDirectory, fail_on_page: Optional[int] = None) -> None:
        self.directory = directory
        self.fail_on_page = fail_on_page
        self.connections: list[FakeConnection] = []

    def connect(self) -> FakeConnection:
        conn = FakeConnection(self.directory, self.fail_on_page)
        self.connections.append(conn)
        return conn


# ---------- data ----------

def user_entry(sam: str, mail: str, cn: str, given: str, **extra: Any) -> tuple[str, dict[str, Any]]:
    attrs = {
        "objectCategory": "Person",
        "objectClass": ["top", "person", "organizationalPerson", "user"],
        "sAMAccountName": sam,
        "mail": mail,
        "cn": cn,
        "givenName": given,
    }
    attrs.update(extra)
    return f"CN={cn},OU=Users,DC=EXAMPLE,DC=COM", attrs


def computer_entry(cn: str, **extra: Any) -> tuple[str, dict[str, Any]]:
    attrs = {
        "objectCategory": "Computer",
        "objectClass": ["top", "computer"],
        "cn": cn,
        "name": cn,
    }
    attrs.update(extra)
    return f"CN={cn},OU=Computers,DC=EXAMPLE,DC=COM", attrs


@pytest.fixture(autouse=True)
def _utc(monkeypatch):
    monkeypatch.setenv("TZ", "UTC")


@pytest.fixture
def directory() -> FakeDirectory:
    return FakeDirectory([
        user_entry("maxmustermann", "max@mustermann.de", "Max Mustermann", "Max"),
        user_entry("alexaloah", "alex@aloah.de", "Alex Aloah", "Alex"),
    ])
