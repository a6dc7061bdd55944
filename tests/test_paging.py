from unittest.mock import MagicMock

from ldap3.core.exceptions import LDAPSocketReceiveError

from ad_microservice.ad.attributes import get_text
from ad_microservice.ad.paging import PAGE_SIZE, PagedSearch
from conftest import FakeConnection, FakeDirectory, user_entry

BASE = "DC=EXAMPLE,DC=COM"
ALL_USERS = "(&(objectCategory=Person)(objectClass=User)(samaccountname=*))"
ATTRS = ("sAMAccountName", "mail")


def _directory(n: int, paging: bool = True) -> FakeDirectory:
    return FakeDirectory(
        [user_entry(f"user{i:04d}", f"user{i:04d}@example.com", f"User {i:04d}", "User") for i in range(n)],
        paging=paging,
    )


def test_page_size_constant():
    assert PAGE_SIZE == 1000


def test_three_pages_are_concatenated_in_server_order():
    conn = FakeConnection(_directory(2500))
    closer = MagicMock()

    res = PagedSearch(closer=closer).search(conn, BASE, ALL_USERS, ATTRS)

    assert not res.partial
    assert res.pages == 3
    assert len(res.entries) == 2500
    assert [get_text(r, "sAMAccountName") for r in res.entries] == [f"user{i:04d}" for i in range(2500)]
    closer.assert_called_once_with(conn)


def test_cookie_is_passed_verbatim_and_later_pages_are_critical():
    conn = FakeConnection(_directory(2500))

    PagedSearch(closer=MagicMock()).search(conn, BASE, ALL_USERS, ATTRS)

    assert len(conn.calls) == 3
    assert [c["paged_cookie"] for c in conn.calls] == [None, b"cookie-1", b"cookie-2"]
    assert [c["paged_criticality"] for c in conn.calls] == [False, True, True]
    assert all(c["paged_size"] == 1000 for c in conn.calls)
    assert all(c["search_base"] == BASE and c["search_filter"] == ALL_USERS for c in conn.calls)
    assert conn.calls[0]["attributes"] == list(ATTRS)


def test_exact_page_boundary_stops_on_empty_cookie():
    conn = FakeConnection(_directory(2000))

    res = PagedSearch(closer=MagicMock()).search(conn, BASE, ALL_USERS, ATTRS)

    assert len(res.entries) == 2000
    assert res.pages == 2


def test_server_without_paging_support_returns_single_page():
    conn = FakeConnection(_directory(1500, paging=False))

    res = PagedSearch(closer=MagicMock()).search(conn, BASE, ALL_USERS, ATTRS)

    assert not res.partial
    assert res.pages == 1
    assert len(res.entries) == 1500


def test_empty_result():
    conn = FakeConnection(_directory(0))
    closer = MagicMock()

    res = PagedSearch(closer=closer).search(conn, BASE, ALL_USERS, ATTRS)

    assert res.entries == []
    assert not res.partial
    closer.assert_called_once_with(conn)


def test_error_mid_paging_returns_partial_result():
    conn = FakeConnection(_directory(2500), fail_on_page=2)
    closer = MagicMock()

    res = PagedSearch(closer=closer).search(conn, BASE, ALL_USERS, ATTRS)

    assert res.partial
    assert isinstance(res.error, LDAPSocketReceiveError)
    assert len(res.entries) == 1000
    assert res.pages == 1
    closer.assert_called_once_with(conn)


def test_error_on_first_page_returns_empty_partial_result():
    conn = FakeConnection(_directory(10), fail_on_page=1)

    res = PagedSearch(closer=MagicMock()).search(conn, BASE, ALL_USERS, ATTRS)

    assert res.partial
    assert res.entries == []


def test_default_closer_unbinds():
    conn = FakeConnection(_directory(3))

    PagedSearch().search(conn, BASE, ALL_USERS, ATTRS)

    assert conn.closed


def test_smaller_page_size():
    conn = FakeConnection(_directory(25))

    res = PagedSearch(page_size=10, closer=MagicMock()).search(conn, BASE, ALL_USERS, ATTRS)

    assert len(res.entries) == 25
    assert res.pages == 3
