"""Raw directory entries and typed access to their attributes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

RawValue = Union[bytes, str]


def _as_list(v: Any) -> list:
    if v is None:
        return []
    if isinstance(v, (list, tuple)):
        return list(v)
    return [v]


@dataclass
class RawResult:
    """One directory entry: its DN plus raw attribute values.

    Attribute names are compared case-insensitively. Values keep the form the
    server sent (bytes from ldap3 `raw_attributes`); only the first value of a
    multi-valued attribute is ever read.
    """

    dn: str
    attributes: dict[str, list[RawValue]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.attributes = {str(k).lower(): _as_list(v) for k, v in (self.attributes or {}).items()}

    @classmethod
    def from_response(cls, entry: Mapping[str, Any]) -> "RawResult":
        """Build from one ldap3 `searchResEntry` response item."""
        raw = entry.get("raw_attributes") or {}
        return cls(dn=str(entry.get("dn") or ""), attributes=dict(raw))

    def first(self, name: str) -> Optional[RawValue]:
        values = self.attributes.get(name.lower())
        if not values:
            return None
        return values[0]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and bool(self.attributes.get(name.lower()))


def get_text(result: RawResult, name: str) -> Optional[str]:
    """First value of attribute `name` as text, None if the entry lacks it."""
    v = result.first(name)
    if v is None:
        return None
    if isinstance(v, (bytes, bytearray)):
        return bytes(v).decode("utf-8", errors="replace")
    return str(v)


def get_binary(result: RawResult, name: str) -> Optional[bytes]:
    """First value of attribute `name` as raw bytes (e.g. objectGUID)."""
    v = result.first(name)
    if v is None:
        return None
    if isinstance(v, (bytes, bytearray)):
        return bytes(v)
    return str(v).encode("utf-8")


def get_int(result: RawResult, name: str) -> Optional[int]:
    """First value parsed as int; None when missing or not a number."""
    s = get_text(result, name)
    if s is None:
        return None
    try:
        return int(s.strip())
    except ValueError:
        return None
