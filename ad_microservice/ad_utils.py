from __future__ import annotations

import ipaddress
import logging

log = logging.getLogger(__name__)

LDAP_PORT = 389
LDAPS_PORT = 636


def get_base_dn(domain: str) -> str:
    """Build a search base from a DNS domain (www.debuglevel.de -> DC=WWW,DC=DEBUGLEVEL,DC=DE)."""
    domain = (domain or "").strip().strip(".")
    if not domain:
        return ""
    parts = [p for p in domain.upper().split(".") if p]
    dn = ",".join([f"DC={p}" for p in parts])
    log.debug("Built base DN for domain '%s': '%s'", domain, dn)
    return dn


def split_host_port(server: str, use_ssl: bool = False) -> tuple[str, int]:
    """Split 'host[:port]' into (host, port); the port defaults to 389/636.

    Bracketed IPv6 literals ('[::1]:389') and bare IPv6 addresses are supported.
    """
    s = (server or "").strip()
    if not s:
        raise ValueError("empty domain controller address")

    default_port = LDAPS_PORT if use_ssl else LDAP_PORT

    if s.startswith("["):
        host, _, rest = s[1:].partition("]")
        port = rest[1:] if rest.startswith(":") else ""
        return host, int(port) if port else default_port

    # A bare IPv6 address contains several colons and no port.
    try:
        ipaddress.IPv6Address(s)
        return s, default_port
    except ValueError:
        pass

    host, sep, port = s.rpartition(":")
    if not sep:
        return s, default_port
    if not port.isdigit():
        raise ValueError(f"invalid port in domain controller address '{server}'")
    return host, int(port)
