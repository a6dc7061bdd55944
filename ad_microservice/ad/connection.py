from __future__ import annotations

import logging
import ssl
from typing import Any

from ldap3 import NONE, Connection, Server, Tls
from ldap3.core.exceptions import LDAPException

from .exceptions import LDAPConnectionError
from .models import ADConfig

log = logging.getLogger(__name__)


class ConnectionFactory:
    """Opens authenticated LDAP connections to the configured domain controller.

    One connection per lookup; nothing is pooled and a failed connect is not retried.
    """

    def __init__(self, cfg: ADConfig) -> None:
        self.cfg = cfg

        tls = None
        if cfg.use_ssl:
            tls = Tls(validate=ssl.CERT_REQUIRED if cfg.tls_validate else ssl.CERT_NONE)

        server_kwargs: dict[str, Any] = {
            "host": cfg.host,
            "port": cfg.port,
            "use_ssl": cfg.use_ssl,
            # Schema is not needed: all attributes are read from raw values.
            "get_info": NONE,
            "tls": tls,
        }
        if cfg.connect_timeout_s is not None:
            server_kwargs["connect_timeout"] = float(cfg.connect_timeout_s)
        self.server = Server(**server_kwargs)

    def connect(self) -> Connection:
        """Open and bind a connection.

        Raises LDAPConnectionError for unreachable hosts, TLS failures and
        rejected credentials.
        """
        conn_kwargs: dict[str, Any] = {
            "user": self.cfg.bind_username,
            "password": self.cfg.bind_password,
            "auto_bind": False,
            "raise_exceptions": True,
            "read_only": True,
        }
        if self.cfg.receive_timeout_s is not None:
            conn_kwargs["receive_timeout"] = float(self.cfg.receive_timeout_s)

        conn: Connection | None = None
        try:
            log.debug("Opening LDAP connection to %s as %s...", self.cfg.domain_controller, self.cfg.bind_username)
            conn = Connection(self.server, **conn_kwargs)
            conn.open()
            if not conn.bind():
                res = dict(conn.result or {})
                raise LDAPConnectionError(self.cfg.domain_controller, str(res.get("description") or "bind failed"))
        except LDAPException as e:
            log.error("Initializing LDAP connection to %s failed", self.cfg.domain_controller, exc_info=True)
            if conn is not None:
                close_connection(conn)
            raise LDAPConnectionError(self.cfg.domain_controller, str(e)) from e
        except LDAPConnectionError:
            log.error("LDAP bind to %s was rejected", self.cfg.domain_controller)
            if conn is not None:
                close_connection(conn)
            raise

        log.debug("Opened LDAP connection to %s", self.cfg.domain_controller)
        return conn

    @staticmethod
    def close(conn: Connection) -> None:
        close_connection(conn)


def close_connection(conn: Connection) -> None:
    """Unbind a connection; failures are logged and never raised."""
    try:
        log.debug("Closing LDAP connection...")
        conn.unbind()
    except Exception:
        log.error("Failed closing LDAP connection", exc_info=True)
