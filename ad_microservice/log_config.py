"""Logging setup.

Console output always; with a log directory also a daily rotated file
(`TimedRotatingFileHandler`, midnight, `retention_days` backups).
"""
from __future__ import annotations

import logging
import os
from logging.handlers import TimedRotatingFileHandler

_LOG_FORMAT = "%(asctime)s [%(levelname)-8s] %(name)s: %(message)s"
_LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Handlers installed by us, removed again on reconfiguration.
_installed: list[logging.Handler] = []


def setup_logging(level: str = "INFO", log_dir: str = "", retention_days: int = 30) -> None:
    level_str = (level or "INFO").strip().upper()
    if level_str not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        level_str = "INFO"
    log_level = getattr(logging, level_str, logging.INFO)
    retention_days = max(1, min(365, int(retention_days or 30)))

    root = logging.getLogger()
    for h in _installed:
        root.removeHandler(h)
        h.close()
    _installed.clear()

    formatter = logging.Formatter(_LOG_FORMAT, datefmt=_LOG_DATE_FORMAT)

    ch = logging.StreamHandler()
    ch.setLevel(log_level)
    ch.setFormatter(formatter)
    _installed.append(ch)

    log_dir = (log_dir or "").strip()
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        fh = TimedRotatingFileHandler(
            os.path.join(log_dir, "ad_microservice.log"),
            when="midnight",
            interval=1,
            backupCount=retention_days,
            encoding="utf-8",
            utc=True,
        )
        fh.suffix = "%Y-%m-%d"
        fh.setLevel(log_level)
        fh.setFormatter(formatter)
        _installed.append(fh)

    root.setLevel(log_level)
    for h in _installed:
        root.addHandler(h)

    # ldap3 and access logs are too chatty below WARNING
    logging.getLogger("uvicorn.access").setLevel(max(log_level, logging.WARNING))
    logging.getLogger("ldap3").setLevel(max(log_level, logging.WARNING))

    logging.getLogger("ad_microservice").info(
        "Logging configured: level=%s, file=%s", level_str, log_dir or "-",
    )
