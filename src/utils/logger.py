"""Logging for the shop suites, scripts and load runs.

Everything logs under the ``shopqa`` tree. ``configure_logging`` reads:

- ``LOG_LEVEL`` / ``LOG_FORMAT`` / ``LOG_DATE_FORMAT``
- ``LOG_FILE`` (truthy enables a rotating file under ``LOG_DIR``/``LOG_FILE_NAME``,
  sized by ``LOG_MAX_BYTES`` and ``LOG_BACKUP_COUNT``)
- ``LOG_QUIET`` (comma separated third-party loggers held at WARNING)
"""
from __future__ import annotations

import logging
import os
from logging import Handler, Logger
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final

ROOT_NAME: Final[str] = "shopqa"
DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
DEFAULT_QUIET: Final[str] = "urllib3,faker"
_configured = False


def _level(name: str) -> int:
    value = logging.getLevelName(name.strip().upper())
    return value if isinstance(value, int) else logging.INFO


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "")
    return int(raw) if raw.strip().isdigit() else default


def _handlers() -> list[Handler]:
    handlers: list[Handler] = [logging.StreamHandler()]
    if os.getenv("LOG_FILE", "false").lower() in {"1", "true", "yes"}:
        log_dir = Path(os.getenv("LOG_DIR", "logs"))
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                log_dir / os.getenv("LOG_FILE_NAME", "shopqa.log"),
                maxBytes=_env_int("LOG_MAX_BYTES", 10 * 1024 * 1024),
                backupCount=_env_int("LOG_BACKUP_COUNT", 3),
                encoding="utf-8",
            )
        )
    return handlers


def configure_logging(force: bool = False) -> Logger:
    """Build the ``shopqa`` handlers once; ``force`` rebuilds after env changes."""
    global _configured
    root = logging.getLogger(ROOT_NAME)
    if _configured and not force:
        return root

    level = _level(os.getenv("LOG_LEVEL", "INFO"))
    formatter = logging.Formatter(
        os.getenv("LOG_FORMAT", DEFAULT_FORMAT),
        datefmt=os.getenv("LOG_DATE_FORMAT", "%Y-%m-%d %H:%M:%S"),
    )
    for old in list(root.handlers):
        root.removeHandler(old)
        old.close()
    for handler in _handlers():
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False

    for noisy in filter(None, (name.strip() for name in os.getenv("LOG_QUIET", DEFAULT_QUIET).split(","))):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    _configured = True
    return root


def get_logger(name: str | None = None) -> Logger:
    """``shopqa`` itself, or a child; ``src.`` prefixes from ``__name__`` are dropped."""
    configure_logging()
    if not name:
        return logging.getLogger(ROOT_NAME)
    return logging.getLogger(f"{ROOT_NAME}.{name.removeprefix('src.')}")


__all__ = ["configure_logging", "get_logger"]
