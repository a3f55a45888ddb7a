"""Readiness checks for the shop site and its JSON API."""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

import requests

from src.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ServiceStatus:
    name: str
    healthy: bool
    detail: str
    elapsed: float


class ReadinessTimeoutError(RuntimeError):
    """Raised when the shop is still unhealthy once the wait runs out."""


def check_service(
    name: str,
    url: str,
    *,
    expect_code: Optional[int] = None,
    timeout: float = 5,
    session: Optional[requests.Session] = None,
) -> ServiceStatus:
    """Hit ``url`` once and describe the outcome without raising.

    With ``expect_code`` the body must be the API's JSON envelope carrying that
    ``responseCode``; the API reports its own errors inside HTTP 200 replies.
    """
    http = session or requests
    start = time.perf_counter()
    try:
        response = http.get(url, timeout=timeout)
    except requests.RequestException as exc:
        return ServiceStatus(name, False, f"{type(exc).__name__}: {exc}", time.perf_counter() - start)
    elapsed = time.perf_counter() - start

    if response.status_code >= 400:
        return ServiceStatus(name, False, f"HTTP {response.status_code}", elapsed)
    if expect_code is None:
        return ServiceStatus(name, True, f"HTTP {response.status_code}", elapsed)

    try:
        code = response.json().get("responseCode")
    except (ValueError, AttributeError):
        return ServiceStatus(name, False, "body is not a JSON object", elapsed)
    if code != expect_code:
        return ServiceStatus(name, False, f"responseCode {code}, wanted {expect_code}", elapsed)
    return ServiceStatus(name, True, f"responseCode {code}", elapsed)


def wait_for_http(
    name: str,
    url: str,
    timeout: float = 60,
    interval: float = 5,
    *,
    expect_code: Optional[int] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> ServiceStatus:
    """Poll ``url`` until a check succeeds or ``timeout`` seconds pass."""
    deadline = time.monotonic() + timeout
    attempt = 0
    while True:
        attempt += 1
        status = check_service(name, url, expect_code=expect_code, timeout=interval)
        if status.healthy:
            logger.debug("%s ready after %d attempt(s): %s", name, attempt, status.detail)
            return status
        logger.debug("%s not ready (attempt %d): %s", name, attempt, status.detail)
        if time.monotonic() + interval > deadline:
            raise ReadinessTimeoutError(f"{name} not ready after {attempt} attempt(s): {status.detail}")
        sleep(interval)


def ensure_all_ready(checks: Iterable[ServiceStatus]) -> None:
    failed = [check for check in checks if not check.healthy]
    if failed:
        raise ReadinessTimeoutError("; ".join(f"{check.name}: {check.detail}" for check in failed))


__all__ = [
    "ReadinessTimeoutError",
    "ServiceStatus",
    "ensure_all_ready",
    "check_service",
    "wait_for_http",
]
