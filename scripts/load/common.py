"""Shared pieces for the account-endpoint Locust scenarios.

Locust puts the locustfile's directory on ``sys.path``, so the scenario files
import this module as ``common``.
"""
from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from dotenv import load_dotenv
from locust import HttpUser, LoadTestShape, events
from locust.env import Environment

ROOT_DIR = Path(__file__).resolve().parents[2]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from src.data.factory import DEFAULT_EMAIL_DOMAIN, DataFactory, UserData
from src.utils.api_client import (
    ACCOUNT_DELETED,
    LOGIN_PARAMS_MISSING,
    USER_CREATED,
    USER_EXISTS,
    USER_NOT_FOUND,
    account_form,
)
from src.utils.logger import configure_logging, get_logger

logger = get_logger("load")

DEFAULT_HOST = "https://automationexercise.com"
DEFAULT_ENV_FILE = "config/shop.env"
FORM_HEADERS = {"Content-Type": "application/x-www-form-urlencoded"}


def load_env_file(raw: Optional[str] = None) -> Optional[Path]:
    """Load the shared env file; variables already set in the process win."""
    path = Path(raw or os.environ.get("SHOP_ENV_FILE") or DEFAULT_ENV_FILE)
    if not path.is_absolute():
        path = ROOT_DIR / path
    if not path.is_file():
        logger.warning("Env file %s not found; using process environment only", path)
        return None
    load_dotenv(path, override=False)
    configure_logging(force=True)
    return path


def resolve_host() -> str:
    return (os.environ.get("LOCUST_HOST") or os.environ.get("BASE_URL") or DEFAULT_HOST).rstrip("/")


load_env_file()


@dataclass
class Thresholds:
    p95_ms: float
    p99_ms: float
    max_fail_ratio: float
    min_login_success: float


@dataclass
class LoginOutcomes:
    attempts: int = 0
    successes: int = 0

    def record(self, ok: bool) -> None:
        self.attempts += 1
        self.successes += int(ok)

    @property
    def rate(self) -> float:
        return self.successes / self.attempts if self.attempts else 1.0


login_outcomes = LoginOutcomes()


def check_thresholds(
    environment: Environment,
    thresholds: Thresholds,
    outcomes: Optional[LoginOutcomes] = None,
) -> list[str]:
    """Compare the run totals with ``thresholds``; any breach sets a non-zero exit code."""
    if outcomes is None:
        outcomes = login_outcomes
    total = environment.stats.total
    breaches = []
    p95 = total.get_response_time_percentile(0.95)
    p99 = total.get_response_time_percentile(0.99)
    if p95 > thresholds.p95_ms:
        breaches.append(f"p95 {p95:.0f}ms > {thresholds.p95_ms:.0f}ms")
    if p99 > thresholds.p99_ms:
        breaches.append(f"p99 {p99:.0f}ms > {thresholds.p99_ms:.0f}ms")
    if total.fail_ratio > thresholds.max_fail_ratio:
        breaches.append(f"failure ratio {total.fail_ratio:.2%} > {thresholds.max_fail_ratio:.2%}")
    if outcomes.rate < thresholds.min_login_success:
        breaches.append(f"login success {outcomes.rate:.2%} < {thresholds.min_login_success:.2%}")
    if breaches:
        logger.error("Load thresholds breached: %s", "; ".join(breaches))
        environment.process_exit_code = 1
    else:
        logger.info("Load thresholds met (p95=%.0fms, p99=%.0fms)", p95, p99)
    return breaches


def register_thresholds(thresholds: Thresholds) -> Callable[..., None]:
    """Check ``thresholds`` when Locust quits; returns the registered listener."""

    def _on_quitting(environment: Environment, **_kwargs) -> None:
        check_thresholds(environment, thresholds)

    events.quitting.add_listener(_on_quitting)
    return _on_quitting


class StagedShape(LoadTestShape):
    """Ramp through ``stages`` of ``(duration_seconds, target_users)``, then stop."""

    abstract = True
    stages: list[tuple[int, int]] = []
    spawn_rate: float = 2

    def tick(self) -> Optional[tuple[int, float]]:
        elapsed = self.get_run_time()
        for duration, users in self._cumulative():
            if elapsed < duration:
                return users, self.spawn_rate
        return None

    def _cumulative(self) -> list[tuple[int, int]]:
        total = 0
        plan = []
        for duration, users in self.stages:
            total += duration
            plan.append((total, users))
        return plan


class AccountJourneyUser(HttpUser):
    abstract = True
    host = resolve_host()
    create_budget_ms: float = 2000
    login_budget_ms: float = 1000

    def on_start(self) -> None:
        self.factory = DataFactory(email_domain=os.environ.get("EMAIL_DOMAIN", DEFAULT_EMAIL_DOMAIN))

    def _expect(self, response, code: int, message: str, budget_ms: Optional[float] = None) -> bool:
        try:
            body = response.json()
        except ValueError:
            response.failure(f"Non-JSON body (HTTP {response.status_code})")
            return False
        if body.get("responseCode") != code or body.get("message") != message:
            response.failure(f"Expected {code} {message!r}, got {body.get('responseCode')} {body.get('message')!r}")
            return False
        if budget_ms is not None and response.elapsed.total_seconds() * 1000 > budget_ms:
            response.failure(f"Slower than {budget_ms:.0f}ms")
            return False
        response.success()
        return True

    def create_account(self, user: UserData) -> bool:
        with self.client.post(
            "/api/createAccount",
            data=account_form(user),
            headers=FORM_HEADERS,
            name="createAccount",
            catch_response=True,
        ) as response:
            return self._expect(response, 201, USER_CREATED, self.create_budget_ms)

    def verify_login(self, email: str, password: str) -> bool:
        with self.client.post(
            "/api/verifyLogin",
            data={"email": email, "password": password},
            headers=FORM_HEADERS,
            name="verifyLogin",
            catch_response=True,
        ) as response:
            ok = self._expect(response, 200, USER_EXISTS, self.login_budget_ms)
        login_outcomes.record(ok)
        return ok

    def delete_account(self, email: str, password: str) -> bool:
        with self.client.delete(
            "/api/deleteAccount",
            data={"email": email, "password": password},
            headers=FORM_HEADERS,
            name="deleteAccount",
            catch_response=True,
        ) as response:
            return self._expect(response, 200, ACCOUNT_DELETED)

    def account_round_trip(self) -> None:
        user = self.factory.user()
        if self.create_account(user):
            self.verify_login(user.email, user.password)
            self.delete_account(user.email, user.password)

    def invalid_logins(self) -> None:
        creds = self.factory.credentials()
        checks = [
            ("verifyLogin [unknown user]", {"email": creds.email, "password": creds.password}, 404, USER_NOT_FOUND),
            ("verifyLogin [empty]", {"email": "", "password": ""}, 404, USER_NOT_FOUND),
            ("verifyLogin [missing email]", {"password": creds.password}, 400, LOGIN_PARAMS_MISSING),
        ]
        for name, form, code, message in checks:
            with self.client.post(
                "/api/verifyLogin",
                data=form,
                headers=FORM_HEADERS,
                name=name,
                catch_response=True,
            ) as response:
                self._expect(response, code, message)
