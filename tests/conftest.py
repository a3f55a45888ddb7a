from __future__ import annotations

import io
import json
import logging
import os
import time

# Locust's gevent monkey-patching recurses on ssl once pytest plugins have imported it;
# the unit tests only exercise pure helpers, so skip the patch under pytest.
os.environ.setdefault("LOCUST_SKIP_MONKEY_PATCH", "1")
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Iterator, Optional

import allure
import pytest
from dotenv import load_dotenv
from playwright.sync_api import Page

from src.data.factory import DEFAULT_COUNTRY, DEFAULT_EMAIL_DOMAIN, DataFactory, UserData
from src.health.checks import ReadinessTimeoutError, wait_for_http
from src.utils.api_client import AccountApiClient
from src.utils.logger import configure_logging, get_logger

log = get_logger("session")

ENV_OPTION = "--env-file"
ENV_VAR = "SHOP_ENV_FILE"
DEFAULT_ENV_FILE = "config/shop.env"
SUITE_MARKERS = ("unit", "api", "ui")
SECRET_HINTS = ("password", "secret", "token")


def _seed(raw: Optional[str]) -> Optional[int]:
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        pytest.exit(f"DATA_SEED must be an integer, got {raw!r}", returncode=1)


def _env_file(config: pytest.Config) -> Path:
    return Path(config.getoption(ENV_OPTION) or DEFAULT_ENV_FILE)


@dataclass
class Settings:
    env_file: Path
    base_url: str
    api_base_url: str
    health_endpoint: str
    default_country: str
    email_domain: str
    data_seed: Optional[int]

    @classmethod
    def from_env(cls, env_file: Path, base_url: Optional[str]) -> "Settings":
        base_url = (base_url or "").rstrip("/")
        if not base_url:
            pytest.exit(f"BASE_URL is not set in {env_file} and --base-url was not given", returncode=1)
        api_base_url = os.environ.get("API_BASE_URL", f"{base_url}/api").rstrip("/")
        return cls(
            env_file=env_file,
            base_url=base_url,
            api_base_url=api_base_url,
            health_endpoint=os.environ.get("HEALTH_ENDPOINT", f"{api_base_url}/productsList"),
            default_country=os.environ.get("DEFAULT_COUNTRY", DEFAULT_COUNTRY),
            email_domain=os.environ.get("EMAIL_DOMAIN", DEFAULT_EMAIL_DOMAIN),
            data_seed=_seed(os.environ.get("DATA_SEED")),
        )

    def redacted(self) -> dict[str, Any]:
        return {
            key: "***" if any(hint in key for hint in SECRET_HINTS) else str(value)
            for key, value in asdict(self).items()
        }


@dataclass
class RunTimings:
    """Per-phase and per-suite durations accumulated from test reports."""

    started: float = field(default_factory=time.perf_counter)
    phases: dict[str, float] = field(default_factory=lambda: {"setup": 0.0, "call": 0.0, "teardown": 0.0})
    suites: dict[str, float] = field(default_factory=lambda: dict.fromkeys((*SUITE_MARKERS, "other"), 0.0))

    def record(self, item: pytest.Item, report: pytest.TestReport) -> None:
        self.phases[report.when] += report.duration
        if report.when == "call":
            suite = next((mark.name for mark in item.iter_markers() if mark.name in SUITE_MARKERS), "other")
            self.suites[suite] += report.duration

    def summary(self, exitstatus: int) -> dict[str, Any]:
        return {
            "finished_at": datetime.now(UTC).isoformat(timespec="seconds"),
            "exitstatus": int(exitstatus),
            "wall_clock_seconds": round(time.perf_counter() - self.started, 3),
            "phases": {name: round(value, 3) for name, value in self.phases.items()},
            "suites": {name: round(value, 3) for name, value in self.suites.items()},
        }


timings = RunTimings()


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        ENV_OPTION,
        action="store",
        default=os.environ.get(ENV_VAR, DEFAULT_ENV_FILE),
        help=f"Env file with BASE_URL and friends (default: ${ENV_VAR} or {DEFAULT_ENV_FILE})",
    )


def pytest_configure(config: pytest.Config) -> None:
    for marker in (
        "unit: Offline tests of the data generator, readiness checks, load shapes and client mapping",
        "ui: Browser journeys through the page objects",
        "api: API contract tests against the live shop",
        "smoke: Quick reachability checks",
        "checkout: Cart, checkout and payment journeys",
        "happy: Expected-success paths",
        "unhappy: Negative paths",
    ):
        config.addinivalue_line("markers", marker)

    env_file = _env_file(config)
    if env_file.is_file():
        load_dotenv(env_file, override=True)
        configure_logging(force=True)
    # pytest-playwright builds every browser context from the base_url fixture.
    if not getattr(config.option, "base_url", None) and os.environ.get("BASE_URL"):
        config.option.base_url = os.environ["BASE_URL"].rstrip("/")


def pytest_sessionstart(session: pytest.Session) -> None:
    del session
    global timings
    timings = RunTimings()


# Configuration and API ------------------------------------------------------


@pytest.fixture(scope="session")
def settings(pytestconfig: pytest.Config) -> Settings:
    env_file = _env_file(pytestconfig)
    if not env_file.is_file():
        pytest.exit(f"Env file {env_file} does not exist", returncode=1)

    loaded = Settings.from_env(env_file, pytestconfig.getoption("base_url", default=None))
    log.info("Using %s against %s", env_file, loaded.base_url)
    allure.attach(
        json.dumps(loaded.redacted(), indent=2),
        name="settings",
        attachment_type=allure.attachment_type.JSON,
    )
    return loaded


@pytest.fixture(scope="session")
def browser_context_args(browser_context_args: dict[str, Any]) -> dict[str, Any]:
    return {**browser_context_args, "viewport": {"width": 1440, "height": 900}}


@pytest.fixture(scope="session")
def site_ready(settings: Settings) -> None:
    try:
        status = wait_for_http("shop", settings.health_endpoint, expect_code=200)
    except ReadinessTimeoutError as exc:
        log.error("Shop unavailable: %s", exc)
        pytest.skip(f"Shop unavailable: {exc}")
    log.info("Shop answered in %.2fs (%s)", status.elapsed, status.detail)
    allure.attach(
        json.dumps(asdict(status), indent=2),
        name="shop_health",
        attachment_type=allure.attachment_type.JSON,
    )


@pytest.fixture(scope="session")
def api_client(settings: Settings, site_ready: None) -> AccountApiClient:
    return AccountApiClient(settings.api_base_url)


@pytest.fixture(scope="session")
def data_factory(settings: Settings) -> DataFactory:
    if settings.data_seed is not None:
        log.info("Seeding generated data with %d", settings.data_seed)
    return DataFactory(
        country=settings.default_country,
        email_domain=settings.email_domain,
        seed=settings.data_seed,
    )


@pytest.fixture
def user(data_factory: DataFactory, api_client: AccountApiClient) -> Iterator[UserData]:
    """A fresh synthetic user whose account, if one gets created, is removed afterwards."""
    generated = data_factory.user()
    log.debug("Test user: %s", generated.model_dump_json(exclude={"password"}))
    yield generated
    api_client.safe_delete_account(generated.email, generated.password)


@pytest.fixture
def registered_user(user: UserData, api_client: AccountApiClient) -> UserData:
    result = api_client.create_account_from_user_data(user)
    assert result.response_code == 201, f"Account setup failed: {result.response_code} {result.message}"
    log.info("Registered %s through the API", user.email)
    return user


# Per-test logs and report attachments ---------------------------------------


def _outcome(node: pytest.Item) -> str:
    for when in ("call", "setup"):
        report = getattr(node, f"rep_{when}", None)
        if report is not None and (when == "call" or not report.passed):
            return report.outcome.upper()
    return "SKIPPED"


@pytest.fixture(autouse=True)
def _test_log_trail(request: pytest.FixtureRequest) -> Iterator[None]:
    """Log start and end of each test; attach the captured records when it fails."""
    nodeid = request.node.nodeid
    buffer = io.StringIO()
    capture = logging.StreamHandler(buffer)
    capture.setLevel(logging.DEBUG)
    capture.setFormatter(logging.Formatter("%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"))
    root = get_logger()
    root.addHandler(capture)
    log.info("START %s", nodeid)
    try:
        yield
    finally:
        outcome = _outcome(request.node)
        (log.error if outcome == "FAILED" else log.info)("END %s :: %s", nodeid, outcome)
        root.removeHandler(capture)
        capture.close()
    if outcome == "FAILED" and buffer.getvalue().strip():
        allure.attach(
            buffer.getvalue(),
            name=f"logs::{nodeid}",
            attachment_type=allure.attachment_type.TEXT,
        )


def _attach_failure_screenshot(item: pytest.Item) -> None:
    page = getattr(item, "funcargs", {}).get("page")
    if not isinstance(page, Page):
        return
    try:
        allure.attach(
            page.screenshot(full_page=True),
            name="page_on_failure",
            attachment_type=allure.attachment_type.PNG,
        )
    except Exception as exc:  # noqa: BLE001
        allure.attach(str(exc), name="screenshot_error", attachment_type=allure.attachment_type.TEXT)


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item: pytest.Item, call: pytest.CallInfo) -> Iterator[None]:
    del call
    report: pytest.TestReport = (yield).get_result()
    setattr(item, f"rep_{report.when}", report)
    timings.record(item, report)
    if report.when == "call" and report.failed and item.get_closest_marker("ui") is not None:
        _attach_failure_screenshot(item)


def pytest_sessionfinish(session: pytest.Session, exitstatus: int) -> None:
    del session
    summary = timings.summary(exitstatus)
    logs_dir = Path(os.environ.get("LOG_DIR", "logs"))
    logs_dir.mkdir(parents=True, exist_ok=True)
    target = logs_dir / f"runtime_{datetime.now(UTC).strftime('%Y%m%dT%H%M%SZ')}.json"
    target.write_text(json.dumps(summary, indent=2))
    log.info("Runtime summary written to %s", target)
    try:
        allure.attach(
            json.dumps(summary, indent=2),
            name="runtime_summary",
            attachment_type=allure.attachment_type.JSON,
        )
    except Exception as exc:  # noqa: BLE001
        log.debug("Runtime summary not attached: %s", exc)
