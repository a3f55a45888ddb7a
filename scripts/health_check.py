#!/usr/bin/env python3
"""Pre-flight checks against the shop before running the suites."""
from __future__ import annotations

import argparse
import os
import sys
import time
from pathlib import Path

import requests
from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from src.data.factory import DataFactory
from src.health.checks import ReadinessTimeoutError, ServiceStatus, ensure_all_ready, wait_for_http
from src.utils.api_client import USER_CREATED, AccountApiClient, ApiError
from src.utils.logger import configure_logging, get_logger

logger = get_logger("health_check")


def check_products_api(client: AccountApiClient) -> ServiceStatus:
    """The catalogue endpoint answers with a non-empty product list."""
    start = time.perf_counter()
    try:
        result = client.list_products()
        healthy = result.response_code == 200 and bool(result.body.get("products"))
        detail = f"{len(result.body.get('products', []))} products"
    except (ApiError, requests.RequestException) as exc:
        healthy, detail = False, str(exc)
    return ServiceStatus(name="products_api", healthy=healthy, detail=detail, elapsed=time.perf_counter() - start)


def check_account_round_trip(client: AccountApiClient, factory: DataFactory) -> ServiceStatus:
    """Create and delete a throwaway account."""
    start = time.perf_counter()
    user = factory.user()
    try:
        created = client.create_account_from_user_data(user)
        healthy = created.response_code == 201 and created.message == USER_CREATED
        detail = f"{created.response_code} {created.message}"
    except (ApiError, requests.RequestException) as exc:
        healthy, detail = False, str(exc)
    finally:
        client.safe_delete_account(user.email, user.password)
    return ServiceStatus(name="account_round_trip", healthy=healthy, detail=detail, elapsed=time.perf_counter() - start)


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--env-file", default="config/shop.env", help="Path to environment file")
    parser.add_argument("--skip-accounts", action="store_true", help="Skip the account create/delete check")
    parser.add_argument("--timeout", type=float, default=30, help="Seconds to wait for the site")
    args = parser.parse_args()

    env_path = Path(args.env_file)
    if not env_path.exists():
        print(f"Environment file not found: {env_path}", file=sys.stderr)
        return 1
    load_dotenv(env_path, override=True)
    configure_logging(force=True)

    base_url = os.environ.get("BASE_URL", "").rstrip("/")
    if not base_url:
        print("BASE_URL not set in environment", file=sys.stderr)
        return 1
    api_base_url = os.environ.get("API_BASE_URL", f"{base_url}/api")

    try:
        checks = [wait_for_http("site", base_url, timeout=args.timeout)]
    except ReadinessTimeoutError as exc:
        logger.error("%s", exc)
        return 1

    client = AccountApiClient(api_base_url)
    checks.append(check_products_api(client))
    if not args.skip_accounts:
        factory = DataFactory(email_domain=os.environ.get("EMAIL_DOMAIN", "automationtest.com"))
        checks.append(check_account_round_trip(client, factory))

    for check in checks:
        log_fn = logger.info if check.healthy else logger.error
        log_fn("%s %s: %s (%.2fs)", "OK " if check.healthy else "BAD", check.name, check.detail, check.elapsed)

    try:
        ensure_all_ready(checks)
    except ReadinessTimeoutError as exc:
        logger.error("%d/%d checks failed: %s", sum(not c.healthy for c in checks), len(checks), exc)
        return 1
    logger.info("All %d health checks passed", len(checks))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
