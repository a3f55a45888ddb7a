"""Account API wrapper for automationexercise.com, kept thin for test readability."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from src.data.factory import UserData
from src.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 10  # seconds

# Vendor messages asserted by the suites.
USER_CREATED = "User created!"
EMAIL_EXISTS = "Email already exists!"
USER_EXISTS = "User exists!"
USER_NOT_FOUND = "User not found!"
ACCOUNT_DELETED = "Account deleted!"
LOGIN_PARAMS_MISSING = "Bad request, email or password parameter is missing in POST request."
ACCOUNT_PARAM_MISSING = "Bad request, {param} parameter is missing in POST request."


@dataclass
class ApiResponse:
    response_code: int
    message: str
    body: dict[str, Any] = field(default_factory=dict)
    http_status: int = 200

    @property
    def ok(self) -> bool:
        return 200 <= self.response_code < 300


class ApiError(RuntimeError):
    """Raised when the API answers with something that is not the expected JSON envelope."""

    def __init__(self, message: str, status: Optional[int] = None, body: Optional[str] = None) -> None:
        super().__init__(message)
        self.status = status
        self.body = body

    @property
    def status_code(self) -> Optional[int]:
        return self.status


def _text(value: Optional[str]) -> str:
    return value if value is not None else ""


def account_form(user: UserData) -> dict[str, str]:
    """Map a generated user onto the createAccount form fields."""
    dob = user.date_of_birth
    return {
        "name": user.full_name,
        "email": user.email,
        "password": user.password,
        "title": _text(user.title),
        "birth_date": dob.day if dob else "",
        "birth_month": dob.month if dob else "",
        "birth_year": dob.year if dob else "",
        "firstname": user.first_name,
        "lastname": user.last_name,
        "company": _text(user.company),
        "address1": user.address,
        "address2": _text(user.address2),
        "country": user.country,
        "zipcode": user.zipcode,
        "state": user.state,
        "city": user.city,
        "mobile_number": user.mobile_number,
    }


class AccountApiClient:
    def __init__(self, base_url: str, session: requests.Session | None = None, timeout: int = DEFAULT_TIMEOUT) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        # Retry transient server/network errors only; vendor errors come back as HTTP 200.
        retries = Retry(total=3, backoff_factor=0.3, status_forcelist=(429, 500, 502, 503, 504), raise_on_status=False)
        adapter = HTTPAdapter(max_retries=retries)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)
        self.session.headers.update({"Accept": "application/json"})

    def _envelope(self, response: requests.Response) -> ApiResponse:
        try:
            body = response.json()
        except ValueError as exc:
            logger.error(
                "Non-JSON body (status %s) for %s %s",
                response.status_code,
                response.request.method,
                response.request.url,
            )
            raise ApiError(
                f"Expected JSON from {response.request.url}: {response.text[:200]}",
                status=response.status_code,
                body=response.text,
            ) from exc
        if not isinstance(body, dict):
            raise ApiError(f"Unexpected payload type {type(body).__name__}", status=response.status_code, body=response.text)
        return ApiResponse(
            response_code=int(body.get("responseCode") or response.status_code),
            message=body.get("message") or "",
            body=body,
            http_status=response.status_code,
        )

    # Account endpoints --------------------------------------------------

    def create_account(self, form: Mapping[str, str]) -> ApiResponse:
        logger.info("Creating account %s", form.get("email"))
        response = self.session.post(f"{self.base_url}/createAccount", data=dict(form), timeout=self.timeout)
        result = self._envelope(response)
        logger.debug("createAccount -> %s %s", result.response_code, result.message)
        return result

    def create_account_from_user_data(self, user: UserData) -> ApiResponse:
        return self.create_account(account_form(user))

    def verify_login(self, email: str, password: str) -> ApiResponse:
        return self.verify_login_with_partial_data(email=email, password=password)

    def verify_login_with_partial_data(self, **fields: str) -> ApiResponse:
        logger.debug("Verifying login with fields %s", sorted(fields))
        response = self.session.post(f"{self.base_url}/verifyLogin", data=fields, timeout=self.timeout)
        return self._envelope(response)

    def delete_account(self, email: str, password: str) -> ApiResponse:
        logger.info("Deleting account %s", email)
        response = self.session.delete(
            f"{self.base_url}/deleteAccount",
            data={"email": email, "password": password},
            timeout=self.timeout,
        )
        return self._envelope(response)

    def verify_account_deleted(self, email: str, password: str) -> bool:
        result = self.delete_account(email, password)
        return result.response_code == 200 and result.message == ACCOUNT_DELETED

    def safe_delete_account(self, email: str, password: str) -> None:
        """Teardown helper: never raises if the account is already gone or the site is flaky."""
        try:
            result = self.delete_account(email, password)
        except (ApiError, requests.RequestException) as exc:
            logger.warning("Could not delete account %s: %s", email, exc)
            return
        if result.response_code != 200:
            logger.debug("Account %s not deleted: %s %s", email, result.response_code, result.message)

    def get_user_detail_by_email(self, email: str) -> ApiResponse:
        logger.debug("Fetching user detail for %s", email)
        response = self.session.get(f"{self.base_url}/getUserDetailByEmail", params={"email": email}, timeout=self.timeout)
        return self._envelope(response)

    # Catalogue endpoints ------------------------------------------------

    def list_products(self) -> ApiResponse:
        response = self.session.get(f"{self.base_url}/productsList", timeout=self.timeout)
        return self._envelope(response)


__all__ = [
    "ACCOUNT_DELETED",
    "ACCOUNT_PARAM_MISSING",
    "AccountApiClient",
    "ApiError",
    "ApiResponse",
    "EMAIL_EXISTS",
    "LOGIN_PARAMS_MISSING",
    "USER_CREATED",
    "USER_EXISTS",
    "USER_NOT_FOUND",
    "account_form",
]
