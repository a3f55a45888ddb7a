"""Synthetic account data for the shop UI and API suites."""
from __future__ import annotations

import string
import time
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Literal, Optional

from faker import Faker
from pydantic import BaseModel, ConfigDict

from src.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_COUNTRY = "United States"
DEFAULT_EMAIL_DOMAIN = "automationtest.com"
DEFAULT_PASSWORD_LENGTH = 12
PASSWORD_PREFIX = "Test@"
PASSWORD_SYMBOLS = "!@#$%"
PASSWORD_ALPHABET = string.ascii_letters + string.digits + PASSWORD_SYMBOLS
# Prefix covers upper, lower and symbol; the body must hold at least one digit.
MIN_PASSWORD_LENGTH = len(PASSWORD_PREFIX) + 1


class ConfigurationError(ValueError):
    """Raised when a generator is asked for something it cannot produce."""


def epoch_millis() -> int:
    return time.time_ns() // 1_000_000


class DateOfBirth(BaseModel):
    day: str
    month: str
    year: str


class MinimalUserData(BaseModel):
    full_name: str
    email: str
    password: str


class UserData(BaseModel):
    model_config = ConfigDict(extra="forbid")

    first_name: str
    last_name: str
    full_name: str
    email: str
    password: str
    address: str
    address2: Optional[str] = None
    country: str
    state: str
    city: str
    zipcode: str
    mobile_number: str
    company: Optional[str] = None
    title: Optional[Literal["Mr", "Mrs"]] = None
    date_of_birth: Optional[DateOfBirth] = None

    def minimal(self) -> MinimalUserData:
        return MinimalUserData(full_name=self.full_name, email=self.email, password=self.password)


class LoginCredentials(BaseModel):
    email: str
    password: str


class PaymentCard(BaseModel):
    name_on_card: str
    card_number: str
    cvc: str
    expiry_month: str
    expiry_year: str


class InvalidEmails(BaseModel):
    missing_at: str
    missing_domain: str


class InvalidData(BaseModel):
    emails: InvalidEmails


@dataclass
class DataFactory:
    """Builds user records from an injected random source and clock.

    ``seed`` pins the Faker instance so a failing record can be reproduced;
    ``clock`` returns epoch milliseconds and is the only time source used.
    """

    country: str = DEFAULT_COUNTRY
    email_domain: str = DEFAULT_EMAIL_DOMAIN
    seed: Optional[int] = None
    clock: Callable[[], int] = epoch_millis
    faker: Faker = field(default_factory=lambda: Faker("en_US"))
    _last_stamp: int = field(default=-1, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.seed is not None:
            self.faker.seed_instance(self.seed)

    def _stamp(self) -> int:
        # Strictly increasing per factory, even when the clock has not ticked.
        now = self.clock()
        if now <= self._last_stamp:
            now = self._last_stamp + 1
        self._last_stamp = now
        return now

    # Primitives ---------------------------------------------------------

    def unique_email(self, domain: str | None = None) -> str:
        username = self.faker.user_name().lower()
        return f"{username}_{self._stamp()}@{domain or self.email_domain}"

    def password(self, length: int = DEFAULT_PASSWORD_LENGTH) -> str:
        if length < MIN_PASSWORD_LENGTH:
            raise ConfigurationError(
                f"Password length {length} is shorter than the minimum {MIN_PASSWORD_LENGTH} "
                f"required by prefix {PASSWORD_PREFIX!r} plus one digit"
            )
        rng = self.faker.random
        body = [rng.choice(string.digits)]
        body.extend(rng.choice(PASSWORD_ALPHABET) for _ in range(length - MIN_PASSWORD_LENGTH))
        rng.shuffle(body)
        return PASSWORD_PREFIX + "".join(body)

    def mobile_number(self) -> str:
        area_code = self.faker.random_int(min=200, max=999)
        prefix = self.faker.random_int(min=200, max=999)
        line_number = self.faker.random_int(min=1000, max=9999)
        return f"{area_code}{prefix}{line_number}"

    def date_of_birth(self) -> DateOfBirth:
        born: date = self.faker.date_of_birth(minimum_age=18, maximum_age=80)
        return DateOfBirth(day=str(born.day), month=str(born.month), year=str(born.year))

    # Records ------------------------------------------------------------

    def _base_fields(self) -> dict[str, Any]:
        return {
            "first_name": self.faker.first_name(),
            "last_name": self.faker.last_name(),
            "email": self.unique_email(),
            "password": self.password(),
            "address": self.faker.street_address(),
            "country": self.country,
            "state": self.faker.state(),
            "city": self.faker.city(),
            "zipcode": self.faker.numerify("#####"),
            "mobile_number": self.mobile_number(),
        }

    def user(self, **overrides: Any) -> UserData:
        fields = {**self._base_fields(), **overrides}
        if "full_name" not in overrides:
            fields["full_name"] = f"{fields['first_name']} {fields['last_name']}"
        user = UserData(**fields)
        logger.debug("Generated user %s (overrides: %s)", user.email, sorted(overrides))
        return user

    def minimal_user(self, **overrides: Any) -> MinimalUserData:
        return self.user(**overrides).minimal()

    def credentials(self, email: str | None = None, password: str | None = None) -> LoginCredentials:
        return LoginCredentials(
            email=self.unique_email() if email is None else email,
            password=self.password() if password is None else password,
        )

    def payment_card(self, name_on_card: str | None = None) -> PaymentCard:
        expiry = self.faker.date_between(start_date="+1y", end_date="+5y")
        return PaymentCard(
            name_on_card=name_on_card or self.faker.name(),
            card_number=self.faker.credit_card_number(card_type="visa16"),
            cvc=self.faker.credit_card_security_code(card_type="visa16"),
            expiry_month=f"{expiry.month:02d}",
            expiry_year=str(expiry.year),
        )

    def invalid_data(self) -> InvalidData:
        return InvalidData(
            emails=InvalidEmails(
                missing_at=f"testuser{self._stamp()}.com",
                missing_domain=f"test{self._stamp()}@",
            )
        )


factory = DataFactory()

InvalidTestData = factory.invalid_data()


def generate_unique_email(domain: str | None = None) -> str:
    return factory.unique_email(domain)


def generate_password(length: int = DEFAULT_PASSWORD_LENGTH) -> str:
    return factory.password(length)


def generate_mobile_number() -> str:
    return factory.mobile_number()


def generate_date_of_birth() -> DateOfBirth:
    return factory.date_of_birth()


def generate_user_data(**overrides: Any) -> UserData:
    return factory.user(**overrides)


def generate_login_credentials(email: str | None = None, password: str | None = None) -> LoginCredentials:
    return factory.credentials(email=email, password=password)


def generate_payment_card(name_on_card: str | None = None) -> PaymentCard:
    return factory.payment_card(name_on_card)


__all__ = [
    "ConfigurationError",
    "DataFactory",
    "DateOfBirth",
    "InvalidData",
    "InvalidEmails",
    "InvalidTestData",
    "LoginCredentials",
    "MinimalUserData",
    "PaymentCard",
    "UserData",
    "factory",
    "generate_date_of_birth",
    "generate_login_credentials",
    "generate_mobile_number",
    "generate_password",
    "generate_payment_card",
    "generate_unique_email",
    "generate_user_data",
]
