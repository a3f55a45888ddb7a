from __future__ import annotations

import re
from typing import Iterator

import pytest
from playwright.sync_api import Page, Route

from src.pages.cart_page import CartPage
from src.pages.checkout_page import CheckoutPage
from src.pages.login_signup_page import LoginSignupPage
from src.pages.navbar import Navbar
from src.pages.payment_page import PaymentPage
from src.pages.products_page import ProductsPage
from src.pages.signup_form_page import SignupFormPage
from src.utils.logger import get_logger

logger = get_logger(__name__)

# Third-party ad frames on the shop overlay buttons and swallow clicks.
AD_HOSTS = re.compile(r"(googlesyndication|doubleclick|googleadservices|adservice\.google|fundingchoicesmessages)")

DEFAULT_TIMEOUT_MS = 10_000

INIT_SCRIPT = """
    const style = document.createElement('style');
    style.innerHTML = '* { transition-duration: 0s !important; animation-duration: 0s !important; }';
    document.addEventListener('DOMContentLoaded', () => document.head.appendChild(style));
"""


def _abort(route: Route) -> None:
    route.abort()


@pytest.fixture
def shop_page(page: Page, site_ready: None) -> Iterator[Page]:
    """The Playwright page with ads blocked, opened on the home page."""
    page.set_default_timeout(DEFAULT_TIMEOUT_MS)
    page.add_init_script(INIT_SCRIPT)
    page.route(AD_HOSTS, _abort)
    page.goto("/")
    logger.debug("Opened shop home page")
    yield page
    page.unroute(AD_HOSTS)


@pytest.fixture
def navbar(shop_page: Page) -> Navbar:
    return Navbar(shop_page)


@pytest.fixture
def login_signup_page(shop_page: Page) -> LoginSignupPage:
    return LoginSignupPage(shop_page)


@pytest.fixture
def signup_form_page(shop_page: Page) -> SignupFormPage:
    return SignupFormPage(shop_page)


@pytest.fixture
def products_page(shop_page: Page) -> ProductsPage:
    return ProductsPage(shop_page)


@pytest.fixture
def cart_page(shop_page: Page) -> CartPage:
    return CartPage(shop_page)


@pytest.fixture
def checkout_page(shop_page: Page) -> CheckoutPage:
    return CheckoutPage(shop_page)


@pytest.fixture
def payment_page(shop_page: Page) -> PaymentPage:
    return PaymentPage(shop_page)
