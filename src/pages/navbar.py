"""Site-wide header navigation."""
from __future__ import annotations

from playwright.sync_api import Locator, Page


class Navbar:
    def __init__(self, page: Page) -> None:
        self.page = page

        self.home_link: Locator = page.locator('a[href="/"]').first
        self.products_link: Locator = page.locator('a[href="/products"]')
        self.cart_link: Locator = page.locator('header a[href="/view_cart"]')
        self.signup_login_link: Locator = page.locator('a[href="/login"]')

        self.logout_link: Locator = page.locator('a[href="/logout"]')
        self.delete_account_link: Locator = page.locator('a[href="/delete_account"]')
        # "Logged in as <b>name</b>"
        self.logged_in_username: Locator = page.locator('a:has(i.fa-user) b')

    def get_logged_in_username(self) -> str:
        return (self.logged_in_username.text_content() or "").strip()
