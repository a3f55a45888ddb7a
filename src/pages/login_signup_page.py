"""The /login page: "Login to your account" on the left, "New User Signup!" on the right."""
from __future__ import annotations

from playwright.sync_api import Page

from src.utils.logger import get_logger

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Your email or password is incorrect!"
EMAIL_ALREADY_EXISTS = "Email Address already exist!"


class LoginSignupPage:
    path = "/login"

    def __init__(self, page: Page) -> None:
        self.page = page

        login_form = page.locator(".login-form")
        self.login_heading = page.get_by_role("heading", name="Login to your account")
        self.login_email_input = login_form.locator('[data-qa="login-email"]')
        self.login_password_input = login_form.locator('[data-qa="login-password"]')
        self.login_button = page.get_by_role("button", name="Login")
        self.invalid_credentials_error_message = page.get_by_text(INVALID_CREDENTIALS)

        signup_form = page.locator(".signup-form")
        self.signup_heading = page.get_by_role("heading", name="New User Signup!")
        self.signup_name_input = signup_form.locator('[data-qa="signup-name"]')
        self.signup_email_input = signup_form.locator('[data-qa="signup-email"]')
        self.signup_button = page.get_by_role("button", name="Signup")
        self.email_exists_error_message = page.get_by_text(EMAIL_ALREADY_EXISTS)

    def goto(self) -> None:
        self.page.goto(self.path)

    # Login --------------------------------------------------------------

    def fill_login_email(self, email: str) -> None:
        self.login_email_input.fill(email)

    def fill_login_password(self, password: str) -> None:
        self.login_password_input.fill(password)

    def click_login_button(self) -> None:
        self.login_button.click()

    def login(self, email: str, password: str) -> None:
        logger.info("Logging in through the UI as %s", email)
        self.fill_login_email(email)
        self.fill_login_password(password)
        self.click_login_button()

    def login_email_validation_message(self) -> str:
        """Browser-native constraint validation text for the login email field."""
        return self.login_email_input.evaluate("element => element.validationMessage")

    # Signup -------------------------------------------------------------

    def fill_signup_name(self, name: str) -> None:
        self.signup_name_input.fill(name)

    def fill_signup_email(self, email: str) -> None:
        self.signup_email_input.fill(email)

    def click_signup_button(self) -> None:
        self.signup_button.click()

    def fill_and_submit_name_and_email(self, name: str, email: str) -> None:
        logger.info("Starting signup for %s", email)
        self.fill_signup_name(name)
        self.fill_signup_email(email)
        self.click_signup_button()
