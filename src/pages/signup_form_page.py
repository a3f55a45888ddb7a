"""The /signup "Enter Account Information" form reached after the name/email step."""
from __future__ import annotations

from playwright.sync_api import Page

from src.data.factory import UserData
from src.utils.logger import get_logger

logger = get_logger(__name__)


class SignupFormPage:
    path = "/signup"

    def __init__(self, page: Page) -> None:
        self.page = page

        self.account_info_heading = page.get_by_role("heading", name="Enter Account Information")
        self.title_mr_radio = page.locator("#id_gender1")
        self.title_mrs_radio = page.locator("#id_gender2")
        self.name_input = page.locator('[data-qa="name"]')
        self.email_input = page.locator('[data-qa="email"]')
        self.password_input = page.locator('[data-qa="password"]')
        self.days_select = page.locator('[data-qa="days"]')
        self.months_select = page.locator('[data-qa="months"]')
        self.years_select = page.locator('[data-qa="years"]')

        self.first_name_input = page.locator('[data-qa="first_name"]')
        self.last_name_input = page.locator('[data-qa="last_name"]')
        self.company_input = page.locator('[data-qa="company"]')
        self.address_input = page.locator('[data-qa="address"]')
        self.address2_input = page.locator('[data-qa="address2"]')
        self.country_dropdown = page.locator('[data-qa="country"]')
        self.state_input = page.locator('[data-qa="state"]')
        self.city_input = page.locator('[data-qa="city"]')
        self.zipcode_input = page.locator('[data-qa="zipcode"]')
        self.mobile_number_input = page.locator('[data-qa="mobile_number"]')

        self.create_account_button = page.get_by_role("button", name="Create Account")

    def goto(self) -> None:
        self.page.goto(self.path)
        self.account_info_heading.wait_for(state="visible")

    def fill_optional_fields(self, user: UserData) -> None:
        if user.title == "Mr":
            self.title_mr_radio.check()
        elif user.title == "Mrs":
            self.title_mrs_radio.check()
        if user.date_of_birth:
            self.days_select.select_option(user.date_of_birth.day)
            self.months_select.select_option(user.date_of_birth.month)
            self.years_select.select_option(user.date_of_birth.year)
        if user.company:
            self.company_input.fill(user.company)
        if user.address2:
            self.address2_input.fill(user.address2)

    def fill_required_fields(self, user: UserData) -> None:
        self.password_input.fill(user.password)
        self.first_name_input.fill(user.first_name)
        self.last_name_input.fill(user.last_name)
        self.address_input.fill(user.address)
        self.country_dropdown.select_option(user.country)
        self.state_input.fill(user.state)
        self.city_input.fill(user.city)
        self.zipcode_input.fill(user.zipcode)
        self.mobile_number_input.fill(user.mobile_number)

    def fill_and_submit_signup_form(self, user: UserData) -> None:
        logger.info("Submitting account information for %s", user.email)
        self.fill_optional_fields(user)
        self.fill_required_fields(user)
        self.create_account_button.click()
