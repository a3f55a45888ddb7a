"""The /payment card form and the order-placed confirmation that follows it."""
from __future__ import annotations

from playwright.sync_api import Page

from src.data.factory import PaymentCard
from src.utils.logger import get_logger

logger = get_logger(__name__)

ORDER_CONFIRMED = "Congratulations! Your order has been confirmed!"


class PaymentPage:
    path = "/payment"

    def __init__(self, page: Page) -> None:
        self.page = page

        self.name_on_card = page.locator('[data-qa="name-on-card"]')
        self.card_number = page.locator('[data-qa="card-number"]')
        self.cvc = page.locator('[data-qa="cvc"]')
        self.expiration_month = page.locator('[data-qa="expiry-month"]')  # MM
        self.expiration_year = page.locator('[data-qa="expiry-year"]')  # YYYY

        self.pay_and_confirm_order_button = page.get_by_role("button", name="Pay and Confirm Order")
        self.order_placed_heading = page.locator('[data-qa="order-placed"]')
        self.order_confirmed_message = page.get_by_text(ORDER_CONFIRMED)
        self.download_invoice_link = page.get_by_role("link", name="Download Invoice")
        self.continue_button = page.locator('[data-qa="continue-button"]')

    def goto(self) -> None:
        self.page.goto(self.path)

    def fill_card(self, card: PaymentCard) -> None:
        self.name_on_card.fill(card.name_on_card)
        self.card_number.fill(card.card_number)
        self.cvc.fill(card.cvc)
        self.expiration_month.fill(card.expiry_month)
        self.expiration_year.fill(card.expiry_year)

    def pay(self, card: PaymentCard) -> None:
        logger.info("Paying with card ending %s", card.card_number[-4:])
        self.fill_card(card)
        self.pay_and_confirm_order_button.click()
