"""The /checkout review page: delivery address, order lines, total, comment."""
from __future__ import annotations

from typing import Iterable

from playwright.sync_api import Locator, Page, expect

from src.data.factory import UserData
from src.pages.products_page import Product


class CheckoutPage:
    path = "/checkout"

    def __init__(self, page: Page) -> None:
        self.page = page

        delivery = page.locator("#address_delivery")
        self.delivery_address_section = delivery
        self.delivery_address_title = delivery.locator(".address_title h3")
        self.delivery_name = delivery.locator(".address_firstname.address_lastname")
        # Lines are company, address1, address2 in that order.
        self.delivery_address1 = delivery.locator(".address_address1.address_address2").nth(1)
        self.delivery_city = delivery.locator(".address_city.address_state_name.address_postcode")
        self.delivery_country = delivery.locator(".address_country_name")
        self.delivery_phone = delivery.locator(".address_phone")

        self.billing_address_section = page.locator("#address_invoice")

        self.place_order_button = page.get_by_role("link", name="Place Order")
        self.comment_textarea = page.locator('textarea[name="message"]')

        self.cart_info_table = page.locator("#cart_info table")
        self.product_rows = page.locator("#cart_info table tbody tr").filter(
            has_not=page.locator('h4:has-text("Total Amount")')
        )
        self.total_amount_row = page.locator('#cart_info table tbody tr:has(h4:has-text("Total Amount"))')
        self.total_amount_price = self.total_amount_row.locator(".cart_total_price")

    def goto(self) -> None:
        self.page.goto(self.path)

    # Delivery address ---------------------------------------------------

    def _text(self, locator: Locator) -> str:
        return (locator.text_content() or "").strip()

    def get_delivery_name(self) -> str:
        return self._text(self.delivery_name)

    def get_delivery_address(self) -> str:
        return self._text(self.delivery_address1)

    def get_delivery_city_state_zip(self) -> str:
        return self._text(self.delivery_city)

    def get_delivery_country(self) -> str:
        return self._text(self.delivery_country)

    def get_delivery_phone(self) -> str:
        return self._text(self.delivery_phone)

    def verify_delivery_address_visible(self) -> None:
        expect(self.delivery_address_section).to_be_visible()
        expect(self.delivery_address_title).to_contain_text("Your delivery address")

    def verify_delivery_address(self, user: UserData) -> None:
        name = self.get_delivery_name()
        assert user.first_name in name, f"{user.first_name!r} missing from {name!r}"
        assert user.last_name in name, f"{user.last_name!r} missing from {name!r}"

        expect(self.delivery_address1).to_contain_text(user.address)

        city_state_zip = self.get_delivery_city_state_zip()
        for part in (user.city, user.state, user.zipcode):
            assert part in city_state_zip, f"{part!r} missing from {city_state_zip!r}"

        expect(self.delivery_country).to_have_text(user.country)
        expect(self.delivery_phone).to_have_text(user.mobile_number)

    # Order review -------------------------------------------------------

    def get_product_count(self) -> int:
        return self.product_rows.count()

    def get_product_image(self, row: Locator) -> Locator:
        return row.locator(".cart_product img")

    def get_product_name_link(self, row: Locator) -> Locator:
        return row.locator(".cart_description h4 a")

    def get_product_price(self, row: Locator) -> Locator:
        return row.locator(".cart_price p")

    def get_product_quantity(self, row: Locator) -> Locator:
        return row.locator(".cart_quantity button")

    def get_product_total(self, row: Locator) -> Locator:
        return row.locator(".cart_total .cart_total_price")

    def find_product_row_by_name(self, product_name: str) -> Locator:
        needle = product_name.lower()
        for row in self.product_rows.all():
            if needle in (self.get_product_name_link(row).text_content() or "").lower():
                return row
        raise AssertionError(f'Product "{product_name}" not found in checkout')

    def verify_product_row(self, row: Locator, product: Product, expected_quantity: int = 1) -> None:
        if product.image_src:
            expect(self.get_product_image(row)).to_have_attribute("src", product.image_src)
        expect(self.get_product_name_link(row)).to_have_text(product.name)
        expect(self.get_product_price(row)).to_have_text(product.price)
        expect(self.get_product_quantity(row)).to_have_text(str(expected_quantity))
        expect(self.get_product_total(row)).to_have_text(f"Rs. {product.price_number * expected_quantity}")

    def verify_product_in_checkout(self, product: Product, expected_quantity: int = 1) -> None:
        self.verify_product_row(self.find_product_row_by_name(product.name), product, expected_quantity)

    def get_total_amount(self) -> str:
        return self._text(self.total_amount_price)

    def verify_total_amount(self, expected_amount: str) -> None:
        expect(self.total_amount_price).to_have_text(expected_amount)

    def verify_calculated_total(self, items: Iterable[tuple[Product, int]]) -> None:
        total = sum(product.price_number * quantity for product, quantity in items)
        self.verify_total_amount(f"Rs. {total}")

    def place_order(self, comment: str | None = None) -> None:
        if comment:
            self.comment_textarea.fill(comment)
        self.place_order_button.click()
