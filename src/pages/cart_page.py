"""The /view_cart table."""
from __future__ import annotations

from typing import Optional

from playwright.sync_api import Locator, Page, expect

from src.pages.products_page import Product


class CartPage:
    path = "/view_cart"

    def __init__(self, page: Page) -> None:
        self.page = page

        self.cart_table_rows = page.locator("#cart_info_table tbody tr")
        self.proceed_to_checkout_button = page.locator("a.check_out")
        self.checkout_modal_login_link = page.locator("#checkoutModal a[href='/login']")

    def goto(self) -> None:
        self.page.goto(self.path)

    def get_cart_rows(self) -> list[Locator]:
        return self.cart_table_rows.all()

    def get_cart_row_by_index(self, index: int) -> Locator:
        return self.cart_table_rows.nth(index)

    def get_cart_item_count(self) -> int:
        return self.cart_table_rows.count()

    def get_product_name(self, row: Locator) -> str:
        return (self.get_product_name_link(row).text_content() or "").strip()

    def find_cart_row_by_product_name(self, product_name: str) -> Optional[Locator]:
        needle = product_name.lower()
        for row in self.get_cart_rows():
            if needle in self.get_product_name(row).lower():
                return row
        return None

    # Row cells ----------------------------------------------------------

    def get_product_image(self, row: Locator) -> Locator:
        return row.locator(".cart_product img.product_image")

    def get_product_name_link(self, row: Locator) -> Locator:
        return row.locator(".cart_description h4 a")

    def get_product_category(self, row: Locator) -> Locator:
        return row.locator(".cart_description p")

    def get_price_text(self, row: Locator) -> Locator:
        return row.locator(".cart_price p")

    def get_quantity_cell(self, row: Locator) -> Locator:
        return row.locator(".cart_quantity")

    def get_quantity_button(self, row: Locator) -> Locator:
        return row.locator(".cart_quantity button")

    def get_total_price(self, row: Locator) -> Locator:
        return row.locator(".cart_total .cart_total_price")

    def get_delete_button(self, row: Locator) -> Locator:
        return row.locator(".cart_delete a.cart_quantity_delete")

    # Assertions ---------------------------------------------------------

    def verify_product_row(self, row: Locator, product: Product, expected_quantity: int = 1) -> None:
        if product.image_src:
            expect(self.get_product_image(row)).to_have_attribute("src", product.image_src)
        expect(self.get_product_name_link(row)).to_have_text(product.name)
        expect(self.get_price_text(row)).to_have_text(product.price)
        expect(self.get_quantity_button(row)).to_have_text(str(expected_quantity))
        expect(self.get_total_price(row)).to_have_text(f"Rs. {product.price_number * expected_quantity}")
        expect(self.get_delete_button(row)).to_be_visible()
        expect(self.get_delete_button(row)).to_be_enabled()

    def verify_product_in_cart(self, product: Product, expected_quantity: int = 1) -> None:
        row = self.find_cart_row_by_product_name(product.name)
        if row is None:
            raise AssertionError(f"Product {product.name!r} not found in cart")
        self.verify_product_row(row, product, expected_quantity)
