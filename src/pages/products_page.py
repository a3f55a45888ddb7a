"""The /products catalogue grid."""
from __future__ import annotations

import random
import re
from dataclasses import dataclass
from typing import Optional

from playwright.sync_api import Locator, Page

from src.utils.logger import get_logger

logger = get_logger(__name__)

_PRICE_RE = re.compile(r"\d+")


@dataclass
class Product:
    name: str
    price: str
    price_number: int  # 500 for "Rs. 500"
    image_src: Optional[str] = None


def parse_price(text: str) -> int:
    match = _PRICE_RE.search(text)
    return int(match.group()) if match else 0


class ProductsPage:
    path = "/products"

    def __init__(self, page: Page) -> None:
        self.page = page

        self.all_products_heading = page.get_by_role("heading", name="All Products")
        self.product_cards = page.locator(".productinfo")
        self.search_input = page.locator("#search_product")
        self.search_button = page.locator("#submit_search")
        self.continue_shopping_button = page.get_by_role("button", name="Continue Shopping")
        self.view_cart_link = page.get_by_role("link", name="View Cart")

    def goto(self) -> None:
        self.page.goto(self.path)
        self.all_products_heading.wait_for(state="visible")

    def search(self, term: str) -> None:
        self.search_input.fill(term)
        self.search_button.click()

    # Card fields --------------------------------------------------------

    def get_product_name(self, card: Locator) -> str:
        return (card.locator("p").text_content() or "").strip()

    def get_product_price(self, card: Locator) -> str:
        return (card.locator("h2").text_content() or "").strip()

    def get_product_image_src(self, card: Locator) -> str:
        src = card.locator("img").get_attribute("src") or ""
        # Cart rows render the same image without the leading slash.
        return src[1:] if src.startswith("/") else src

    def get_add_to_cart_button(self, card: Locator) -> Locator:
        return card.locator("a.btn.btn-default.add-to-cart")

    def read_product(self, card: Locator) -> Product:
        price = self.get_product_price(card)
        return Product(
            name=self.get_product_name(card),
            price=price,
            price_number=parse_price(price),
            image_src=self.get_product_image_src(card),
        )

    # Collections --------------------------------------------------------

    def get_product_count(self) -> int:
        return self.product_cards.count()

    def get_product_card_by_index(self, index: int) -> Locator:
        return self.product_cards.nth(index)

    def get_product_by_index(self, index: int) -> Product:
        return self.read_product(self.get_product_card_by_index(index))

    def get_all_products(self) -> list[Product]:
        return [self.read_product(card) for card in self.product_cards.all()]

    def find_product_by_name(self, product_name: str) -> Optional[Locator]:
        needle = product_name.lower()
        for card in self.product_cards.all():
            if needle in self.get_product_name(card).lower():
                return card
        return None

    # Cart actions -------------------------------------------------------

    def add_product_to_cart(self, card: Locator) -> None:
        card.hover()
        self.get_add_to_cart_button(card).click()

    def add_product_to_cart_by_name(self, product_name: str) -> bool:
        card = self.find_product_by_name(product_name)
        if card is None:
            return False
        self.add_product_to_cart(card)
        return True

    def add_random_product_to_cart(self) -> Optional[Product]:
        count = self.get_product_count()
        if count == 0:
            return None
        index = random.randrange(count)
        card = self.get_product_card_by_index(index)
        product = self.read_product(card)
        self.add_product_to_cart(card)
        logger.info("Added %s (%s) to cart", product.name, product.price)
        return product
