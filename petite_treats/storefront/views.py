"""
Storefront pages rendered from API data.

Each view fetches what it needs through a ``StorefrontClient`` and
exposes plain data for a template layer: cards, a ``state`` and the
status ``message`` shown above the content. Any failed or malformed
response puts the view in ``ViewState.ERROR`` with one generic message;
nothing is retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from pydantic import ValidationError

from ..catalog.schemas import FAQEntry, MacaronFlavor, Product
from ..naming import dash_form
from .cart import CartManager
from .client import RequestFailed, StorefrontClient


logger = logging.getLogger(__name__)

LOADING_MESSAGE = "Response Loading..."
LOAD_ERROR = "There was an error loading the data. Please try again later."
POST_ERROR = "The server encountered an error. Please try again later."

CART_PAGE = "cart"

_FETCH_ERRORS = (RequestFailed, ValidationError)


class ViewState(str, Enum):
    LOADING = "loading"
    LOADED = "loaded"
    EMPTY = "empty"
    ERROR = "error"


@dataclass
class ProductCard:
    name: str
    slug: str
    price: str
    image: str
    alt: str
    description: Optional[str] = None

    @classmethod
    def from_product(cls, product: Product, with_description: bool = False) -> "ProductCard":
        return cls(
            name=product.name,
            slug=product.slug,
            price=f"${product.price:.2f}",
            image=product.image,
            alt=product.name,
            description=product.description if with_description else None,
        )


class _View:
    def __init__(self, client: StorefrontClient):
        self.client = client
        self.state = ViewState.LOADING
        self.message = ""

    def _loading(self) -> None:
        self.state = ViewState.LOADING
        self.message = LOADING_MESSAGE

    def _failed(self, exc: Exception) -> None:
        logger.info("%s failed to load: %s", type(self).__name__, exc)
        self.state = ViewState.ERROR
        self.message = LOAD_ERROR

    def _loaded(self) -> None:
        self.state = ViewState.LOADED
        self.message = ""


class ProductListView(_View):
    """The menu: every product, or the result of a search/sort."""

    def __init__(self, client: StorefrontClient):
        super().__init__(client)
        self.cards: List[ProductCard] = []

    def load(self) -> ViewState:
        return self.search("")

    def search(self, query: str, sort: str = "name", direction: str = "asc") -> ViewState:
        """Run a search and replace the cards with its results.

        ``query`` is the text typed by the shopper; it is sent in dash
        form. The previous cards are kept only if the request fails.
        """
        self._loading()
        try:
            products = self.client.products(contains=dash_form(query), sort=sort, direction=direction)
        except _FETCH_ERRORS as exc:
            self._failed(exc)
            return self.state

        self.cards = [ProductCard.from_product(p) for p in products]
        if self.cards:
            self._loaded()
        else:
            self.state = ViewState.EMPTY
            self.message = f"No products found matching '{query}'."
        return self.state


class ProductDetailView(_View):
    """Single product with flavor/box selection and add-to-cart."""

    def __init__(self, client: StorefrontClient, cart: CartManager):
        super().__init__(client)
        self.cart = cart
        self.visible = False
        self.product: Optional[Product] = None
        self.flavors: List[str] = []
        self.boxes: List[str] = []
        self.flavor = ""
        self.box = ""
        self.description = ""

    def open(self, slug: str) -> ViewState:
        """Show the product identified by ``slug``.

        Product, flavors, box decorations and the first description are
        fetched one after the other; the view only switches to the new
        product once all of them arrived.
        """
        self._loading()
        try:
            product = self.client.product(slug)
            flavors = self.client.flavors(product.slug)
            boxes = self.client.box_decorations()
            flavor = flavors[0] if flavors else ""
            box = boxes[0] if boxes else ""
            if flavor and box:
                description = self.client.custom_description(product.slug, flavor, box)
            else:
                description = product.description
        except _FETCH_ERRORS as exc:
            self._failed(exc)
            return self.state

        self.product = product
        self.flavors = flavors
        self.boxes = boxes
        self.flavor = flavor
        self.box = box
        self.description = description
        self.visible = True
        self._loaded()
        return self.state

    def select(self, flavor: Optional[str] = None, box: Optional[str] = None) -> ViewState:
        """Change the flavor and/or box and refresh the description.

        A response is applied only if the selection it was requested for
        is still the current one, so the latest selection always wins.
        Products without flavors keep their plain description.
        """
        if self.product is None:
            return self.state
        if flavor is not None:
            self.flavor = flavor
        if box is not None:
            self.box = box
        if not self.flavors:
            self.flavor = ""
            self.description = self.product.description
            self._loaded()
            return self.state
        requested = (self.flavor, self.box)

        self._loading()
        try:
            text = self.client.custom_description(self.product.slug, *requested)
        except _FETCH_ERRORS as exc:
            self._failed(exc)
            return self.state

        if requested == (self.flavor, self.box):
            self.description = text
        self._loaded()
        return self.state

    def add_to_cart(self, quantity) -> Optional[str]:
        """Put ``quantity`` units with the current selection in the cart.

        Returns the page to navigate to, or ``None`` when nothing was
        added (no product shown or an invalid quantity).
        """
        if self.product is None:
            return None
        added = self.cart.add(
            name=self.product.name,
            slug=self.product.slug,
            price=self.product.price,
            quantity=quantity,
            flavor=self.flavor or None,
            box=self.box,
        )
        return CART_PAGE if added else None

    def back(self) -> None:
        self.visible = False
        self.message = ""


class FeaturedSection(_View):
    """Home page products, in the order listed by ``GET /featured``."""

    def __init__(self, client: StorefrontClient):
        super().__init__(client)
        self.cards: List[ProductCard] = []

    def load(self) -> ViewState:
        self._loading()
        self.cards = []
        cards = []
        try:
            for name in self.client.featured():
                product = self.client.product(name)
                cards.append(ProductCard.from_product(product, with_description=True))
        except _FETCH_ERRORS as exc:
            self._failed(exc)
            return self.state

        self.cards = cards
        self._loaded()
        return self.state


@dataclass
class FaqCard:
    question: str
    answer: str

    @classmethod
    def from_entry(cls, entry: FAQEntry) -> "FaqCard":
        return cls(question=f"Q: {entry.question}", answer=f"A: {entry.answer}")


class FaqPage(_View):
    def __init__(self, client: StorefrontClient):
        super().__init__(client)
        self.cards: List[FaqCard] = []

    def load(self) -> ViewState:
        self._loading()
        try:
            entries = self.client.faq()
        except _FETCH_ERRORS as exc:
            self._failed(exc)
            return self.state
        self.cards = [FaqCard.from_entry(e) for e in entries]
        self._loaded()
        return self.state


@dataclass
class FlavorCard:
    name: str
    image: str
    alt: str
    description: str

    @classmethod
    def from_flavor(cls, flavor: MacaronFlavor) -> "FlavorCard":
        return cls(
            name=flavor.name,
            image=flavor.image,
            alt=f"{flavor.name} macaron",
            description=flavor.description,
        )


class FlavorsPage(_View):
    """Macaron flavors; entries without a description or image are skipped."""

    def __init__(self, client: StorefrontClient):
        super().__init__(client)
        self.cards: List[FlavorCard] = []

    def load(self) -> ViewState:
        self._loading()
        try:
            flavors = self.client.macaron_flavors()
        except _FETCH_ERRORS as exc:
            self._failed(exc)
            return self.state
        self.cards = [FlavorCard.from_flavor(f) for f in flavors if f.description and f.image]
        self._loaded()
        return self.state


class ContactForm:
    def __init__(self, client: StorefrontClient):
        self.client = client
        self.name = ""
        self.email = ""
        self.message = ""
        self.confirmation = ""

    def submit(self, name: str, email: str, message: str) -> bool:
        """Send the form; on success the fields are reset.

        Rejections (4xx) show the server's own explanation; anything else
        shows the generic error message.
        """
        self.name, self.email, self.message = name, email, message
        try:
            self.confirmation = self.client.contact(name, email, message)
        except RequestFailed as exc:
            if exc.status_code is not None and 400 <= exc.status_code < 500:
                self.confirmation = exc.message
            else:
                self.confirmation = POST_ERROR
            return False
        self.name = self.email = self.message = ""
        return True
