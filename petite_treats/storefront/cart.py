"""
Shopping cart kept in session storage.

The cart is a JSON array stored under the ``"cart"`` key, e.g.::

    [{"name": "Cake", "slug": "cake", "price": 10.0,
      "customizations": [{"flavor": "Chocolate", "box": "Plain"},
                         {"flavor": "Vanilla", "box": "Flower"}]}]

``flavor`` is null for products that have no flavor options.

There is at most one line item per product and one customization per
unit, so the quantity of a line item is the length of its
customization list. Every operation loads the cart, changes it and
writes it back in one pass.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, Field, TypeAdapter

from .session import SessionStore

CART_KEY = "cart"
MIN_QUANTITY = 1
MAX_QUANTITY = 10

CENTS = Decimal("0.01")


def _money(value: Decimal) -> Decimal:
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


class Customization(BaseModel):
    flavor: Optional[str] = None
    box: str

    @property
    def label(self) -> str:
        if self.flavor:
            return f"Flavor: {self.flavor}\nBox Decoration: {self.box}"
        return f"Box Decoration: {self.box}"


class CartLineItem(BaseModel):
    name: str
    slug: str
    price: float = Field(ge=0)
    customizations: List[Customization] = Field(default_factory=list)

    @property
    def quantity(self) -> int:
        return len(self.customizations)

    @property
    def total(self) -> Decimal:
        return _money(Decimal(str(self.price)) * self.quantity)


_CART_ADAPTER = TypeAdapter(List[CartLineItem])


def parse_quantity(value: Any) -> Optional[int]:
    """Return the quantity as an int, or ``None`` if it is not usable.

    Accepts ints and integer strings between ``MIN_QUANTITY`` and
    ``MAX_QUANTITY`` inclusive.
    """
    if isinstance(value, bool):
        return None
    try:
        qty = int(str(value).strip())
    except ValueError:
        return None
    if qty < MIN_QUANTITY or qty > MAX_QUANTITY:
        return None
    return qty


class CartManager:
    def __init__(self, store: SessionStore, key: str = CART_KEY):
        self.store = store
        self.key = key

    def load(self) -> List[CartLineItem]:
        raw = self.store.get(self.key)
        if not raw:
            return []
        return _CART_ADAPTER.validate_json(raw)

    def save(self, items: List[CartLineItem]) -> None:
        self.store.set(self.key, _CART_ADAPTER.dump_json(items).decode("utf-8"))

    def add(
        self, name: str, slug: str, price: float, quantity: Any, flavor: Optional[str], box: str
    ) -> bool:
        """Add ``quantity`` units of a product with the same customization.

        Units of a product already in the cart are appended to its
        existing line item, which then moves to the end of the cart so the
        most recently added product is listed last. ``flavor`` is ``None``
        for products without flavor options. An invalid quantity leaves the
        cart untouched and returns ``False``.
        """
        qty = parse_quantity(quantity)
        if qty is None:
            return False

        items = self.load()
        item = next((i for i in items if i.slug == slug), None)
        if item is None:
            item = CartLineItem(name=name, slug=slug, price=price)
        else:
            items.remove(item)
        items.append(item)
        item.customizations.extend(Customization(flavor=flavor, box=box) for _ in range(qty))
        self.save(items)
        return True

    def remove(self, slug: str) -> Optional[CartLineItem]:
        items = self.load()
        removed = next((i for i in items if i.slug == slug), None)
        if removed is None:
            return None
        self.save([i for i in items if i.slug != slug])
        return removed

    def clear(self) -> None:
        self.save([])


@dataclass
class CartLine:
    """One rendered line item.

    ``slug`` identifies the product; ``label`` is only for display.
    """

    slug: str
    name: str
    quantity: int
    amount: Decimal
    customizations: List[str] = field(default_factory=list)

    @property
    def label(self) -> str:
        return f"{self.quantity} {self.name} - ${self.amount:.2f}"


class CartView:
    """The cart page: rendered lines plus the running count and total."""

    def __init__(self, cart: CartManager):
        self.cart = cart
        self.lines: List[CartLine] = []
        self.count = 0
        self.total = Decimal("0.00")

    @property
    def total_text(self) -> str:
        return f"{self.total:.2f}"

    def render(self) -> List[CartLine]:
        self.lines = []
        self.count = 0
        self.total = Decimal("0.00")
        for item in self.cart.load():
            line = CartLine(
                slug=item.slug,
                name=item.name,
                quantity=item.quantity,
                amount=item.total,
                customizations=[c.label for c in item.customizations],
            )
            self.lines.append(line)
            self.count += line.quantity
            self.total += line.amount
        return self.lines

    def remove(self, slug: str) -> bool:
        line = next((entry for entry in self.lines if entry.slug == slug), None)
        if line is None:
            return False
        self.cart.remove(slug)
        self.count -= line.quantity
        self.total = _money(self.total - line.amount)
        self.lines.remove(line)
        return True

    def clear(self) -> None:
        self.cart.clear()
        self.lines = []
        self.count = 0
        self.total = Decimal("0.00")
