"""
Pydantic schema definitions for the catalog module.

``Product`` carries both the display ``name`` and the stable ``slug``
so that clients never need to rebuild a URL key from the display text.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

SortField = Literal["name", "price"]
SortDirection = Literal["asc", "desc"]


class Product(BaseModel):
    """A product as rendered on a menu card or the detail view."""

    model_config = ConfigDict(from_attributes=True)

    name: str
    slug: str
    price: float = Field(ge=0)
    description: str
    image: str


class MacaronFlavor(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str
    description: str
    image: str


class FAQEntry(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    question: str
    answer: str


class ProductQuery(BaseModel):
    """Normalized filter and sort options for ``GET /products``.

    ``contains`` is in dash form (``"mini-palmiers"``); every dash
    separated token must appear in the product name.
    """

    contains: str = ""
    sort: SortField = "name"
    direction: SortDirection = "asc"
