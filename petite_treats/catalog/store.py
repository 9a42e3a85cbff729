"""
Query functions for the catalog API.

Every function takes an open SQLAlchemy ``Session`` owned by the caller
(one per request, see ``database.get_session``) and returns Pydantic
schema objects ready to be serialized. Input is expected to be
validated already; the router's dependencies take care of that.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from ..errors import ProductNotFound
from ..tables import FAQEntry as FAQRow
from ..tables import MacaronFlavor as MacaronFlavorRow
from ..tables import Product as ProductRow
from ..tables import ProductFlavor as ProductFlavorRow
from ..naming import build_description_template, render_description, title_case
from .schemas import FAQEntry, MacaronFlavor, Product, ProductQuery


logger = logging.getLogger(__name__)


def _escape_like(token: str) -> str:
    return token.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _find_product(session: Session, key: str) -> ProductRow:
    """Resolve a product row from a slug, its display name or its dash form.

    Raises
    ------
    ProductNotFound
        When neither the slug nor either form of the name matches a row.
    """
    stmt = select(ProductRow).where(
        or_(
            ProductRow.slug == key.strip().lower(),
            func.lower(ProductRow.name) == key.strip().lower(),
            func.lower(ProductRow.name) == title_case(key.strip()).lower(),
        )
    )
    row = session.scalars(stmt).first()
    if row is None:
        raise ProductNotFound(key)
    return row


def list_products(session: Session, query: ProductQuery) -> List[Product]:
    """Return the products whose name contains every token of the query.

    Parameters
    ----------
    session : Session
        Open database session.
    query : ProductQuery
        ``contains`` is split on dashes; each non-empty token must appear
        in the name, ignoring case. An empty filter matches the whole
        catalog. Products are ordered by ``sort`` in ``direction``; equal
        prices fall back to name order.

    Returns
    -------
    List[Product]
        The matching products, possibly empty.
    """
    stmt = select(ProductRow)
    for token in query.contains.split("-"):
        if token:
            stmt = stmt.where(ProductRow.name.ilike(f"%{_escape_like(token)}%", escape="\\"))

    column = ProductRow.price if query.sort == "price" else ProductRow.name
    stmt = stmt.order_by(column.desc() if query.direction == "desc" else column.asc())
    if query.sort == "price":
        stmt = stmt.order_by(ProductRow.name.asc())

    logger.debug(
        "Listing products contains=%r sort=%s direction=%s",
        query.contains,
        query.sort,
        query.direction,
    )
    return [Product.model_validate(row) for row in session.scalars(stmt)]


def get_product(session: Session, key: str) -> Product:
    return Product.model_validate(_find_product(session, key))


def get_product_flavors(session: Session, key: str) -> List[str]:
    """Return the flavor labels offered for a product.

    The product is looked up first so that an unknown product is reported
    as such, while a known product without flavors yields an empty list.
    """
    product = _find_product(session, key)
    stmt = (
        select(ProductFlavorRow.flavor)
        .where(ProductFlavorRow.product == product.name)
        .order_by(ProductFlavorRow.flavor)
    )
    return list(session.scalars(stmt))


def get_custom_description(session: Session, key: str, flavor: str, box: str) -> str:
    """Compose the product description for a flavor and box decoration.

    Uses the stored ``description_template`` when present; otherwise the
    template is derived from the plain description, placing the flavor
    as the third word and the box right before the last word.
    """
    product = _find_product(session, key)
    template = product.description_template or build_description_template(product.description)
    return render_description(template, flavor=flavor, box=box)


def list_macaron_flavors(session: Session) -> List[MacaronFlavor]:
    stmt = select(MacaronFlavorRow).order_by(MacaronFlavorRow.name)
    return [MacaronFlavor.model_validate(row) for row in session.scalars(stmt)]


def list_faq(session: Session) -> List[FAQEntry]:
    stmt = select(FAQRow).order_by(FAQRow.id)
    return [FAQEntry.model_validate(row) for row in session.scalars(stmt)]


def _read_lines(path: Path) -> List[str]:
    with path.open("r", encoding="utf-8") as f:
        lines = [line.strip() for line in f]
    return [line for line in lines if line]


def read_featured(session: Session, path: Path) -> List[str]:
    """Names of the featured products, in file order.

    The file lists one product slug per line; each is resolved to the
    product's stored name.

    Raises
    ------
    ProductNotFound
        When a listed slug matches no product.
    """
    return [_find_product(session, slug).name for slug in _read_lines(path)]


def read_box_decorations(path: Path) -> List[str]:
    """Box decoration styles, in file order, title-cased."""
    return [title_case(line) for line in _read_lines(path)]
