"""
Route definitions for the catalog API.

Endpoints:
- GET  /featured            : featured product names (plain text)
- GET  /products            : list products, filtered and sorted
- GET  /products/{name}     : one product
- GET  /flavors/{name}      : flavor labels offered for a product
- GET  /macaron-flavors     : macaron flavor cards
- GET  /box-decorations     : box decoration styles (plain text)
- GET  /faq                 : questions and answers
- POST /custom-description  : product description for a flavor/box pair

Validation runs in dependencies, before a handler touches the database.
Errors leave as ``HTTPException`` and are rendered as plain text by the
handler registered in ``main.py``.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from ..config import Settings
from ..database import get_session
from ..errors import INVALID_QUERY_ERR, PRODUCT_404_ERR, SERVER_ERROR, ProductNotFound, server_faults
from ..models import CustomDescriptionRequest, parse_description_request, read_payload
from . import store
from ..naming import dash_form
from .schemas import FAQEntry, MacaronFlavor, Product, ProductQuery

logger = logging.getLogger(__name__)

router = APIRouter(tags=["catalog"])

SORT_FIELDS = ("name", "price")
SORT_DIRECTIONS = ("asc", "desc")


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def products_query(
    contains: Optional[str] = Query(default=None, description="Words the product name must contain, dash separated"),
    sort: Optional[str] = Query(default=None, description="Sort field: name or price"),
    direction: Optional[str] = Query(default=None, description="Sort direction: asc or desc"),
) -> ProductQuery:
    """Normalize the ``GET /products`` query string.

    Missing values default to an empty filter sorted by name ascending.
    ``sort`` and ``direction`` ignore case; anything outside the allowed
    values is rejected with a 400 before the store is queried.
    """
    sort = (sort or "name").lower()
    direction = (direction or "asc").lower()
    if sort not in SORT_FIELDS or direction not in SORT_DIRECTIONS:
        raise HTTPException(status_code=400, detail=INVALID_QUERY_ERR)
    return ProductQuery(contains=dash_form(contains or ""), sort=sort, direction=direction)


async def description_params(request: Request) -> CustomDescriptionRequest:
    payload = await read_payload(request)
    return parse_description_request(payload)


def _text(lines: List[str]) -> PlainTextResponse:
    return PlainTextResponse("\n".join(lines))


@router.get("/featured", response_class=PlainTextResponse)
def featured(
    settings: Settings = Depends(get_settings),
    session: Session = Depends(get_session),
):
    with server_faults("Reading featured products"):
        try:
            names = store.read_featured(session, settings.featured_path)
        except ProductNotFound as e:
            # A stale entry in the featured file is a server-side fault
            logger.error("Featured product %r does not exist", e.key)
            raise HTTPException(status_code=500, detail=SERVER_ERROR)
    return _text(names)


@router.get("/products", response_model=List[Product])
def list_products(
    query: ProductQuery = Depends(products_query),
    session: Session = Depends(get_session),
) -> List[Product]:
    with server_faults("Listing products"):
        return store.list_products(session, query)


@router.get("/products/{name}", response_model=Product)
def get_product(name: str, session: Session = Depends(get_session)) -> Product:
    with server_faults("Fetching product"):
        try:
            return store.get_product(session, name)
        except ProductNotFound:
            raise HTTPException(status_code=400, detail=PRODUCT_404_ERR)


@router.get("/flavors/{name}", response_model=List[str])
def get_flavors(name: str, session: Session = Depends(get_session)) -> List[str]:
    with server_faults("Fetching product flavors"):
        try:
            return store.get_product_flavors(session, name)
        except ProductNotFound:
            raise HTTPException(status_code=400, detail=PRODUCT_404_ERR)


@router.get("/macaron-flavors", response_model=List[MacaronFlavor])
def macaron_flavors(session: Session = Depends(get_session)) -> List[MacaronFlavor]:
    with server_faults("Listing macaron flavors"):
        return store.list_macaron_flavors(session)


@router.get("/box-decorations", response_class=PlainTextResponse)
def box_decorations(settings: Settings = Depends(get_settings)):
    with server_faults("Reading box decorations"):
        styles = store.read_box_decorations(settings.box_decorations_path)
    return _text(styles)


@router.get("/faq", response_model=List[FAQEntry])
def faq(session: Session = Depends(get_session)) -> List[FAQEntry]:
    with server_faults("Listing FAQ"):
        return store.list_faq(session)


@router.post("/custom-description", response_class=PlainTextResponse)
def custom_description(
    params: CustomDescriptionRequest = Depends(description_params),
    session: Session = Depends(get_session),
):
    with server_faults("Composing custom description"):
        try:
            text = store.get_custom_description(session, params.product, params.flavor, params.box)
        except ProductNotFound:
            raise HTTPException(status_code=400, detail=PRODUCT_404_ERR)
    return PlainTextResponse(text)
