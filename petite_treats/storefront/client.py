"""
HTTP client for the storefront API.

``StorefrontClient`` wraps an ``httpx.Client``; in tests that client is
FastAPI's ``TestClient``, so the pages below run against the real
application without a network. Every call either returns parsed data
or raises ``RequestFailed``, whatever went wrong (connection error,
timeout, non-2xx status).
"""

from __future__ import annotations

import logging
from typing import List, Optional
from urllib.parse import quote

import httpx

from ..catalog.schemas import FAQEntry, MacaronFlavor, Product


logger = logging.getLogger(__name__)


class RequestFailed(Exception):
    """A request did not produce a successful response.

    ``status_code`` is ``None`` for transport errors; otherwise ``message``
    holds the plain-text body sent by the server.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _lines(text: str) -> List[str]:
    return [line for line in text.strip().split("\n") if line.strip()]


class StorefrontClient:
    def __init__(self, http: httpx.Client):
        self.http = http

    @classmethod
    def from_base_url(cls, base_url: str, timeout: Optional[float] = None) -> "StorefrontClient":
        return cls(httpx.Client(base_url=base_url, timeout=timeout))

    def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = self.http.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise RequestFailed(str(exc)) from exc
        if not response.is_success:
            logger.warning("%s %s returned status %s", method, path, response.status_code)
            raise RequestFailed(response.text, status_code=response.status_code)
        return response

    def _json(self, method: str, path: str, **kwargs):
        response = self._send(method, path, **kwargs)
        try:
            return response.json()
        except ValueError as exc:
            raise RequestFailed(f"Malformed response from {path}", response.status_code) from exc

    def featured(self) -> List[str]:
        return _lines(self._send("GET", "/featured").text)

    def products(self, contains: str = "", sort: str = "name", direction: str = "asc") -> List[Product]:
        params = {"contains": contains, "sort": sort, "direction": direction}
        data = self._json("GET", "/products", params=params)
        return [Product.model_validate(item) for item in data]

    def product(self, key: str) -> Product:
        data = self._json("GET", f"/products/{quote(key, safe='')}")
        return Product.model_validate(data)

    def flavors(self, key: str) -> List[str]:
        return list(self._json("GET", f"/flavors/{quote(key, safe='')}"))

    def box_decorations(self) -> List[str]:
        return _lines(self._send("GET", "/box-decorations").text)

    def macaron_flavors(self) -> List[MacaronFlavor]:
        data = self._json("GET", "/macaron-flavors")
        return [MacaronFlavor.model_validate(item) for item in data]

    def faq(self) -> List[FAQEntry]:
        data = self._json("GET", "/faq")
        return [FAQEntry.model_validate(item) for item in data]

    def custom_description(self, product: str, flavor: str, box: str) -> str:
        body = {"product": product, "flavor": flavor, "box": box}
        return self._send("POST", "/custom-description", json=body).text

    def contact(self, name: str, email: str, message: str) -> str:
        # Sent as a form, like the contact page does
        form = {"name": name, "email": email, "message": message}
        return self._send("POST", "/contact-us", data=form).text
