"""
Shopper-facing side of the storefront.

Pages (``views``) fetch catalog data through ``StorefrontClient`` and
expose cards and status messages; the cart (``cart``) lives entirely in
a ``SessionStore`` and never calls the API.
"""

from .cart import CartManager, CartView  # noqa: F401
from .client import RequestFailed, StorefrontClient  # noqa: F401
from .session import InMemorySessionStore, JsonFileSessionStore, SessionStore  # noqa: F401
