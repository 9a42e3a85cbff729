"""
Catalog package for the bakery storefront API.

This package contains the schemas, query functions and route
definitions that expose the product menu, product flavors, macaron
flavors, box decorations, the FAQ and customized product descriptions.
Products are read-only through the API; the tables are seeded once at
start-up from ``data/seed.json``.
"""

from .router import router as catalog_router  # noqa: F401
