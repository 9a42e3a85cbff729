"""Petite Treats bakery storefront: catalog API and shopper-facing pages."""

__version__ = "1.0.0"
