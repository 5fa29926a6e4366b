"""Catalogue domain API package."""

from catalogue.api.routes import company_router, favorite_router, product_router

__all__ = ["product_router", "company_router", "favorite_router"]
