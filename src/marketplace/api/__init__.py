"""Marketplace domain API package."""

from marketplace.api.routes import register_marketplace_exception_handlers, router

__all__ = ["router", "register_marketplace_exception_handlers"]
