"""Storefront domain API package."""

from storefront.api.routes import (
    banner_router,
    cart_router,
    category_router,
    discount_router,
    order_router,
    product_router,
)

__all__ = [
    "banner_router",
    "cart_router",
    "category_router",
    "discount_router",
    "order_router",
    "product_router",
]
