"""API routes module."""

from showroom.api.routes.admin_auth import router as admin_auth_router
from showroom.api.routes.admin_categories import router as admin_categories_router
from showroom.api.routes.admin_products import router as admin_products_router
from showroom.api.routes.contact import router as contact_router
from showroom.api.routes.health import router as health_router
from showroom.api.routes.products import router as products_router

__all__ = [
    "admin_auth_router",
    "admin_categories_router",
    "admin_products_router",
    "contact_router",
    "health_router",
    "products_router",
]
