"""Business logic services."""

from showroom.services.auth_service import AuthService
from showroom.services.catalog_service import CatalogService
from showroom.services.category_service import CategoryService
from showroom.services.contact_service import ContactService

__all__ = [
    "AuthService",
    "CatalogService",
    "CategoryService",
    "ContactService",
]
