"""Pydantic schemas for request/response validation."""

from showroom.schemas.auth import (
    AdminIdentity,
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    SessionResponse,
)
from showroom.schemas.category import CategoryResponse, CategoryWrite
from showroom.schemas.common import ErrorResponse, HealthResponse, SuccessResponse
from showroom.schemas.contact import ContactInquiry
from showroom.schemas.product import (
    LocalizedText,
    ProductCreate,
    ProductImage,
    ProductResponse,
    ProductUpdate,
    ProductView,
)

__all__ = [
    "AdminIdentity",
    "ChangePasswordRequest",
    "LoginRequest",
    "LoginResponse",
    "SessionResponse",
    "CategoryResponse",
    "CategoryWrite",
    "ErrorResponse",
    "HealthResponse",
    "SuccessResponse",
    "ContactInquiry",
    "LocalizedText",
    "ProductCreate",
    "ProductImage",
    "ProductResponse",
    "ProductUpdate",
    "ProductView",
]
