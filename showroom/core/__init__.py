"""Core module - slugs, specifications, credentials, sessions, errors."""

from showroom.core.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ShowroomError,
    ValidationError,
)
from showroom.core.slug import derive_slug, resolve_slug
from showroom.core.specs import parse_spec, render_spec

__all__ = [
    "AuthorizationError",
    "ConflictError",
    "NotFoundError",
    "ShowroomError",
    "ValidationError",
    "derive_slug",
    "resolve_slug",
    "parse_spec",
    "render_spec",
]
