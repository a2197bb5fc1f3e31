"""API route handlers."""

from videomania.api.openapi.routes import comments, health, uploads, videos

__all__ = [
    "comments",
    "health",
    "uploads",
    "videos",
]
