"""API routes package."""

from app.api.routes import ai, notes, subjects, users

__all__ = [
    "ai",
    "notes",
    "subjects",
    "users",
]
