"""
FastAPI Todo API package.

Exposes ``create_app`` for building the application around an existing
connection pool; the ready-made ASGI instance lives at ``todo_api.main:app``.
"""

from .main import create_app  # noqa: F401
