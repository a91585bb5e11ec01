"""
ASGI entry point for the short-link service.

`uvicorn main:app` and `from main import app` build the app from environment
configuration. Tests and embedding code should call `create_app()` directly
so each instance gets its own storage handle.
"""

from shortlink_service.app import create_app

app = create_app()
