"""
HomePoker Server - FastAPI HTTP Layer
"""

from homepoker.server.app import app, create_app

__all__ = ["app", "create_app"]
