"""Root-level routes: short link redirects and liveness."""

from .routes import router as web_router

__all__ = ["web_router"]
