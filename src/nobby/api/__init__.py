"""HTTP API routers."""

from nobby.api.router import api_router

__all__ = ["api_router"]
