"""FastAPI routers exposing the object store."""

from .download_api import router as download_router
from .files_api import router as files_router

__all__ = ["download_router", "files_router"]
