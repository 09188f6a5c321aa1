"""API routers."""

from .analysis import router as analysis_router
from .chat import router as chat_router
from .collections import router as collections_router
from .health import router as health_router
from .sessions import router as sessions_router

__all__ = [
    "analysis_router",
    "chat_router",
    "collections_router",
    "health_router",
    "sessions_router",
]
