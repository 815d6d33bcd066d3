"""API route modules."""

from recordboard.api.routes.clubs import router as clubs_router
from recordboard.api.routes.health import router as health_router
from recordboard.api.routes.public import router as public_router
from recordboard.api.routes.record_lists import router as record_lists_router
from recordboard.api.routes.records import router as records_router

__all__ = [
    "clubs_router",
    "health_router",
    "public_router",
    "record_lists_router",
    "records_router",
]
