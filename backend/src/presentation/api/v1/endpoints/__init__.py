"""
API V1 Endpoints Package
Exports routers used by main app
"""
from .health import router as health_router
from .resume import router as resume_router
from .results import router as results_router
from .versions import router as versions_router

__all__ = [
    "health_router",
    "resume_router",
    "results_router",
    "versions_router",
]
