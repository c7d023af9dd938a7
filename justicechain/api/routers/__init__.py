from .cases import router as cases_router
from .evidence import router as evidence_router
from .investigation import router as investigation_router
from .users import admin_router, auth_router, users_router

__all__ = [
    "admin_router",
    "auth_router",
    "cases_router",
    "evidence_router",
    "investigation_router",
    "users_router",
]
