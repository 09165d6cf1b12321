from .admin import router as admin_router
from .auth import router as auth_router
from .chirps import router as chirps_router
from .users import router as users_router

__all__ = [
    "admin_router",
    "auth_router",
    "chirps_router",
    "users_router",
]
