from .admin import setup_admin_router
from .guest import setup_guest_router
from .start import setup_start_router
from .verification import setup_verification_router

__all__ = [
    "setup_admin_router",
    "setup_guest_router",
    "setup_start_router",
    "setup_verification_router",
]
