from aiogram import Router

from .callbacks import setup_admin_callbacks_router
from .commands import setup_admin_commands_router


def setup_admin_router() -> Router:
    router = Router(name="admin_main")
    router.include_router(setup_admin_callbacks_router())
    router.include_router(setup_admin_commands_router())
    return router
