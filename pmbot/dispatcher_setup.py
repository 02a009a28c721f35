"""
Настройка и регистрация всех обработчиков и middleware для диспетчера.
"""
from typing import TYPE_CHECKING

from aiogram import Dispatcher
from loguru import logger

from pmbot.handlers import (
    setup_admin_router,
    setup_guest_router,
    setup_start_router,
    setup_verification_router,
)
from pmbot.middleware.services import ServiceMiddleware

if TYPE_CHECKING:
    from pmbot.config.settings import Settings
    from pmbot.database.manager import DatabaseManager

ALLOWED_UPDATES = ["message", "callback_query"]


def setup_dispatcher(
    dp: Dispatcher,
    db_manager: "DatabaseManager",
    settings: "Settings",
) -> None:
    """
    Настраивает диспетчер, регистрируя middleware и обработчики.

    Порядок роутеров важен: /start, затем администраторы (их сообщения
    дальше не идут), затем ответы на викторину и в конце - гости.

    Args:
        dp: Экземпляр Dispatcher.
        db_manager: Менеджер базы данных.
        settings: Конфигурация бота.
    """
    service_middleware = ServiceMiddleware(
        db_manager=db_manager,
        settings=settings,
    )
    dp.update.middleware(service_middleware)

    dp.include_routers(
        setup_start_router(),
        setup_admin_router(),
        setup_verification_router(),
        setup_guest_router(),
    )

    logger.info("Все обработчики успешно зарегистрированы.")
