"""Middleware для передачи сервисов в обработчики."""

from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject, Update
from loguru import logger

from pmbot.config.settings import Settings
from pmbot.database.manager import DatabaseManager
from pmbot.services.captcha_service import CaptchaService
from pmbot.services.moderation_service import ModerationService
from pmbot.services.relay_service import RelayService


class ServiceMiddleware(BaseMiddleware):
    """
    Middleware для передачи сервисов и менеджеров в обработчики.
    Создает сервисы "на лету" для каждого события.
    """

    def __init__(self, db_manager: DatabaseManager, settings: Settings):
        """Инициализация middleware."""
        super().__init__()
        self.db_manager = db_manager
        self.settings = settings

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        """Выполнение middleware."""
        if isinstance(event, Update):
            logger.debug(f"🔧 SERVICE_MIDDLEWARE: update {event.update_id} ({event.event_type})")

        bot = data["bot"]
        data["db_manager"] = self.db_manager
        data["settings"] = self.settings
        data["captcha_service"] = CaptchaService(self.db_manager, bot, self.settings)
        data["relay_service"] = RelayService(self.db_manager, bot, self.settings)
        data["moderation_service"] = ModerationService(self.db_manager, bot, self.settings)

        return await handler(event, data)
