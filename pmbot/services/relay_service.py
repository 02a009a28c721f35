"""Сервис пересылки сообщений между гостями и администраторами."""

from typing import Iterable, Optional

import aiosqlite
from aiogram import Bot
from aiogram.exceptions import TelegramAPIError
from aiogram.types import Message
from loguru import logger

from pmbot.config.settings import Settings
from pmbot.database.manager import DatabaseManager


class RelayService:
    """
    Пересылает сообщения гостя каждому администратору и
    возвращает ответы администраторов нужному гостю.
    """

    def __init__(self, db_manager: DatabaseManager, bot: Bot, settings: Settings):
        self.db = db_manager
        self.bot = bot
        self.settings = settings

    async def relay_to_admins(self, message: Message, admin_ids: Iterable[int]) -> int:
        """
        Пересылает сообщение каждому администратору отдельно.

        Для каждой успешной пересылки запоминается id пересланной копии,
        чтобы ответ на неё можно было вернуть гостю. Ошибка для одного
        администратора не мешает остальным.

        :return: Количество успешных пересылок.
        """
        guest_id = message.chat.id
        delivered = 0
        for admin_id in admin_ids:
            try:
                forwarded = await self.bot.forward_message(
                    chat_id=admin_id,
                    from_chat_id=guest_id,
                    message_id=message.message_id,
                )
                await self.db.message_map.save(
                    admin_id, forwarded.message_id, guest_id, ttl=self.settings.message_map_ttl_seconds
                )
            except (TelegramAPIError, aiosqlite.Error) as e:
                logger.error(
                    f"❌ Не удалось переслать сообщение {message.message_id} от {guest_id} администратору {admin_id}: {e}"
                )
                continue
            delivered += 1

        logger.debug(f"📨 Сообщение {message.message_id} от {guest_id} переслано {delivered} администраторам")
        return delivered

    async def resolve_guest(self, admin_id: int, message_id: int) -> Optional[int]:
        """Чат гостя, сообщение которого было переслано администратору admin_id как message_id."""
        return await self.db.message_map.resolve(admin_id, message_id)

    async def route_admin_reply(self, message: Message) -> bool:
        """
        Копирует ответ администратора гостю.

        Если исходное сообщение неизвестно, ответ молча отбрасывается.
        """
        if message.reply_to_message is None:
            return False

        guest_id = await self.resolve_guest(message.chat.id, message.reply_to_message.message_id)
        if guest_id is None:
            logger.debug(
                f"Ответ администратора {message.chat.id} на неизвестное сообщение "
                f"{message.reply_to_message.message_id} пропущен"
            )
            return False

        await self.bot.copy_message(
            chat_id=guest_id,
            from_chat_id=message.chat.id,
            message_id=message.message_id,
        )
        logger.info(f"↩️ Ответ администратора {message.chat.id} отправлен пользователю {guest_id}")
        return True
