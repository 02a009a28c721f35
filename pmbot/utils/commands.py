"""Module for setting up bot commands."""
import logging
from typing import Iterable

from aiogram import Bot
from aiogram.exceptions import TelegramBadRequest
from aiogram.types import BotCommand, BotCommandScopeAllPrivateChats, BotCommandScopeChat, BotCommandScopeDefault

logger = logging.getLogger(__name__)

PRIVATE_COMMANDS = [
    BotCommand(command="start", description="Начать"),
]

ADMIN_COMMANDS = [
    BotCommand(command="pending", description="Пользователи на проверке"),
    BotCommand(command="failed", description="Не прошли проверку"),
    BotCommand(command="block", description="Заблокировать (ответом)"),
    BotCommand(command="unblock", description="Разблокировать (ответом)"),
    BotCommand(command="checkblock", description="Статус пользователя (ответом)"),
]


async def set_bot_commands(bot: Bot, admin_ids: Iterable[int]) -> None:
    """
    Sets up the commands for the bot in the Telegram UI.

    Guests see only /start, every administrator additionally gets the
    moderation commands in their own chat.
    """
    try:
        await bot.delete_my_commands(scope=BotCommandScopeDefault())
        await bot.delete_my_commands(scope=BotCommandScopeAllPrivateChats())
        logger.info("Старые команды бота очищены")
    except TelegramBadRequest as e:
        logger.warning(f"Ошибка при очистке команд: {e}")

    try:
        await bot.set_my_commands(PRIVATE_COMMANDS, scope=BotCommandScopeAllPrivateChats())
        logger.info("Команды бота настроены для личных сообщений")
    except TelegramBadRequest as e:
        logger.error(f"Не удалось установить команды бота: {e}")

    for admin_id in admin_ids:
        try:
            await bot.set_my_commands(
                PRIVATE_COMMANDS + ADMIN_COMMANDS,
                scope=BotCommandScopeChat(chat_id=admin_id),
            )
            logger.info(f"Команды администратора установлены для {admin_id}")
        except TelegramBadRequest as e:
            # Администратор ещё не писал боту
            logger.error(f"Не удалось установить команды для администратора {admin_id}: {e}")
