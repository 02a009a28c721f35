"""Обработчик команды /start."""

from aiogram import Bot, F, Router
from aiogram.filters import CommandStart
from aiogram.types import Message
from loguru import logger

from pmbot.config.settings import Settings
from pmbot.services.captcha_service import CaptchaService
from pmbot.services.moderation_service import ModerationService
from pmbot.utils.texts import BLOCKED_NOTICE


async def start_command(
    message: Message,
    bot: Bot,
    settings: Settings,
    captcha_service: CaptchaService,
    moderation_service: ModerationService,
):
    """
    Приветствие и, если проверка включена, выдача задания.

    Основной администратор и уже проверенные пользователи задание не получают,
    заблокированные получают уведомление о блокировке.
    """
    chat_id = message.chat.id
    logger.info(f"👋 /start от пользователя {chat_id}")

    await bot.send_message(chat_id=chat_id, text=settings.WELCOME_MESSAGE, parse_mode=None)

    if not settings.CAPTCHA_ENABLED or chat_id == settings.primary_admin_id:
        return

    if await moderation_service.is_blocked(chat_id):
        await bot.send_message(chat_id=chat_id, text=BLOCKED_NOTICE)
        return

    if await captcha_service.is_verified(chat_id):
        logger.debug(f"Пользователь {chat_id} уже проверен")
        return

    user = message.from_user
    await captcha_service.issue_challenge(
        chat_id,
        username=user.username if user else None,
        first_name=user.first_name if user else None,
        last_name=user.last_name if user else None,
    )


def setup_start_router() -> Router:
    """Роутер /start в личных чатах."""
    router = Router(name="start")
    router.message.filter(F.chat.type == "private")
    router.message.register(start_command, CommandStart())
    return router
