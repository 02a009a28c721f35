"""Сообщения гостей: проверка, блокировка и пересылка администраторам."""

from aiogram import Bot, F, Router
from aiogram.types import Message
from loguru import logger

from pmbot.config.settings import Settings
from pmbot.services.captcha_service import CaptchaService
from pmbot.services.moderation_service import ModerationService
from pmbot.services.relay_service import RelayService
from pmbot.utils.texts import BLOCKED_NOTICE, VERIFICATION_REQUIRED, VERIFICATION_SUCCESS


async def guest_message(
    message: Message,
    bot: Bot,
    settings: Settings,
    captcha_service: CaptchaService,
    relay_service: RelayService,
    moderation_service: ModerationService,
):
    """
    Обрабатывает сообщение гостя.

    - Заблокированный гость получает уведомление, сообщение не пересылается.
    - Непроверенный гость с активной сессией отвечает на задание текстом,
      без сессии - получает подсказку отправить /start.
    - Остальные сообщения пересылаются всем администраторам.
    """
    chat_id = message.chat.id

    if await moderation_service.is_blocked(chat_id):
        logger.info(f"🚫 Сообщение от заблокированного пользователя {chat_id} не переслано")
        await bot.send_message(chat_id=chat_id, text=BLOCKED_NOTICE)
        return

    if settings.CAPTCHA_ENABLED and not await captcha_service.is_verified(chat_id):
        if await captcha_service.has_active_session(chat_id):
            if message.text:
                outcome = await captcha_service.check_answer(chat_id, message.text)
                if outcome.passed:
                    await bot.send_message(chat_id=chat_id, text=VERIFICATION_SUCCESS)
            return

        await bot.send_message(chat_id=chat_id, text=VERIFICATION_REQUIRED)
        return

    await relay_service.relay_to_admins(message, settings.admin_ids)


def setup_guest_router() -> Router:
    """Последний роутер: сюда доходят только сообщения не от администраторов."""
    router = Router(name="guest")
    router.message.filter(F.chat.type == "private")
    router.message.register(guest_message)
    return router
