"""Ответы на вопросы викторины через inline-кнопки."""

from aiogram import Bot, F, Router
from aiogram.types import CallbackQuery
from loguru import logger

from pmbot.services.captcha_service import CAPTCHA_ANSWER_PREFIX, CaptchaService
from pmbot.utils.texts import VERIFICATION_SUCCESS


async def captcha_answer_callback(callback: CallbackQuery, bot: Bot, captcha_service: CaptchaService):
    """Проверяет выбранный вариант ответа."""
    chat_id = callback.from_user.id
    answer = callback.data[len(CAPTCHA_ANSWER_PREFIX):]

    outcome = await captcha_service.check_answer(chat_id, answer)
    logger.debug(f"Ответ викторины от {chat_id}: {answer} -> {outcome.value}")

    if outcome.passed:
        await bot.answer_callback_query(callback.id, text="✅ Проверка пройдена!", show_alert=True)
        await bot.send_message(chat_id=chat_id, text=VERIFICATION_SUCCESS)
    else:
        await bot.answer_callback_query(callback.id, text="❌ Неверный ответ", show_alert=False)


def setup_verification_router() -> Router:
    router = Router(name="verification")
    router.callback_query.register(captcha_answer_callback, F.data.startswith(CAPTCHA_ANSWER_PREFIX))
    return router
