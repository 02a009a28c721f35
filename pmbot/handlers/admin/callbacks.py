"""
Кнопки модерации из списков /pending и /failed.
"""
from aiogram import Bot, F, Router
from aiogram.types import CallbackQuery
from loguru import logger

from pmbot.handlers.admin.core import IsAdmin, parse_target_id
from pmbot.services.moderation_service import (
    APPROVE_PREFIX,
    BLOCK_PREFIX,
    REJECT_PREFIX,
    ModerationService,
)


async def _answer_invalid(callback: CallbackQuery, bot: Bot) -> None:
    logger.warning(f"Неправильный формат callback_data: {callback.data}")
    await bot.answer_callback_query(callback.id, text="⚠️ Некорректная кнопка")


async def approve_callback(callback: CallbackQuery, bot: Bot, moderation_service: ModerationService):
    target_id = parse_target_id(callback.data, APPROVE_PREFIX)
    if target_id is None:
        await _answer_invalid(callback, bot)
        return
    await moderation_service.approve(target_id, callback.from_user.id)
    await bot.answer_callback_query(callback.id, text="✅ Одобрено")


async def reject_callback(callback: CallbackQuery, bot: Bot, moderation_service: ModerationService):
    target_id = parse_target_id(callback.data, REJECT_PREFIX)
    if target_id is None:
        await _answer_invalid(callback, bot)
        return
    await moderation_service.reject(target_id, callback.from_user.id)
    await bot.answer_callback_query(callback.id, text="❌ Отклонено")


async def block_callback(callback: CallbackQuery, bot: Bot, moderation_service: ModerationService):
    target_id = parse_target_id(callback.data, BLOCK_PREFIX)
    if target_id is None:
        await _answer_invalid(callback, bot)
        return
    await moderation_service.block(target_id, callback.from_user.id)
    await bot.answer_callback_query(callback.id, text="🚫 Заблокирован")


def setup_admin_callbacks_router() -> Router:
    router = Router(name="admin_callbacks")
    router.callback_query.filter(IsAdmin())
    router.callback_query.register(approve_callback, F.data.startswith(APPROVE_PREFIX))
    router.callback_query.register(reject_callback, F.data.startswith(REJECT_PREFIX))
    router.callback_query.register(block_callback, F.data.startswith(BLOCK_PREFIX))
    return router
