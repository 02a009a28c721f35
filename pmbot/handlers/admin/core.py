"""Базовые функции для административных операций."""
from typing import Optional, Union

from aiogram.filters import BaseFilter
from aiogram.types import CallbackQuery, Message

from pmbot.config.settings import Settings


def event_chat_id(event: Union[Message, CallbackQuery]) -> int:
    """
    ID чата, от имени которого пришло событие.

    Для сообщений берётся чат (бот работает в личке), для нажатий кнопок -
    пользователь, нажавший кнопку.
    """
    if isinstance(event, CallbackQuery):
        return event.from_user.id
    return event.chat.id


class IsAdmin(BaseFilter):
    """Пропускает только события от администраторов из ADMIN_UID."""

    async def __call__(self, event: Union[Message, CallbackQuery], settings: Settings) -> bool:
        return settings.is_admin(event_chat_id(event))


def parse_target_id(data: Optional[str], prefix: str) -> Optional[int]:
    """Достаёт ID пользователя из callback_data вида {prefix}{id}."""
    if not data or not data.startswith(prefix):
        return None
    try:
        return int(data[len(prefix):])
    except ValueError:
        return None
