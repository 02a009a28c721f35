"""
Репозитории строковых флагов: отметка о верификации и блокировка.
"""
from .base import BaseRepository

TRUE_VALUE = "true"
FALSE_VALUE = "false"


class VerifiedRepository(BaseRepository):
    """Отметка о пройденной проверке. Бессрочная."""

    prefix = "captcha-verified-"

    async def mark(self, chat_id: int) -> None:
        await self.store.put(self.key(chat_id), TRUE_VALUE)

    async def is_verified(self, chat_id: int) -> bool:
        return await self.store.get(self.key(chat_id)) == TRUE_VALUE


class BlockRepository(BaseRepository):
    """
    Флаг блокировки. Заблокированным считается только значение "true",
    разблокировка записывает "false", а не удаляет ключ.
    """

    prefix = "isblocked-"

    async def set_blocked(self, chat_id: int, blocked: bool) -> None:
        await self.store.put(self.key(chat_id), TRUE_VALUE if blocked else FALSE_VALUE)

    async def is_blocked(self, chat_id: int) -> bool:
        return await self.store.get(self.key(chat_id)) == TRUE_VALUE
