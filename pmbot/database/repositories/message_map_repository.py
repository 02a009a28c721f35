"""Репозиторий соответствия пересланных сообщений и чатов гостей."""

from typing import Optional

from loguru import logger

from .base import BaseRepository


class MessageMapRepository(BaseRepository):
    """
    msg-map-{чат администратора}-{id пересланной копии} -> id чата гостя.

    Telegram нумерует сообщения в каждом чате отдельно, поэтому id копии
    уникален только вместе с чатом администратора, которому она переслана.
    """

    prefix = "msg-map-"

    def entry_key(self, admin_id: int, message_id: int) -> str:
        return f"{self.prefix}{admin_id}-{message_id}"

    async def save(self, admin_id: int, message_id: int, chat_id: int, ttl: Optional[float] = None) -> None:
        await self.store.put(self.entry_key(admin_id, message_id), str(chat_id), ttl=ttl)

    async def resolve(self, admin_id: int, message_id: int) -> Optional[int]:
        raw = await self.store.get(self.entry_key(admin_id, message_id))
        if raw is None:
            return None
        try:
            return int(raw.strip().strip('"'))
        except ValueError:
            logger.warning(
                f"⚠️ Повреждённая запись msg-map для сообщения {message_id} в чате {admin_id}: {raw!r}"
            )
            return None
