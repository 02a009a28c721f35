"""
Репозиторий сессий проверки CAPTCHA.
"""
from typing import List, Optional

from loguru import logger
from pydantic import ValidationError

from .base import BaseRepository
from ..models.captcha_session import CaptchaSession


class SessionRepository(BaseRepository):
    """Одна сессия на чат, новая сессия перезаписывает предыдущую."""

    prefix = "captcha-"

    async def get(self, chat_id: int) -> Optional[CaptchaSession]:
        """
        Получает сессию чата.

        Повреждённая запись логируется и считается отсутствующей.
        """
        raw = await self.store.get(self.key(chat_id))
        if raw is None:
            return None
        try:
            return CaptchaSession.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(f"⚠️ Повреждённая сессия CAPTCHA для {chat_id}: {e}")
            return None

    async def save(self, session: CaptchaSession, ttl: Optional[float]) -> None:
        await self.store.put(self.key(session.chat_id), session.to_json(), ttl=ttl)

    async def exists(self, chat_id: int) -> bool:
        return await self.store.get(self.key(chat_id)) is not None

    async def list_all(self) -> List[CaptchaSession]:
        """Все живые сессии, от старых к новым."""
        sessions = []
        for chat_id in await self.ids():
            session = await self.get(chat_id)
            if session is not None:
                sessions.append(session)
        return sorted(sessions, key=lambda s: s.created_at)
