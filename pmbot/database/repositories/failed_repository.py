"""
Репозиторий отклонённых администратором верификаций.
"""
from typing import List, Optional

from loguru import logger
from pydantic import ValidationError

from .base import BaseRepository
from ..models.verification import FailedVerification


class FailedVerificationRepository(BaseRepository):
    """Операции над записями failed-verification-{chat_id}."""

    prefix = "failed-verification-"

    async def get(self, chat_id: int) -> Optional[FailedVerification]:
        raw = await self.store.get(self.key(chat_id))
        if raw is None:
            return None
        try:
            return FailedVerification.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(f"⚠️ Повреждённая запись об отклонении для {chat_id}: {e}")
            return None

    async def save(self, record: FailedVerification) -> None:
        await self.store.put(self.key(record.chat_id), record.to_json())

    async def list_all(self) -> List[FailedVerification]:
        """Все записи об отклонении, от старых к новым."""
        records = []
        for chat_id in await self.ids():
            record = await self.get(chat_id)
            if record is not None:
                records.append(record)
        return sorted(records, key=lambda r: r.timestamp)
