"""
Модели статуса верификации гостя.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class VerificationState(str, Enum):
    """Статус записи о верификации."""
    PENDING = "pending"
    FAILED = "failed"
    VERIFIED = "verified"


class GuestStatus(str, Enum):
    """Итоговое состояние гостя, вычисляемое из записей в хранилище."""
    UNVERIFIED = "unverified"
    PENDING = "pending"
    VERIFIED = "verified"
    FAILED = "failed"
    BLOCKED = "blocked"


GUEST_STATUS_LABELS = {
    GuestStatus.UNVERIFIED: "не проверен",
    GuestStatus.PENDING: "проходит проверку",
    GuestStatus.VERIFIED: "проверен",
    GuestStatus.FAILED: "отклонён",
    GuestStatus.BLOCKED: "заблокирован",
}


class FailedVerification(BaseModel):
    """
    Запись об отклонённой администратором верификации
    (ключ failed-verification-{chat_id}).
    """
    model_config = ConfigDict(populate_by_name=True)

    chat_id: int = Field(alias="chatId")
    status: VerificationState = VerificationState.FAILED
    timestamp: int = Field(description="Unix-время отклонения в миллисекундах")
    username: Optional[str] = None
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")

    @property
    def display_name(self) -> str:
        return self.first_name or self.username or f"Пользователь {self.chat_id}"

    def age_minutes(self, now_ms: int) -> int:
        return max(0, (now_ms - self.timestamp) // 60000)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)
