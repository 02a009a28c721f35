"""
Модели, связанные с сессией проверки CAPTCHA.
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CaptchaKind(str, Enum):
    """Тип проверки. Каждый тип сам определяет правило сравнения ответа."""
    IMAGE = "image"
    QUIZ = "quiz"

    def matches(self, expected: str, submitted: str) -> bool:
        """Сравнивает ответ пользователя с ожидаемым."""
        if self is CaptchaKind.IMAGE:
            return submitted.strip().upper() == expected.upper()
        return submitted == expected


class CaptchaSession(BaseModel):
    """
    Pydantic-модель сессии проверки, хранится в KV под ключом captcha-{chat_id}.

    Имена полей в JSON совпадают с форматом исходного воркера
    (chatId, createdAt, type ...), поэтому используются алиасы.
    """
    model_config = ConfigDict(populate_by_name=True)

    chat_id: int = Field(alias="chatId")
    answer: str
    attempts: int = 0
    created_at: int = Field(alias="createdAt", description="Unix-время создания в миллисекундах")
    kind: CaptchaKind = Field(alias="type")
    username: Optional[str] = None
    first_name: Optional[str] = Field(default=None, alias="firstName")
    last_name: Optional[str] = Field(default=None, alias="lastName")

    @property
    def display_name(self) -> str:
        return self.first_name or self.username or f"Пользователь {self.chat_id}"

    def age_minutes(self, now_ms: int) -> int:
        return max(0, (now_ms - self.created_at) // 60000)

    def is_expired(self, now_ms: int, timeout_ms: int) -> bool:
        return now_ms - self.created_at > timeout_ms

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)
