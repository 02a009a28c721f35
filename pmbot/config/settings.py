"""Настройки конфигурации PM-бота."""
from functools import cached_property
from typing import List, Optional

from loguru import logger
from pydantic import AliasChoices, Field, SecretStr, TypeAdapter, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pmbot.database.models.captcha_session import CaptchaKind
from pmbot.database.models.quiz_question import QuizQuestion

_quiz_questions_adapter = TypeAdapter(List[QuizQuestion])


def parse_admin_ids(value: str) -> List[int]:
    """Разбирает строку вида "123, 456" в список ID."""
    return [int(part.strip()) for part in value.split(",") if part.strip()]


def parse_quiz_questions(raw: Optional[str]) -> Optional[List[QuizQuestion]]:
    """
    Разбирает JSON со своими вопросами викторины.

    Пустое значение, невалидный JSON или неверная структура дают None,
    тогда используется встроенный набор вопросов.
    """
    if not raw or not raw.strip():
        return None
    try:
        questions = _quiz_questions_adapter.validate_json(raw)
    except ValidationError as e:
        logger.error(f"❌ Не удалось разобрать QUIZ_QUESTIONS, используются встроенные вопросы: {e}")
        return None
    return questions or None


class Settings(BaseSettings):
    """Основные настройки приложения. Создаются один раз и не изменяются."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # 1. Настройки Telegram
    BOT_TOKEN: SecretStr = Field(
        ...,
        validation_alias=AliasChoices("BOT_TOKEN", "ENV_BOT_TOKEN"),
        description="Токен Telegram бота",
    )
    BOT_SECRET: SecretStr = Field(
        ...,
        validation_alias=AliasChoices("BOT_SECRET", "ENV_BOT_SECRET"),
        description="Секрет вебхука (заголовок X-Telegram-Bot-Api-Secret-Token)",
    )
    ADMIN_UID: str = Field(
        ...,
        validation_alias=AliasChoices("ADMIN_UID", "ENV_ADMIN_UID"),
        description="ID администраторов через запятую, первый - основной",
    )

    # 2. Настройки проверки
    CAPTCHA_MODE: CaptchaKind = Field(default=CaptchaKind.QUIZ, description="image или quiz")
    CAPTCHA_ENABLED: bool = Field(default=True, description="Включить проверку новых пользователей")
    CAPTCHA_TIMEOUT: int = Field(default=300000, gt=0, description="Время жизни сессии проверки, мс")
    CAPTCHA_MAX_ATTEMPTS: int = Field(default=3, gt=0, description="Максимальное количество попыток")
    WELCOME_MESSAGE: str = Field(default="Добро пожаловать! Напишите сообщение, и администратор его получит.")
    QUIZ_QUESTIONS: str = Field(default="", description="JSON-список своих вопросов викторины")

    # 3. Хранилище
    DATABASE_PATH: str = Field(default="pmbot.db", description="Путь к файлу SQLite")
    MESSAGE_MAP_TTL_DAYS: int = Field(
        default=30,
        ge=0,
        description="Сколько дней хранить связь пересланного сообщения с гостем (0 - бессрочно)",
    )
    CLEANUP_INTERVAL: int = Field(default=3600, gt=0, description="Интервал очистки просроченных ключей, сек")

    # 4. Вебхук
    WEBHOOK_BASE_URL: str = Field(default="", description="Публичный адрес для автоматической регистрации вебхука")
    WEBHOOK_PATH: str = Field(default="/endpoint")
    WEBAPP_HOST: str = Field(default="0.0.0.0")
    WEBAPP_PORT: int = Field(default=8080)

    # 5. Логирование
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="bot.log")

    # Валидаторы
    @field_validator("ADMIN_UID")
    @classmethod
    def check_admin_uid(cls, value: str) -> str:
        try:
            admin_ids = parse_admin_ids(value)
        except ValueError:
            raise ValueError("ADMIN_UID должен содержать числовые ID через запятую")
        if not admin_ids:
            raise ValueError("ADMIN_UID не может быть пустым")
        return value

    @field_validator("WEBHOOK_PATH")
    @classmethod
    def check_webhook_path(cls, value: str) -> str:
        return value if value.startswith("/") else f"/{value}"

    # Методы для удобства
    def get_bot_token(self) -> str:
        """Получить токен бота в виде строки."""
        return self.BOT_TOKEN.get_secret_value()

    def get_bot_secret(self) -> str:
        return self.BOT_SECRET.get_secret_value()

    @property
    def admin_ids(self) -> List[int]:
        return parse_admin_ids(self.ADMIN_UID)

    @property
    def primary_admin_id(self) -> int:
        """Основной администратор: ему не выдаётся проверка при /start."""
        return self.admin_ids[0]

    def is_admin(self, chat_id: int) -> bool:
        return chat_id in self.admin_ids

    @cached_property
    def quiz_questions(self) -> Optional[List[QuizQuestion]]:
        return parse_quiz_questions(self.QUIZ_QUESTIONS)

    @property
    def captcha_timeout_seconds(self) -> float:
        return self.CAPTCHA_TIMEOUT / 1000

    @property
    def message_map_ttl_seconds(self) -> Optional[int]:
        if self.MESSAGE_MAP_TTL_DAYS == 0:
            return None
        return self.MESSAGE_MAP_TTL_DAYS * 24 * 60 * 60

    @property
    def webhook_url(self) -> Optional[str]:
        if not self.WEBHOOK_BASE_URL:
            return None
        return self.WEBHOOK_BASE_URL.rstrip("/") + self.WEBHOOK_PATH
