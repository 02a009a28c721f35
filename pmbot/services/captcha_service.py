"""Сервис проверки пользователей через CAPTCHA."""

import random
from enum import Enum
from typing import Optional

from aiogram import Bot, html
from aiogram.types import BufferedInputFile
from aiogram.utils.keyboard import InlineKeyboardBuilder
from loguru import logger

from pmbot.config.settings import Settings
from pmbot.database.manager import DatabaseManager
from pmbot.database.models.captcha_session import CaptchaKind, CaptchaSession
from pmbot.database.models.quiz_question import QuizQuestion
from pmbot.services.captcha_image import generate_captcha_text, render_captcha_image
from pmbot.services.quiz_pool import DEFAULT_QUIZ_QUESTIONS

CAPTCHA_ANSWER_PREFIX = "captcha_answer_"


class CaptchaOutcome(str, Enum):
    """Результат проверки ответа."""
    CORRECT = "correct"
    INCORRECT = "incorrect"
    EXHAUSTED = "exhausted"
    EXPIRED = "expired"
    NO_SESSION = "no_session"

    @property
    def passed(self) -> bool:
        return self is CaptchaOutcome.CORRECT


class CaptchaService:
    """Выдача заданий, хранение сессий и проверка ответов."""

    def __init__(self, db_manager: DatabaseManager, bot: Bot, settings: Settings):
        self.db = db_manager
        self.bot = bot
        self.settings = settings

    def _now_ms(self) -> int:
        return int(self.db.clock() * 1000)

    def _prompt_footer(self) -> str:
        return (
            f"⏱ Действует {int(self.settings.captcha_timeout_seconds)} сек.\n"
            f"📝 Осталось попыток: {self.settings.CAPTCHA_MAX_ATTEMPTS}"
        )

    def pick_quiz_question(self) -> QuizQuestion:
        """Случайный вопрос из своего набора или, если он пуст, из встроенного."""
        questions = self.settings.quiz_questions or DEFAULT_QUIZ_QUESTIONS
        return random.choice(questions)

    async def issue_challenge(
        self,
        chat_id: int,
        username: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
    ) -> CaptchaSession:
        """
        Создаёт новую сессию проверки (перезаписывая старую)
        и отправляет задание пользователю.
        """
        kind = self.settings.CAPTCHA_MODE
        if kind is CaptchaKind.IMAGE:
            answer = generate_captcha_text()
            question = None
        else:
            question = self.pick_quiz_question()
            answer = str(question.correct_answer)

        session = CaptchaSession(
            chat_id=chat_id,
            answer=answer,
            attempts=0,
            created_at=self._now_ms(),
            kind=kind,
            username=username,
            first_name=first_name,
            last_name=last_name,
        )
        await self.db.sessions.save(session, ttl=self.settings.captcha_timeout_seconds)

        if question is None:
            await self._send_image_challenge(chat_id, answer)
        else:
            await self._send_quiz_challenge(chat_id, question)

        logger.info(f"🔐 Выдана проверка '{kind.value}' пользователю {chat_id}")
        return session

    async def _send_image_challenge(self, chat_id: int, text: str) -> None:
        image = render_captcha_image(text)
        await self.bot.send_photo(
            chat_id=chat_id,
            photo=BufferedInputFile(image, filename="captcha.png"),
            caption=(
                "🔐 <b>Проверка</b>\n\n"
                "Введите символы с картинки (регистр не важен).\n\n"
                f"{self._prompt_footer()}"
            ),
        )

    async def _send_quiz_challenge(self, chat_id: int, question: QuizQuestion) -> None:
        builder = InlineKeyboardBuilder()
        for index, option in enumerate(question.options):
            builder.button(text=option, callback_data=f"{CAPTCHA_ANSWER_PREFIX}{index}")
        builder.adjust(1)

        await self.bot.send_message(
            chat_id=chat_id,
            text=(
                "🔐 <b>Проверка</b>\n\n"
                f"{html.quote(question.question)}\n\n"
                f"{self._prompt_footer()}"
            ),
            reply_markup=builder.as_markup(),
        )

    async def check_answer(self, chat_id: int, answer: str) -> CaptchaOutcome:
        """
        Проверяет ответ пользователя.

        Каждый неверный ответ увеличивает счётчик попыток на 1, срок жизни
        сессии при этом продлевается на полный таймаут. При достижении
        лимита сессия удаляется.
        """
        session = await self.db.sessions.get(chat_id)
        if session is None:
            return CaptchaOutcome.NO_SESSION

        if session.is_expired(self._now_ms(), self.settings.CAPTCHA_TIMEOUT):
            await self.db.sessions.delete(chat_id)
            logger.info(f"⌛ Сессия проверки {chat_id} истекла")
            return CaptchaOutcome.EXPIRED

        session.attempts += 1

        if session.kind.matches(session.answer, answer):
            await self.db.verified.mark(chat_id)
            await self.db.sessions.delete(chat_id)
            logger.success(f"✅ Пользователь {chat_id} прошёл проверку с попытки {session.attempts}")
            return CaptchaOutcome.CORRECT

        max_attempts = self.settings.CAPTCHA_MAX_ATTEMPTS
        if session.attempts >= max_attempts:
            await self.db.sessions.delete(chat_id)
            await self.bot.send_message(
                chat_id=chat_id,
                text="❌ Слишком много неверных ответов. Попробуйте позже.",
            )
            logger.warning(f"🚫 Пользователь {chat_id} исчерпал {max_attempts} попыток проверки")
            return CaptchaOutcome.EXHAUSTED

        await self.db.sessions.save(session, ttl=self.settings.captcha_timeout_seconds)
        await self.bot.send_message(
            chat_id=chat_id,
            text=(
                "❌ Неверный ответ, попробуйте ещё раз.\n"
                f"📝 Осталось попыток: {max_attempts - session.attempts}"
            ),
        )
        logger.info(f"❌ Неверный ответ от {chat_id}, попытка {session.attempts}/{max_attempts}")
        return CaptchaOutcome.INCORRECT

    async def is_verified(self, chat_id: int) -> bool:
        return await self.db.verified.is_verified(chat_id)

    async def has_active_session(self, chat_id: int) -> bool:
        """Есть ли сессия в хранилище, даже если по времени она уже истекла."""
        return await self.db.sessions.exists(chat_id)
