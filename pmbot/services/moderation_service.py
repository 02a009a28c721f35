"""Сервис модерации: одобрение, отклонение и блокировка гостей."""

from typing import List, Sequence, Tuple, Union

from aiogram import Bot, html
from aiogram.exceptions import TelegramAPIError
from aiogram.utils.keyboard import InlineKeyboardBuilder
from loguru import logger

from pmbot.config.settings import Settings
from pmbot.database.manager import DatabaseManager
from pmbot.database.models.captcha_session import CaptchaSession
from pmbot.database.models.verification import (
    GUEST_STATUS_LABELS,
    FailedVerification,
    GuestStatus,
    VerificationState,
)

LIST_LIMIT = 10

APPROVE_PREFIX = "approve_"
REJECT_PREFIX = "reject_"
BLOCK_PREFIX = "block_"


class ModerationService:
    """
    Переходы состояния гостя по действиям администратора.

    Состояние гостя хранится в четырёх записях (сессия, отметка о
    верификации, запись об отклонении, флаг блокировки). Каждое действие
    оставляет ровно одно из состояний GuestStatus.
    """

    def __init__(self, db_manager: DatabaseManager, bot: Bot, settings: Settings):
        self.db = db_manager
        self.bot = bot
        self.settings = settings

    def _now_ms(self) -> int:
        return int(self.db.clock() * 1000)

    async def get_status(self, chat_id: int) -> GuestStatus:
        """Состояние гостя. Приоритет: blocked > verified > failed > pending > unverified."""
        if await self.db.blocks.is_blocked(chat_id):
            return GuestStatus.BLOCKED
        if await self.db.verified.is_verified(chat_id):
            return GuestStatus.VERIFIED
        if await self.db.failed.get(chat_id) is not None:
            return GuestStatus.FAILED
        if await self.db.sessions.exists(chat_id):
            return GuestStatus.PENDING
        return GuestStatus.UNVERIFIED

    async def is_blocked(self, chat_id: int) -> bool:
        return await self.db.blocks.is_blocked(chat_id)

    async def approve(self, chat_id: int, admin_id: int) -> None:
        """
        Одобряет гостя вручную: -> verified.

        Флаг блокировки не трогается: старая кнопка одобрения не снимает
        блокировку, поставленную позже. Для этого есть /unblock.
        """
        await self.db.verified.mark(chat_id)
        await self.db.sessions.delete(chat_id)
        await self.db.failed.delete(chat_id)

        try:
            await self.bot.send_message(
                chat_id=chat_id,
                text="✅ Администратор одобрил вашу заявку, теперь вы можете отправлять сообщения!",
            )
        except TelegramAPIError as e:
            logger.warning(f"⚠️ Не удалось уведомить пользователя {chat_id} об одобрении: {e}")

        await self.bot.send_message(
            chat_id=admin_id,
            text=f"✅ Пользователь {html.code(chat_id)} одобрен",
        )
        logger.info(f"Администратор {admin_id} одобрил пользователя {chat_id}")

    async def reject(self, chat_id: int, admin_id: int) -> None:
        """
        Отклоняет проверку гостя: -> failed. Гость не уведомляется.

        Отметка о верификации остаётся, снять её может только блокировка.
        """
        session = await self.db.sessions.get(chat_id)
        await self.db.sessions.delete(chat_id)

        record = FailedVerification(
            chat_id=chat_id,
            status=VerificationState.FAILED,
            timestamp=self._now_ms(),
            username=session.username if session else None,
            first_name=session.first_name if session else None,
            last_name=session.last_name if session else None,
        )
        await self.db.failed.save(record)

        await self.bot.send_message(
            chat_id=admin_id,
            text=f"❌ Проверка пользователя {html.code(chat_id)} отклонена",
        )
        logger.info(f"Администратор {admin_id} отклонил пользователя {chat_id}")

    async def block(self, chat_id: int, admin_id: int) -> bool:
        """
        Блокирует гостя: -> blocked.

        :return: False, если администратор пытается заблокировать себя.
        """
        if chat_id == admin_id:
            await self.bot.send_message(chat_id=admin_id, text="⚠️ Нельзя заблокировать самого себя")
            return False

        await self.db.blocks.set_blocked(chat_id, True)
        await self.db.sessions.delete(chat_id)
        await self.db.failed.delete(chat_id)
        await self.db.verified.delete(chat_id)

        await self.bot.send_message(
            chat_id=admin_id,
            text=f"🚫 Пользователь {html.code(chat_id)} заблокирован",
        )
        logger.warning(f"🚫 Администратор {admin_id} заблокировал пользователя {chat_id}")
        return True

    async def unblock(self, chat_id: int, admin_id: int) -> None:
        """Снимает блокировку: -> unverified. Отметка о верификации не выдаётся."""
        await self.db.blocks.set_blocked(chat_id, False)
        await self.bot.send_message(
            chat_id=admin_id,
            text=f"✅ Пользователь {html.code(chat_id)} разблокирован",
        )
        logger.info(f"Администратор {admin_id} разблокировал пользователя {chat_id}")

    async def check_block(self, chat_id: int, admin_id: int) -> bool:
        """Сообщает администратору, заблокирован ли гость, и его состояние."""
        status = await self.get_status(chat_id)
        blocked = status is GuestStatus.BLOCKED
        await self.bot.send_message(
            chat_id=admin_id,
            text=(
                f"UID: {html.code(chat_id)} - {'заблокирован' if blocked else 'не заблокирован'}\n"
                f"Статус: {GUEST_STATUS_LABELS[status]}"
            ),
        )
        return blocked

    async def list_pending(self, admin_id: int) -> int:
        """Список пользователей на проверке с кнопками одобрить/отклонить."""
        sessions = await self.db.sessions.list_all()
        if not sessions:
            await self.bot.send_message(chat_id=admin_id, text="📋 Сейчас никто не проходит проверку")
            return 0

        now_ms = self._now_ms()
        lines = ["📋 <b>Пользователи на проверке:</b>\n"]
        buttons = []
        for session in sessions[:LIST_LIMIT]:
            lines.append(
                self._format_entry(session, now_ms)
                + f"   Попытки: {session.attempts}/{self.settings.CAPTCHA_MAX_ATTEMPTS}\n"
            )
            buttons.append((f"✅ Одобрить {session.display_name}", f"{APPROVE_PREFIX}{session.chat_id}"))
            buttons.append(("❌ Отклонить", f"{REJECT_PREFIX}{session.chat_id}"))

        await self._send_listing(admin_id, lines, buttons, total=len(sessions))
        return len(sessions)

    async def list_failed(self, admin_id: int) -> int:
        """Список отклонённых пользователей с кнопками одобрить/заблокировать."""
        records = await self.db.failed.list_all()
        if not records:
            await self.bot.send_message(chat_id=admin_id, text="📋 Нет пользователей, не прошедших проверку")
            return 0

        now_ms = self._now_ms()
        lines = ["📋 <b>Не прошли проверку:</b>\n"]
        buttons = []
        for record in records[:LIST_LIMIT]:
            lines.append(self._format_entry(record, now_ms))
            buttons.append((f"✅ Одобрить {record.display_name}", f"{APPROVE_PREFIX}{record.chat_id}"))
            buttons.append(("🚫 Заблокировать", f"{BLOCK_PREFIX}{record.chat_id}"))

        await self._send_listing(admin_id, lines, buttons, total=len(records))
        return len(records)

    @staticmethod
    def _format_entry(entry: Union[CaptchaSession, FailedVerification], now_ms: int) -> str:
        username = f"@{entry.username}" if entry.username else "без username"
        return (
            f"👤 {html.quote(entry.display_name)} ({html.quote(username)})\n"
            f"   ID: {html.code(entry.chat_id)}\n"
            f"   Время: {entry.age_minutes(now_ms)} мин. назад\n"
        )

    async def _send_listing(
        self,
        admin_id: int,
        lines: List[str],
        buttons: Sequence[Tuple[str, str]],
        total: int,
    ) -> None:
        if total > LIST_LIMIT:
            lines.append(f"…и ещё {total - LIST_LIMIT}")

        builder = InlineKeyboardBuilder()
        for text, callback_data in buttons:
            builder.button(text=text, callback_data=callback_data)
        builder.adjust(2)

        await self.bot.send_message(
            chat_id=admin_id,
            text="\n".join(lines),
            reply_markup=builder.as_markup(),
        )
