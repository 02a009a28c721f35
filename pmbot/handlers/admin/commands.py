"""
Команды администратора: списки, блокировка ответом и ответы гостям.
"""
from aiogram import Bot, F, Router
from aiogram.filters import Command
from aiogram.types import Message
from loguru import logger

from pmbot.handlers.admin.core import IsAdmin
from pmbot.services.moderation_service import ModerationService
from pmbot.services.relay_service import RelayService
from pmbot.utils.texts import ADMIN_HELP


async def pending_command(message: Message, moderation_service: ModerationService):
    """Показывает пользователей, которые сейчас проходят проверку."""
    count = await moderation_service.list_pending(message.chat.id)
    logger.debug(f"Администратор {message.chat.id} запросил /pending: {count}")


async def failed_command(message: Message, moderation_service: ModerationService):
    """Показывает пользователей, проверка которых отклонена."""
    count = await moderation_service.list_failed(message.chat.id)
    logger.debug(f"Администратор {message.chat.id} запросил /failed: {count}")


async def admin_help(message: Message, bot: Bot):
    """Любое другое сообщение без ответа - подсказка по командам."""
    await bot.send_message(chat_id=message.chat.id, text=ADMIN_HELP)


async def block_command(
    message: Message,
    relay_service: RelayService,
    moderation_service: ModerationService,
):
    """Блокирует автора пересланного сообщения."""
    guest_id = await relay_service.resolve_guest(message.chat.id, message.reply_to_message.message_id)
    if guest_id is None:
        return
    await moderation_service.block(guest_id, message.chat.id)


async def unblock_command(
    message: Message,
    relay_service: RelayService,
    moderation_service: ModerationService,
):
    """Снимает блокировку с автора пересланного сообщения."""
    guest_id = await relay_service.resolve_guest(message.chat.id, message.reply_to_message.message_id)
    if guest_id is None:
        return
    await moderation_service.unblock(guest_id, message.chat.id)


async def checkblock_command(
    message: Message,
    relay_service: RelayService,
    moderation_service: ModerationService,
):
    """Показывает администратору, заблокирован ли автор пересланного сообщения."""
    guest_id = await relay_service.resolve_guest(message.chat.id, message.reply_to_message.message_id)
    if guest_id is None:
        return
    await moderation_service.check_block(guest_id, message.chat.id)


async def admin_reply(message: Message, relay_service: RelayService):
    """Ответ на пересланное сообщение копируется гостю."""
    await relay_service.route_admin_reply(message)


def setup_admin_commands_router() -> Router:
    """
    Сообщения администраторов. Порядок регистрации важен: команды без ответа,
    подсказка для прочих сообщений без ответа, команды ответом и в конце
    пересылка ответа гостю.
    """
    router = Router(name="admin_commands")
    router.message.filter(F.chat.type == "private", IsAdmin())
    router.message.register(pending_command, Command("pending"), ~F.reply_to_message)
    router.message.register(failed_command, Command("failed"), ~F.reply_to_message)
    router.message.register(admin_help, ~F.reply_to_message)
    router.message.register(block_command, Command("block"))
    router.message.register(unblock_command, Command("unblock"))
    router.message.register(checkblock_command, Command("checkblock"))
    router.message.register(admin_reply)
    return router
