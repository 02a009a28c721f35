"""
Tests that feed updates through the assembled dispatcher and the webhook route.
"""

import pytest
from aiogram import Dispatcher
from aiogram.dispatcher.event.bases import UNHANDLED
from aiogram.types import Update
from aiohttp import web
from aiohttp.test_utils import TestClient, TestServer

from pmbot.app import BotApp
from pmbot.dispatcher_setup import setup_dispatcher
from pmbot.utils.texts import ADMIN_HELP, VERIFICATION_REQUIRED, VERIFICATION_SUCCESS

ADMIN = 100
SECOND_ADMIN = 200
GUEST = 555


@pytest.fixture
def dispatcher(db_manager, settings):
    dp = Dispatcher()
    setup_dispatcher(dp, db_manager, settings)
    return dp


class Updates:
    """Builds Update objects with increasing update_id."""

    def __init__(self, make_message, make_callback):
        self.make_message = make_message
        self.make_callback = make_callback
        self.update_id = 0

    def _next_id(self):
        self.update_id += 1
        return self.update_id

    def message(self, *args, **kwargs):
        return Update(update_id=self._next_id(), message=self.make_message(*args, **kwargs))

    def callback(self, *args, **kwargs):
        return Update(update_id=self._next_id(), callback_query=self.make_callback(*args, **kwargs))


@pytest.fixture
def updates(make_message, make_callback):
    return Updates(make_message, make_callback)


class TestGuestUpdates:

    async def test_verified_guest_is_relayed(self, dispatcher, bot, db_manager, updates):
        await db_manager.verified.mark(GUEST)

        await dispatcher.feed_update(bot, updates.message(GUEST, "hello", message_id=7))

        forwards = bot.sent("forward_message")
        assert [f["chat_id"] for f in forwards] == [ADMIN, SECOND_ADMIN]
        assert all(f["from_chat_id"] == GUEST and f["message_id"] == 7 for f in forwards)

    async def test_unverified_guest_is_prompted(self, dispatcher, bot, updates):
        await dispatcher.feed_update(bot, updates.message(GUEST, "hello"))

        assert bot.texts_to(GUEST) == [VERIFICATION_REQUIRED]
        assert bot.sent("forward_message") == []

    async def test_start_issues_challenge(self, dispatcher, bot, settings, db_manager, updates):
        await dispatcher.feed_update(bot, updates.message(GUEST, "/start"))

        texts = bot.texts_to(GUEST)
        assert texts[0] == settings.WELCOME_MESSAGE
        assert len(texts) == 2
        assert await db_manager.sessions.exists(GUEST)


class TestAdminUpdates:

    async def _relay(self, dispatcher, bot, db_manager, updates):
        """Relays a guest message and returns ADMIN's copy of it."""
        await db_manager.verified.mark(GUEST)
        await dispatcher.feed_update(bot, updates.message(GUEST, "question"))
        forwarded_id = next(f["forwarded_id"] for f in bot.sent("forward_message") if f["chat_id"] == ADMIN)
        return updates.make_message(ADMIN, "question", message_id=forwarded_id)

    async def test_reply_is_copied_to_guest(self, dispatcher, bot, db_manager, updates):
        forwarded = await self._relay(dispatcher, bot, db_manager, updates)

        await dispatcher.feed_update(bot, updates.message(ADMIN, "answer", message_id=90, reply_to=forwarded))

        [copy] = bot.sent("copy_message")
        assert copy == {"chat_id": GUEST, "from_chat_id": ADMIN, "message_id": 90}

    async def test_block_by_reply(self, dispatcher, bot, db_manager, updates):
        forwarded = await self._relay(dispatcher, bot, db_manager, updates)

        await dispatcher.feed_update(bot, updates.message(ADMIN, "/block", message_id=91, reply_to=forwarded))

        assert await db_manager.blocks.is_blocked(GUEST)
        assert not await db_manager.verified.is_verified(GUEST)
        assert bot.sent("copy_message") == []

    async def test_plain_message_gets_help(self, dispatcher, bot, updates):
        await dispatcher.feed_update(bot, updates.message(ADMIN, "hello"))

        assert bot.texts_to(ADMIN) == [ADMIN_HELP]
        assert bot.sent("forward_message") == []

    async def test_admin_can_answer_quiz(self, dispatcher, bot, db_manager, updates):
        """Admin callbacks router must let captcha answers through."""
        await dispatcher.feed_update(bot, updates.message(SECOND_ADMIN, "/start"))
        session = await db_manager.sessions.get(SECOND_ADMIN)

        await dispatcher.feed_update(bot, updates.callback(SECOND_ADMIN, f"captcha_answer_{session.answer}"))

        assert await db_manager.verified.is_verified(SECOND_ADMIN)
        assert VERIFICATION_SUCCESS in bot.texts_to(SECOND_ADMIN)

    async def test_moderation_button_ignored_for_non_admin(self, dispatcher, bot, db_manager, updates):
        result = await dispatcher.feed_update(bot, updates.callback(777, f"approve_{GUEST}"))

        assert result is UNHANDLED
        assert bot.calls == []
        assert not await db_manager.verified.is_verified(GUEST)


def _raw_guest_update(update_id=1):
    return {
        "update_id": update_id,
        "message": {
            "message_id": 7,
            "date": 1_700_000_000,
            "chat": {"id": GUEST, "type": "private"},
            "from": {"id": GUEST, "is_bot": False, "first_name": "Guest"},
            "text": "hello",
        },
    }


@pytest.fixture
def web_app(settings, bot, db_manager, dispatcher):
    bot_app = BotApp(settings)
    bot_app.bot = bot
    bot_app.dp = dispatcher
    bot_app.db_manager = db_manager
    app = web.Application()
    bot_app.add_routes(app)
    return app


class TestWebhookRoute:

    async def test_wrong_secret_rejected(self, web_app, bot, db_manager):
        await db_manager.verified.mark(GUEST)

        async with TestClient(TestServer(web_app)) as client:
            response = await client.post(
                "/endpoint",
                json=_raw_guest_update(),
                headers={"X-Telegram-Bot-Api-Secret-Token": "wrong"},
            )
            assert response.status == 401

            response = await client.post("/endpoint", json=_raw_guest_update(2))
            assert response.status == 401

        assert bot.calls == []
        assert await db_manager.store.list_keys("msg-map-") == []

    async def test_valid_secret_is_processed(self, web_app, bot, db_manager):
        await db_manager.verified.mark(GUEST)

        async with TestClient(TestServer(web_app)) as client:
            response = await client.post(
                "/endpoint",
                json=_raw_guest_update(),
                headers={"X-Telegram-Bot-Api-Secret-Token": "webhook-secret"},
            )
            assert response.status == 200

        assert [f["chat_id"] for f in bot.sent("forward_message")] == [ADMIN, SECOND_ADMIN]
        assert len(await db_manager.store.list_keys("msg-map-")) == 2

    async def test_index(self, web_app):
        async with TestClient(TestServer(web_app)) as client:
            response = await client.get("/")
            assert response.status == 200
            assert "running" in await response.text()
