"""
Shared fixtures: fake bot, in-memory store, settings and aiogram objects.
"""

import json
from collections import defaultdict
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from aiogram.exceptions import TelegramBadRequest
from aiogram.methods import ForwardMessage
from aiogram.types import CallbackQuery, Chat, Message, User

from pmbot.config.settings import Settings
from pmbot.database.manager import DatabaseManager
from pmbot.services.captcha_service import CaptchaService
from pmbot.services.moderation_service import ModerationService
from pmbot.services.relay_service import RelayService

ADMIN_ID = 100
SECOND_ADMIN_ID = 200
GUEST_ID = 555
START_TIME = 1_700_000_000.0


class FakeClock:
    """Controllable replacement for time.time."""

    def __init__(self, now: float = START_TIME):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSession:
    json_loads = staticmethod(json.loads)
    json_dumps = staticmethod(json.dumps)

    def __init__(self):
        self.closed = False

    async def close(self):
        self.closed = True


class FakeBot:
    """
    Records outgoing Bot API calls instead of sending them.

    Message ids are numbered per chat, as Telegram does.
    """

    id = 42

    def __init__(self):
        self.calls = []
        self.failing_chats = set()
        self.session = FakeSession()
        self._last_ids = defaultdict(int)

    def _new_message(self, chat_id):
        self._last_ids[chat_id] += 1
        return SimpleNamespace(message_id=self._last_ids[chat_id])

    def skip_messages(self, chat_id, count):
        """Pretends that count other messages were already sent to chat_id."""
        self._last_ids[chat_id] += count

    async def send_message(self, chat_id, text, **kwargs):
        self.calls.append(("send_message", dict(chat_id=chat_id, text=text, **kwargs)))
        return self._new_message(chat_id)

    async def send_photo(self, chat_id, photo, **kwargs):
        self.calls.append(("send_photo", dict(chat_id=chat_id, photo=photo, **kwargs)))
        return self._new_message(chat_id)

    async def forward_message(self, chat_id, from_chat_id, message_id, **kwargs):
        if chat_id in self.failing_chats:
            raise TelegramBadRequest(
                method=ForwardMessage(chat_id=chat_id, from_chat_id=from_chat_id, message_id=message_id),
                message="Bad Request: chat not found",
            )
        forwarded = self._new_message(chat_id)
        self.calls.append(
            (
                "forward_message",
                dict(
                    chat_id=chat_id,
                    from_chat_id=from_chat_id,
                    message_id=message_id,
                    forwarded_id=forwarded.message_id,
                ),
            )
        )
        return forwarded

    async def copy_message(self, chat_id, from_chat_id, message_id, **kwargs):
        self.calls.append(
            ("copy_message", dict(chat_id=chat_id, from_chat_id=from_chat_id, message_id=message_id))
        )
        return self._new_message(chat_id)

    async def answer_callback_query(self, callback_query_id, text=None, show_alert=None, **kwargs):
        self.calls.append(
            ("answer_callback_query", dict(callback_query_id=callback_query_id, text=text, show_alert=show_alert))
        )
        return True

    def sent(self, method):
        return [kwargs for name, kwargs in self.calls if name == method]

    def texts_to(self, chat_id):
        return [kwargs["text"] for kwargs in self.sent("send_message") if kwargs["chat_id"] == chat_id]


def make_settings(**overrides) -> Settings:
    values = dict(
        BOT_TOKEN="123456:TEST-token",
        BOT_SECRET="webhook-secret",
        ADMIN_UID=f"{ADMIN_ID},{SECOND_ADMIN_ID}",
        CAPTCHA_MODE="quiz",
        CAPTCHA_ENABLED=True,
        CAPTCHA_TIMEOUT=300000,
        CAPTCHA_MAX_ATTEMPTS=3,
        QUIZ_QUESTIONS="",
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_message(chat_id=GUEST_ID, text=None, message_id=1, reply_to=None, username="guest", first_name="Guest"):
    return Message(
        message_id=message_id,
        date=datetime.now(timezone.utc),
        chat=Chat(id=chat_id, type="private"),
        from_user=User(id=chat_id, is_bot=False, first_name=first_name, username=username),
        text=text,
        reply_to_message=reply_to,
    )


def make_callback(user_id, data, callback_id="cb-1"):
    return CallbackQuery(
        id=callback_id,
        from_user=User(id=user_id, is_bot=False, first_name="User"),
        chat_instance="chat-instance",
        data=data,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def bot():
    return FakeBot()


@pytest.fixture
async def db_manager(clock):
    manager = DatabaseManager(":memory:", clock=clock)
    await manager.init_database()
    yield manager
    await manager.close()


@pytest.fixture
def captcha_service(db_manager, bot, settings):
    return CaptchaService(db_manager, bot, settings)


@pytest.fixture
def relay_service(db_manager, bot, settings):
    return RelayService(db_manager, bot, settings)


@pytest.fixture
def moderation_service(db_manager, bot, settings):
    return ModerationService(db_manager, bot, settings)


@pytest.fixture(name="make_settings")
def make_settings_fixture():
    return make_settings


@pytest.fixture(name="make_message")
def make_message_fixture():
    return make_message


@pytest.fixture(name="make_callback")
def make_callback_fixture():
    return make_callback
