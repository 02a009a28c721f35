"""
Tests for the typed repositories on top of the key-value store.
"""

from pmbot.database.models import CaptchaKind, CaptchaSession, FailedVerification, VerificationState

NOW_MS = 1_700_000_000_000


def _session(chat_id=555, created_at=NOW_MS, **kwargs):
    return CaptchaSession(chat_id=chat_id, answer="ABCDE", created_at=created_at, kind=CaptchaKind.IMAGE, **kwargs)


class TestSessionRepository:

    async def test_save_and_get(self, db_manager):
        await db_manager.sessions.save(_session(username="guest"), ttl=300)
        session = await db_manager.sessions.get(555)
        assert session.answer == "ABCDE"
        assert session.kind is CaptchaKind.IMAGE
        assert session.username == "guest"

    async def test_stored_json_uses_worker_field_names(self, db_manager):
        await db_manager.sessions.save(_session(first_name="Ann"), ttl=None)
        raw = await db_manager.store.get("captcha-555")
        assert '"chatId":555' in raw
        assert '"createdAt"' in raw
        assert '"type":"image"' in raw
        assert '"firstName":"Ann"' in raw

    async def test_corrupt_session_reads_as_missing(self, db_manager):
        await db_manager.store.put("captcha-555", "{not json")
        assert await db_manager.sessions.get(555) is None

    async def test_list_all_ignores_verified_marks(self, db_manager):
        """captcha-verified-{id} shares the captcha- prefix."""
        await db_manager.sessions.save(_session(chat_id=2, created_at=NOW_MS + 10), ttl=None)
        await db_manager.sessions.save(_session(chat_id=1, created_at=NOW_MS + 20), ttl=None)
        await db_manager.verified.mark(3)
        sessions = await db_manager.sessions.list_all()
        assert [s.chat_id for s in sessions] == [2, 1]

    async def test_session_expires_with_ttl(self, db_manager, clock):
        await db_manager.sessions.save(_session(), ttl=300)
        clock.advance(301)
        assert not await db_manager.sessions.exists(555)


class TestFlagRepositories:

    async def test_verified_mark(self, db_manager):
        assert not await db_manager.verified.is_verified(555)
        await db_manager.verified.mark(555)
        assert await db_manager.verified.is_verified(555)
        assert await db_manager.store.get("captcha-verified-555") == "true"

    async def test_unblock_writes_false(self, db_manager):
        await db_manager.blocks.set_blocked(555, True)
        assert await db_manager.blocks.is_blocked(555)
        await db_manager.blocks.set_blocked(555, False)
        assert not await db_manager.blocks.is_blocked(555)
        assert await db_manager.store.get("isblocked-555") == "false"

    async def test_only_true_means_blocked(self, db_manager):
        await db_manager.store.put("isblocked-555", "yes")
        assert not await db_manager.blocks.is_blocked(555)


class TestFailedVerificationRepository:

    async def test_save_get_and_list(self, db_manager):
        await db_manager.failed.save(FailedVerification(chat_id=2, timestamp=NOW_MS + 5))
        await db_manager.failed.save(FailedVerification(chat_id=1, timestamp=NOW_MS))
        record = await db_manager.failed.get(2)
        assert record.status is VerificationState.FAILED
        assert [r.chat_id for r in await db_manager.failed.list_all()] == [1, 2]

    async def test_corrupt_record_skipped(self, db_manager):
        await db_manager.store.put("failed-verification-9", '{"chatId": "x"}')
        assert await db_manager.failed.get(9) is None
        assert await db_manager.failed.list_all() == []


class TestMessageMapRepository:

    async def test_save_and_resolve(self, db_manager):
        await db_manager.message_map.save(100, 42, 555)
        assert await db_manager.message_map.resolve(100, 42) == 555
        assert await db_manager.store.get("msg-map-100-42") == "555"

    async def test_same_message_id_in_two_admin_chats(self, db_manager):
        """Message ids repeat across chats, each admin keeps its own entry."""
        await db_manager.message_map.save(100, 42, 555)
        await db_manager.message_map.save(200, 42, 777)
        assert await db_manager.message_map.resolve(100, 42) == 555
        assert await db_manager.message_map.resolve(200, 42) == 777

    async def test_unknown_message(self, db_manager):
        assert await db_manager.message_map.resolve(100, 42) is None

    async def test_corrupt_value(self, db_manager):
        await db_manager.store.put("msg-map-100-42", "garbage")
        assert await db_manager.message_map.resolve(100, 42) is None

    async def test_entry_expires(self, db_manager, clock):
        await db_manager.message_map.save(100, 42, 555, ttl=60)
        clock.advance(61)
        assert await db_manager.message_map.resolve(100, 42) is None
