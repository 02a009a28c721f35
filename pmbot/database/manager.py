import time
from pathlib import Path
from typing import Callable, Optional

from loguru import logger
import aiosqlite

from pmbot.database.repositories.failed_repository import FailedVerificationRepository
from pmbot.database.repositories.flag_repository import BlockRepository, VerifiedRepository
from pmbot.database.repositories.message_map_repository import MessageMapRepository
from pmbot.database.repositories.session_repository import SessionRepository
from pmbot.database.store import KeyValueStore


class DatabaseManager:
    """
    Владелец соединения с SQLite.

    Создаёт таблицу KV-хранилища и раздаёт репозитории по пространствам
    ключей: сессии, отметки, блокировки, отклонения, связи сообщений.
    """

    def __init__(self, db_path: str, clock: Callable[[], float] = time.time):
        """
        :param db_path: Путь к файлу SQLite или ":memory:".
        :param clock: Источник времени для TTL ключей.
        """
        self.db_path = db_path
        self.clock = clock
        self.conn: Optional[aiosqlite.Connection] = None
        self.store: Optional[KeyValueStore] = None
        self.sessions: Optional[SessionRepository] = None
        self.verified: Optional[VerifiedRepository] = None
        self.blocks: Optional[BlockRepository] = None
        self.failed: Optional[FailedVerificationRepository] = None
        self.message_map: Optional[MessageMapRepository] = None

    async def init_database(self) -> None:
        """Открывает соединение, применяет SQL-скрипты и создаёт репозитории."""
        self.conn = await aiosqlite.connect(self.db_path)
        self.conn.row_factory = aiosqlite.Row
        await self._run_sql_scripts()
        await self._init_repositories()
        logger.info(f"🗄 Хранилище готово: {self.db_path}")

    async def _init_repositories(self) -> None:
        """Репозитории работают поверх одного KeyValueStore."""
        self.store = KeyValueStore(self.conn, clock=self.clock)
        self.sessions = SessionRepository(self.store)
        self.verified = VerifiedRepository(self.store)
        self.blocks = BlockRepository(self.store)
        self.failed = FailedVerificationRepository(self.store)
        self.message_map = MessageMapRepository(self.store)

    async def _run_sql_scripts(self) -> None:
        """
        Применяет схему из pmbot/database/sql.

        Порядок выполнения - по имени файла, поэтому индекс лежит в z_*.sql.
        """
        sql_dir = Path(__file__).parent / "sql"
        scripts = sorted(sql_dir.glob("*.sql"))

        async with self.conn.cursor() as cursor:
            for script_path in scripts:
                try:
                    sql_query = script_path.read_text(encoding="utf-8").strip()
                    await cursor.execute(sql_query)
                except Exception as e:
                    logger.error(f"❌ SQL-скрипт {script_path.name} не выполнен: {e}")
                    raise

        await self.conn.commit()
        logger.debug(f"Схема хранилища применена ({len(scripts)} скриптов)")

    async def cleanup_expired(self) -> int:
        """Физически удаляет просроченные ключи хранилища."""
        return await self.store.purge_expired()

    async def close(self) -> None:
        """Закрывает соединение. Повторный вызов ничего не делает."""
        if self.conn:
            await self.conn.close()
            self.conn = None
            logger.info("🗄 Хранилище закрыто")
