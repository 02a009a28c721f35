"""Key-value хранилище со сроком жизни ключей поверх SQLite."""

import time
from typing import Callable, List, Optional

import aiosqlite


class KeyValueStore:
    """
    Строковое KV-хранилище: get / put с TTL / delete / список по префиксу.

    Просроченные ключи не возвращаются сразу после истечения срока,
    физически они удаляются в purge_expired().
    """

    def __init__(self, conn: aiosqlite.Connection, clock: Callable[[], float] = time.time):
        """
        Инициализация хранилища.

        :param conn: Соединение с базой данных.
        :param clock: Источник текущего времени в секундах.
        """
        self.conn = conn
        self.clock = clock

    async def execute(self, query: str, parameters=None) -> int:
        """Выполнение SQL запроса, возвращает число затронутых строк."""
        if parameters is None:
            parameters = ()
        async with self.conn.execute(query, parameters) as cursor:
            await self.conn.commit()
            return cursor.rowcount

    async def fetchone(self, query: str, parameters=None):
        """Выполнение SQL запроса и получение одной записи."""
        if parameters is None:
            parameters = ()
        async with self.conn.execute(query, parameters) as cursor:
            return await cursor.fetchone()

    async def fetchall(self, query: str, parameters=None):
        """Выполнение SQL запроса и получение всех записей."""
        if parameters is None:
            parameters = ()
        async with self.conn.execute(query, parameters) as cursor:
            return await cursor.fetchall()

    async def get(self, key: str) -> Optional[str]:
        """Значение ключа или None, если ключа нет или срок его жизни истёк."""
        row = await self.fetchone(
            "SELECT value, expires_at FROM kv_store WHERE key = ?", (key,)
        )
        if row is None:
            return None
        if row["expires_at"] is not None and row["expires_at"] <= self.clock():
            return None
        return row["value"]

    async def put(self, key: str, value: str, ttl: Optional[float] = None) -> None:
        """
        Записывает значение. Запись перезаписывает ключ целиком,
        включая срок жизни.

        :param ttl: Срок жизни в секундах, None - бессрочно.
        """
        expires_at = self.clock() + ttl if ttl else None
        await self.execute(
            """
            INSERT INTO kv_store (key, value, expires_at) VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                expires_at = excluded.expires_at
            """,
            (key, value, expires_at),
        )

    async def delete(self, key: str) -> None:
        await self.execute("DELETE FROM kv_store WHERE key = ?", (key,))

    async def list_keys(self, prefix: str) -> List[str]:
        """Живые ключи с указанным префиксом в алфавитном порядке."""
        rows = await self.fetchall(
            """
            SELECT key FROM kv_store
            WHERE substr(key, 1, ?) = ?
              AND (expires_at IS NULL OR expires_at > ?)
            ORDER BY key
            """,
            (len(prefix), prefix, self.clock()),
        )
        return [row["key"] for row in rows]

    async def purge_expired(self) -> int:
        """Удаляет просроченные ключи, возвращает их количество."""
        return await self.execute(
            "DELETE FROM kv_store WHERE expires_at IS NOT NULL AND expires_at <= ?",
            (self.clock(),),
        )
