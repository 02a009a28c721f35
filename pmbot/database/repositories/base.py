"""Базовый класс для всех репозиториев."""

from typing import List

from ..store import KeyValueStore


class BaseRepository:
    """
    Базовый класс репозитория.

    Каждый репозиторий владеет одним пространством ключей вида
    {prefix}{идентификатор}.
    """

    prefix: str = ""

    def __init__(self, store: KeyValueStore):
        """
        Инициализация репозитория.

        :param store: KV-хранилище.
        """
        self.store = store

    def key(self, ident: int) -> str:
        return f"{self.prefix}{ident}"

    async def delete(self, ident: int) -> None:
        await self.store.delete(self.key(ident))

    async def ids(self) -> List[int]:
        """
        Идентификаторы всех живых ключей репозитория.

        Ключи с нечисловым суффиксом пропускаются: префикс captcha-
        совпадает, например, с captcha-verified-{id}.
        """
        result = []
        for key in await self.store.list_keys(self.prefix):
            try:
                result.append(int(key[len(self.prefix):]))
            except ValueError:
                continue
        return result
