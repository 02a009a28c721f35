"""Сборка PM-бота: бот, хранилище, диспетчер и aiohttp-сервер вебхука."""

import asyncio
from typing import Optional

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.exceptions import TelegramAPIError
from aiogram.webhook.aiohttp_server import SimpleRequestHandler, setup_application
from aiohttp import web
from loguru import logger

from pmbot.config.settings import Settings
from pmbot.database.manager import DatabaseManager
from pmbot.dispatcher_setup import ALLOWED_UPDATES, setup_dispatcher
from pmbot.utils.commands import set_bot_commands


class BotApp:
    """
    Держит Bot, Dispatcher и DatabaseManager на время жизни процесса
    и отдаёт aiohttp-приложение с маршрутом вебхука.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.bot: Optional[Bot] = None
        self.dp: Optional[Dispatcher] = None
        self.db_manager: Optional[DatabaseManager] = None
        self._cleanup_task: Optional[asyncio.Task] = None

    async def _setup_bot_and_dispatcher(self):
        """Bot с HTML по умолчанию и пустой Dispatcher."""
        self.bot = Bot(
            token=self.settings.get_bot_token(),
            default=DefaultBotProperties(parse_mode=ParseMode.HTML),
        )
        self.dp = Dispatcher()
        logger.debug("🤖 Bot и Dispatcher созданы")

    async def _setup_database(self):
        """Открывает SQLite-хранилище по DATABASE_PATH."""
        self.db_manager = DatabaseManager(self.settings.DATABASE_PATH)
        await self.db_manager.init_database()

    async def _setup_dispatcher(self):
        """Middleware сервисов и роутеры."""
        setup_dispatcher(
            dp=self.dp,
            db_manager=self.db_manager,
            settings=self.settings,
        )

    async def _periodic_cleanup(self):
        """Периодическая задача для удаления просроченных ключей хранилища."""
        while True:
            await asyncio.sleep(self.settings.CLEANUP_INTERVAL)
            try:
                deleted_count = await self.db_manager.cleanup_expired()
                if deleted_count > 0:
                    logger.info(f"Автоочистка: удалено {deleted_count} просроченных ключей.")
            except Exception as e:
                logger.error(f"Ошибка при автоочистке хранилища: {e}")

    async def ensure_webhook(self) -> bool:
        """
        Регистрирует вебхук, если задан WEBHOOK_BASE_URL и текущий
        адрес вебхука в Telegram отличается от ожидаемого.

        :return: True, если вебхук был (пере)зарегистрирован.
        """
        expected_url = self.settings.webhook_url
        if not expected_url:
            logger.info("WEBHOOK_BASE_URL не задан, регистрация вебхука пропущена")
            return False

        try:
            info = await self.bot.get_webhook_info()
            if info.url == expected_url:
                logger.debug(f"Вебхук уже зарегистрирован: {expected_url}")
                return False

            logger.info(f"Регистрация вебхука: {expected_url}")
            await self.bot.set_webhook(
                url=expected_url,
                secret_token=self.settings.get_bot_secret(),
                allowed_updates=ALLOWED_UPDATES,
            )
            return True
        except TelegramAPIError as e:
            logger.error(f"Не удалось зарегистрировать вебхук: {e}")
            return False

    async def on_startup(self):
        """Меню команд, регистрация вебхука и фоновая очистка."""
        logger.info("🚀 Старт вебхук-сервера")
        try:
            await set_bot_commands(self.bot, self.settings.admin_ids)
        except Exception as e:
            logger.error(f"❌ Меню команд не установлено: {e}")

        await self.ensure_webhook()

        self._cleanup_task = asyncio.create_task(self._periodic_cleanup())
        logger.debug(f"🧹 Очистка хранилища раз в {self.settings.CLEANUP_INTERVAL} сек.")

    async def on_shutdown(self):
        """Останавливает очистку и закрывает хранилище."""
        logger.info("🛑 Остановка вебхук-сервера")
        if self._cleanup_task:
            self._cleanup_task.cancel()
        if self.db_manager:
            await self.db_manager.close()
        logger.info("✅ Ресурсы освобождены")

    async def index(self, request: web.Request) -> web.Response:
        return web.Response(text="Telegram PM Bot is running")

    async def webhook_info(self, request: web.Request) -> web.Response:
        """Отладочный маршрут: текущее состояние вебхука в Telegram."""
        info = await self.bot.get_webhook_info()
        return web.json_response(info.model_dump(mode="json", exclude_none=True))

    def add_routes(self, app: web.Application) -> None:
        """Маршруты: проверка жизни, состояние вебхука и сам вебхук."""
        app.router.add_get("/", self.index)
        app.router.add_get("/webhook-info", self.webhook_info)

        # Запрос с неверным X-Telegram-Bot-Api-Secret-Token отклоняется с 401.
        SimpleRequestHandler(
            dispatcher=self.dp,
            bot=self.bot,
            secret_token=self.settings.get_bot_secret(),
            handle_in_background=False,
        ).register(app, path=self.settings.WEBHOOK_PATH)

    async def build_web_app(self) -> web.Application:
        """Собирает aiohttp-приложение с обработчиком вебхука."""
        await self._setup_bot_and_dispatcher()
        await self._setup_database()
        await self._setup_dispatcher()

        self.dp.startup.register(self.on_startup)
        self.dp.shutdown.register(self.on_shutdown)

        app = web.Application()
        self.add_routes(app)
        setup_application(app, self.dp, bot=self.bot)
        return app

    async def run(self):
        """Поднимает HTTP-сервер и ждёт до отмены."""
        app = await self.build_web_app()
        runner = web.AppRunner(app)
        await runner.setup()
        site = web.TCPSite(runner, host=self.settings.WEBAPP_HOST, port=self.settings.WEBAPP_PORT)
        try:
            await site.start()
            logger.info(
                f"Вебхук слушает http://{self.settings.WEBAPP_HOST}:{self.settings.WEBAPP_PORT}"
                f"{self.settings.WEBHOOK_PATH}"
            )
            await asyncio.Event().wait()
        except Exception as e:
            logger.critical(f"Критическая ошибка при запуске бота: {e}")
            raise
        finally:
            await runner.cleanup()
