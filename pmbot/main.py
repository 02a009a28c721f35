"""Точка входа в приложение PM-бота."""

import asyncio
import sys

from loguru import logger
from pydantic import ValidationError

from pmbot.app import BotApp
from pmbot.config.settings import Settings
from pmbot.utils.log import setup_logging


def main() -> None:
    """Загружает настройки, настраивает логирование и запускает вебхук-сервер."""
    try:
        settings = Settings()
    except ValidationError as e:
        logger.critical(f"❌ Ошибка конфигурации: {e}")
        logger.info("💡 Проверьте .env командой: pmbot-validate")
        sys.exit(1)

    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)
    logger.info("🚀 Запуск PM-бота...")
    logger.info("📋 Для остановки нажмите Ctrl+C")

    app = BotApp(settings)
    try:
        asyncio.run(app.run())
    except (KeyboardInterrupt, SystemExit):
        logger.info("✅ Бот остановлен.")
    except Exception as e:
        logger.critical(f"💥 Непредвиденная ошибка: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
