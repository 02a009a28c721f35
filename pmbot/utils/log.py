"""Настройка логирования через loguru."""

import inspect
import logging
import sys

from loguru import logger


class InterceptHandler(logging.Handler):
    """Перенаправляет записи стандартного logging (aiogram, aiohttp) в loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = inspect.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str = "INFO", log_file: str = "bot.log") -> None:
    """Консоль + файл с ротацией, стандартный logging идёт туда же."""
    logger.remove()
    logger.add(sys.stderr, level=level)
    if log_file:
        logger.add(log_file, level=level, rotation="10 MB", retention=1)
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
