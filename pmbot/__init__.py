"""Telegram PM-бот: пересылка сообщений администраторам с проверкой CAPTCHA."""

__version__ = "1.0.0"
