#!/usr/bin/env python3
"""
Простой запуск Telegram PM-бота.

Использование:
    python start.py
"""

import sys
from pathlib import Path

project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))


def main():
    """Проверяет окружение и запускает бота."""
    env_file = project_root / ".env"
    if not env_file.exists():
        print("❌ Ошибка: файл .env не найден!")
        print("💡 Создайте файл .env с BOT_TOKEN, BOT_SECRET и ADMIN_UID")
        sys.exit(1)

    if sys.version_info < (3, 10):
        print("❌ Ошибка: требуется Python 3.10 или выше")
        print(f"📋 Текущая версия: {sys.version}")
        sys.exit(1)

    from pmbot.main import main as run_bot

    run_bot()


if __name__ == "__main__":
    main()
