#!/usr/bin/env python3
"""
Валидация конфигурации PM-бота

Проверяет:
- Наличие обязательных полей в .env
- Формат токена, секрета вебхука, ID администраторов и вопросов викторины
- Реальное подключение к Telegram API и состояние вебхука
- Выводит понятные ошибки
"""

import json
import os
import re
import sys

import requests

REQUIRED_FIELDS = ("BOT_TOKEN", "BOT_SECRET", "ADMIN_UID")
LEGACY_PREFIX = "ENV_"


def read_env_file(path=".env"):
    """Читаем .env в словарь. Имена ENV_BOT_TOKEN и т.п. приводятся к BOT_TOKEN."""
    env_vars = {}
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#") and "=" in line:
                key, value = line.split("=", 1)
                key = key.strip()
                if key.startswith(LEGACY_PREFIX) and key[len(LEGACY_PREFIX):] in REQUIRED_FIELDS:
                    key = key[len(LEGACY_PREFIX):]
                env_vars[key] = value.strip().strip('"').strip("'")
    return env_vars


def validate_env_file(path=".env"):
    """Проверяем наличие и формат .env файла"""
    if not os.path.exists(path):
        print(f"❌ {path} file not found!")
        print("Please create .env file with your configuration")
        return False

    env_vars = read_env_file(path)

    for field in REQUIRED_FIELDS:
        if not env_vars.get(field):
            print(f"❌ Missing or empty {field} in .env file")
            return False

    return env_vars


def validate_token_format(token):
    """Формат Telegram токена: 123456789:ABCdef..."""
    if not re.match(r"^\d+:[a-zA-Z0-9_-]+$", token or ""):
        print("❌ Invalid Telegram bot token format")
        print("   Should be like: 123456789:ABCdefGHI...")
        return False
    return True


def validate_secret_format(secret):
    """Telegram принимает secret_token длиной 1-256 из A-Z, a-z, 0-9, _ и -"""
    if not re.match(r"^[A-Za-z0-9_-]{1,256}$", secret or ""):
        print("❌ Invalid BOT_SECRET format")
        print("   Only A-Z, a-z, 0-9, _ and - are allowed, 1-256 characters")
        return False
    print("✅ BOT_SECRET format is valid")
    return True


def validate_admin_ids(admin_ids):
    """Проверяем формат ADMIN_UID"""
    try:
        ids = [int(x.strip()) for x in (admin_ids or "").split(",") if x.strip()]
    except ValueError:
        print("❌ Invalid ADMIN_UID format")
        print("   Should be comma-separated numbers: 123456789,987654321")
        return False

    if not ids:
        print("❌ ADMIN_UID is empty, at least one admin is required")
        return False

    for user_id in ids:
        if user_id <= 0:
            print(f"❌ Invalid admin user ID: {user_id} (should be positive)")
            return False
    print(f"✅ Admin IDs format is valid ({len(ids)} admins, primary: {ids[0]})")
    return True


def validate_quiz_questions(raw):
    """QUIZ_QUESTIONS: JSON-список объектов {question, options, correctAnswer}"""
    if not raw or not raw.strip():
        print("✅ QUIZ_QUESTIONS not specified (built-in questions will be used)")
        return True

    try:
        questions = json.loads(raw)
    except json.JSONDecodeError as e:
        print(f"❌ QUIZ_QUESTIONS is not valid JSON: {e}")
        return False

    if not isinstance(questions, list) or not questions:
        print("❌ QUIZ_QUESTIONS should be a non-empty JSON list")
        return False

    for index, item in enumerate(questions):
        if not isinstance(item, dict):
            print(f"❌ QUIZ_QUESTIONS[{index}] should be an object")
            return False
        options = item.get("options")
        answer = item.get("correctAnswer")
        if not item.get("question") or not isinstance(options, list) or len(options) < 2:
            print(f"❌ QUIZ_QUESTIONS[{index}] needs 'question' and at least two 'options'")
            return False
        if not isinstance(answer, int) or not 0 <= answer < len(options):
            print(f"❌ QUIZ_QUESTIONS[{index}].correctAnswer should be an index into 'options'")
            return False

    print(f"✅ QUIZ_QUESTIONS is valid ({len(questions)} questions)")
    return True


def check_telegram_api(token, expected_webhook_url=None):
    """Проверяем токен через getMe и показываем состояние вебхука"""
    api_url = f"https://api.telegram.org/bot{token}"
    try:
        response = requests.get(f"{api_url}/getMe", timeout=10)
        if response.status_code == 401:
            print("❌ Invalid bot token (401 Unauthorized)")
            return False
        if response.status_code != 200 or not response.json().get("ok"):
            print(f"❌ Telegram API error: {response.status_code}")
            return False
        bot_info = response.json().get("result", {})
        print(f"✅ Bot connected successfully: @{bot_info.get('username', 'unknown')}")

        response = requests.get(f"{api_url}/getWebhookInfo", timeout=10)
        webhook = response.json().get("result", {}) if response.status_code == 200 else {}
        current_url = webhook.get("url") or ""
        if not current_url:
            print("⚠️ Webhook is not registered yet (it will be registered on startup if WEBHOOK_BASE_URL is set)")
        elif expected_webhook_url and current_url != expected_webhook_url:
            print(f"⚠️ Webhook points to {current_url}, expected {expected_webhook_url}")
        else:
            print(f"✅ Webhook: {current_url}")
        if webhook.get("last_error_message"):
            print(f"⚠️ Last webhook error: {webhook['last_error_message']}")
        return True
    except requests.exceptions.RequestException as e:
        print(f"❌ Network error connecting to Telegram: {e}")
        return False


def main():
    print("🔍 PM Bot - Configuration Validation")
    print("=" * 50)

    env_vars = validate_env_file()
    if not env_vars:
        sys.exit(1)

    validation_failed = False

    print("\n🔍 Validating configuration...")

    if not validate_token_format(env_vars["BOT_TOKEN"]):
        validation_failed = True

    if not validate_secret_format(env_vars["BOT_SECRET"]):
        validation_failed = True

    if not validate_admin_ids(env_vars["ADMIN_UID"]):
        validation_failed = True

    if not validate_quiz_questions(env_vars.get("QUIZ_QUESTIONS", "")):
        validation_failed = True

    if not validation_failed:
        base_url = env_vars.get("WEBHOOK_BASE_URL", "").rstrip("/")
        path = env_vars.get("WEBHOOK_PATH", "/endpoint")
        expected_url = f"{base_url}{path}" if base_url else None
        if not check_telegram_api(env_vars["BOT_TOKEN"], expected_url):
            validation_failed = True

    if validation_failed:
        print("\n❌ Configuration validation failed!")
        print("Please fix the issues above before running the bot.")
        sys.exit(1)
    else:
        print("\n✅ All configuration checks passed!")
        print("Bot is ready to start.")


if __name__ == "__main__":
    main()
