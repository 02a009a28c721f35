"""Тексты сообщений, которые отправляются из нескольких мест."""

VERIFICATION_SUCCESS = "✅ Проверка пройдена! Теперь вы можете отправлять сообщения."

VERIFICATION_REQUIRED = (
    "⚠️ Вы ещё не прошли проверку.\n\n"
    "Отправьте команду /start, чтобы начать."
)

BLOCKED_NOTICE = "🚫 Вы заблокированы."

ADMIN_HELP = (
    "ℹ️ <b>Как пользоваться</b>\n\n"
    "Ответьте на пересланное сообщение, чтобы написать пользователю.\n\n"
    "<b>Команды ответом на пересланное сообщение:</b>\n"
    "/block - заблокировать пользователя\n"
    "/unblock - разблокировать пользователя\n"
    "/checkblock - проверить статус пользователя\n\n"
    "<b>Команды:</b>\n"
    "/pending - пользователи на проверке\n"
    "/failed - пользователи, не прошедшие проверку"
)
