"""Встроенный набор вопросов викторины."""

from pmbot.database.models.quiz_question import QuizQuestion

DEFAULT_QUIZ_QUESTIONS = (
    QuizQuestion(
        question="Выберите правильный ответ: 2 + 3 = ?",
        options=["3", "5", "7", "8"],
        correct_answer=1,
    ),
    QuizQuestion(
        question="Что из этого животное?",
        options=["🌵 Кактус", "🐱 Кошка", "🌸 Цветок", "🌲 Дерево"],
        correct_answer=1,
    ),
    QuizQuestion(
        question="Что из этого фрукт?",
        options=["🍕 Пицца", "🍔 Бургер", "🍎 Яблоко", "🍰 Торт"],
        correct_answer=2,
    ),
    QuizQuestion(
        question="Выберите правильный ответ: 5 × 2 = ?",
        options=["8", "10", "12", "15"],
        correct_answer=1,
    ),
    QuizQuestion(
        question="Что из этого транспорт?",
        options=["🏠 Дом", "🚗 Машина", "📱 Телефон", "📚 Книга"],
        correct_answer=1,
    ),
    QuizQuestion(
        question="Какое число самое большое?",
        options=["5", "15", "25", "35"],
        correct_answer=3,
    ),
    QuizQuestion(
        question="Какой вариант обозначает красный цвет?",
        options=["🔵 Blue", "🔴 Red", "🟢 Green", "🟡 Yellow"],
        correct_answer=1,
    ),
)
