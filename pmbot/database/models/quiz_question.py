"""
Модель вопроса викторины для CAPTCHA.
"""
from typing import List

from pydantic import BaseModel, ConfigDict, Field, model_validator


class QuizQuestion(BaseModel):
    """
    Вопрос викторины: текст, варианты ответа и индекс правильного варианта.
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    question: str = Field(min_length=1)
    options: List[str] = Field(min_length=2)
    correct_answer: int = Field(alias="correctAnswer", ge=0)

    @model_validator(mode="after")
    def check_correct_answer(self) -> "QuizQuestion":
        if self.correct_answer >= len(self.options):
            raise ValueError(
                f"correctAnswer={self.correct_answer} вне диапазона вариантов (0..{len(self.options) - 1})"
            )
        return self
