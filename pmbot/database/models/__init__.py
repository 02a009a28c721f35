from .captcha_session import CaptchaKind, CaptchaSession
from .quiz_question import QuizQuestion
from .verification import FailedVerification, GuestStatus, VerificationState

__all__ = [
    "CaptchaKind",
    "CaptchaSession",
    "FailedVerification",
    "GuestStatus",
    "QuizQuestion",
    "VerificationState",
]
