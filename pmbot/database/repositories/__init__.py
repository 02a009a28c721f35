from .failed_repository import FailedVerificationRepository
from .flag_repository import BlockRepository, VerifiedRepository
from .message_map_repository import MessageMapRepository
from .session_repository import SessionRepository

__all__ = [
    "BlockRepository",
    "FailedVerificationRepository",
    "MessageMapRepository",
    "SessionRepository",
    "VerifiedRepository",
]
