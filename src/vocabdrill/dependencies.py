from typing import Optional

from fastapi import Cookie

from .config import settings
from .globals import quiz_engine, result_repo, session_store, vocab_repo
from .quiz import QuizEngine
from .sessions import SessionStore
from .storage import ResultRepository, VocabularyRepository


def get_vocab_repo() -> VocabularyRepository:
    return vocab_repo


def get_result_repo() -> ResultRepository:
    return result_repo


def get_session_store() -> SessionStore:
    return session_store


def get_quiz_engine() -> QuizEngine:
    return quiz_engine


def get_session_id(
    session_id: Optional[str] = Cookie(None, alias=settings.SESSION_COOKIE_NAME)
) -> Optional[str]:
    return session_id
