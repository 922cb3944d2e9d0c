from .config import settings
from .quiz import QuizEngine
from .sessions import SessionStore
from .storage import InMemoryResultRepository, InMemoryVocabularyRepository
from .vocabulary import VocabularyLoader

vocab_repo = InMemoryVocabularyRepository()
result_repo = InMemoryResultRepository()
session_store = SessionStore(settings.SESSION_TIMEOUT_MINUTES)
quiz_engine = QuizEngine()
vocab_loader = VocabularyLoader(settings.VOCAB_DIR, vocab_repo)
