import random
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from vocabdrill import dependencies
from vocabdrill.app import create_app
from vocabdrill.config import settings
from vocabdrill.models import WordPairCreate
from vocabdrill.quiz import QuizEngine
from vocabdrill.sessions import SessionStore
from vocabdrill.storage import InMemoryResultRepository, InMemoryVocabularyRepository

GERMAN_ENGLISH = [
    ("Hund", "dog"),
    ("Katze", "cat"),
    ("Baum", "tree"),
    ("Haus", "house"),
    ("Wasser", "water"),
    ("Brot", "bread"),
    ("Apfel", "apple"),
    ("Buch", "book"),
    ("Stuhl", "chair"),
    ("Tisch", "table"),
    ("Fenster", "window"),
    ("Tür", "door"),
    ("Auto", "car"),
    ("Straße", "street"),
    ("Stadt", "city"),
    ("Blume", "flower"),
    ("Vogel", "bird"),
    ("Sonne", "sun"),
    ("Mond", "moon"),
    ("Schule", "school"),
    ("Freund", "friend"),
    ("Zeit", "time"),
]


class FakeClock:
    def __init__(self, start=None):
        self.now = start or datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now = self.now + timedelta(seconds=seconds)


class TickingClock(FakeClock):
    """Moves forward one second every time it is read."""

    def __call__(self):
        current = self.now
        self.advance(1)
        return current


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def vocab_repo():
    return InMemoryVocabularyRepository(clock=TickingClock(), rng=random.Random(7))


@pytest.fixture
def result_repo():
    return InMemoryResultRepository(clock=TickingClock())


@pytest.fixture
def session_store(clock):
    return SessionStore(timeout_minutes=120, clock=clock)


@pytest.fixture
def engine(clock):
    return QuizEngine(clock=clock)


@pytest.fixture
def add_words(vocab_repo):
    def _add(count, category=None):
        created = []
        for german, english in GERMAN_ENGLISH[:count]:
            created.append(
                vocab_repo.create(
                    WordPairCreate(german_word=german, english_translation=english, category=category)
                )
            )
        return created

    return _add


@pytest.fixture
def app(tmp_path, monkeypatch, vocab_repo, result_repo, session_store, engine):
    monkeypatch.setattr(settings, "LOG_DIR", str(tmp_path / "log"))
    monkeypatch.setattr(settings, "VOCAB_DIR", str(tmp_path / "vocabulary"))
    app = create_app()
    app.dependency_overrides[dependencies.get_vocab_repo] = lambda: vocab_repo
    app.dependency_overrides[dependencies.get_result_repo] = lambda: result_repo
    app.dependency_overrides[dependencies.get_session_store] = lambda: session_store
    app.dependency_overrides[dependencies.get_quiz_engine] = lambda: engine
    return app


@pytest.fixture
def client(app):
    return TestClient(app)
