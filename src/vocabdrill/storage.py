import logging
import random
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence, TypeVar

from .models import TestResult, TestResultCreate, WordPair, WordPairCreate

logger = logging.getLogger(__name__)

T = TypeVar("T")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def sample_without_replacement(
    items: Sequence[T], count: int, rng: Optional[random.Random] = None
) -> List[T]:
    """Partial Fisher-Yates shuffle: draws min(count, len(items)) distinct items."""
    rng = rng or random
    pool = list(items)
    k = max(0, min(count, len(pool)))
    for i in range(k):
        j = rng.randrange(i, len(pool))
        pool[i], pool[j] = pool[j], pool[i]
    return pool[:k]


def _newest_first(records):
    return sorted(records, key=lambda r: (r.created_at, r.id), reverse=True)


# --- Repository interfaces ---
class VocabularyRepository(ABC):
    """Owns the word pair collection."""

    @abstractmethod
    def create(self, pair: WordPairCreate) -> WordPair:
        pass

    @abstractmethod
    def get_all(self) -> List[WordPair]:
        pass

    @abstractmethod
    def get_by_id(self, pair_id: int) -> Optional[WordPair]:
        pass

    @abstractmethod
    def update(self, pair_id: int, changes: dict) -> Optional[WordPair]:
        """Returns None when the id is unknown."""

    @abstractmethod
    def delete(self, pair_id: int) -> bool:
        pass

    @abstractmethod
    def sample_random(self, count: int) -> List[WordPair]:
        pass

    def search(self, query: str, category: Optional[str] = None) -> List[WordPair]:
        needle = (query or "").lower()
        return [
            pair
            for pair in self.get_all()
            if (
                needle in pair.german_word.lower()
                or needle in pair.english_translation.lower()
            )
            and (not category or pair.category == category)
        ]

    def categories(self) -> List[str]:
        return sorted({p.category for p in self.get_all() if p.category})

    def count(self) -> int:
        return len(self.get_all())


class ResultRepository(ABC):
    """Owns the history of completed quizzes. Results are never modified."""

    @abstractmethod
    def create(self, result: TestResultCreate) -> TestResult:
        pass

    @abstractmethod
    def get_all(self) -> List[TestResult]:
        pass

    def get_recent(self, limit: int) -> List[TestResult]:
        return self.get_all()[: max(0, limit)]


# --- In-memory implementations ---
class InMemoryVocabularyRepository(VocabularyRepository):
    def __init__(
        self,
        clock: Callable[[], datetime] = utc_now,
        rng: Optional[random.Random] = None,
    ):
        self._pairs: Dict[int, WordPair] = {}
        self._next_id = 1
        self._lock = threading.Lock()
        self._clock = clock
        self._rng = rng or random.Random()

    def create(self, pair: WordPairCreate) -> WordPair:
        with self._lock:
            record = WordPair(id=self._next_id, created_at=self._clock(), **pair.model_dump())
            self._next_id += 1
            self._pairs[record.id] = record
        logger.debug(f"Created word pair {record.id}: {record.german_word}")
        return record

    def get_all(self) -> List[WordPair]:
        return _newest_first(list(self._pairs.values()))

    def get_by_id(self, pair_id: int) -> Optional[WordPair]:
        return self._pairs.get(pair_id)

    def update(self, pair_id: int, changes: dict) -> Optional[WordPair]:
        allowed = {k: v for k, v in changes.items() if k not in ("id", "created_at")}
        with self._lock:
            existing = self._pairs.get(pair_id)
            if existing is None:
                return None
            updated = existing.model_copy(update=allowed)
            self._pairs[pair_id] = updated
        return updated

    def delete(self, pair_id: int) -> bool:
        with self._lock:
            return self._pairs.pop(pair_id, None) is not None

    def sample_random(self, count: int) -> List[WordPair]:
        return sample_without_replacement(list(self._pairs.values()), count, self._rng)

    def count(self) -> int:
        return len(self._pairs)


class InMemoryResultRepository(ResultRepository):
    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self._results: Dict[int, TestResult] = {}
        self._next_id = 1
        self._lock = threading.Lock()
        self._clock = clock

    def create(self, result: TestResultCreate) -> TestResult:
        with self._lock:
            record = TestResult(id=self._next_id, created_at=self._clock(), **result.model_dump())
            self._next_id += 1
            self._results[record.id] = record
        return record

    def get_all(self) -> List[TestResult]:
        return _newest_first(list(self._results.values()))
