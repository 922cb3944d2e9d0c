import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, List, Optional

from .errors import (
    EmptyAnswerError,
    NotEnoughWordsError,
    QuizCompletedError,
    QuizNotCompletedError,
)
from .models import QuizOutcome, QuizSession, TestAnswer, TestQuestion, TestResultCreate, WordPair
from .storage import VocabularyRepository, sample_without_replacement, utc_now

logger = logging.getLogger(__name__)

# Fixed policy, not configurable.
REQUIRED_WORDS = 20
MAX_WRONG_ANSWERS = 3


def to_question(pair: WordPair) -> TestQuestion:
    return TestQuestion(
        id=pair.id,
        german_word=pair.german_word,
        correct_answer=pair.english_translation,
    )


def normalize_answer(text: str) -> str:
    return text.strip().lower()


def is_passing(correct_answers: int, total_questions: int) -> bool:
    return (total_questions - correct_answers) <= MAX_WRONG_ANSWERS


# --- Strategy Pattern: Quiz Generators ---
class QuizGenerator(ABC):
    """Turns part of the vocabulary into an ordered question list."""

    def __init__(self, repo: VocabularyRepository):
        self.repo = repo

    @abstractmethod
    def generate(self, count: int) -> List[TestQuestion]:
        pass


class RandomQuizGenerator(QuizGenerator):
    """Standard mode: randomly selects N words from the whole vocabulary."""

    def generate(self, count: int) -> List[TestQuestion]:
        return [to_question(p) for p in self.repo.sample_random(count)]


class CategoryQuizGenerator(QuizGenerator):
    """Drills a single category."""

    def __init__(self, repo: VocabularyRepository, category: str, rng=None):
        super().__init__(repo)
        self.category = category
        self.rng = rng

    def generate(self, count: int) -> List[TestQuestion]:
        pool = self.repo.search("", self.category)
        return [to_question(p) for p in sample_without_replacement(pool, count, self.rng)]


def create_generator(repo: VocabularyRepository, category: Optional[str] = None) -> QuizGenerator:
    if category:
        return CategoryQuizGenerator(repo, category)
    return RandomQuizGenerator(repo)


# --- Engine ---
class QuizEngine:
    """Drives a QuizSession through submit/skip transitions.

    The engine keeps no per-session state; everything lives on the session
    object passed in, so any number of sessions can run side by side.
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self.clock = clock

    def start(
        self, questions: List[TestQuestion], category: Optional[str] = None
    ) -> QuizSession:
        if len(questions) < REQUIRED_WORDS:
            raise NotEnoughWordsError(available=len(questions), required=REQUIRED_WORDS)
        session = QuizSession(
            id=str(uuid.uuid4()),
            questions=list(questions),
            started_at=self.clock(),
            category=category,
        )
        logger.info(f"Quiz started: {session.id} [{len(questions)} questions]")
        return session

    def current_question(self, session: QuizSession) -> Optional[TestQuestion]:
        if session.completed:
            return None
        return session.questions[session.cursor]

    def submit(self, session: QuizSession, user_answer: str) -> TestAnswer:
        question = self._require_open(session)
        answer_text = (user_answer or "").strip()
        if not answer_text:
            raise EmptyAnswerError()
        is_correct = normalize_answer(answer_text) == normalize_answer(question.correct_answer)
        return self._record(session, question, answer_text, is_correct)

    def skip(self, session: QuizSession) -> TestAnswer:
        question = self._require_open(session)
        return self._record(session, question, "", False)

    def outcome(self, session: QuizSession) -> QuizOutcome:
        if not session.completed or session.completed_at is None:
            raise QuizNotCompletedError()

        correct = sum(1 for a in session.answers if a.is_correct)
        total = len(session.answers)
        elapsed = (session.completed_at - session.started_at).total_seconds()
        result = TestResultCreate(
            correct_answers=correct,
            total_questions=total,
            duration=max(0, int(elapsed)),
            passed=1 if is_passing(correct, total) else 0,
        )
        return QuizOutcome(
            result=result,
            accuracy=round(correct / total * 100) if total else 0,
            answers=list(session.answers),
            questions=list(session.questions),
            result_id=session.result_id,
        )

    def _require_open(self, session: QuizSession) -> TestQuestion:
        question = self.current_question(session)
        if question is None:
            raise QuizCompletedError()
        return question

    def _record(
        self, session: QuizSession, question: TestQuestion, user_answer: str, is_correct: bool
    ) -> TestAnswer:
        record = TestAnswer(
            question_id=question.id,
            user_answer=user_answer,
            is_correct=is_correct,
            correct_answer=question.correct_answer,
        )
        session.answers.append(record)
        session.cursor += 1
        if session.completed:
            session.completed_at = self.clock()
            logger.info(
                f"Quiz completed: {session.id} "
                f"[{sum(a.is_correct for a in session.answers)}/{len(session.answers)}]"
            )
        return record
