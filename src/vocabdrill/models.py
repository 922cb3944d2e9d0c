from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serializes as camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _require_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be empty")
    return value


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


# --- Word pairs ---
class WordPairCreate(CamelModel):
    german_word: str
    english_translation: str
    category: Optional[str] = None

    @field_validator("german_word", "english_translation")
    @classmethod
    def non_empty(cls, v: str) -> str:
        return _require_text(v)

    @field_validator("category")
    @classmethod
    def normalize_category(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)


class WordPairUpdate(CamelModel):
    german_word: Optional[str] = None
    english_translation: Optional[str] = None
    category: Optional[str] = None

    @field_validator("german_word", "english_translation")
    @classmethod
    def non_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            raise ValueError("must not be null")
        return _require_text(v)

    @field_validator("category")
    @classmethod
    def normalize_category(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)

    def changes(self) -> dict:
        """Only the fields the caller actually sent."""
        return self.model_dump(exclude_unset=True)


class WordPair(CamelModel):
    id: int
    german_word: str
    english_translation: str
    category: Optional[str] = None
    created_at: datetime


# --- Test results ---
class TestResultCreate(CamelModel):
    correct_answers: int = Field(ge=0)
    total_questions: int = Field(ge=0)
    duration: int = Field(ge=0)
    passed: int = Field(ge=0, le=1)

    @model_validator(mode="after")
    def correct_within_total(self):
        if self.correct_answers > self.total_questions:
            raise ValueError("correctAnswers cannot exceed totalQuestions")
        return self


class TestResult(TestResultCreate):
    id: int
    created_at: datetime


# --- Quiz ---
class TestQuestion(CamelModel):
    id: int
    german_word: str
    correct_answer: str


class TestAnswer(CamelModel):
    question_id: int
    user_answer: str
    is_correct: bool
    correct_answer: str


class QuizSession(CamelModel):
    id: str
    questions: List[TestQuestion]
    cursor: int = 0
    answers: List[TestAnswer] = []
    started_at: datetime
    completed_at: Optional[datetime] = None
    category: Optional[str] = None
    result_id: Optional[int] = None

    @property
    def completed(self) -> bool:
        return self.cursor >= len(self.questions)


class QuizOutcome(CamelModel):
    result: TestResultCreate
    accuracy: int
    answers: List[TestAnswer]
    questions: List[TestQuestion]
    result_id: Optional[int] = None


class QuestionPrompt(CamelModel):
    id: int
    german_word: str


class QuizView(CamelModel):
    """What the client sees of an in-flight session; answers stay hidden."""

    session_id: str
    category: Optional[str] = None
    current_index: int
    total_questions: int
    correct_count: int
    incorrect_count: int
    question: Optional[QuestionPrompt] = None
    completed: bool


class AnswerRequest(CamelModel):
    answer: str = ""


class StartQuizRequest(CamelModel):
    category: Optional[str] = None

    @field_validator("category")
    @classmethod
    def normalize_category(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)


class AnswerResponse(CamelModel):
    answer: TestAnswer
    completed: bool
    outcome: Optional[QuizOutcome] = None


class Stats(CamelModel):
    total_words: int
    tests_completed: int
    passed_tests: int
    success_rate: int
    categories: List[str]
