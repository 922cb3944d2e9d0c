import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import JSONResponse

from .config import settings
from .dependencies import (
    get_quiz_engine,
    get_result_repo,
    get_session_id,
    get_session_store,
    get_vocab_repo,
)
from .errors import NotFoundError, SessionNotFoundError
from .models import (
    AnswerRequest,
    AnswerResponse,
    QuestionPrompt,
    QuizOutcome,
    QuizSession,
    QuizView,
    StartQuizRequest,
    Stats,
    TestAnswer,
    TestResult,
    TestResultCreate,
    WordPair,
    WordPairCreate,
    WordPairUpdate,
)
from .quiz import REQUIRED_WORDS, QuizEngine, create_generator
from .sessions import SessionStore
from .storage import ResultRepository, VocabularyRepository
from .vocabulary import export_csv

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.get("/health")
async def health() -> dict:
    return {"status": "ok"}


# --- Word pairs ---
@router.get("/word-pairs", response_model=List[WordPair])
async def list_word_pairs(repo: VocabularyRepository = Depends(get_vocab_repo)):
    return repo.get_all()


@router.post("/word-pairs", response_model=WordPair, status_code=201)
async def create_word_pair(
    payload: WordPairCreate, repo: VocabularyRepository = Depends(get_vocab_repo)
):
    pair = repo.create(payload)
    logger.info(f"Word pair added: {pair.id} [{pair.german_word} -> {pair.english_translation}]")
    return pair


@router.get("/word-pairs/search", response_model=List[WordPair])
async def search_word_pairs(
    q: str = "",
    category: Optional[str] = None,
    repo: VocabularyRepository = Depends(get_vocab_repo),
):
    return repo.search(q, category or None)


@router.get("/word-pairs/random/{count}", response_model=List[WordPair])
async def random_word_pairs(count: int, repo: VocabularyRepository = Depends(get_vocab_repo)):
    if count <= 0:
        return JSONResponse({"message": "Invalid count parameter"}, status_code=400)
    return repo.sample_random(count)


@router.get("/word-pairs/categories", response_model=List[str])
async def list_categories(repo: VocabularyRepository = Depends(get_vocab_repo)):
    return repo.categories()


@router.get("/word-pairs/export")
async def export_word_pairs(repo: VocabularyRepository = Depends(get_vocab_repo)):
    return Response(
        content=export_csv(repo.get_all()),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="vocabulary.csv"'},
    )


@router.get("/word-pairs/{pair_id}", response_model=WordPair)
async def get_word_pair(pair_id: int, repo: VocabularyRepository = Depends(get_vocab_repo)):
    pair = repo.get_by_id(pair_id)
    if pair is None:
        raise NotFoundError("Word pair not found")
    return pair


@router.put("/word-pairs/{pair_id}", response_model=WordPair)
async def update_word_pair(
    pair_id: int,
    payload: WordPairUpdate,
    repo: VocabularyRepository = Depends(get_vocab_repo),
):
    pair = repo.update(pair_id, payload.changes())
    if pair is None:
        raise NotFoundError("Word pair not found")
    return pair


@router.delete("/word-pairs/{pair_id}", status_code=204)
async def delete_word_pair(pair_id: int, repo: VocabularyRepository = Depends(get_vocab_repo)):
    if not repo.delete(pair_id):
        raise NotFoundError("Word pair not found")
    logger.info(f"Word pair deleted: {pair_id}")
    return Response(status_code=204)


# --- Test results ---
@router.post("/test-results", response_model=TestResult, status_code=201)
async def create_test_result(
    payload: TestResultCreate, results: ResultRepository = Depends(get_result_repo)
):
    return results.create(payload)


@router.get("/test-results", response_model=List[TestResult])
async def list_test_results(
    limit: Optional[int] = Query(None, ge=0),
    results: ResultRepository = Depends(get_result_repo),
):
    if limit:
        return results.get_recent(limit)
    return results.get_all()


@router.get("/stats", response_model=Stats)
async def get_stats(
    repo: VocabularyRepository = Depends(get_vocab_repo),
    results: ResultRepository = Depends(get_result_repo),
):
    history = results.get_all()
    passed = sum(1 for r in history if r.passed == 1)
    return Stats(
        total_words=repo.count(),
        tests_completed=len(history),
        passed_tests=passed,
        success_rate=round(passed / len(history) * 100) if history else 0,
        categories=repo.categories(),
    )


# --- Quiz sessions ---
def _view(engine: QuizEngine, session: QuizSession) -> QuizView:
    question = engine.current_question(session)
    correct = sum(1 for a in session.answers if a.is_correct)
    return QuizView(
        session_id=session.id,
        category=session.category,
        current_index=session.cursor,
        total_questions=len(session.questions),
        correct_count=correct,
        incorrect_count=len(session.answers) - correct,
        question=QuestionPrompt(id=question.id, german_word=question.german_word)
        if question
        else None,
        completed=session.completed,
    )


def _require_session(store: SessionStore, session_id: Optional[str]) -> QuizSession:
    session = store.get(session_id)
    if session is None:
        raise SessionNotFoundError()
    return session


def _finish_if_done(
    engine: QuizEngine, session: QuizSession, results: ResultRepository
) -> Optional[QuizOutcome]:
    if not session.completed:
        return None
    if session.result_id is None:
        stored = results.create(engine.outcome(session).result)
        session.result_id = stored.id
        logger.info(
            f"Result saved: {stored.id} for session {session.id} "
            f"[{stored.correct_answers}/{stored.total_questions}, passed={stored.passed}]"
        )
    return engine.outcome(session)


@router.post("/quiz/start", response_model=QuizView, status_code=201)
async def start_quiz(
    response: Response,
    payload: Optional[StartQuizRequest] = None,
    repo: VocabularyRepository = Depends(get_vocab_repo),
    store: SessionStore = Depends(get_session_store),
    engine: QuizEngine = Depends(get_quiz_engine),
):
    category = payload.category if payload else None
    questions = create_generator(repo, category).generate(REQUIRED_WORDS)
    session = store.add(engine.start(questions, category=category))

    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session.id,
        httponly=True,
        samesite="lax",
    )
    return _view(engine, session)


@router.get("/quiz/current", response_model=QuizView)
async def current_quiz(
    session_id: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
    engine: QuizEngine = Depends(get_quiz_engine),
):
    return _view(engine, _require_session(store, session_id))


@router.post("/quiz/answer", response_model=AnswerResponse)
async def answer_question(
    payload: AnswerRequest,
    session_id: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
    engine: QuizEngine = Depends(get_quiz_engine),
    results: ResultRepository = Depends(get_result_repo),
):
    with store.lock:
        session = _require_session(store, session_id)
        record: TestAnswer = engine.submit(session, payload.answer)
        outcome = _finish_if_done(engine, session, results)
    return AnswerResponse(answer=record, completed=session.completed, outcome=outcome)


@router.post("/quiz/skip", response_model=AnswerResponse)
async def skip_question(
    session_id: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
    engine: QuizEngine = Depends(get_quiz_engine),
    results: ResultRepository = Depends(get_result_repo),
):
    with store.lock:
        session = _require_session(store, session_id)
        record = engine.skip(session)
        outcome = _finish_if_done(engine, session, results)
    return AnswerResponse(answer=record, completed=session.completed, outcome=outcome)


@router.get("/quiz/result", response_model=QuizOutcome)
async def quiz_result(
    session_id: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
    engine: QuizEngine = Depends(get_quiz_engine),
):
    return engine.outcome(_require_session(store, session_id))


@router.post("/reset")
async def reset_session(
    response: Response,
    session_id: Optional[str] = Depends(get_session_id),
    store: SessionStore = Depends(get_session_store),
):
    store.discard(session_id)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return {"status": "success"}
