import pytest

from vocabdrill.errors import (
    EmptyAnswerError,
    NotEnoughWordsError,
    QuizCompletedError,
    QuizNotCompletedError,
)
from vocabdrill.models import WordPairCreate
from vocabdrill.quiz import (
    MAX_WRONG_ANSWERS,
    REQUIRED_WORDS,
    CategoryQuizGenerator,
    RandomQuizGenerator,
    create_generator,
    is_passing,
)


def _start(engine, vocab_repo, add_words, count=20):
    add_words(count)
    questions = RandomQuizGenerator(vocab_repo).generate(REQUIRED_WORDS)
    return engine.start(questions)


def test_policy_constants():
    assert REQUIRED_WORDS == 20
    assert MAX_WRONG_ANSWERS == 3


def test_questions_snapshot_word_pairs(vocab_repo, add_words):
    add_words(20)
    questions = RandomQuizGenerator(vocab_repo).generate(20)
    assert len(questions) == 20
    by_id = {p.id: p for p in vocab_repo.get_all()}
    for q in questions:
        assert q.german_word == by_id[q.id].german_word
        assert q.correct_answer == by_id[q.id].english_translation


def test_start_requires_twenty_words(engine, vocab_repo, add_words):
    add_words(15)
    questions = RandomQuizGenerator(vocab_repo).generate(REQUIRED_WORDS)
    assert len(questions) == 15
    with pytest.raises(NotEnoughWordsError) as exc_info:
        engine.start(questions)
    assert exc_info.value.available == 15
    assert "at least 20 words" in exc_info.value.message


def test_new_session_is_in_progress(engine, vocab_repo, add_words):
    session = _start(engine, vocab_repo, add_words)
    assert session.cursor == 0
    assert session.answers == []
    assert not session.completed
    assert engine.current_question(session) == session.questions[0]


def test_submit_is_case_insensitive_and_trimmed(engine, vocab_repo, add_words):
    session = _start(engine, vocab_repo, add_words)
    question = session.questions[0]
    question.correct_answer = "haus "

    answer = engine.submit(session, "  Haus")
    assert answer.is_correct
    assert answer.user_answer == "Haus"
    assert answer.question_id == question.id
    assert session.cursor == 1


def test_submit_wrong_answer(engine, vocab_repo, add_words):
    session = _start(engine, vocab_repo, add_words)
    answer = engine.submit(session, "definitely wrong")
    assert not answer.is_correct
    assert answer.correct_answer == session.questions[0].correct_answer


def test_no_partial_credit(engine, vocab_repo, add_words):
    session = _start(engine, vocab_repo, add_words)
    correct = session.questions[0].correct_answer
    assert not engine.submit(session, correct[:-1]).is_correct


@pytest.mark.parametrize("blank", ["", "   ", None])
def test_empty_answer_is_rejected(engine, vocab_repo, add_words, blank):
    session = _start(engine, vocab_repo, add_words)
    with pytest.raises(EmptyAnswerError):
        engine.submit(session, blank)
    assert session.cursor == 0
    assert session.answers == []


def test_skip_counts_as_wrong(engine, vocab_repo, add_words):
    session = _start(engine, vocab_repo, add_words)
    answer = engine.skip(session)
    assert answer.user_answer == ""
    assert answer.is_correct is False
    assert session.cursor == 1


def test_seventeen_correct_three_skipped_passes(engine, clock, vocab_repo, add_words):
    session = _start(engine, vocab_repo, add_words)
    for i, question in enumerate(list(session.questions)):
        clock.advance(3)
        if i < 17:
            engine.submit(session, question.correct_answer.upper())
        else:
            engine.skip(session)

    assert session.completed
    outcome = engine.outcome(session)
    assert outcome.result.correct_answers == 17
    assert outcome.result.total_questions == 20
    assert outcome.result.passed == 1
    assert outcome.result.duration == 60
    assert outcome.accuracy == 85
    assert len(outcome.answers) == 20
    assert outcome.questions == session.questions


def test_sixteen_correct_four_wrong_fails(engine, vocab_repo, add_words):
    session = _start(engine, vocab_repo, add_words)
    for i, question in enumerate(list(session.questions)):
        engine.submit(session, question.correct_answer if i < 16 else "nope")

    outcome = engine.outcome(session)
    assert outcome.result.correct_answers == 16
    assert outcome.result.passed == 0


@pytest.mark.parametrize("wrong,passed", [(0, True), (3, True), (4, False), (20, False)])
def test_pass_threshold(wrong, passed):
    assert is_passing(20 - wrong, 20) is passed


def test_actions_after_completion_are_rejected(engine, vocab_repo, add_words):
    session = _start(engine, vocab_repo, add_words)
    for _ in session.questions:
        engine.skip(session)
    assert engine.current_question(session) is None
    with pytest.raises(QuizCompletedError):
        engine.skip(session)
    with pytest.raises(QuizCompletedError):
        engine.submit(session, "dog")
    assert len(session.answers) == 20


def test_outcome_before_completion(engine, vocab_repo, add_words):
    session = _start(engine, vocab_repo, add_words)
    engine.skip(session)
    with pytest.raises(QuizNotCompletedError):
        engine.outcome(session)


def test_edits_after_start_do_not_change_questions(engine, vocab_repo, add_words):
    session = _start(engine, vocab_repo, add_words)
    first = session.questions[0]
    original_answer = first.correct_answer
    vocab_repo.update(first.id, {"english_translation": "changed"})
    vocab_repo.delete(session.questions[1].id)

    assert engine.submit(session, original_answer).is_correct
    assert session.questions[1].german_word


def test_sessions_are_independent(engine, vocab_repo, add_words):
    add_words(20)
    generator = RandomQuizGenerator(vocab_repo)
    first = engine.start(generator.generate(20))
    second = engine.start(generator.generate(20))
    engine.skip(first)
    assert first.id != second.id
    assert second.cursor == 0
    assert second.answers == []


def test_category_generator_only_uses_category(engine, vocab_repo, add_words):
    add_words(20, category="basics")
    other = vocab_repo.create(
        WordPairCreate(german_word="Zug", english_translation="train", category="other")
    )
    generator = create_generator(vocab_repo, "basics")
    assert isinstance(generator, CategoryQuizGenerator)
    questions = generator.generate(REQUIRED_WORDS)
    assert len(questions) == 20
    assert {q.id for q in questions} == {p.id for p in vocab_repo.search("", "basics")}
    assert other.id not in {q.id for q in questions}


def test_create_generator_defaults_to_random(vocab_repo):
    assert isinstance(create_generator(vocab_repo), RandomQuizGenerator)
    assert isinstance(create_generator(vocab_repo, ""), RandomQuizGenerator)


def test_answer_comparison_only_folds_case(engine, vocab_repo, add_words):
    session = _start(engine, vocab_repo, add_words)
    session.questions[0].correct_answer = "Straße"
    session.questions[1].correct_answer = "Straße"

    assert not engine.submit(session, "strasse").is_correct
    assert engine.submit(session, " STRAßE ").is_correct
