class VocabDrillError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(VocabDrillError):
    status_code = 404


class NotEnoughWordsError(VocabDrillError):
    """The vocabulary is too small to start a quiz."""

    status_code = 409

    def __init__(self, available: int, required: int):
        plural = "" if available == 1 else "s"
        super().__init__(
            f"You need at least {required} words in your vocabulary to take a test. "
            f"Currently you have {available} word{plural}."
        )
        self.available = available
        self.required = required


class EmptyAnswerError(VocabDrillError):
    status_code = 400

    def __init__(self):
        super().__init__("Please enter an answer")


class QuizCompletedError(VocabDrillError):
    status_code = 409

    def __init__(self):
        super().__init__("Quiz is already completed")


class QuizNotCompletedError(VocabDrillError):
    status_code = 409

    def __init__(self):
        super().__init__("Quiz is not completed yet")


class SessionNotFoundError(VocabDrillError):
    status_code = 401

    def __init__(self):
        super().__init__("Session invalid")
