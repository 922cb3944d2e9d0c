import os


class Settings:
    PROJECT_NAME: str = "vocabdrill"
    DEBUG: bool = os.environ.get("DEBUG", "").lower() in ("1", "true", "yes")
    LOG_DIR: str = os.environ.get("LOG_DIR", "log")
    LOG_FILE: str = "vocabdrill.log"
    LOG_TO_DB: bool = os.environ.get("LOG_TO_DB", "").lower() in ("1", "true", "yes")
    DB_DIR: str = os.environ.get("DB_DIR", "db")
    DB_FILE: str = "vocabdrill.db"
    VOCAB_DIR: str = os.environ.get("VOCAB_DIR", "vocabulary")
    SESSION_COOKIE_NAME: str = "quiz_session_id"
    SESSION_TIMEOUT_MINUTES: int = int(os.environ.get("SESSION_TIMEOUT_MINUTES", "120"))
    ROOT_PATH: str = os.environ.get("ROOT_PATH", "")


settings = Settings()
