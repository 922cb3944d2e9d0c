import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .config import settings
from .database import init_db
from .errors import VocabDrillError
from .globals import vocab_loader
from .log_handler import SQLiteHandler
from .router import router

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

logger = logging.getLogger("vocabdrill")


# --- Logging Setup ---
def _has_handler(handler_type) -> bool:
    return any(isinstance(h, handler_type) for h in logger.handlers)


def setup_logging():
    logger.setLevel(logging.INFO)

    if not _has_handler(RotatingFileHandler):
        if not os.path.exists(settings.LOG_DIR):
            os.makedirs(settings.LOG_DIR, exist_ok=True)
        log_path = os.path.join(settings.LOG_DIR, settings.LOG_FILE)
        file_handler = RotatingFileHandler(log_path, maxBytes=5_000_000, backupCount=3)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(file_handler)

    if settings.LOG_TO_DB and not _has_handler(SQLiteHandler):
        init_db()
        db_handler = SQLiteHandler()
        db_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(db_handler)

    # Also configure root logger to see logs from other libraries
    logging.basicConfig(level=logging.INFO)


# --- Error Handling ---
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"loc": list(err.get("loc", ())), "message": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
    return JSONResponse({"message": "Invalid data", "errors": errors}, status_code=400)


async def domain_error_handler(request: Request, exc: VocabDrillError):
    return JSONResponse({"message": exc.message}, status_code=exc.status_code)


async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse({"message": "Internal server error"}, status_code=500)


# --- Lifecycle ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    vocab_loader.load_all()
    yield


# --- App Factory ---
def create_app() -> FastAPI:
    setup_logging()
    app = FastAPI(
        title=settings.PROJECT_NAME,
        debug=settings.DEBUG,
        lifespan=lifespan,
        root_path=settings.ROOT_PATH,
    )

    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(VocabDrillError, domain_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    app.include_router(router)

    return app
