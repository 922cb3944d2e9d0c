import glob
import io
import logging
import os
from typing import List, Optional

import pandas as pd
from pydantic import ValidationError

from .models import WordPair, WordPairCreate
from .storage import VocabularyRepository

logger = logging.getLogger(__name__)

COLUMN_SETS = [("german", "english"), ("word", "translation")]
EXPORT_COLUMNS = ["id", "german", "english", "category", "created_at"]


def _pick_columns(df: pd.DataFrame) -> Optional[tuple]:
    for german_col, english_col in COLUMN_SETS:
        if german_col in df.columns and english_col in df.columns:
            return german_col, english_col
    return None


def _cell(value) -> Optional[str]:
    if pd.isna(value):
        return None
    return str(value)


class VocabularyLoader:
    """Seeds a vocabulary repository from the CSV files in a directory."""

    def __init__(self, directory: str, repo: VocabularyRepository):
        self.directory = directory
        self.repo = repo

    def load_all(self) -> int:
        if not os.path.isdir(self.directory):
            logger.warning(f"Vocabulary directory {self.directory} not found; starting empty.")
            return 0

        loaded = 0
        for file_path in sorted(glob.glob(os.path.join(self.directory, "*.csv"))):
            try:
                loaded += self.load_file(file_path)
            except Exception as e:
                logger.error(f"Failed to load {file_path}: {e}")
        logger.info(f"Seeded {loaded} word pairs from {self.directory}")
        return loaded

    def load_file(self, file_path: str) -> int:
        file_name = os.path.splitext(os.path.basename(file_path))[0]
        df = pd.read_csv(file_path, encoding="utf-8")
        df.columns = [str(c).strip().lower() for c in df.columns]

        columns = _pick_columns(df)
        if columns is None:
            logger.error(f"Skipping {file_name}: Missing columns.")
            return 0
        german_col, english_col = columns
        default_category = file_name.replace("_", " ").title()

        count = 0
        for row in df.to_dict("records"):
            category = _cell(row.get("category")) if "category" in df.columns else None
            try:
                pair = WordPairCreate(
                    german_word=_cell(row[german_col]) or "",
                    english_translation=_cell(row[english_col]) or "",
                    category=category or default_category,
                )
            except ValidationError:
                logger.warning(f"Skipping incomplete row in {file_name}: {row}")
                continue
            self.repo.create(pair)
            count += 1
        logger.info(f"Loaded {count} words from {file_name}")
        return count


def export_csv(pairs: List[WordPair]) -> str:
    """Renders word pairs as CSV text with the columns the loader accepts."""
    df = pd.DataFrame(
        [
            {
                "id": p.id,
                "german": p.german_word,
                "english": p.english_translation,
                "category": p.category or "",
                "created_at": p.created_at.isoformat(),
            }
            for p in pairs
        ],
        columns=EXPORT_COLUMNS,
    )
    buffer = io.StringIO()
    df.to_csv(buffer, index=False)
    return buffer.getvalue()
