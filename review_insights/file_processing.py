import io
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

import pandas as pd

from . import settings
from .models import Review, ensure_reviews

logger = logging.getLogger(__name__)

# Review field -> accepted column names, first match wins
COLUMN_ALIASES = {
    "id": ("id", "review_id"),
    "rating": ("rating", "stars", "score"),
    "date": ("date", "created_at", "date_posted", "timestamp"),
    "title": ("title", "review_title", "headline"),
    "source": ("source", "platform", "site"),
    "author": ("author", "user", "reviewer"),
    "product": ("product", "item", "sku"),
    "verified": ("verified", "verified_purchase"),
}


def _read_frame(file_bytes: bytes, file_name: str) -> pd.DataFrame:
    name = file_name.lower()
    if name.endswith(".csv") or name.endswith(".tsv"):
        sep = "," if name.endswith(".csv") else "\t"
        for encoding in settings.FILE_ENCODINGS:
            try:
                return pd.read_csv(io.BytesIO(file_bytes), sep=sep, encoding=encoding)
            except UnicodeDecodeError:
                logger.debug(f"{file_name} is not {encoding}, trying next encoding")
                continue
        raise ValueError("Could not decode file with any supported encoding")
    if name.endswith(".xlsx"):
        return pd.read_excel(io.BytesIO(file_bytes))
    raise ValueError("Unsupported file format. Use CSV, TSV, or XLSX.")


def _find_column(columns: Iterable[str], candidates: Iterable[str]) -> Optional[str]:
    lowered = {str(col).strip().lower(): col for col in columns}
    for cand in candidates:
        if cand in lowered:
            return lowered[cand]
    return None


def load_reviews_from_file(file_bytes: bytes, file_name: str) -> List[Review]:
    """
    Read reviews from an uploaded CSV, TSV or XLSX file.

    Args:
        file_bytes: Raw file content.
        file_name: Original file name; its extension selects the parser.

    Returns:
        Reviews for every row with non-blank text.

    Raises:
        ValueError: Unsupported extension, undecodable content or a rating
            outside 1-5.
    """
    df = _read_frame(file_bytes, file_name)
    if df.empty:
        return []

    text_col = _find_column(df.columns, settings.TEXT_COLUMN_CANDIDATES)
    if text_col is None:
        # fallback: first column
        text_col = df.columns[0]
    mapping = {"text": text_col}
    for field_name, aliases in COLUMN_ALIASES.items():
        col = _find_column(df.columns, aliases)
        if col is not None and col != text_col:
            mapping[field_name] = col

    df = df.astype(object).where(pd.notna(df), None)
    records = []
    for row in df.to_dict("records"):
        record: Dict[str, Any] = {field_name: row[col] for field_name, col in mapping.items()}
        text = "" if record["text"] is None else str(record["text"])
        if not text.strip():
            continue
        record["text"] = text
        records.append(record)

    logger.info(f"Loaded {len(records)} reviews from {file_name} (text column '{text_col}')")
    return reviews_from_records(records)


def reviews_from_records(records: Iterable[Mapping[str, Any]]) -> List[Review]:
    return ensure_reviews(list(records or []))
