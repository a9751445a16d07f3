import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

import pandas as pd

logger = logging.getLogger(__name__)

Row = Dict[str, str]


def read_rows(
    path: Path,
    *,
    sep: str = ",",
    names: Optional[Sequence[str]] = None,
    label: str = "dataset",
) -> List[Row]:
    """
    Reads a delimited file into a list of string rows.

    Every cell is returned as a stripped string ("" for missing cells) so a
    short or malformed row never aborts the load. A missing file or an I/O /
    parser failure is logged and yields an empty list.
    """
    if not path.exists():
        logger.warning("%s file not found: %s", label, path)
        return []

    try:
        frame = pd.read_csv(
            path,
            sep=sep,
            header=None if names else "infer",
            names=list(names) if names else None,
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
            on_bad_lines="skip",
            engine="python",
        )
    except (OSError, UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        logger.warning("Failed to load %s from %s: %s", label, path, exc)
        return []

    frame = frame.fillna("")
    frame.columns = [str(column).strip() for column in frame.columns]
    rows = [
        {column: str(value).strip() for column, value in record.items()}
        for record in frame.to_dict(orient="records")
    ]
    logger.info("Loaded %d %s records from %s", len(rows), label, path.name)
    return rows


def first_existing(root: Path, candidates: Iterable[str]) -> Optional[Path]:
    for relative in candidates:
        path = root / relative
        if path.exists():
            return path
    return None


def pick(row: Row, *keys: str, default: str = "") -> str:
    """First non-empty value among alternative column names."""
    for key in keys:
        value = row.get(key)
        if value:
            return value
    return default


def to_float(value: Optional[str], default: float = 0.0) -> float:
    if value is None:
        return default
    cleaned = str(value).replace(",", "").strip()
    try:
        number = float(cleaned)
    except ValueError:
        return default
    if number != number:
        return default
    return number
