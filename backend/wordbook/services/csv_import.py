"""
CSV parsing for vocabulary imports.

Two layouts are accepted: chapter-scoped files (`order, korean, translation`) are
imported into one chapter; flat files add a `chapter` column naming the chapter
of each row inside one level. Header problems abort the whole import; rows with
an empty required value or a non-numeric order are skipped and only counted.
"""

import csv
import io
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from wordbook.db.types import fits_db_int

FLAT_HEADERS = ("order", "korean", "translation", "chapter")
CHAPTER_HEADERS = ("order", "korean", "translation")

NO_ROWS_MESSAGE = "CSV has no data rows."


class CsvImportError(Exception):
    """The CSV cannot be imported at all; nothing is inserted."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@dataclass
class CsvRow:
    order: int
    korean: str
    translation: str
    chapter: Optional[str] = None


@dataclass
class ParsedCsv:
    rows: List[CsvRow] = field(default_factory=list)
    skipped: int = 0


def header_error_message(required_headers: Sequence[str]) -> str:
    return f"CSV headers must be exactly: {', '.join(required_headers)}."


def _parse_order(text: str) -> Optional[int]:
    """Integral order value, or None when the cell is not a whole number the database can store."""
    try:
        value = int(text)
    except ValueError:
        try:
            number = float(text)
        except ValueError:
            return None
        if not number.is_integer():
            return None
        value = int(number)
    if not fits_db_int(value):
        return None
    return value


def parse_csv(text: str, required_headers: Sequence[str] = CHAPTER_HEADERS) -> ParsedCsv:
    """
    Parse import CSV text.

    Args:
        text: raw CSV including the header row
        required_headers: exact set of (case-insensitive) columns the header must have

    Returns:
        ParsedCsv: valid rows in file order and the number of rows skipped

    Raises:
        CsvImportError: empty input, wrong headers or unreadable CSV
    """
    try:
        reader = csv.reader(io.StringIO((text or "").lstrip("\ufeff")))
        lines = [cells for cells in reader if any(cell.strip() for cell in cells)]
    except csv.Error as e:
        raise CsvImportError(f"Invalid CSV: {e}") from e

    if not lines:
        raise CsvImportError(NO_ROWS_MESSAGE)

    headers = [cell.strip().lower() for cell in lines[0]]
    if len(headers) != len(required_headers) or set(headers) != set(required_headers):
        raise CsvImportError(header_error_message(required_headers))

    data = lines[1:]
    if not data:
        raise CsvImportError(NO_ROWS_MESSAGE)

    with_chapter = "chapter" in required_headers
    parsed = ParsedCsv()
    for position, cells in enumerate(data, start=1):
        values = {
            name: cells[index].strip() if index < len(cells) else ""
            for index, name in enumerate(headers)
        }
        korean = values["korean"]
        translation = values["translation"]
        chapter = values.get("chapter") if with_chapter else None
        if not korean or not translation or (with_chapter and not chapter):
            parsed.skipped += 1
            continue

        # An empty order falls back to the row's position in the file
        order = position if values["order"] == "" else _parse_order(values["order"])
        if order is None:
            parsed.skipped += 1
            continue

        parsed.rows.append(CsvRow(order=order, korean=korean, translation=translation, chapter=chapter))
    return parsed
