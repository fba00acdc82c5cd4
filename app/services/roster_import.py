"""Roster import: turn an uploaded CSV/XLSX file into participant rows.

Structure is validated against the whole file before anything is written;
once the file is accepted, individual rows that fail to insert are reported
back instead of aborting the batch.
"""
import csv
import io
import logging
import os
import zipfile
from datetime import date, datetime
from typing import Any, List, NamedTuple, Sequence, Tuple

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app import crud
from app.core.exceptions import RosterValidationError
from app.schemas.participant import ROSTER_COLUMNS, ParticipantRecord

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".csv", ".xlsx")

# (line number in the source file, cell values)
Row = Tuple[int, List[str]]


class RosterRow(NamedTuple):
    line_number: int
    record: ParticipantRecord


class RosterImportResult(BaseModel):
    success: bool
    insertedCount: int
    errors: List[str] = Field(default_factory=list)


def get_file_extension(filename: str) -> str:
    return os.path.splitext(filename or "")[1].lower()


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).upper()
    if isinstance(value, float) and value.is_integer():
        # Spreadsheets store bib numbers and years as floats
        return str(int(value))
    if isinstance(value, datetime):
        if value.time() == datetime.min.time():
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    return str(value).strip()


def _read_csv_rows(content: bytes) -> List[Row]:
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise RosterValidationError("Roster file must be UTF-8 encoded")

    rows: List[Row] = []
    reader = csv.reader(io.StringIO(text, newline=""))
    try:
        for cells in reader:
            cleaned = [cell.strip() for cell in cells]
            if not any(cleaned):
                continue
            rows.append((reader.line_num, cleaned))
    except csv.Error as e:
        raise RosterValidationError(f"Malformed CSV near line {reader.line_num}: {e}")
    return rows


def _read_xlsx_rows(content: bytes) -> List[Row]:
    try:
        workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, ValueError, OSError) as e:
        raise RosterValidationError(f"Could not read spreadsheet: {e}")

    try:
        if not workbook.worksheets:
            return []
        sheet = workbook.worksheets[0]
        rows: List[Row] = []
        for line_number, values in enumerate(sheet.iter_rows(values_only=True), start=1):
            cells = [_cell_text(value) for value in values]
            # Trailing blank cells are formatting, not columns
            while cells and not cells[-1]:
                cells.pop()
            if cells:
                rows.append((line_number, cells))
        return rows
    finally:
        workbook.close()


def _validate_header(header: Sequence[str]) -> None:
    missing = [column for column in ROSTER_COLUMNS if column not in header]
    if missing:
        raise RosterValidationError(f"Missing required columns: {', '.join(missing)}")

    extra = [column for column in header if column not in ROSTER_COLUMNS]
    if extra:
        raise RosterValidationError(f"Unexpected columns found: {', '.join(extra)}")

    duplicated = sorted({column for column in header if list(header).count(column) > 1})
    if duplicated:
        raise RosterValidationError(f"Duplicate columns found: {', '.join(duplicated)}")


def rows_to_records(rows: List[Row], *, pad_short_rows: bool = False) -> List[RosterRow]:
    """Validate the table shape and map every data row onto a ParticipantRecord,
    keeping the source line number for error reporting."""
    if len(rows) < 2:
        raise RosterValidationError("Roster file must have at least a header row and one data row")

    _, header = rows[0]
    _validate_header(header)
    width = len(header)

    parsed: List[RosterRow] = []
    for line_number, cells in rows[1:]:
        if pad_short_rows and len(cells) < width:
            cells = cells + [""] * (width - len(cells))
        if len(cells) != width:
            raise RosterValidationError(
                f"Row {line_number} has {len(cells)} columns, expected {width}"
            )
        parsed.append(RosterRow(line_number, ParticipantRecord(**dict(zip(header, cells)))))
    return parsed


def parse_roster(content: bytes, filename: str) -> List[RosterRow]:
    extension = get_file_extension(filename)
    if extension == ".csv":
        return rows_to_records(_read_csv_rows(content))
    if extension == ".xlsx":
        return rows_to_records(_read_xlsx_rows(content), pad_short_rows=True)
    raise RosterValidationError(
        f"Unsupported file type '{extension or filename}'. Allowed types: {', '.join(SUPPORTED_EXTENSIONS)}"
    )


def insert_records(db: Session, *, event_id: int, rows: List[RosterRow]) -> RosterImportResult:
    result = crud.participant.bulk_insert(
        db,
        event_id=event_id,
        records=[row.record for row in rows],
        row_numbers=[row.line_number for row in rows],
    )
    return RosterImportResult(
        success=result.success,
        insertedCount=result.inserted,
        errors=result.errors,
    )


def import_roster(db: Session, *, event_id: int, content: bytes, filename: str) -> RosterImportResult:
    rows = parse_roster(content, filename)
    logger.info(f"Parsed {len(rows)} roster rows from {filename} for event {event_id}")
    return insert_records(db, event_id=event_id, rows=rows)
