"""FileParserService: turns raw paysheet exports into a uniform text grid.

Delimited text is split line by line with no quoting rules beyond stripping
one pair of surrounding quotes per cell, so a delimiter inside a quoted cell
still splits it. Spreadsheets are read from the first sheet only, with cached
values rather than formulas.
"""

from __future__ import annotations

import io
import logging
import zipfile
import zlib
from datetime import date, datetime, time
from enum import StrEnum
from pathlib import PurePath
from typing import Any

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from teacherpay.core.exceptions import ParseError, UnsupportedFormatError
from teacherpay.core.types import Grid, Row

logger = logging.getLogger(__name__)

_QUOTES = ('"', "'")

# SyntaxError covers both xml.etree and lxml parse errors.
_WORKBOOK_ERRORS = (
    InvalidFileException, zipfile.BadZipFile, zlib.error, SyntaxError,
    KeyError, IndexError, EOFError, OSError, ValueError,
)


class SourceKind(StrEnum):
    CSV = "csv"
    XLSX = "xlsx"
    XLS = "xls"

    @property
    def is_spreadsheet(self) -> bool:
        return self is not SourceKind.CSV


def detect_source_kind(filename: str) -> SourceKind:
    """Map a file name suffix to a source kind."""
    suffix = PurePath(filename).suffix.lower().lstrip(".")
    try:
        return SourceKind(suffix)
    except ValueError:
        raise UnsupportedFormatError(
            "Unsupported file format. Please use CSV or Excel files (.csv, .xlsx, .xls)."
        ) from None


def _strip_quotes(cell: str) -> str:
    if len(cell) >= 2 and cell[0] == cell[-1] and cell[0] in _QUOTES:
        return cell[1:-1]
    return cell


def parse_delimited(content: str | bytes, delimiter: str = ",") -> Grid:
    """Split delimited text into rows of trimmed, unquoted cells."""
    if isinstance(content, bytes):
        try:
            content = content.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ParseError(f"Failed to read CSV file: {exc}") from exc
    content = content.lstrip("\ufeff")

    grid: Grid = []
    for line in content.splitlines():
        if not line.strip():
            continue
        grid.append([_strip_quotes(cell.strip()) for cell in line.split(delimiter)])
    return grid


def cell_to_text(value: Any) -> str:
    """Render one spreadsheet cell the way it would appear in a CSV export."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, (date, time)):
        return value.isoformat()
    return str(value).strip()


def parse_spreadsheet(content: bytes) -> Grid:
    """Read the first worksheet into a grid; row 0 holds the headers."""
    try:
        wb = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except _WORKBOOK_ERRORS as exc:
        raise ParseError(f"Failed to parse Excel file: {exc}") from exc

    # read_only sheets are parsed lazily, so a damaged sheet part fails here
    try:
        ws = wb.worksheets[0]
        grid: Grid = []
        for values in ws.iter_rows(values_only=True):
            row: Row = [cell_to_text(v) for v in values]
            while row and row[-1] == "":
                row.pop()
            if row:
                grid.append(row)
    except _WORKBOOK_ERRORS as exc:
        raise ParseError(f"Failed to parse Excel file: {exc}") from exc
    finally:
        wb.close()
    return grid


def parse(raw: str | bytes, source_kind: SourceKind | str, delimiter: str = ",") -> Grid:
    """Parse raw file content into a grid according to its source kind."""
    kind = SourceKind(source_kind)
    if kind.is_spreadsheet:
        if isinstance(raw, str):
            raise ParseError("Failed to parse Excel file: expected binary workbook content")
        grid = parse_spreadsheet(raw)
    else:
        grid = parse_delimited(raw, delimiter=delimiter)
    logger.debug("Parsed %s input into %d rows", kind, len(grid))
    return grid
