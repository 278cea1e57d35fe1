"""TeacherPay exception hierarchy."""

from __future__ import annotations


class TeacherPayError(Exception):
    """Base exception for all TeacherPay errors."""


class ParseError(TeacherPayError):
    """Source container (CSV text or workbook) could not be decoded."""


class UnsupportedFormatError(ParseError):
    """File type is neither delimited text nor a spreadsheet export."""


class StoreUnavailable(TeacherPayError):
    """Store adapter reported it is not ready."""

    def __init__(self, store: str, message: str = "store not ready") -> None:
        self.store = store
        super().__init__(f"{store}: {message}")


class StoreWriteFailed(TeacherPayError):
    """Network or remote error while persisting to a store."""

    def __init__(self, store: str, message: str) -> None:
        self.store = store
        super().__init__(f"{store} write failed: {message}")
