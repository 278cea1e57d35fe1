"""Pay period, paysheet batch, and store/import outcome models."""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Optional

from pydantic import BaseModel, Field, PrivateAttr, field_validator
from pydantic.alias_generators import to_camel

from teacherpay.core.types import JsonDict
from teacherpay.models.payroll_record import PayrollRecord

MONTH_NUMBERS: dict[str, str] = {
    "January": "01", "February": "02", "March": "03", "April": "04",
    "May": "05", "June": "06", "July": "07", "August": "08",
    "September": "09", "October": "10", "November": "11", "December": "12",
}
DEFAULT_MONTH_NUM = "01"


def _month_name(month: str) -> str:
    return month.strip().capitalize()


def is_known_month(month: str) -> bool:
    return _month_name(month) in MONTH_NUMBERS


def month_number(month: str) -> str:
    """Month name -> "01".."12"; unrecognized names fall back to "01"."""
    return MONTH_NUMBERS.get(_month_name(month), DEFAULT_MONTH_NUM)


class PayPeriod(BaseModel):
    month: str
    year: str

    model_config = {"frozen": True}

    @field_validator("month", "year", mode="before")
    @classmethod
    def _as_text(cls, v: Any) -> str:
        return str(v).strip()

    @property
    def key(self) -> str:
        return f"{self.month}_{self.year}"

    @property
    def month_num(self) -> str:
        return month_number(self.month)

    @property
    def is_known_month(self) -> bool:
        return is_known_month(self.month)


class BatchSummary(BaseModel):
    total_records: int = 0
    total_gross: float = 0.0
    total_deductions: float = 0.0
    total_net: float = 0.0

    model_config = {"frozen": True, "alias_generator": to_camel, "populate_by_name": True}


class PaysheetBatch(BaseModel):
    """All records of one (month, year) import plus their totals."""

    month: str
    year: str
    month_num: str = DEFAULT_MONTH_NUM
    period_key: str
    import_date: str = ""
    records: list[PayrollRecord] = Field(default_factory=list)
    summary: BatchSummary = BatchSummary()
    duplicate_ids: list[str] = Field(default_factory=list)

    model_config = {"frozen": True, "alias_generator": to_camel, "populate_by_name": True}

    _index: dict[str, PayrollRecord] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        # Last write wins for colliding identifiers.
        self._index = {record.id: record for record in self.records}

    @property
    def records_by_id(self) -> dict[str, PayrollRecord]:
        return self._index

    def get(self, record_id: str) -> PayrollRecord | None:
        return self._index.get(record_id)

    @property
    def period(self) -> PayPeriod:
        return PayPeriod(month=self.month, year=self.year)

    def to_document(self) -> JsonDict:
        return self.model_dump(by_alias=True)


class StoreTag(StrEnum):
    PRIMARY = "primary"
    SECONDARY = "secondary"


class OutcomeStatus(StrEnum):
    PERSISTED = "persisted"
    FAILED = "failed"


class StoreWriteOutcome(BaseModel):
    """Tagged result of one routed batch write."""

    status: OutcomeStatus
    store: Optional[StoreTag] = None
    store_name: str = ""
    batch_id: Optional[str] = None
    reason: str = ""
    # Returned on failure so the caller still owns the data.
    batch: Optional[PaysheetBatch] = None

    @classmethod
    def persisted(cls, store: StoreTag, store_name: str, batch_id: str) -> StoreWriteOutcome:
        return cls(status=OutcomeStatus.PERSISTED, store=store, store_name=store_name, batch_id=batch_id)

    @classmethod
    def failed(cls, reason: str, batch: PaysheetBatch) -> StoreWriteOutcome:
        return cls(status=OutcomeStatus.FAILED, reason=reason, batch=batch)

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.PERSISTED


class ImportResult(BaseModel):
    """What an import caller gets back: always a definite success or failure."""

    success: bool
    record_count: int = 0
    batch_id: Optional[str] = None
    message: str = ""
    records: list[PayrollRecord] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    store: Optional[StoreTag] = None

    model_config = {"alias_generator": to_camel, "populate_by_name": True}
