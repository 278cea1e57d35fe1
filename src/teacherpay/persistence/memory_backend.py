"""In-memory payroll store: dict-backed, for unit tests and in-process fallback."""

from __future__ import annotations

from teacherpay.core.exceptions import StoreWriteFailed
from teacherpay.models.batch import PaysheetBatch
from teacherpay.models.payroll_record import PayrollRecord


class MemoryPayrollStore:
    """Dict-backed IPayrollStore.

    ``available`` and ``fail_on`` let tests simulate an unreachable store or a
    write that fails midway.
    """

    def __init__(self, name: str = "memory", *, available: bool = True,
                 fail_on: set[str] | None = None) -> None:
        self.name = name
        self.available = available
        self.fail_on = fail_on or set()
        self.calls: list[str] = []
        self._paysheets: dict[str, dict] = {}
        self._slips: dict[str, dict] = {}

    async def initialize(self) -> bool:
        self.calls.append("initialize")
        return self.available

    async def write_batch(self, period_key: str, batch: PaysheetBatch) -> None:
        self.calls.append("write_batch")
        if "write_batch" in self.fail_on:
            raise StoreWriteFailed(self.name, f"paysheet {period_key!r} rejected")
        self._paysheets[period_key] = batch.to_document()

    async def write_record(self, record: PayrollRecord) -> None:
        self.calls.append("write_record")
        if "write_record" in self.fail_on or record.id in self.fail_on:
            raise StoreWriteFailed(self.name, f"slip {record.id!r} rejected")
        self._slips[record.id] = record.to_document()

    async def read_batch(self, period_key: str) -> PaysheetBatch | None:
        doc = self._paysheets.get(period_key)
        return PaysheetBatch.model_validate(doc) if doc is not None else None

    async def list_salary_slips(self, teacher_id: str) -> list[PayrollRecord]:
        return [
            PayrollRecord.model_validate(doc)
            for doc in self._slips.values()
            if doc.get("teacherId") == teacher_id
        ]

    def get_slip(self, slip_id: str) -> PayrollRecord | None:
        doc = self._slips.get(slip_id)
        return PayrollRecord.model_validate(doc) if doc is not None else None
