"""Protocol interfaces for TeacherPay abstractions.

All store access goes through these Protocols: structural typing, no
inheritance required, easy to test with isinstance().
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from teacherpay.core.types import PeriodKey, TeacherId

if TYPE_CHECKING:
    from teacherpay.models.batch import PaysheetBatch, StoreWriteOutcome
    from teacherpay.models.payroll_record import PayrollRecord


# ---------------------------------------------------------------------------
# Persistence: Payroll Store
# ---------------------------------------------------------------------------

@runtime_checkable
class IPayrollStore(Protocol):
    """One backing store for paysheets and salary slips.

    ``initialize`` never raises; False means "unavailable, fall back".
    Writes raise StoreWriteFailed.
    """

    name: str

    async def initialize(self) -> bool: ...

    async def write_batch(self, period_key: PeriodKey, batch: PaysheetBatch) -> None: ...

    async def write_record(self, record: PayrollRecord) -> None: ...

    async def read_batch(self, period_key: PeriodKey) -> PaysheetBatch | None: ...

    async def list_salary_slips(self, teacher_id: TeacherId) -> list[PayrollRecord]: ...


# ---------------------------------------------------------------------------
# Orchestration: Storage Router
# ---------------------------------------------------------------------------

@runtime_checkable
class IStorageRouter(Protocol):
    """Primary-then-fallback batch persistence."""

    async def write(self, batch: PaysheetBatch) -> StoreWriteOutcome: ...

    async def read_batch(self, period_key: PeriodKey) -> PaysheetBatch | None: ...
