"""StorageRouter: writes a paysheet batch to the primary store, else the fallback.

One logical attempt per store: the paysheet document first, then every salary
slip (fanned out and all awaited). Any failure during the primary attempt
sends the whole batch to the secondary store; nothing already written to the
primary is reconciled or rolled back. Imports are manual and idempotent by
record id, so a later re-import converges the stores.
"""

from __future__ import annotations

import asyncio
import logging

from teacherpay.core.exceptions import StoreUnavailable, StoreWriteFailed
from teacherpay.core.protocols import IPayrollStore
from teacherpay.models.batch import PaysheetBatch, StoreTag, StoreWriteOutcome
from teacherpay.models.payroll_record import PayrollRecord

logger = logging.getLogger(__name__)


async def is_ready(store: IPayrollStore) -> bool:
    """``store.initialize()``, with an exception counted as not ready."""
    try:
        return bool(await store.initialize())
    except Exception as exc:
        logger.warning("Store %s failed to initialize: %s", store.name, exc)
        return False


async def write_to_store(store: IPayrollStore, batch: PaysheetBatch) -> None:
    """Write the batch document, then all slips; raise if any step failed."""
    await store.write_batch(batch.period_key, batch)

    results = await asyncio.gather(
        *(store.write_record(record) for record in batch.records),
        return_exceptions=True,
    )
    failures = [r for r in results if isinstance(r, BaseException)]
    if failures:
        raise StoreWriteFailed(
            store.name,
            f"{len(failures)} of {len(batch.records)} salary slips failed; first: {failures[0]}",
        )


class StorageRouter:
    """Primary/secondary IPayrollStore pair with complete fallback."""

    def __init__(self, primary: IPayrollStore, secondary: IPayrollStore) -> None:
        self._primary = primary
        self._secondary = secondary

    @property
    def primary(self) -> IPayrollStore:
        return self._primary

    @property
    def secondary(self) -> IPayrollStore:
        return self._secondary

    async def write(self, batch: PaysheetBatch) -> StoreWriteOutcome:
        period_key = batch.period_key

        if await is_ready(self._primary):
            try:
                await write_to_store(self._primary, batch)
            except Exception as exc:
                logger.warning(
                    "Primary store %s failed for %s, falling back to %s: %s",
                    self._primary.name, period_key, self._secondary.name, exc,
                )
            else:
                logger.info(
                    "Paysheet %s (%d records) saved to %s",
                    period_key, len(batch.records), self._primary.name,
                )
                return StoreWriteOutcome.persisted(StoreTag.PRIMARY, self._primary.name, period_key)
        else:
            logger.warning(
                "Primary store %s unavailable, falling back to %s",
                self._primary.name, self._secondary.name,
            )

        try:
            if not await is_ready(self._secondary):
                raise StoreUnavailable(self._secondary.name)
            await write_to_store(self._secondary, batch)
        except Exception as exc:
            logger.error("Fallback store %s failed for %s: %s", self._secondary.name, period_key, exc)
            return StoreWriteOutcome.failed(
                f"Primary and fallback stores both failed: {exc}", batch,
            )

        logger.warning(
            "Paysheet %s (%d records) saved to fallback store %s",
            period_key, len(batch.records), self._secondary.name,
        )
        return StoreWriteOutcome.persisted(StoreTag.SECONDARY, self._secondary.name, period_key)

    async def read_batch(self, period_key: str) -> PaysheetBatch | None:
        """Read from the primary; use the secondary when the primary has nothing."""
        for store in (self._primary, self._secondary):
            if not await is_ready(store):
                continue
            try:
                batch = await store.read_batch(period_key)
            except Exception as exc:
                logger.warning("Read of %s from %s failed: %s", period_key, store.name, exc)
                continue
            if batch is not None:
                return batch
        return None

    async def list_salary_slips(self, teacher_id: str) -> list[PayrollRecord]:
        for store in (self._primary, self._secondary):
            if not await is_ready(store):
                continue
            try:
                slips = await store.list_salary_slips(teacher_id)
            except Exception as exc:
                logger.warning("Slip lookup for %s on %s failed: %s", teacher_id, store.name, exc)
                continue
            if slips:
                return slips
        return []
