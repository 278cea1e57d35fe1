"""Batch aggregation: records of one pay period -> PaysheetBatch."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Sequence
from datetime import datetime, timezone

from teacherpay.core.types import RecordId
from teacherpay.models.batch import BatchSummary, PayPeriod, PaysheetBatch
from teacherpay.models.payroll_record import PayrollRecord

logger = logging.getLogger(__name__)


def summarize(records: Sequence[PayrollRecord]) -> BatchSummary:
    return BatchSummary(
        total_records=len(records),
        total_gross=sum((r.gross_total for r in records), 0.0),
        total_deductions=sum((r.total_deductions for r in records), 0.0),
        total_net=sum((r.net_pay for r in records), 0.0),
    )


def find_duplicate_ids(records: Sequence[PayrollRecord]) -> list[RecordId]:
    counts = Counter(r.id for r in records)
    return [record_id for record_id, n in counts.items() if n > 1]


def aggregate(
    records: Sequence[PayrollRecord],
    period: PayPeriod | None = None,
    *,
    now: datetime | None = None,
) -> PaysheetBatch:
    """Fold records into a batch with summary totals and an id index.

    ``period`` defaults to the first record's month and year.
    """
    if period is None:
        first = records[0] if records else None
        period = PayPeriod(
            month=first.month if first else "",
            year=first.year if first else "",
        )
    if now is None:
        now = datetime.now(timezone.utc)

    duplicates = find_duplicate_ids(records)
    if duplicates:
        logger.warning(
            "%d duplicate record id(s) in %s; later rows replace earlier ones in the index: %s",
            len(duplicates), period.key, duplicates,
        )

    return PaysheetBatch(
        month=period.month,
        year=period.year,
        month_num=period.month_num,
        period_key=period.key,
        import_date=now.isoformat(),
        records=list(records),
        summary=summarize(records),
        duplicate_ids=duplicates,
    )
