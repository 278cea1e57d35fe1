"""Record normalization: one grid row -> one PayrollRecord.

Rows shorter than ``min_row_cells`` are dropped without error. Every other
data row yields exactly one record, in input order. Currency cells go through
:func:`coerce_currency`; unmapped fields take their defaults.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

from teacherpay.core.types import Grid
from teacherpay.importer.destring import coerce_currency
from teacherpay.models.batch import PayPeriod
from teacherpay.models.payroll_record import PayrollRecord
from teacherpay.models.schema_mapping import CanonicalField, ColumnMapping, FieldKind

logger = logging.getLogger(__name__)

MIN_ROW_CELLS = 3
DEFAULT_STATUS = "paid"


def _cell(row: Sequence[Any], index: int | None) -> str:
    if index is None or index >= len(row):
        return ""
    value = row[index]
    return "" if value is None else str(value).strip()


def record_id(teacher_id: str, row_ordinal: int, period: PayPeriod) -> str:
    return f"{teacher_id or row_ordinal}_{period.month}_{period.year}"


def normalize_row(
    row: Sequence[Any],
    row_ordinal: int,
    mapping: ColumnMapping,
    period: PayPeriod,
    *,
    now: datetime,
    default_status: str = DEFAULT_STATUS,
) -> PayrollRecord:
    """Build the record for one data row (``row_ordinal`` is its grid index)."""
    values: dict[str, Any] = {}
    for field in CanonicalField:
        raw = _cell(row, mapping.index_of(field))
        if field.kind is FieldKind.CURRENCY:
            values[field.value] = coerce_currency(raw)
        else:
            values[field.value] = raw

    teacher_id = values[CanonicalField.TEACHER_ID.value]
    values["id"] = record_id(teacher_id, row_ordinal, period)
    values[CanonicalField.PAY_DATE.value] = (
        values[CanonicalField.PAY_DATE.value] or now.date().isoformat()
    )
    values[CanonicalField.STATUS.value] = values[CanonicalField.STATUS.value] or default_status
    values.update(
        month=period.month,
        year=period.year,
        month_num=period.month_num,
        created_at=now.isoformat(),
        paysheet_id=period.key,
    )
    return PayrollRecord(**values)


def normalize(
    grid: Grid,
    mapping: ColumnMapping,
    period: PayPeriod,
    *,
    now: datetime | None = None,
    min_row_cells: int = MIN_ROW_CELLS,
    default_status: str = DEFAULT_STATUS,
) -> list[PayrollRecord]:
    """Normalize every data row (grid index >= 1) into a record."""
    if now is None:
        now = datetime.now(timezone.utc)

    records: list[PayrollRecord] = []
    skipped = 0
    for ordinal in range(1, len(grid)):
        row = grid[ordinal]
        if len(row) < min_row_cells:
            skipped += 1
            logger.debug("Skipping incomplete row %d (%d cells)", ordinal, len(row))
            continue
        records.append(
            normalize_row(row, ordinal, mapping, period, now=now, default_status=default_status)
        )

    logger.info(
        "Normalized %d records for %s (%d incomplete rows skipped)",
        len(records), period.key, skipped,
    )
    return records
