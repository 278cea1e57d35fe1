"""PaysheetImporter: parse -> resolve -> normalize -> aggregate -> route.

The caller always gets an ImportResult with a definite success flag and a
human-readable message. Parse failures end the import before anything is
written; store trouble is handled by the router's fallback.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from teacherpay.core.config import AppSettings
from teacherpay.core.exceptions import ParseError, TeacherPayError, UnsupportedFormatError
from teacherpay.core.protocols import IStorageRouter
from teacherpay.core.types import Grid
from teacherpay.importer.aggregator import aggregate
from teacherpay.importer.file_parser import SourceKind, detect_source_kind, parse
from teacherpay.importer.normalizer import normalize
from teacherpay.importer.schema_matcher import resolve_columns
from teacherpay.models.batch import DEFAULT_MONTH_NUM, ImportResult, PayPeriod, StoreTag
from teacherpay.models.payroll_record import PayrollRecord

logger = logging.getLogger(__name__)


def validate_grid(grid: Grid) -> None:
    if len(grid) < 2:
        raise ParseError("File must contain at least header row and one data row")


class PaysheetImporter:
    """Import entry point used by the API and the CLI."""

    def __init__(self, router: IStorageRouter, settings: AppSettings | None = None) -> None:
        self._router = router
        self._settings = settings or AppSettings()

    def process(
        self,
        raw: str | bytes,
        source_kind: SourceKind | str,
        period: PayPeriod,
        *,
        now: datetime | None = None,
    ) -> tuple[list[PayrollRecord], list[str]]:
        """Run the synchronous part of the pipeline; raises ParseError."""
        try:
            kind = SourceKind(source_kind)
        except ValueError:
            raise UnsupportedFormatError(f"Unsupported source kind: {source_kind!r}") from None

        cfg = self._settings.importer
        grid = parse(raw, kind, delimiter=cfg.delimiter)
        validate_grid(grid)

        mapping = resolve_columns(grid[0])
        records = normalize(
            grid, mapping, period,
            now=now, min_row_cells=cfg.min_row_cells, default_status=cfg.default_status,
        )

        warnings = list(mapping.warnings)
        if not period.is_known_month:
            warnings.append(
                f'Unrecognized month "{period.month}"; month number defaulted to "{DEFAULT_MONTH_NUM}"'
            )
        return records, warnings

    async def import_file(
        self,
        raw: str | bytes,
        source_kind: SourceKind | str,
        period: PayPeriod,
        *,
        now: datetime | None = None,
    ) -> ImportResult:
        try:
            records, warnings = self.process(raw, source_kind, period, now=now)
        except TeacherPayError as exc:
            logger.error("Error importing paysheet for %s: %s", period.key, exc)
            return ImportResult(success=False, message=str(exc))

        batch = aggregate(records, period, now=now)
        if batch.duplicate_ids:
            warnings.append(
                f"{len(batch.duplicate_ids)} duplicate record id(s); "
                f"later rows replaced earlier ones: {', '.join(batch.duplicate_ids)}"
            )

        outcome = await self._router.write(batch)
        count = len(records)
        if not outcome.ok:
            return ImportResult(
                success=False,
                record_count=count,
                message=outcome.reason,
                records=records,
                warnings=warnings,
            )

        batch_id = None
        if outcome.store == StoreTag.PRIMARY:
            batch_id = outcome.batch_id
            message = f"Successfully imported {count} paysheet records to {outcome.store_name}"
        else:
            message = (
                f"Successfully imported {count} paysheet records to fallback store "
                f"{outcome.store_name} (primary store unavailable)"
            )
        if warnings:
            message += ". Warnings: " + "; ".join(warnings)

        return ImportResult(
            success=True,
            record_count=count,
            batch_id=batch_id,
            message=message,
            records=records,
            warnings=warnings,
            store=outcome.store,
        )

    async def import_path(self, path: str | Path, period: PayPeriod) -> ImportResult:
        path = Path(path)
        try:
            kind = detect_source_kind(path.name)
            raw = path.read_bytes()
        except (UnsupportedFormatError, OSError) as exc:
            logger.error("Error reading paysheet file %s: %s", path, exc)
            return ImportResult(success=False, message=str(exc))
        return await self.import_file(raw, kind, period)
