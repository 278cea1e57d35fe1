"""Import a paysheet file from the command line.

Usage:
    python -m teacherpay.importer paysheet.xlsx --month January --year 2025
    python -m teacherpay.importer --sample > paysheet_sample_format.csv
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from teacherpay.core.config import AppSettings
from teacherpay.core.logging import setup_logging
from teacherpay.importer.main import PaysheetImporter
from teacherpay.importer.sample_format import sample_csv
from teacherpay.models.batch import ImportResult, PayPeriod
from teacherpay.orchestration.storage_router import StorageRouter
from teacherpay.persistence import create_stores


async def run_import(path: str, period: PayPeriod, settings: AppSettings) -> ImportResult:
    primary, fallback = create_stores(settings)
    importer = PaysheetImporter(StorageRouter(primary, fallback), settings)
    try:
        return await importer.import_path(path, period)
    finally:
        for store in (primary, fallback):
            close = getattr(store, "close", None)
            if close is not None:
                await close()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Import a teacher paysheet (CSV or Excel)")
    parser.add_argument("file", nargs="?", help="Paysheet file (.csv, .xlsx, .xls)")
    parser.add_argument("--month", help="Pay period month name (e.g. January)")
    parser.add_argument("--year", help="Pay period year (e.g. 2025)")
    parser.add_argument("--sample", action="store_true", help="Print the sample CSV format and exit")
    args = parser.parse_args(argv)

    if args.sample:
        sys.stdout.write(sample_csv())
        return 0
    if not args.file or not args.month or not args.year:
        parser.error("file, --month and --year are required")

    settings = AppSettings()
    setup_logging(settings.log_level)

    result = asyncio.run(run_import(args.file, PayPeriod(month=args.month, year=args.year), settings))
    print(result.model_dump_json(indent=2, by_alias=True, exclude={"records"}))
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
