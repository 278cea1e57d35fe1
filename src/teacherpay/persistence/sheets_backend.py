"""Google Sheets backend implementing IPayrollStore (spreadsheet API store).

Each paysheet becomes a ``{month}_{year}_Paysheet`` sheet: a header row, one
row per record with a running Sr.No, and a TOTAL row. Salary slips are
appended to a shared ``SalarySlips`` sheet whose header row holds the record's
camelCase field names.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import httpx
from pydantic.alias_generators import to_camel

from teacherpay.core.exceptions import StoreWriteFailed
from teacherpay.importer.aggregator import aggregate
from teacherpay.importer.destring import coerce_currency
from teacherpay.models.batch import PaysheetBatch, PayPeriod
from teacherpay.models.payroll_record import PayrollRecord
from teacherpay.models.schema_mapping import FIELD_LABELS, CanonicalField, FieldKind

logger = logging.getLogger(__name__)

SLIPS_SHEET = "SalarySlips"
SLIP_COLUMNS: list[str] = [to_camel(name) for name in PayrollRecord.model_fields]
CURRENCY_KEYS: frozenset[str] = frozenset(
    to_camel(f.value) for f in CanonicalField if f.kind is FieldKind.CURRENCY
)

# (header label, record attribute); Sr.No is filled from the row position.
PAYSHEET_COLUMNS: list[tuple[str, str | None]] = (
    [("Sr.No", None)]
    + [(FIELD_LABELS[f], f.value) for f in CanonicalField]
    + [("Record ID", "id"), ("Created At", "created_at")]
)
SUMMARY_COLUMNS: dict[str, str] = {
    "gross_total": "total_gross",
    "total_deductions": "total_deductions",
    "net_pay": "total_net",
}


def column_letter(index: int) -> str:
    """0 -> A, 25 -> Z, 26 -> AA."""
    letter = ""
    while index >= 0:
        letter = chr(65 + index % 26) + letter
        index = index // 26 - 1
    return letter


def paysheet_sheet_name(period_key: str) -> str:
    return f"{period_key}_Paysheet"


def _coerce_slip(values: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key, value in values.items():
        if key in CURRENCY_KEYS:
            out[key] = coerce_currency(value)
        else:
            out[key] = "" if value is None else str(value)
    return out


class GoogleSheetsPayrollStore:
    """IPayrollStore over the Sheets v4 REST API."""

    name = "sheets"

    def __init__(self, api_key: str = "", spreadsheet_id: str = "",
                 base_url: str = "https://sheets.googleapis.com/v4/spreadsheets",
                 access_token: str = "", timeout: float = 10.0,
                 transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._api_key = api_key
        self._spreadsheet_id = spreadsheet_id
        headers = {"Authorization": f"Bearer {access_token}"} if access_token else {}
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            params={"key": api_key} if api_key else None,
            timeout=timeout,
            transport=transport,
        )
        self._known_sheets: set[str] | None = None
        self._sheet_lock = asyncio.Lock()

    @property
    def configured(self) -> bool:
        return bool(self._api_key and self._spreadsheet_id)

    # ---- HTTP helpers ----

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        resp = await self._client.request(method, f"/{self._spreadsheet_id}{path}", **kwargs)
        resp.raise_for_status()
        return resp.json() if resp.content else {}

    async def _read_values(self, range_: str) -> list[list[Any]]:
        data = await self._request(
            "GET", f"/values/{range_}", params={"valueRenderOption": "UNFORMATTED_VALUE"},
        )
        return data.get("values", [])

    async def _write_values(self, range_: str, rows: list[list[Any]]) -> None:
        await self._request(
            "PUT", f"/values/{range_}",
            params={"valueInputOption": "RAW"}, json={"values": rows},
        )

    async def _clear_values(self, range_: str) -> None:
        await self._request("POST", f"/values/{range_}:clear", json={})

    async def _append_values(self, range_: str, rows: list[list[Any]]) -> None:
        await self._request(
            "POST", f"/values/{range_}:append",
            params={"valueInputOption": "RAW"}, json={"values": rows},
        )

    async def _ensure_sheet(self, title: str, header: list[str] | None = None) -> None:
        """Create ``title`` (with an optional header row) if it does not exist yet."""
        async with self._sheet_lock:
            if self._known_sheets is None:
                meta = await self._request("GET", "", params={"fields": "sheets.properties.title"})
                self._known_sheets = {
                    s["properties"]["title"] for s in meta.get("sheets", [])
                }
            if title in self._known_sheets:
                return
            await self._request(
                "POST", ":batchUpdate",
                json={"requests": [{"addSheet": {"properties": {"title": title}}}]},
            )
            self._known_sheets.add(title)
            logger.info("Created sheet %s", title)
            if header:
                last = column_letter(len(header) - 1)
                await self._write_values(f"{title}!A1:{last}1", [header])

    # ---- IPayrollStore methods ----

    async def initialize(self) -> bool:
        if not self.configured:
            logger.info("Google Sheets configuration missing, skipping initialization")
            return False
        try:
            await self._request("GET", "", params={"fields": "spreadsheetId"})
        except httpx.HTTPError as exc:
            logger.warning("Google Sheets unavailable: %s", exc)
            return False
        return True

    async def write_batch(self, period_key: str, batch: PaysheetBatch) -> None:
        title = paysheet_sheet_name(period_key)
        header = [label for label, _ in PAYSHEET_COLUMNS]

        rows: list[list[Any]] = [header]
        for position, record in enumerate(batch.records, start=1):
            rows.append([
                position if attr is None else getattr(record, attr)
                for _, attr in PAYSHEET_COLUMNS
            ])
        summary_row: list[Any] = []
        for _, attr in PAYSHEET_COLUMNS:
            if attr == CanonicalField.TEACHER_NAME.value:
                summary_row.append("TOTAL")
            elif attr in SUMMARY_COLUMNS:
                summary_row.append(getattr(batch.summary, SUMMARY_COLUMNS[attr]))
            else:
                summary_row.append("")
        rows.append(summary_row)

        last = column_letter(len(header) - 1)
        try:
            await self._ensure_sheet(title)
            await self._clear_values(title)
            await self._write_values(f"{title}!A1:{last}{len(rows)}", rows)
        except httpx.HTTPError as exc:
            raise StoreWriteFailed(self.name, f"paysheet view {title!r}: {exc}") from exc
        logger.info("Monthly paysheet view written: %s (%d rows)", title, len(batch.records))

    async def write_record(self, record: PayrollRecord) -> None:
        doc = record.to_document()
        row = [doc[key] for key in SLIP_COLUMNS]
        try:
            await self._ensure_sheet(SLIPS_SHEET, header=SLIP_COLUMNS)
            await self._append_values(f"{SLIPS_SHEET}!A:{column_letter(len(row) - 1)}", [row])
        except httpx.HTTPError as exc:
            raise StoreWriteFailed(self.name, f"slip {record.id!r}: {exc}") from exc

    async def read_batch(self, period_key: str) -> PaysheetBatch | None:
        try:
            rows = await self._read_values(paysheet_sheet_name(period_key))
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code in (400, 404):
                return None
            raise
        if len(rows) < 2:
            return None

        month, _, year = period_key.rpartition("_")
        period = PayPeriod(month=month, year=year)
        header = [str(h) for h in rows[0]]
        attrs = dict(PAYSHEET_COLUMNS)
        records: list[PayrollRecord] = []
        for row in rows[1:]:
            if not row or not str(row[0]).strip().isdigit():
                continue  # TOTAL row
            values = {
                to_camel(attrs[label]): row[i] if i < len(row) else ""
                for i, label in enumerate(header)
                if attrs.get(label)
            }
            values.update(
                month=period.month, year=period.year,
                monthNum=period.month_num, paysheetId=period_key,
            )
            records.append(PayrollRecord.model_validate(_coerce_slip(values)))

        return aggregate(records, period)

    async def list_salary_slips(self, teacher_id: str) -> list[PayrollRecord]:
        rows = await self._read_values(SLIPS_SHEET)
        if not rows:
            return []
        header = [str(h) for h in rows[0]]
        slips: list[PayrollRecord] = []
        for row in rows[1:]:
            values = {key: row[i] if i < len(row) else "" for i, key in enumerate(header)}
            if str(values.get("teacherId", "")) != teacher_id:
                continue
            slips.append(PayrollRecord.model_validate(_coerce_slip(values)))
        return slips

    async def close(self) -> None:
        await self._client.aclose()
