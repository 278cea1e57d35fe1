"""DynamoDB backend implementing IPayrollStore (remote document store)."""

from __future__ import annotations

import asyncio
import logging
from decimal import Decimal
from typing import Any

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

from teacherpay.core.exceptions import StoreWriteFailed
from teacherpay.models.batch import PaysheetBatch
from teacherpay.models.payroll_record import PayrollRecord

logger = logging.getLogger(__name__)

PAYSHEET_SK = "PAYSHEET"
BATCH_GET_LIMIT = 100


def _to_dynamodb(obj: Any) -> Any:
    """Convert floats to Decimal for DynamoDB."""
    if isinstance(obj, float):
        return Decimal(str(obj))
    if isinstance(obj, dict):
        return {k: _to_dynamodb(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_to_dynamodb(i) for i in obj]
    return obj


def _decode_decimals(obj: Any) -> Any:
    """Convert Decimal values in a DynamoDB item back to int/float."""
    if isinstance(obj, Decimal):
        return int(obj) if obj == int(obj) else float(obj)
    if isinstance(obj, dict):
        return {k: _decode_decimals(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_decode_decimals(i) for i in obj]
    return obj


def paysheet_key(period_key: str) -> dict[str, str]:
    return {"PK": f"PAYSHEET#{period_key}", "SK": PAYSHEET_SK}


def slip_key(record: PayrollRecord) -> dict[str, str]:
    return {"PK": f"TEACHER#{record.teacher_id or record.id}", "SK": f"SLIP#{record.id}"}


def paysheet_item(batch: PaysheetBatch) -> dict[str, Any]:
    """Paysheet header item: summary plus slip keys, records stay in their slip items."""
    doc = batch.to_document()
    doc.pop("records")
    return {
        **_to_dynamodb(doc),
        "recordKeys": [slip_key(record) for record in batch.records],
        **paysheet_key(batch.period_key),
    }


class DynamoDBPayrollStore:
    """Production IPayrollStore backed by a single PK/SK DynamoDB table.

    Paysheets live under ``PAYSHEET#{period}``, salary slips under
    ``TEACHER#{teacherId}`` so one query returns a teacher's history.
    boto3 calls run in worker threads, one at a time.
    """

    name = "dynamodb"

    def __init__(self, table_name: str = "teacherpay-paysheets", table_suffix: str = "",
                 region: str = "us-east-1", endpoint_url: str | None = None) -> None:
        self._table_name = f"{table_name}{table_suffix}"
        self._region = region
        self._endpoint_url = endpoint_url
        kwargs: dict = {"region_name": region}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        self._ddb = boto3.resource("dynamodb", **kwargs)
        self._table = self._ddb.Table(self._table_name)
        self._lock = asyncio.Lock()

    @property
    def table_name(self) -> str:
        return self._table_name

    async def _call(self, fn, /, *args: Any, **kwargs: Any) -> Any:
        async with self._lock:
            return await asyncio.to_thread(fn, *args, **kwargs)

    # ---- IPayrollStore methods ----

    async def initialize(self) -> bool:
        try:
            await self._call(self._ddb.meta.client.describe_table, TableName=self._table_name)
        except (ClientError, BotoCoreError) as exc:
            logger.warning("DynamoDB table %s unavailable: %s", self._table_name, exc)
            return False
        return True

    async def write_batch(self, period_key: str, batch: PaysheetBatch) -> None:
        item = {**paysheet_item(batch), **paysheet_key(period_key)}
        try:
            await self._call(self._table.put_item, Item=item)
        except (ClientError, BotoCoreError) as exc:
            raise StoreWriteFailed(self.name, f"paysheet {period_key!r}: {exc}") from exc

    async def write_record(self, record: PayrollRecord) -> None:
        item = {**_to_dynamodb(record.to_document()), **slip_key(record)}
        try:
            await self._call(self._table.put_item, Item=item)
        except (ClientError, BotoCoreError) as exc:
            raise StoreWriteFailed(self.name, f"slip {record.id!r}: {exc}") from exc

    async def read_batch(self, period_key: str) -> PaysheetBatch | None:
        resp = await self._call(self._table.get_item, Key=paysheet_key(period_key))
        item = resp.get("Item")
        if not item:
            return None
        keys = item.pop("recordKeys", [])
        slips = await self._get_slips(keys)
        missing = [k["SK"] for k in keys if (k["PK"], k["SK"]) not in slips]
        if missing:
            logger.warning("Paysheet %s is missing %d salary slip(s)", period_key, len(missing))
        doc = _decode_decimals(item)
        doc["records"] = [slips[(k["PK"], k["SK"])] for k in keys if (k["PK"], k["SK"]) in slips]
        return PaysheetBatch.model_validate(doc)

    async def _get_slips(self, keys: list[dict[str, str]]) -> dict[tuple[str, str], PayrollRecord]:
        unique = list({(k["PK"], k["SK"]): k for k in keys}.values())
        found: dict[tuple[str, str], PayrollRecord] = {}
        for start in range(0, len(unique), BATCH_GET_LIMIT):
            request: dict[str, Any] | None = {
                self._table_name: {"Keys": unique[start:start + BATCH_GET_LIMIT]},
            }
            while request:
                resp = await self._call(self._ddb.batch_get_item, RequestItems=request)
                for item in resp.get("Responses", {}).get(self._table_name, []):
                    found[(item["PK"], item["SK"])] = PayrollRecord.model_validate(_decode_decimals(item))
                request = resp.get("UnprocessedKeys") or None
        return found

    async def list_salary_slips(self, teacher_id: str) -> list[PayrollRecord]:
        resp = await self._call(
            self._table.query,
            KeyConditionExpression=Key("PK").eq(f"TEACHER#{teacher_id}"),
        )
        return [PayrollRecord.model_validate(_decode_decimals(i)) for i in resp.get("Items", [])]
