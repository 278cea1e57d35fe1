"""Redis backend implementing IPayrollStore (local key-value store)."""

from __future__ import annotations

import json
import logging
from typing import Any

import redis.asyncio as redis
from redis.exceptions import RedisError

from teacherpay.core.exceptions import StoreWriteFailed
from teacherpay.models.batch import PaysheetBatch
from teacherpay.models.payroll_record import PayrollRecord

logger = logging.getLogger(__name__)


class RedisPayrollStore:
    """Local IPayrollStore backed by Redis.

    Keys: ``{prefix}:paysheet:{period}`` holds the JSON batch,
    ``{prefix}:salary_slips:{teacherId}`` is a hash of slip id -> JSON slip.
    """

    name = "redis"

    def __init__(self, host: str = "localhost", port: int = 6379, db: int = 0,
                 key_prefix: str = "teacherpay", client: Any = None) -> None:
        self._host = host
        self._port = port
        self._db = db
        self._prefix = key_prefix
        self._client = client if client is not None else redis.Redis(
            host=host, port=port, db=db, decode_responses=True,
        )

    def paysheet_key(self, period_key: str) -> str:
        return f"{self._prefix}:paysheet:{period_key}"

    def slips_key(self, teacher_id: str) -> str:
        return f"{self._prefix}:salary_slips:{teacher_id}"

    async def initialize(self) -> bool:
        try:
            return bool(await self._client.ping())
        except Exception as exc:
            logger.warning("Redis at %s:%s unavailable: %s", self._host, self._port, exc)
            return False

    async def write_batch(self, period_key: str, batch: PaysheetBatch) -> None:
        key = self.paysheet_key(period_key)
        try:
            await self._client.set(key, batch.model_dump_json(by_alias=True))
        except RedisError as exc:
            raise StoreWriteFailed(self.name, f"SET failed for key={key!r}: {exc}") from exc

    async def write_record(self, record: PayrollRecord) -> None:
        key = self.slips_key(record.teacher_id or record.id)
        try:
            await self._client.hset(key, record.id, record.model_dump_json(by_alias=True))
        except RedisError as exc:
            raise StoreWriteFailed(self.name, f"HSET failed for key={key!r}: {exc}") from exc

    async def read_batch(self, period_key: str) -> PaysheetBatch | None:
        raw = await self._client.get(self.paysheet_key(period_key))
        if raw is None:
            return None
        return PaysheetBatch.model_validate(json.loads(raw))

    async def list_salary_slips(self, teacher_id: str) -> list[PayrollRecord]:
        slips = await self._client.hgetall(self.slips_key(teacher_id))
        return [PayrollRecord.model_validate(json.loads(v)) for v in slips.values()]

    async def close(self) -> None:
        await self._client.aclose()
