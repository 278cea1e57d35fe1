"""Unit tests for RedisPayrollStore using fakeredis."""

from __future__ import annotations

import asyncio
import json
from unittest.mock import AsyncMock

import fakeredis
import pytest
import redis.exceptions

from teacherpay.core.exceptions import StoreWriteFailed
from teacherpay.importer.aggregator import aggregate
from teacherpay.models.payroll_record import PayrollRecord
from teacherpay.persistence.redis_backend import RedisPayrollStore


@pytest.fixture
def batch(period, now):
    records = [
        PayrollRecord(id="T1_January_2025", teacher_id="T1", net_pay=100, month="January", year="2025"),
        PayrollRecord(id="T2_January_2025", teacher_id="T2", net_pay=200, month="January", year="2025"),
        PayrollRecord(id="3_January_2025", net_pay=300, month="January", year="2025"),
    ]
    return aggregate(records, period, now=now)


def _run(scenario):
    """Run ``scenario(store, client)`` against a fresh fake server in one event loop."""
    async def runner():
        client = fakeredis.FakeAsyncRedis(server=fakeredis.FakeServer(), decode_responses=True)
        store = RedisPayrollStore(key_prefix="test", client=client)
        try:
            return await scenario(store, client)
        finally:
            await store.close()

    return asyncio.run(runner())


class TestKeys:
    def test_key_layout(self):
        store = RedisPayrollStore(key_prefix="tp", client=AsyncMock())
        assert store.paysheet_key("January_2025") == "tp:paysheet:January_2025"
        assert store.slips_key("T1") == "tp:salary_slips:T1"


class TestInitialize:
    def test_ping_ok(self):
        async def scenario(store, client):
            return await store.initialize()

        assert _run(scenario) is True

    def test_connection_error_means_not_ready(self):
        client = AsyncMock()
        client.ping.side_effect = redis.exceptions.ConnectionError("refused")
        store = RedisPayrollStore(client=client)
        assert asyncio.run(store.initialize()) is False


class TestWrites:
    def test_write_batch_sets_json_document(self, batch):
        async def scenario(store, client):
            await store.write_batch(batch.period_key, batch)
            return await client.get("test:paysheet:January_2025")

        doc = json.loads(_run(scenario))
        assert doc["periodKey"] == "January_2025"
        assert doc["summary"]["totalNet"] == 600

    def test_write_record_uses_teacher_hash(self, batch):
        async def scenario(store, client):
            for record in batch.records:
                await store.write_record(record)
            return (
                await client.hkeys("test:salary_slips:T1"),
                await client.hkeys("test:salary_slips:3_January_2025"),
            )

        t1, anonymous = _run(scenario)
        assert t1 == ["T1_January_2025"]
        assert anonymous == ["3_January_2025"]

    def test_write_wraps_redis_error(self, batch):
        client = AsyncMock()
        client.set.side_effect = redis.exceptions.ConnectionError("gone")
        store = RedisPayrollStore(client=client)
        with pytest.raises(StoreWriteFailed, match="redis write failed"):
            asyncio.run(store.write_batch(batch.period_key, batch))


class TestReads:
    def test_batch_round_trip(self, batch):
        async def scenario(store, client):
            await store.write_batch(batch.period_key, batch)
            return await store.read_batch("January_2025")

        restored = _run(scenario)
        assert restored == batch
        assert restored.get("T2_January_2025").net_pay == 200

    def test_missing_batch(self):
        async def scenario(store, client):
            return await store.read_batch("March_2025")

        assert _run(scenario) is None

    def test_list_salary_slips(self, batch):
        async def scenario(store, client):
            for record in batch.records:
                await store.write_record(record)
            return await store.list_salary_slips("T2"), await store.list_salary_slips("nobody")

        slips, none = _run(scenario)
        assert [s.net_pay for s in slips] == [200]
        assert none == []
