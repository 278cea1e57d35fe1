"""Integration tests for the stores against LocalStack and a local Redis."""

from __future__ import annotations

import asyncio
import uuid

import pytest

from teacherpay.importer.main import PaysheetImporter
from teacherpay.models.batch import PayPeriod, StoreTag
from teacherpay.orchestration.storage_router import StorageRouter
from teacherpay.persistence.dynamodb_backend import DynamoDBPayrollStore
from teacherpay.persistence.redis_backend import RedisPayrollStore
from tests.integration.conftest import (
    LOCALSTACK_URL,
    REDIS_HOST,
    skip_no_localstack,
    skip_no_redis,
)

CSV = "Teacher ID,Teacher Name,Basic Pay,Net Pay\nIT1,Dr. Int,50000,45000\n"


@skip_no_localstack
class TestDynamoDBIntegration:
    @pytest.fixture
    def store(self, paysheet_table):
        return DynamoDBPayrollStore(
            table_suffix=paysheet_table,
            region="us-east-1",
            endpoint_url=LOCALSTACK_URL,
        )

    def test_import_to_primary_and_read_back(self, store):
        year = f"2099-{uuid.uuid4().hex[:6]}"
        importer = PaysheetImporter(StorageRouter(store, DynamoDBPayrollStore(table_suffix="-absent")))

        async def scenario():
            result = await importer.import_file(CSV, "csv", PayPeriod(month="January", year=year))
            return result, await store.read_batch(f"January_{year}")

        result, stored = asyncio.run(scenario())
        assert result.store is StoreTag.PRIMARY
        assert stored.get(f"IT1_January_{year}").net_pay == 45000


@skip_no_redis
class TestRedisFallbackIntegration:
    def test_unreachable_primary_falls_back_to_redis(self):
        prefix = f"inttest-{uuid.uuid4().hex[:8]}"
        primary = DynamoDBPayrollStore(
            table_suffix="-absent", region="us-east-1", endpoint_url="http://127.0.0.1:9",
        )

        async def scenario():
            secondary = RedisPayrollStore(host=REDIS_HOST, key_prefix=prefix)
            try:
                importer = PaysheetImporter(StorageRouter(primary, secondary))
                result = await importer.import_file(CSV, "csv", PayPeriod(month="March", year="2025"))
                return result, await secondary.read_batch("March_2025")
            finally:
                await secondary.close()

        result, stored = asyncio.run(scenario())
        assert result.store is StoreTag.SECONDARY
        assert stored.summary.total_net == 45000
