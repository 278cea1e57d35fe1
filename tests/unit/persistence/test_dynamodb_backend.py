"""Unit tests for DynamoDBPayrollStore using moto."""

from __future__ import annotations

import asyncio
from decimal import Decimal

import boto3
import pytest
from moto import mock_aws

from teacherpay.core.exceptions import StoreWriteFailed
from teacherpay.importer.aggregator import aggregate
from teacherpay.models.payroll_record import PayrollRecord
from teacherpay.persistence.dynamodb_backend import (
    DynamoDBPayrollStore,
    _decode_decimals,
    _to_dynamodb,
    paysheet_key,
    slip_key,
)

TABLE = "teacherpay-paysheets"
TABLE_SUFFIX = "-test"
REGION = "us-east-1"


def _create_table(client, name: str):
    client.create_table(
        TableName=name,
        KeySchema=[
            {"AttributeName": "PK", "KeyType": "HASH"},
            {"AttributeName": "SK", "KeyType": "RANGE"},
        ],
        AttributeDefinitions=[
            {"AttributeName": "PK", "AttributeType": "S"},
            {"AttributeName": "SK", "AttributeType": "S"},
        ],
        BillingMode="PAY_PER_REQUEST",
    )


@pytest.fixture
def aws():
    with mock_aws():
        client = boto3.client("dynamodb", region_name=REGION)
        _create_table(client, f"{TABLE}{TABLE_SUFFIX}")
        yield boto3.resource("dynamodb", region_name=REGION)


@pytest.fixture
def store(aws):
    return DynamoDBPayrollStore(table_suffix=TABLE_SUFFIX, region=REGION)


@pytest.fixture
def batch(period, now):
    records = [
        PayrollRecord(id="T1_January_2025", teacher_id="T1", teacher_name="A",
                      revised_basic_pay=50000, net_pay=45000.5, gross_total=50000,
                      month="January", year="2025"),
        PayrollRecord(id="T2_January_2025", teacher_id="T2", teacher_name="B",
                      net_pay=30000, month="January", year="2025"),
    ]
    return aggregate(records, period, now=now)


class TestKeys:
    def test_paysheet_key(self):
        assert paysheet_key("January_2025") == {"PK": "PAYSHEET#January_2025", "SK": "PAYSHEET"}

    def test_slip_key_falls_back_to_record_id(self):
        assert slip_key(PayrollRecord(id="3_May_2025"))["PK"] == "TEACHER#3_May_2025"


class TestDecimalConversion:
    def test_floats_become_decimal_and_back(self):
        item = _to_dynamodb({"a": 1.5, "b": [2.0], "c": "x"})
        assert item == {"a": Decimal("1.5"), "b": [Decimal("2.0")], "c": "x"}
        assert _decode_decimals(item) == {"a": 1.5, "b": [2], "c": "x"}


class TestInitialize:
    def test_ready_when_table_exists(self, store):
        assert asyncio.run(store.initialize()) is True

    def test_not_ready_when_table_missing(self, aws):
        store = DynamoDBPayrollStore(table_suffix="-missing", region=REGION)
        assert asyncio.run(store.initialize()) is False


class TestWrites:
    def test_write_batch_stores_paysheet_item(self, store, aws, batch):
        asyncio.run(store.write_batch(batch.period_key, batch))
        item = aws.Table(f"{TABLE}{TABLE_SUFFIX}").get_item(Key=paysheet_key("January_2025"))["Item"]
        assert item["periodKey"] == "January_2025"
        assert item["summary"]["totalRecords"] == 2
        assert "records" not in item
        assert item["recordKeys"] == [
            {"PK": "TEACHER#T1", "SK": "SLIP#T1_January_2025"},
            {"PK": "TEACHER#T2", "SK": "SLIP#T2_January_2025"},
        ]

    def test_write_record_stores_slip_under_teacher(self, store, aws, batch):
        asyncio.run(store.write_record(batch.records[0]))
        item = aws.Table(f"{TABLE}{TABLE_SUFFIX}").get_item(
            Key={"PK": "TEACHER#T1", "SK": "SLIP#T1_January_2025"},
        )["Item"]
        assert item["netPay"] == Decimal("45000.5")
        assert item["basicSalary"] == Decimal("50000.0")

    def test_write_to_missing_table_raises(self, aws, batch):
        store = DynamoDBPayrollStore(table_suffix="-missing", region=REGION)
        with pytest.raises(StoreWriteFailed, match="dynamodb write failed"):
            asyncio.run(store.write_batch(batch.period_key, batch))


class TestReads:
    def test_batch_round_trip(self, store, batch):
        async def scenario():
            await store.write_batch(batch.period_key, batch)
            for record in batch.records:
                await store.write_record(record)
            return await store.read_batch("January_2025")

        restored = asyncio.run(scenario())
        assert restored.summary == batch.summary
        assert restored.get("T1_January_2025").net_pay == 45000.5
        assert restored.records == batch.records

    def test_large_batch_round_trip(self, store, period, now):
        records = [
            PayrollRecord(id=f"T{i}_January_2025", teacher_id=f"T{i}", net_pay=float(i),
                          month="January", year="2025")
            for i in range(250)
        ]
        big = aggregate(records, period, now=now)

        async def scenario():
            await store.write_batch(big.period_key, big)
            for record in big.records:
                await store.write_record(record)
            return await store.read_batch("January_2025")

        restored = asyncio.run(scenario())
        assert [r.id for r in restored.records] == [r.id for r in records]
        assert restored.summary.total_net == sum(range(250))

    def test_missing_slips_are_left_out(self, store, batch):
        async def scenario():
            await store.write_batch(batch.period_key, batch)
            await store.write_record(batch.records[1])
            return await store.read_batch("January_2025")

        restored = asyncio.run(scenario())
        assert [r.id for r in restored.records] == ["T2_January_2025"]
        assert restored.summary == batch.summary

    def test_missing_batch_returns_none(self, store):
        assert asyncio.run(store.read_batch("February_2025")) is None

    def test_list_salary_slips(self, store, batch):
        async def scenario():
            for record in batch.records:
                await store.write_record(record)
            return await store.list_salary_slips("T2")

        slips = asyncio.run(scenario())
        assert [s.id for s in slips] == ["T2_January_2025"]
        assert slips[0].net_pay == 30000
