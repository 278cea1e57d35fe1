"""Tests for pay period, batch and outcome models."""

from __future__ import annotations

import pytest

from teacherpay.models.batch import (
    BatchSummary,
    ImportResult,
    OutcomeStatus,
    PayPeriod,
    PaysheetBatch,
    StoreTag,
    StoreWriteOutcome,
    is_known_month,
    month_number,
)
from teacherpay.models.payroll_record import PayrollRecord


class TestMonthNumber:
    @pytest.mark.parametrize("month,num", [
        ("January", "01"), ("june", "06"), (" DECEMBER ", "12"), ("Sept", "01"), ("", "01"),
    ])
    def test_lookup(self, month, num):
        assert month_number(month) == num

    @pytest.mark.parametrize("month,known", [
        ("January", True), (" june ", True), ("DECEMBER\t", True), ("Sept", False), ("", False),
    ])
    def test_known_month_ignores_padding_and_case(self, month, known):
        assert is_known_month(month) is known


class TestPayPeriod:
    def test_key(self):
        assert PayPeriod(month="March", year="2025").key == "March_2025"

    def test_year_accepts_int(self):
        assert PayPeriod(month=" May ", year=2025).key == "May_2025"

    def test_known_month(self):
        assert PayPeriod(month="march", year="2025").is_known_month
        assert not PayPeriod(month="Smarch", year="2025").is_known_month


class TestPaysheetBatch:
    def _batch(self, records):
        return PaysheetBatch(month="January", year="2025", period_key="January_2025", records=records)

    def test_index_built_from_records(self):
        batch = self._batch([PayrollRecord(id="a"), PayrollRecord(id="b")])
        assert set(batch.records_by_id) == {"a", "b"}
        assert batch.get("missing") is None

    def test_document_round_trip_rebuilds_index(self):
        batch = PaysheetBatch(
            month="January", year="2025", period_key="January_2025",
            records=[PayrollRecord(id="a", net_pay=5)],
            summary=BatchSummary(total_records=1, total_net=5),
        )
        doc = batch.to_document()
        assert doc["periodKey"] == "January_2025"
        assert doc["summary"]["totalNet"] == 5
        restored = PaysheetBatch.model_validate(doc)
        assert restored.get("a").net_pay == 5
        assert restored.summary.total_net == 5

    def test_period(self):
        assert self._batch([]).period == PayPeriod(month="January", year="2025")


class TestStoreWriteOutcome:
    def test_persisted(self):
        outcome = StoreWriteOutcome.persisted(StoreTag.SECONDARY, "redis", "January_2025")
        assert outcome.ok
        assert outcome.status is OutcomeStatus.PERSISTED
        assert outcome.batch is None

    def test_failed_carries_batch(self):
        batch = PaysheetBatch(month="January", year="2025", period_key="January_2025")
        outcome = StoreWriteOutcome.failed("both down", batch)
        assert not outcome.ok
        assert outcome.batch is batch
        assert outcome.store is None


def test_import_result_defaults():
    result = ImportResult(success=False, message="bad file")
    assert result.record_count == 0
    assert result.batch_id is None
    assert result.records == []
