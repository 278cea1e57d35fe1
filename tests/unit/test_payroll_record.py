"""Tests for the PayrollRecord model."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from teacherpay.models.payroll_record import PayrollRecord


def test_default_record_has_zero_amounts():
    record = PayrollRecord(id="T1_January_2025")
    assert record.revised_basic_pay == 0.0
    assert record.net_pay == 0.0
    assert record.status == "paid"
    assert record.month_num == "01"


def test_legacy_names_mirror_paysheet_fields():
    record = PayrollRecord(
        id="x",
        revised_basic_pay=50000,
        da150=75000,
        hra30=15000,
        add_allowance=3000,
        gross_total=143300,
        income_tax=5000,
    )
    assert record.basic_salary == 50000
    assert record.da == 75000
    assert record.hra == 15000
    assert record.allowances == 3000
    assert record.gross_salary == 143300
    assert record.tax == 5000


def test_document_uses_camel_case_and_includes_legacy_names():
    doc = PayrollRecord(id="x", teacher_id="T1", revised_basic_pay=10).to_document()
    assert doc["teacherId"] == "T1"
    assert doc["revisedBasicPay"] == 10
    assert doc["basicSalary"] == 10
    assert doc["grossSalary"] == 0
    assert "teacher_id" not in doc


def test_document_round_trips_through_validation():
    record = PayrollRecord(id="x", teacher_id="T1", net_pay=12.5, pay_date="2025-01-31")
    assert PayrollRecord.model_validate(record.to_document()) == record


def test_record_is_immutable():
    record = PayrollRecord(id="x")
    with pytest.raises(ValidationError):
        record.net_pay = 1.0


def test_id_is_required():
    with pytest.raises(ValidationError):
        PayrollRecord()
