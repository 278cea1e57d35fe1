"""Canonical paysheet fields and the header-derived column mapping."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class FieldKind(StrEnum):
    TEXT = "text"
    CURRENCY = "currency"


class CanonicalField(StrEnum):
    """Fixed slots of the paysheet schema, independent of source column names."""

    TEACHER_ID = "teacher_id"
    TEACHER_NAME = "teacher_name"
    DESIGNATION = "designation"
    DEPARTMENT = "department"
    QUALIFICATION = "qualification"
    PAY_SCALE = "pay_scale"
    PAY_BAND = "pay_band"
    AGP = "agp"
    BASIC_PAY = "revised_basic_pay"
    DA = "da150"
    HRA = "hra30"
    CLA = "cla"
    ADDITIONAL_ALLOWANCE = "add_allowance"
    GROSS_TOTAL = "gross_total"
    PROFESSIONAL_TAX = "prof_tax"
    INCOME_TAX = "income_tax"
    PROVIDENT_FUND = "pf"
    LIC = "lic"
    MEDICAL_INSURANCE = "medical_insurance"
    WELFARE_FUND = "ew_fund"
    TOTAL_DEDUCTIONS = "total_deductions"
    NET_PAY = "net_pay"
    PAY_DATE = "pay_date"
    STATUS = "status"

    @property
    def kind(self) -> FieldKind:
        return FIELD_KINDS[self]


FIELD_KINDS: dict[CanonicalField, FieldKind] = {
    CanonicalField.TEACHER_ID: FieldKind.TEXT,
    CanonicalField.TEACHER_NAME: FieldKind.TEXT,
    CanonicalField.DESIGNATION: FieldKind.TEXT,
    CanonicalField.DEPARTMENT: FieldKind.TEXT,
    CanonicalField.QUALIFICATION: FieldKind.TEXT,
    CanonicalField.PAY_SCALE: FieldKind.TEXT,
    CanonicalField.PAY_BAND: FieldKind.TEXT,
    CanonicalField.AGP: FieldKind.CURRENCY,
    CanonicalField.BASIC_PAY: FieldKind.CURRENCY,
    CanonicalField.DA: FieldKind.CURRENCY,
    CanonicalField.HRA: FieldKind.CURRENCY,
    CanonicalField.CLA: FieldKind.CURRENCY,
    CanonicalField.ADDITIONAL_ALLOWANCE: FieldKind.CURRENCY,
    CanonicalField.GROSS_TOTAL: FieldKind.CURRENCY,
    CanonicalField.PROFESSIONAL_TAX: FieldKind.CURRENCY,
    CanonicalField.INCOME_TAX: FieldKind.CURRENCY,
    CanonicalField.PROVIDENT_FUND: FieldKind.CURRENCY,
    CanonicalField.LIC: FieldKind.CURRENCY,
    CanonicalField.MEDICAL_INSURANCE: FieldKind.CURRENCY,
    CanonicalField.WELFARE_FUND: FieldKind.CURRENCY,
    CanonicalField.TOTAL_DEDUCTIONS: FieldKind.CURRENCY,
    CanonicalField.NET_PAY: FieldKind.CURRENCY,
    CanonicalField.PAY_DATE: FieldKind.TEXT,
    CanonicalField.STATUS: FieldKind.TEXT,
}

# Display labels; every label resolves back to its own field.
FIELD_LABELS: dict[CanonicalField, str] = {
    CanonicalField.TEACHER_ID: "Teacher ID",
    CanonicalField.TEACHER_NAME: "Teacher Name",
    CanonicalField.DESIGNATION: "Designation",
    CanonicalField.DEPARTMENT: "Department",
    CanonicalField.QUALIFICATION: "Qualification",
    CanonicalField.PAY_SCALE: "Pay Scale",
    CanonicalField.PAY_BAND: "Pay Band",
    CanonicalField.AGP: "AGP",
    CanonicalField.BASIC_PAY: "Basic Pay",
    CanonicalField.DA: "DA",
    CanonicalField.HRA: "HRA",
    CanonicalField.CLA: "CLA",
    CanonicalField.ADDITIONAL_ALLOWANCE: "Additional Allowance",
    CanonicalField.GROSS_TOTAL: "Gross Total",
    CanonicalField.PROFESSIONAL_TAX: "Professional Tax",
    CanonicalField.INCOME_TAX: "Income Tax",
    CanonicalField.PROVIDENT_FUND: "PF",
    CanonicalField.LIC: "LIC",
    CanonicalField.MEDICAL_INSURANCE: "Medical Insurance",
    CanonicalField.WELFARE_FUND: "Welfare Fund",
    CanonicalField.TOTAL_DEDUCTIONS: "Total Deductions",
    CanonicalField.NET_PAY: "Net Pay",
    CanonicalField.PAY_DATE: "Pay Date",
    CanonicalField.STATUS: "Status",
}

# Absence produces a warning, never a rejection.
RECOMMENDED_FIELDS: tuple[CanonicalField, ...] = (
    CanonicalField.TEACHER_ID,
    CanonicalField.TEACHER_NAME,
    CanonicalField.BASIC_PAY,
)


class ColumnMapping(BaseModel):
    """Canonical field -> column index, built once from a header row."""

    columns: dict[CanonicalField, int] = Field(default_factory=dict)
    headers: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}

    def index_of(self, field: CanonicalField) -> int | None:
        return self.columns.get(field)

    def is_mapped(self, field: CanonicalField) -> bool:
        return field in self.columns

    @property
    def unmapped(self) -> list[CanonicalField]:
        return [f for f in CanonicalField if f not in self.columns]
