"""Payroll record: the normalized structure every store persists.

One record is produced per accepted paysheet row. Field names follow the
paysheet layout used by the college payroll office (revised basic pay, DA at
150%, HRA at 30%, ...). The legacy salary-slip names (``basicSalary``,
``grossSalary``, ...) are exposed as computed fields that read the same
attribute, so both schemas always agree.
"""

from __future__ import annotations

from pydantic import BaseModel, computed_field
from pydantic.alias_generators import to_camel

from teacherpay.core.types import JsonDict


class PayrollRecord(BaseModel):
    """Single teacher paysheet row in canonical form."""

    # --- Identity ---
    id: str
    teacher_id: str = ""
    teacher_name: str = ""
    designation: str = ""
    department: str = ""
    qualification: str = ""

    # --- Pay structure ---
    pay_scale: str = ""
    pay_band: str = ""
    agp: float = 0.0

    # --- Earnings ---
    revised_basic_pay: float = 0.0
    da150: float = 0.0
    hra30: float = 0.0
    cla: float = 0.0
    add_allowance: float = 0.0
    gross_total: float = 0.0  # as read from the file, never recomputed

    # --- Deductions ---
    prof_tax: float = 0.0
    income_tax: float = 0.0
    pf: float = 0.0
    lic: float = 0.0
    medical_insurance: float = 0.0
    ew_fund: float = 0.0
    total_deductions: float = 0.0

    net_pay: float = 0.0  # as read from the file, never recomputed

    # --- Period metadata ---
    month: str = ""
    year: str = ""
    month_num: str = "01"
    pay_date: str = ""
    status: str = "paid"
    created_at: str = ""
    paysheet_id: str = ""

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    # --- Legacy salary-slip names ---

    @computed_field(alias="basicSalary")
    @property
    def basic_salary(self) -> float:
        return self.revised_basic_pay

    @computed_field
    @property
    def da(self) -> float:
        return self.da150

    @computed_field
    @property
    def hra(self) -> float:
        return self.hra30

    @computed_field
    @property
    def allowances(self) -> float:
        return self.add_allowance

    @computed_field(alias="grossSalary")
    @property
    def gross_salary(self) -> float:
        return self.gross_total

    @computed_field
    @property
    def tax(self) -> float:
        return self.income_tax

    def to_document(self) -> JsonDict:
        """camelCase document as written to the stores."""
        return self.model_dump(by_alias=True)
