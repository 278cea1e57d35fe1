"""Sample paysheet file offered to users as the expected input shape."""

from __future__ import annotations

from teacherpay.models.schema_mapping import FIELD_LABELS, CanonicalField

SAMPLE_FILENAME = "paysheet_sample_format.csv"

SAMPLE_HEADERS: list[str] = [FIELD_LABELS[f] for f in CanonicalField]

SAMPLE_ROWS: list[list[str]] = [
    ["T001", "Dr. John Smith", "Professor", "Computer Science", "Ph.D",
     "37400-67000", "PB-4", "10000", "50000", "75000", "15000", "300", "3000", "143300",
     "200", "5000", "6000", "1000", "500", "100", "12800",
     "130500", "2025-01-31", "Paid"],
    ["T002", "Ms. Jane Doe", "Associate Professor", "Mathematics", "M.Sc",
     "15600-39100", "PB-3", "9000", "45000", "67500", "13500", "300", "2500", "128800",
     "200", "4000", "5400", "800", "400", "100", "10900",
     "117900", "2025-01-31", "Paid"],
]


def sample_csv() -> str:
    lines = [",".join(SAMPLE_HEADERS)] + [",".join(row) for row in SAMPLE_ROWS]
    return "\n".join(lines) + "\n"
