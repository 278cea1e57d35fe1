"""SchemaMatcherService: maps human-authored paysheet headers to canonical fields.

Two passes over the header row, both first-match (leftmost column) with no
scoring:

1. Alias pass over the base field set. A header matches a field when one of
   the field's aliases is a substring of the normalized header, or the header
   is a substring of the alias ("Basic" vs "basicsalary").
2. Token pass over the pay-scale breakdown set. Every token of a rule must
   occur in the normalized header ("da" and "150" for "D.A @ 150%"). A match
   here replaces the alias-pass column for the same field, which is what
   separates "Income Tax" from an earlier "Prof. Tax" column.

Missing recommended columns only produce warnings; partial schemas are
accepted.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from teacherpay.models.schema_mapping import (
    RECOMMENDED_FIELDS,
    CanonicalField,
    ColumnMapping,
)

logger = logging.getLogger(__name__)

_STRIP_CHARS = re.compile(r"[\s\-_.]")

F = CanonicalField

# Aliases are stored already normalized.
FIELD_ALIASES: dict[CanonicalField, tuple[str, ...]] = {
    F.TEACHER_ID: ("teacherid", "id", "empid", "employeeid", "staffid"),
    F.TEACHER_NAME: ("teachername", "name", "employeename", "staffname", "fullname"),
    F.DESIGNATION: ("designation", "post"),
    F.DEPARTMENT: ("department", "dept"),
    F.QUALIFICATION: ("qualification", "degree"),
    F.BASIC_PAY: ("basicpay", "basicsalary", "basic", "basesalary", "salary"),
    F.DA: ("da", "dearnessallowance"),
    F.HRA: ("hra", "houserentallowance"),
    F.ADDITIONAL_ALLOWANCE: ("allowances", "additionalallowance", "otherallowance"),
    F.GROSS_TOTAL: ("grosstotal", "grosssalary", "gross", "grosspay"),
    F.INCOME_TAX: ("incometax", "tax", "tds"),
    F.PROVIDENT_FUND: ("pf", "epf", "gpf"),
    F.TOTAL_DEDUCTIONS: ("totaldeductions", "totaldeduction", "totalded"),
    F.NET_PAY: ("netpay", "netsalary", "takehome"),
    F.STATUS: ("status", "paymentstatus"),
}

# Each rule is a tuple of tokens that must all occur in the header.
FIELD_TOKEN_RULES: dict[CanonicalField, tuple[tuple[str, ...], ...]] = {
    F.TEACHER_ID: (("teacher", "id"),),
    F.TEACHER_NAME: (("name", "staff"),),
    F.PAY_SCALE: (("pay", "scale"),),
    F.PAY_BAND: (("pay", "band"),),
    F.AGP: (("agp",), ("academic", "grade", "pay")),
    F.BASIC_PAY: (("revised", "basic"),),
    F.DA: (("da", "150"),),
    F.HRA: (("hra", "30"),),
    F.CLA: (("cla",), ("city", "allowance")),
    F.ADDITIONAL_ALLOWANCE: (("add", "allowance"),),
    F.GROSS_TOTAL: (("gross", "total"),),
    F.PROFESSIONAL_TAX: (("prof", "tax"),),
    F.INCOME_TAX: (("income", "tax"),),
    F.PROVIDENT_FUND: (("provident", "fund"),),
    F.LIC: (("lic",),),
    F.MEDICAL_INSURANCE: (("medical", "insur"),),
    F.WELFARE_FUND: (("ew", "fund"), ("welfare", "fund")),
    F.TOTAL_DEDUCTIONS: (("total", "deduction"),),
    F.NET_PAY: (("net", "pay"),),
    F.PAY_DATE: (("pay", "date"), ("payment", "date")),
}


def normalize_header(header: object) -> str:
    """Lowercase and drop whitespace, hyphens, underscores and periods."""
    if header is None:
        return ""
    return _STRIP_CHARS.sub("", str(header).lower()).strip()


def alias_matches(header: str, alias: str) -> bool:
    if not header:
        return False
    return alias in header or header in alias


def rule_matches(header: str, tokens: Sequence[str]) -> bool:
    return bool(header) and all(token in header for token in tokens)


def _first_alias_column(normalized: Sequence[str], aliases: Sequence[str]) -> int | None:
    for index, header in enumerate(normalized):
        if any(alias_matches(header, alias) for alias in aliases):
            return index
    return None


def _first_rule_column(
    normalized: Sequence[str], rules: Sequence[Sequence[str]]
) -> int | None:
    for index, header in enumerate(normalized):
        if any(rule_matches(header, tokens) for tokens in rules):
            return index
    return None


def resolve_columns(header_row: Sequence[object]) -> ColumnMapping:
    """Build the canonical field -> column index mapping for one import."""
    headers = ["" if h is None else str(h) for h in header_row]
    normalized = [normalize_header(h) for h in headers]

    columns: dict[CanonicalField, int] = {}
    for field, aliases in FIELD_ALIASES.items():
        index = _first_alias_column(normalized, aliases)
        if index is not None:
            columns[field] = index

    for field, rules in FIELD_TOKEN_RULES.items():
        index = _first_rule_column(normalized, rules)
        if index is not None:
            if field in columns and columns[field] != index:
                logger.debug(
                    "Token rule moved %s from column %d to %d", field, columns[field], index
                )
            columns[field] = index

    warnings: list[str] = []
    for field in RECOMMENDED_FIELDS:
        if field not in columns:
            message = (
                f'Recommended column "{field.value}" not found. '
                f"Available headers: {headers}"
            )
            logger.warning(message)
            warnings.append(message)

    ordered = {field: columns[field] for field in CanonicalField if field in columns}
    logger.debug("Column mapping created: %s", ordered)
    return ColumnMapping(columns=ordered, headers=headers, warnings=warnings)
