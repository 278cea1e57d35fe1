"""Type aliases used across TeacherPay."""

from __future__ import annotations

from typing import Any

JsonDict = dict[str, Any]
Row = list[str]
Grid = list[Row]
PeriodKey = str
RecordId = str
TeacherId = str
