"""Shared test doubles: re-export the in-memory payroll store."""

from __future__ import annotations

from teacherpay.persistence.memory_backend import MemoryPayrollStore

__all__ = ["MemoryPayrollStore"]
