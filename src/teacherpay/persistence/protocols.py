"""Re-export persistence protocols from core for convenience."""

from __future__ import annotations

from teacherpay.core.protocols import IPayrollStore

__all__ = ["IPayrollStore"]
