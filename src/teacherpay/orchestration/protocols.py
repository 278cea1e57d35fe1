"""Re-export orchestration protocols from core."""

from __future__ import annotations

from teacherpay.core.protocols import IStorageRouter

__all__ = ["IStorageRouter"]
