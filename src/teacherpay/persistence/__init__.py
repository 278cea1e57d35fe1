"""Pluggable payroll stores behind the IPayrollStore protocol."""

from __future__ import annotations

from teacherpay.core.config import AppSettings
from teacherpay.core.protocols import IPayrollStore
from teacherpay.persistence.dynamodb_backend import DynamoDBPayrollStore
from teacherpay.persistence.memory_backend import MemoryPayrollStore
from teacherpay.persistence.redis_backend import RedisPayrollStore
from teacherpay.persistence.sheets_backend import GoogleSheetsPayrollStore


def create_primary_store(settings: AppSettings) -> IPayrollStore:
    if settings.primary_store == "sheets":
        return GoogleSheetsPayrollStore(
            api_key=settings.sheets.api_key,
            spreadsheet_id=settings.sheets.spreadsheet_id,
            base_url=settings.sheets.base_url,
            access_token=settings.sheets.access_token,
            timeout=settings.sheets.timeout,
        )
    return DynamoDBPayrollStore(
        table_name=settings.dynamodb.table_name,
        table_suffix=settings.dynamodb.table_suffix,
        region=settings.dynamodb.region,
        endpoint_url=settings.dynamodb.endpoint_url,
    )


def create_fallback_store(settings: AppSettings) -> IPayrollStore:
    if settings.fallback_store == "memory":
        return MemoryPayrollStore()
    return RedisPayrollStore(
        host=settings.redis.host,
        port=settings.redis.port,
        db=settings.redis.db,
        key_prefix=settings.redis.key_prefix,
    )


def create_stores(settings: AppSettings | None = None) -> tuple[IPayrollStore, IPayrollStore]:
    """Create the wired-up stores for one import session.

    Returns:
        Tuple of (primary, fallback).
    """
    if settings is None:
        settings = AppSettings()
    return create_primary_store(settings), create_fallback_store(settings)
