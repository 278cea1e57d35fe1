"""Application configuration using pydantic-settings with grouped env prefixes."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings


class DynamoDBConfig(BaseSettings):
    """DynamoDB paysheet store configuration."""

    model_config = {"env_prefix": "TEACHERPAY_DYNAMO_"}

    table_name: str = "teacherpay-paysheets"
    table_suffix: str = ""  # "-dev", "-uat", or "" for prod
    region: str = "us-east-1"
    endpoint_url: str | None = None  # LocalStack override


class SheetsConfig(BaseSettings):
    """Google Sheets API store configuration."""

    model_config = {"env_prefix": "TEACHERPAY_SHEETS_"}

    api_key: str = ""
    access_token: str = ""  # OAuth bearer token; writes need one
    spreadsheet_id: str = ""
    base_url: str = "https://sheets.googleapis.com/v4/spreadsheets"
    timeout: float = 10.0


class RedisConfig(BaseSettings):
    """Local Redis key-value store configuration."""

    model_config = {"env_prefix": "TEACHERPAY_REDIS_"}

    host: str = "localhost"
    port: int = 6379
    db: int = 0
    key_prefix: str = "teacherpay"


class ImportConfig(BaseSettings):
    """Paysheet import behaviour."""

    model_config = {"env_prefix": "TEACHERPAY_IMPORT_"}

    delimiter: str = ","
    min_row_cells: int = 3
    default_status: str = "paid"


class AppSettings(BaseSettings):
    """Root application settings aggregating all sub-configs."""

    model_config = {"env_prefix": "TEACHERPAY_"}

    environment: Literal["dev", "uat", "prod"] = "dev"
    log_level: str = "INFO"
    primary_store: Literal["dynamodb", "sheets"] = "dynamodb"
    fallback_store: Literal["redis", "memory"] = "redis"

    dynamodb: DynamoDBConfig = DynamoDBConfig()
    sheets: SheetsConfig = SheetsConfig()
    redis: RedisConfig = RedisConfig()
    importer: ImportConfig = ImportConfig()
