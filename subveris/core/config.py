from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App settings
    PROJECT_NAME: str = "Subveris"
    API_PREFIX: str = "/api"
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5000",
        "http://localhost:8000",
    ]

    # Storage backend: "memory" or "dynamo"
    STORAGE_BACKEND: str = Field(default="memory")
    SEED_DEMO_DATA: bool = Field(default=True)

    # DynamoDB
    DYNAMO_REGION: str = Field(default="eu-west-1")
    DYNAMO_SUBSCRIPTIONS_TABLE: str = Field(default="subveris-subscriptions")
    DYNAMO_INSIGHTS_TABLE: str = Field(default="subveris-insights")
    DYNAMO_BANK_CONNECTIONS_TABLE: str = Field(default="subveris-bank-connections")
    DYNAMO_TRANSACTIONS_TABLE: str = Field(default="subveris-transactions")
    DYNAMO_SNAPSHOTS_TABLE: str = Field(default="subveris-spending-snapshots")

    # Analytics
    WEEKLY_MULTIPLIER: float = Field(default=4.0)  # 52 / 12 for calendar accuracy

    # Monthly spending snapshot job
    SCHEDULER_ENABLED: bool = Field(default=False)
    SNAPSHOT_DAY: str = Field(default="last")  # Day of month (1-31 or "last")
    SNAPSHOT_HOUR: int = Field(default=23)
    SNAPSHOT_MINUTE: int = Field(default=30)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
