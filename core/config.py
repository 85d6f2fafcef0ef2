"""
Application configuration using Pydantic Settings
"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings with environment variable support"""

    # Operational store (MongoDB)
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DATABASE: str = "career-advisor"

    # Warehouse (BigQuery)
    GCP_PROJECT_ID: str = "career-insights-dev"
    BIGQUERY_DATASET_ID: str = "career_insights"
    BIGQUERY_LOCATION: str = "US"
    GOOGLE_APPLICATION_CREDENTIALS: Optional[str] = None

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Scheduler (crontab syntax, evaluated in SCHEDULER_TIMEZONE)
    SCHEDULER_ENABLED: bool = True
    SCHEDULER_TIMEZONE: str = "UTC"
    FULL_SYNC_CRON: str = "0 2 * * *"
    INCREMENTAL_SYNC_CRON: str = "0 * * * *"
    WEEKLY_METRICS_CRON: str = "0 3 * * sun"
    CACHE_CLEANUP_MINUTES: int = 10

    # Sync Configuration
    INCREMENTAL_WINDOW_MINUTES: int = 60
    FULL_SYNC_ROW_LIMIT: int = 5000
    SYNC_HISTORY_SIZE: int = 10
    WAREHOUSE_BATCH_SIZE: int = 500

    # Dashboard cache
    CACHE_TTL_SECONDS: int = 300

    # One-shot migration tool
    MIGRATION_SOURCE_DATABASE: str = "test"
    MIGRATION_TARGET_DATABASE: str = "career-advisor"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
