"""
Core utilities and configuration for the career insights sync service.

Modules:
    config: Application configuration and environment variable management
    database: MongoDB (Motor) and BigQuery client factories
    exceptions: Custom exception hierarchy for error handling
    logging: Logging configuration
    cache: In-process dashboard cache and its invalidation hooks

Usage:
    from core.config import settings
    from core.database import create_mongo_client, create_bigquery_client
    from core.exceptions import PartialInsertError
    from core.logging import setup_logging
"""

__all__ = [
    "settings",
    "setup_logging",
    "create_mongo_client",
    "create_bigquery_client",
    "cache",
    # Exceptions
    "ETLException",
    "ExtractionError",
    "OperationalStoreError",
    "TransformationError",
    "LoadError",
    "WarehouseError",
    "PartialInsertError",
    "RowInsertError",
    "SchemaProvisioningError",
    "MergeError",
]
