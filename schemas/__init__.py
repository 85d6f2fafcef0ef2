"""
Pydantic schemas for warehouse rows and API payloads.

Schemas:
    rows: One row model per warehouse table, a tagged union keyed by
        EntityType (``ROW_MODELS``). Rows serialize to the warehouse's
        camelCase column names via ``to_warehouse()``.
    api: Status, manual-trigger and health payloads

Usage:
    from schemas.rows import UserActivityRow, ROW_MODELS
    from schemas.api import SyncStatusResponse

Example:
    row = UserActivityRow(
        user_id="uid_1",
        activity_type="profile_update",
        timestamp=datetime(2024, 1, 15, 10, 0),
        event_date=date(2024, 1, 15),
    )
    row.to_warehouse()["userId"]  # "uid_1"
"""

__all__ = [
    "WarehouseRow",
    "ROW_MODELS",
    "SyncStatusResponse",
    "SyncTriggerRequest",
    "HealthCheckResponse",
]
