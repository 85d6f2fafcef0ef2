import enum


# ============================================================================
# ENUMS
# ============================================================================

class EntityType(str, enum.Enum):
    """Operational entity types synced to the warehouse, one table each"""
    USER_ACTIVITY = "user_activity"
    ATS_SCORE = "ats_score"
    SKILL_TREND = "skill_trend"
    ROI_METRIC = "roi_metric"
    SCHOLARSHIP_APPLICATION = "scholarship_application"
    RESOURCE_ENGAGEMENT = "resource_engagement"
    ROADMAP_PROGRESS = "roadmap_progress"
    MOCK_INTERVIEW_PERFORMANCE = "mock_interview_performance"


class SyncKind(str, enum.Enum):
    """Kind of orchestrator run"""
    FULL = "full"
    INCREMENTAL = "incremental"
    WEEKLY_AGGREGATE = "weekly_aggregate"


class PartitionType(str, enum.Enum):
    """Warehouse time partitioning granularity"""
    DAY = "DAY"
    MONTH = "MONTH"


# Fixed processing order; run history is reproducible for a given snapshot
FULL_SYNC_ENTITIES = (
    EntityType.USER_ACTIVITY,
    EntityType.ATS_SCORE,
    EntityType.SKILL_TREND,
    EntityType.RESOURCE_ENGAGEMENT,
    EntityType.ROADMAP_PROGRESS,
    EntityType.MOCK_INTERVIEW_PERFORMANCE,
    EntityType.SCHOLARSHIP_APPLICATION,
)

INCREMENTAL_SYNC_ENTITIES = (
    EntityType.USER_ACTIVITY,
    EntityType.ATS_SCORE,
)

WEEKLY_AGGREGATE_ENTITIES = (
    EntityType.ROI_METRIC,
)
