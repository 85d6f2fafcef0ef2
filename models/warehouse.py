"""
Warehouse table declarations.

The column lists, partitioning and clustering here are read by the
dashboards; they are created once and never altered by the pipeline.
"""

from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, Field
from models.base import EntityType, PartitionType

REQUIRED = "REQUIRED"
NULLABLE = "NULLABLE"


class Column(BaseModel):
    name: str
    type: str
    mode: str = NULLABLE

    class Config:
        frozen = True


class WarehouseTable(BaseModel):
    """One analytical table: columns plus physical layout"""
    name: str
    columns: Tuple[Column, ...]
    partition_type: Optional[PartitionType] = None
    partition_field: Optional[str] = None
    clustering: Tuple[str, ...] = Field(default_factory=tuple)
    description: Optional[str] = None

    class Config:
        frozen = True

    @property
    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]


def _columns(*specs) -> Tuple[Column, ...]:
    return tuple(Column(name=name, type=type_, mode=mode) for name, type_, mode in specs)


USER_ACTIVITIES = WarehouseTable(
    name="user_activities",
    description="Career domains, progress and engagement per user",
    columns=_columns(
        ("userId", "STRING", REQUIRED),
        ("userName", "STRING", NULLABLE),
        ("email", "STRING", NULLABLE),
        ("careerDomain", "STRING", NULLABLE),
        ("skillLevel", "STRING", NULLABLE),
        ("location", "STRING", NULLABLE),
        ("state", "STRING", NULLABLE),
        ("activityType", "STRING", REQUIRED),
        ("activityDetails", "JSON", NULLABLE),
        ("timestamp", "TIMESTAMP", REQUIRED),
        ("eventDate", "DATE", REQUIRED),
    ),
    partition_type=PartitionType.DAY,
    partition_field="eventDate",
    clustering=("careerDomain", "activityType", "state"),
)

ATS_SCORES = WarehouseTable(
    name="ats_scores",
    description="Resume analysis scores and improvements",
    columns=_columns(
        ("userId", "STRING", REQUIRED),
        ("resumeId", "STRING", NULLABLE),
        ("score", "FLOAT", REQUIRED),
        ("previousScore", "FLOAT", NULLABLE),
        ("improvement", "FLOAT", NULLABLE),
        ("category", "STRING", NULLABLE),
        ("suggestions", "JSON", NULLABLE),
        ("timestamp", "TIMESTAMP", REQUIRED),
        ("eventDate", "DATE", REQUIRED),
    ),
    partition_type=PartitionType.DAY,
    partition_field="eventDate",
    clustering=("userId", "category"),
)

SKILLS_TRENDS = WarehouseTable(
    name="skills_trends",
    description="Skill demand and popularity per month",
    columns=_columns(
        ("skillName", "STRING", REQUIRED),
        ("category", "STRING", NULLABLE),
        ("userCount", "INTEGER", REQUIRED),
        ("avgProficiency", "STRING", NULLABLE),
        ("demandScore", "FLOAT", NULLABLE),
        ("trendDirection", "STRING", NULLABLE),
        ("monthYear", "STRING", REQUIRED),
        ("timestamp", "TIMESTAMP", REQUIRED),
    ),
    partition_type=PartitionType.MONTH,
    partition_field="timestamp",
    clustering=("skillName", "category"),
)

ROI_METRICS = WarehouseTable(
    name="roi_metrics",
    description="Career domain versus outcomes",
    columns=_columns(
        ("careerDomain", "STRING", REQUIRED),
        ("totalUsers", "INTEGER", REQUIRED),
        ("avgCompletionRate", "FLOAT", NULLABLE),
        ("avgAtsScore", "FLOAT", NULLABLE),
        ("avgMockInterviewScore", "FLOAT", NULLABLE),
        ("jobApplications", "INTEGER", NULLABLE),
        ("successRate", "FLOAT", NULLABLE),
        ("avgTimeToComplete", "FLOAT", NULLABLE),  # days
        ("monthYear", "STRING", REQUIRED),
        ("timestamp", "TIMESTAMP", REQUIRED),
    ),
    clustering=("careerDomain", "monthYear"),
)

SCHOLARSHIP_APPLICATIONS = WarehouseTable(
    name="scholarship_applications",
    description="Scholarship engagement",
    columns=_columns(
        ("userId", "STRING", REQUIRED),
        ("scholarshipId", "STRING", NULLABLE),
        ("scholarshipName", "STRING", NULLABLE),
        ("category", "STRING", NULLABLE),
        ("amount", "FLOAT", NULLABLE),
        ("state", "STRING", NULLABLE),
        ("country", "STRING", NULLABLE),
        ("status", "STRING", NULLABLE),
        ("timestamp", "TIMESTAMP", REQUIRED),
        ("eventDate", "DATE", REQUIRED),
    ),
    partition_type=PartitionType.DAY,
    partition_field="eventDate",
    clustering=("category", "state", "status"),
)

RESOURCE_ENGAGEMENT = WarehouseTable(
    name="resource_engagement",
    description="Learning resource usage",
    columns=_columns(
        ("userId", "STRING", REQUIRED),
        ("resourceId", "STRING", REQUIRED),
        ("resourceTitle", "STRING", NULLABLE),
        ("category", "STRING", NULLABLE),
        ("completionStatus", "BOOLEAN", REQUIRED),
        ("timeSpent", "INTEGER", NULLABLE),  # minutes
        ("rating", "FLOAT", NULLABLE),
        ("timestamp", "TIMESTAMP", REQUIRED),
        ("eventDate", "DATE", REQUIRED),
    ),
    partition_type=PartitionType.DAY,
    partition_field="eventDate",
    clustering=("category", "userId"),
)

ROADMAP_PROGRESS = WarehouseTable(
    name="roadmap_progress",
    description="Roadmap milestone completion",
    columns=_columns(
        ("userId", "STRING", REQUIRED),
        ("roadmapId", "STRING", REQUIRED),
        ("careerDomain", "STRING", REQUIRED),
        ("skillLevel", "STRING", NULLABLE),
        ("totalMilestones", "INTEGER", REQUIRED),
        ("completedMilestones", "INTEGER", REQUIRED),
        ("progressPercentage", "FLOAT", REQUIRED),
        ("lastActivity", "TIMESTAMP", REQUIRED),
        ("timestamp", "TIMESTAMP", REQUIRED),
    ),
    clustering=("careerDomain", "userId"),
)

MOCK_INTERVIEW_PERFORMANCE = WarehouseTable(
    name="mock_interview_performance",
    description="Aptitude test results from mock interviews",
    columns=_columns(
        ("userId", "STRING", REQUIRED),
        ("sessionId", "STRING", NULLABLE),
        ("testType", "STRING", NULLABLE),
        ("score", "FLOAT", REQUIRED),
        ("totalQuestions", "INTEGER", NULLABLE),
        ("correctAnswers", "INTEGER", NULLABLE),
        ("timeSpent", "INTEGER", NULLABLE),  # seconds
        ("difficulty", "STRING", NULLABLE),
        ("timestamp", "TIMESTAMP", REQUIRED),
        ("eventDate", "DATE", REQUIRED),
    ),
    partition_type=PartitionType.DAY,
    partition_field="eventDate",
    clustering=("testType", "userId"),
)


WAREHOUSE_TABLES: Dict[EntityType, WarehouseTable] = {
    EntityType.USER_ACTIVITY: USER_ACTIVITIES,
    EntityType.ATS_SCORE: ATS_SCORES,
    EntityType.SKILL_TREND: SKILLS_TRENDS,
    EntityType.ROI_METRIC: ROI_METRICS,
    EntityType.SCHOLARSHIP_APPLICATION: SCHOLARSHIP_APPLICATIONS,
    EntityType.RESOURCE_ENGAGEMENT: RESOURCE_ENGAGEMENT,
    EntityType.ROADMAP_PROGRESS: ROADMAP_PROGRESS,
    EntityType.MOCK_INTERVIEW_PERFORMANCE: MOCK_INTERVIEW_PERFORMANCE,
}


def table_for(entity_type: EntityType) -> WarehouseTable:
    return WAREHOUSE_TABLES[entity_type]
