"""
Pydantic row models, one per warehouse table.

Rows form a tagged union keyed by ``EntityType``: every model carries its tag
as a class variable and ``ROW_MODELS`` maps tag to model. Field names are
snake_case in Python and serialize to the camelCase column names of the
warehouse.
"""

import json
from datetime import date, datetime
from typing import Any, ClassVar, Dict, List, Optional, Type
from pydantic import BaseModel, Field, field_serializer
from pydantic.alias_generators import to_camel
from models.base import EntityType


class WarehouseRow(BaseModel):
    """Base for all warehouse rows"""

    entity_type: ClassVar[EntityType]

    timestamp: datetime

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        use_enum_values = True

    def to_warehouse(self) -> Dict[str, Any]:
        """JSON-ready dict keyed by warehouse column names"""
        return self.model_dump(mode="json", by_alias=True)


class UserActivityDetails(BaseModel):
    """Typed payload of ``user_activities.activityDetails``"""
    skills_count: int = 0
    interests: List[str] = Field(default_factory=list)

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class UserActivityRow(WarehouseRow):
    entity_type: ClassVar[EntityType] = EntityType.USER_ACTIVITY

    user_id: str = Field(..., min_length=1)
    user_name: Optional[str] = None
    email: Optional[str] = None
    career_domain: Optional[str] = None
    skill_level: Optional[str] = None
    location: Optional[str] = None
    state: Optional[str] = None
    activity_type: str
    activity_details: Optional[UserActivityDetails] = None
    event_date: date

    @field_serializer("activity_details")
    def serialize_details(self, details: Optional[UserActivityDetails]) -> Optional[str]:
        if details is None:
            return None
        return details.model_dump_json(by_alias=True)


class AtsScoreRow(WarehouseRow):
    entity_type: ClassVar[EntityType] = EntityType.ATS_SCORE

    user_id: str = Field(..., min_length=1)
    resume_id: Optional[str] = None
    score: float
    previous_score: Optional[float] = None
    improvement: Optional[float] = None
    category: Optional[str] = None
    suggestions: Optional[Any] = None
    event_date: date

    @field_serializer("suggestions")
    def serialize_suggestions(self, suggestions: Any) -> Optional[str]:
        if suggestions is None:
            return None
        return json.dumps(suggestions, default=str)


class SkillTrendRow(WarehouseRow):
    entity_type: ClassVar[EntityType] = EntityType.SKILL_TREND

    skill_name: str = Field(..., min_length=1)
    category: Optional[str] = None
    user_count: int = Field(..., ge=0)
    avg_proficiency: Optional[str] = None
    demand_score: Optional[float] = Field(None, ge=0, le=100)
    trend_direction: Optional[str] = "stable"
    month_year: str = Field(..., pattern=r"^\d{4}-\d{2}$")


class RoiMetricRow(WarehouseRow):
    entity_type: ClassVar[EntityType] = EntityType.ROI_METRIC

    career_domain: str = Field(..., min_length=1)
    total_users: int = Field(..., ge=0)
    avg_completion_rate: Optional[float] = None
    avg_ats_score: Optional[float] = None
    avg_mock_interview_score: Optional[float] = None
    job_applications: Optional[int] = None
    success_rate: Optional[float] = None
    avg_time_to_complete: Optional[float] = None
    month_year: str = Field(..., pattern=r"^\d{4}-\d{2}$")


class ScholarshipApplicationRow(WarehouseRow):
    entity_type: ClassVar[EntityType] = EntityType.SCHOLARSHIP_APPLICATION

    user_id: str = Field(..., min_length=1)
    scholarship_id: Optional[str] = None
    scholarship_name: Optional[str] = None
    category: Optional[str] = None
    amount: Optional[float] = None
    state: Optional[str] = None
    country: Optional[str] = "USA"
    status: Optional[str] = "viewed"
    event_date: date


class ResourceEngagementRow(WarehouseRow):
    entity_type: ClassVar[EntityType] = EntityType.RESOURCE_ENGAGEMENT

    user_id: str = Field(..., min_length=1)
    resource_id: str = Field(..., min_length=1)
    resource_title: Optional[str] = None
    category: Optional[str] = None
    completion_status: bool
    time_spent: Optional[int] = None
    rating: Optional[float] = Field(None, ge=0, le=5)
    event_date: date


class RoadmapProgressRow(WarehouseRow):
    entity_type: ClassVar[EntityType] = EntityType.ROADMAP_PROGRESS

    user_id: str = Field(..., min_length=1)
    roadmap_id: str = Field(..., min_length=1)
    career_domain: str
    skill_level: Optional[str] = None
    total_milestones: int = Field(..., ge=0)
    completed_milestones: int = Field(..., ge=0)
    progress_percentage: float = Field(..., ge=0)
    last_activity: datetime


class MockInterviewPerformanceRow(WarehouseRow):
    entity_type: ClassVar[EntityType] = EntityType.MOCK_INTERVIEW_PERFORMANCE

    user_id: str = Field(..., min_length=1)
    session_id: Optional[str] = None
    test_type: Optional[str] = None
    score: float
    total_questions: Optional[int] = None
    correct_answers: Optional[int] = None
    time_spent: Optional[int] = None
    difficulty: Optional[str] = None
    event_date: date


ROW_MODELS: Dict[EntityType, Type[WarehouseRow]] = {
    model.entity_type: model
    for model in (
        UserActivityRow,
        AtsScoreRow,
        SkillTrendRow,
        RoiMetricRow,
        ScholarshipApplicationRow,
        ResourceEngagementRow,
        RoadmapProgressRow,
        MockInterviewPerformanceRow,
    )
}
