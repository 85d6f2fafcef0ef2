"""
Transform operational documents into warehouse rows with Pydantic validation
"""

from typing import Dict, Any, Optional, Callable
from datetime import datetime
from pydantic import ValidationError
from models.base import EntityType
from schemas.rows import (
    WarehouseRow,
    UserActivityRow,
    UserActivityDetails,
    AtsScoreRow,
    SkillTrendRow,
    RoiMetricRow,
    ScholarshipApplicationRow,
    ResourceEngagementRow,
    RoadmapProgressRow,
    MockInterviewPerformanceRow,
)
from ingestion.transformers.enrichment import (
    categorize_skill,
    calculate_demand_score,
    extract_state,
    map_level_to_string,
    event_date,
    month_year,
    milestone_counts,
    progress_percentage,
)
from core.exceptions import TransformationError


class RowTransformer:
    """
    Map one source record of an entity type to exactly one warehouse row.

    Pure: no I/O, and the only clock read is ``now``, fixed at construction
    so a batch shares one reference time. Filtering belongs to the
    extractors; every record given here yields a row or raises
    TransformationError.
    """

    def __init__(self, entity_type: EntityType, now: Optional[datetime] = None):
        self.entity_type = entity_type
        self.now = now or datetime.utcnow()
        self._handlers: Dict[EntityType, Callable[[Dict[str, Any]], WarehouseRow]] = {
            EntityType.USER_ACTIVITY: self._transform_user_activity,
            EntityType.ATS_SCORE: self._transform_ats_score,
            EntityType.SKILL_TREND: self._transform_skill_trend,
            EntityType.ROI_METRIC: self._transform_roi_metric,
            EntityType.SCHOLARSHIP_APPLICATION: self._transform_scholarship_application,
            EntityType.RESOURCE_ENGAGEMENT: self._transform_resource_engagement,
            EntityType.ROADMAP_PROGRESS: self._transform_roadmap_progress,
            EntityType.MOCK_INTERVIEW_PERFORMANCE: self._transform_mock_interview,
        }

    def transform(self, record: Dict[str, Any]) -> WarehouseRow:
        handler = self._handlers.get(self.entity_type)
        if handler is None:
            raise ValueError(f"Unknown entity type: {self.entity_type}")

        try:
            return handler(record)
        except (ValidationError, ValueError, TypeError, KeyError) as e:
            raise TransformationError(
                "Failed to transform source record",
                context={
                    "entity_type": self.entity_type.value,
                    "record_id": self._record_id(record),
                },
                original_exception=e
            )

    def _transform_user_activity(self, user: Dict[str, Any]) -> UserActivityRow:
        profile = user.get("profile") or {}
        skills = user.get("skills") or []
        timestamp = self._parse_datetime(user.get("updatedAt") or user.get("createdAt"))
        location = profile.get("location") or None

        return UserActivityRow(
            user_id=user.get("firebaseUid") or self._record_id(user),
            user_name=user.get("name"),
            email=user.get("email"),
            career_domain=profile.get("careerGoal") or None,
            skill_level="intermediate" if skills else "beginner",
            location=location,
            state=extract_state(location),
            activity_type="profile_update",
            activity_details=UserActivityDetails(
                skills_count=len(skills),
                interests=profile.get("interests") or [],
            ),
            timestamp=timestamp or self.now,
            event_date=event_date(timestamp, self.now),
        )

    def _transform_ats_score(self, resume: Dict[str, Any]) -> AtsScoreRow:
        analysis = resume.get("analysis") or {}
        timestamp = self._parse_datetime(resume.get("createdAt"))

        return AtsScoreRow(
            user_id=str(resume["userId"]),
            resume_id=self._record_id(resume),
            score=self._parse_float(self.ats_score_of(resume)) or 0.0,
            previous_score=self._parse_float(resume.get("previousScore")),
            improvement=self._parse_float(resume.get("improvement")),
            category=analysis.get("category") or "general",
            suggestions=analysis.get("suggestions") or None,
            timestamp=timestamp or self.now,
            event_date=event_date(timestamp, self.now),
        )

    def _transform_skill_trend(self, skill: Dict[str, Any]) -> SkillTrendRow:
        user_count = int(skill["userCount"])
        return SkillTrendRow(
            skill_name=skill["name"],
            category=categorize_skill(skill["name"]),
            user_count=user_count,
            avg_proficiency=map_level_to_string(float(skill["avgLevel"])),
            demand_score=calculate_demand_score(user_count),
            trend_direction="stable",
            month_year=month_year(self.now),
            timestamp=self.now,
        )

    def _transform_roi_metric(self, domain: Dict[str, Any]) -> RoiMetricRow:
        return RoiMetricRow(
            career_domain=domain["careerDomain"],
            total_users=int(domain["totalUsers"]),
            avg_completion_rate=self._parse_float(domain.get("avgCompletionRate")),
            avg_ats_score=self._parse_float(domain.get("avgAtsScore")),
            avg_mock_interview_score=self._parse_float(domain.get("avgMockInterviewScore")),
            job_applications=self._parse_int(domain.get("jobApplications")),
            success_rate=self._parse_float(domain.get("successRate")),
            avg_time_to_complete=self._parse_float(domain.get("avgTimeToComplete")),
            month_year=month_year(self.now),
            timestamp=self.now,
        )

    def _transform_scholarship_application(self, application: Dict[str, Any]) -> ScholarshipApplicationRow:
        timestamp = self._parse_datetime(application.get("createdAt"))
        scholarship_id = application.get("scholarshipId")

        return ScholarshipApplicationRow(
            user_id=str(application["userId"]),
            scholarship_id=str(scholarship_id) if scholarship_id is not None else None,
            scholarship_name=application.get("scholarshipName"),
            category=application.get("category"),
            amount=self._parse_float(application.get("amount")),
            state=application.get("state") or extract_state(application.get("location")),
            country=application.get("country") or "USA",
            status=application.get("status") or "viewed",
            timestamp=timestamp or self.now,
            event_date=event_date(timestamp, self.now),
        )

    def _transform_resource_engagement(self, resource: Dict[str, Any]) -> ResourceEngagementRow:
        timestamp = self._parse_datetime(resource.get("completedAt"))

        return ResourceEngagementRow(
            user_id=str(resource["userId"]),
            resource_id=str(resource["resourceId"]),
            resource_title=resource.get("resourceTitle"),
            category=resource.get("category"),
            completion_status=True,
            time_spent=self._parse_int(resource.get("timeSpent")) or 0,
            rating=self._parse_float(resource.get("rating")),
            timestamp=timestamp or self.now,
            event_date=event_date(timestamp, self.now),
        )

    def _transform_roadmap_progress(self, roadmap: Dict[str, Any]) -> RoadmapProgressRow:
        total_milestones, completed_milestones = milestone_counts(roadmap)
        updated_at = self._parse_datetime(roadmap.get("updatedAt"))
        created_at = self._parse_datetime(roadmap.get("createdAt"))

        return RoadmapProgressRow(
            user_id=str(roadmap["userId"]),
            roadmap_id=self._record_id(roadmap),
            career_domain=roadmap["careerDomain"],
            skill_level=roadmap.get("skillLevel") or "beginner",
            total_milestones=total_milestones,
            completed_milestones=completed_milestones,
            progress_percentage=progress_percentage(completed_milestones, total_milestones),
            last_activity=updated_at or self.now,
            timestamp=created_at or self.now,
        )

    def _transform_mock_interview(self, test: Dict[str, Any]) -> MockInterviewPerformanceRow:
        timestamp = self._parse_datetime(test.get("completedAt"))
        session_id = test.get("_id")

        return MockInterviewPerformanceRow(
            user_id=str(test["userId"]),
            session_id=str(session_id) if session_id is not None else None,
            test_type=test.get("testType"),
            score=self._parse_float(test.get("score")) or 0.0,
            total_questions=self._parse_int(test.get("totalQuestions")),
            correct_answers=self._parse_int(test.get("correctAnswers")),
            time_spent=self._parse_int(test.get("timeSpent")),
            difficulty=test.get("difficulty") or "medium",
            timestamp=timestamp or self.now,
            event_date=event_date(timestamp, self.now),
        )

    @staticmethod
    def ats_score_of(resume: Dict[str, Any]) -> Any:
        """ATS score from the legacy flat field or the analysis block"""
        if resume.get("atsScore") is not None:
            return resume["atsScore"]
        return (resume.get("atsAnalysis") or {}).get("overallScore")

    @staticmethod
    def _record_id(record: Dict[str, Any]) -> Optional[str]:
        record_id = record.get("_id")
        return str(record_id) if record_id is not None else None

    @staticmethod
    def _parse_float(value: Any) -> Optional[float]:
        """Safely parse float value"""
        if value is None or value == "":
            return None
        try:
            return float(value)
        except (ValueError, TypeError):
            return None

    @staticmethod
    def _parse_int(value: Any) -> Optional[int]:
        """Safely parse int value"""
        if value is None or value == "":
            return None
        try:
            return int(float(value))  # Handle "10.0" strings
        except (ValueError, TypeError):
            return None

    @staticmethod
    def _parse_datetime(value: Any) -> Optional[datetime]:
        """Safely parse datetime value"""
        if value is None or value == "":
            return None
        if isinstance(value, datetime):
            return value
        try:
            return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return None
