"""
Unit tests for the row transformer
"""

import json
import pytest
from datetime import date, datetime
from core.exceptions import TransformationError
from ingestion.transformers.row_transformer import RowTransformer
from models.base import EntityType
from models.warehouse import table_for
from schemas.rows import ROW_MODELS

NOW = datetime(2024, 1, 20, 12, 0, 0)


class TestUserActivityTransform:
    """Test users → user_activities"""

    def test_transform_user(self):
        transformer = RowTransformer(EntityType.USER_ACTIVITY, now=NOW)
        user = {
            "_id": "507f1f77bcf86cd799439011",
            "firebaseUid": "uid_1",
            "name": "Ada",
            "email": "ada@example.com",
            "profile": {
                "careerGoal": "Data Science",
                "location": "Austin, TX",
                "interests": ["ml"],
            },
            "skills": [{"name": "Python", "level": "advanced"}],
            "updatedAt": datetime(2024, 1, 15, 10, 30),
        }

        row = transformer.transform(user)
        data = row.to_warehouse()

        assert data["userId"] == "uid_1"
        assert data["careerDomain"] == "Data Science"
        assert data["skillLevel"] == "intermediate"
        assert data["state"] == "TX"
        assert data["activityType"] == "profile_update"
        assert data["eventDate"] == "2024-01-15"
        assert data["timestamp"].startswith("2024-01-15T10:30:00")
        assert json.loads(data["activityDetails"]) == {"skillsCount": 1, "interests": ["ml"]}

    def test_user_without_skills_is_beginner(self):
        transformer = RowTransformer(EntityType.USER_ACTIVITY, now=NOW)
        row = transformer.transform({"_id": "u2", "skills": [], "updatedAt": NOW})

        assert row.user_id == "u2"
        assert row.skill_level == "beginner"
        assert row.state is None

    def test_missing_timestamp_uses_now(self):
        transformer = RowTransformer(EntityType.USER_ACTIVITY, now=NOW)
        row = transformer.transform({"_id": "u3"})

        assert row.timestamp == NOW
        assert row.event_date == date(2024, 1, 20)

    def test_columns_match_table(self):
        transformer = RowTransformer(EntityType.USER_ACTIVITY, now=NOW)
        data = transformer.transform({"_id": "u4", "updatedAt": NOW}).to_warehouse()

        assert set(data) == set(table_for(EntityType.USER_ACTIVITY).column_names)


class TestAtsScoreTransform:
    def test_flat_score(self):
        transformer = RowTransformer(EntityType.ATS_SCORE, now=NOW)
        row = transformer.transform({
            "_id": "r1",
            "userId": "uid_1",
            "atsScore": 82,
            "analysis": {"category": "technical", "suggestions": ["Quantify impact"]},
            "createdAt": datetime(2024, 1, 10),
        })
        data = row.to_warehouse()

        assert data["score"] == 82.0
        assert data["resumeId"] == "r1"
        assert data["category"] == "technical"
        assert json.loads(data["suggestions"]) == ["Quantify impact"]

    def test_score_from_analysis_block(self):
        transformer = RowTransformer(EntityType.ATS_SCORE, now=NOW)
        row = transformer.transform({
            "_id": "r2",
            "userId": "uid_2",
            "atsAnalysis": {"overallScore": 64.5},
            "createdAt": "2024-01-11T08:00:00Z",
        })

        assert row.score == 64.5
        assert row.category == "general"
        assert row.suggestions is None

    def test_missing_user_raises(self):
        transformer = RowTransformer(EntityType.ATS_SCORE, now=NOW)

        with pytest.raises(TransformationError) as exc_info:
            transformer.transform({"_id": "r3", "atsScore": 50})

        assert exc_info.value.context["record_id"] == "r3"
        assert exc_info.value.context["entity_type"] == "ats_score"


class TestAggregateTransforms:
    def test_skill_trend(self):
        transformer = RowTransformer(EntityType.SKILL_TREND, now=NOW)
        row = transformer.transform({"name": "Docker", "userCount": 12, "avgLevel": 2.6})

        assert row.category == "cloud"
        assert row.demand_score == 60
        assert row.avg_proficiency == "advanced"
        assert row.month_year == "2024-01"
        assert row.trend_direction == "stable"

    def test_roi_metric(self):
        transformer = RowTransformer(EntityType.ROI_METRIC, now=NOW)
        row = transformer.transform({
            "careerDomain": "Web Development",
            "totalUsers": 4,
            "avgCompletionRate": 37.5,
            "avgAtsScore": None,
            "avgMockInterviewScore": 71.0,
            "jobApplications": 0,
        })
        data = row.to_warehouse()

        assert data["careerDomain"] == "Web Development"
        assert data["avgAtsScore"] is None
        assert data["monthYear"] == "2024-01"


class TestProgressTransforms:
    def test_roadmap_progress(self):
        transformer = RowTransformer(EntityType.ROADMAP_PROGRESS, now=NOW)
        row = transformer.transform({
            "_id": "rm1",
            "userId": "uid_1",
            "careerDomain": "Data Science",
            "roadmapData": {"stages": [{"milestones": [1, 2]}, {"milestones": [3, 4]}]},
            "completedMilestones": ["a"],
            "createdAt": datetime(2024, 1, 1),
            "updatedAt": datetime(2024, 1, 18),
        })

        assert row.total_milestones == 4
        assert row.completed_milestones == 1
        assert row.progress_percentage == 25.0
        assert row.skill_level == "beginner"
        assert row.last_activity == datetime(2024, 1, 18)

    def test_roadmap_without_stages(self):
        transformer = RowTransformer(EntityType.ROADMAP_PROGRESS, now=NOW)
        row = transformer.transform({"_id": "rm2", "userId": "u", "careerDomain": "Design"})

        assert row.total_milestones == 0
        assert row.progress_percentage == 0.0

    def test_resource_engagement(self):
        transformer = RowTransformer(EntityType.RESOURCE_ENGAGEMENT, now=NOW)
        row = transformer.transform({
            "userId": "uid_1",
            "resourceId": "17",
            "category": "video",
            "timeSpent": 45,
            "rating": None,
            "completedAt": datetime(2024, 1, 19, 9, 0),
        })

        assert row.completion_status is True
        assert row.time_spent == 45
        assert row.event_date == date(2024, 1, 19)

    def test_mock_interview(self):
        transformer = RowTransformer(EntityType.MOCK_INTERVIEW_PERFORMANCE, now=NOW)
        row = transformer.transform({
            "_id": "t1",
            "userId": "uid_1",
            "testType": "logical",
            "score": "8",
            "totalQuestions": 10,
            "correctAnswers": 8,
            "timeSpent": 540,
            "completedAt": datetime(2024, 1, 19),
        })

        assert row.session_id == "t1"
        assert row.score == 8.0
        assert row.difficulty == "medium"

    def test_scholarship_application_defaults(self):
        transformer = RowTransformer(EntityType.SCHOLARSHIP_APPLICATION, now=NOW)
        row = transformer.transform({
            "userId": "uid_1",
            "scholarshipId": "s1",
            "location": "Springfield, IL",
            "createdAt": datetime(2024, 1, 2),
        })

        assert row.country == "USA"
        assert row.status == "viewed"
        assert row.state == "IL"


def test_every_entity_has_a_row_model():
    assert set(ROW_MODELS) == set(EntityType)
