"""
Unit tests for entity sources
"""

import pytest
from datetime import timedelta
from unittest.mock import AsyncMock, patch
from core.exceptions import ExtractionError
from ingestion.extractors import build_sources
from ingestion.extractors.profile_extractors import UserActivitySource, SkillTrendSource
from ingestion.extractors.resume_extractor import AtsScoreSource
from ingestion.extractors.progress_extractors import (
    ResourceEngagementSource,
    RoadmapProgressSource,
    MockInterviewPerformanceSource,
)
from ingestion.extractors.roi_extractor import RoiMetricSource
from models.base import EntityType
from tests.factories import make_user, make_resume, make_roadmap, make_mock_progress


class TestIncrementalFilter:
    """Test the recency window"""

    @pytest.mark.asyncio
    async def test_window_keeps_recent_records(self, mongo_db, now):
        await mongo_db.users.insert_many([
            make_user(1, now - timedelta(hours=2)),
            make_user(2, now - timedelta(minutes=30)),
            make_user(3, now - timedelta(minutes=5)),
        ])
        source = UserActivitySource(mongo_db)

        records = await source.extract(since=now - timedelta(minutes=60))

        assert [r["_id"] for r in records] == ["user_3", "user_2"]

    @pytest.mark.asyncio
    async def test_full_read_newest_first(self, mongo_db, now):
        await mongo_db.users.insert_many([
            make_user(1, now - timedelta(days=3)),
            make_user(2, now - timedelta(days=1)),
            make_user(3, now - timedelta(days=2), isActive=False),
        ])

        records = await UserActivitySource(mongo_db).extract()

        assert [r["_id"] for r in records] == ["user_2", "user_1"]

    @pytest.mark.asyncio
    async def test_limit(self, mongo_db, now):
        await mongo_db.users.insert_many([make_user(i, now - timedelta(minutes=i)) for i in range(5)])

        records = await UserActivitySource(mongo_db, limit=2).extract()

        assert [r["_id"] for r in records] == ["user_0", "user_1"]

    def test_build_filter(self, mongo_db, now):
        source = AtsScoreSource(mongo_db)
        query = source.build_filter(since=now)

        assert query["createdAt"] == {"$gte": now}
        assert "$or" in query
        assert "createdAt" not in source.build_filter()


class TestAtsScoreSource:

    @pytest.mark.asyncio
    async def test_only_scored_resumes(self, mongo_db, now):
        await mongo_db.resumes.insert_many([
            make_resume(1, now),
            make_resume(2, now, atsScore=None, atsAnalysis={"overallScore": 55}),
            {"_id": "resume_3", "userId": "uid_3", "createdAt": now},
        ])
        await mongo_db.resumes.update_one({"_id": "resume_2"}, {"$unset": {"atsScore": ""}})

        records = await AtsScoreSource(mongo_db).extract()

        assert sorted(r["_id"] for r in records) == ["resume_1", "resume_2"]


class TestSkillTrendSource:

    @pytest.mark.asyncio
    async def test_groups_skills_across_users(self, mongo_db, now):
        await mongo_db.users.insert_many([
            make_user(1, now, skills=[{"name": "Python", "level": "advanced"}, {"name": "SQL", "level": "beginner"}]),
            make_user(2, now, skills=[{"name": "Python", "level": "beginner"}]),
            make_user(3, now, skills=[{"name": "Rust"}], isActive=False),
        ])

        records = await SkillTrendSource(mongo_db).extract()

        assert records[0] == {"name": "Python", "userCount": 2, "avgLevel": 2.0}
        assert records[1] == {"name": "SQL", "userCount": 1, "avgLevel": 1.0}
        assert len(records) == 2

    @pytest.mark.asyncio
    async def test_top_n(self, mongo_db, now):
        skills = [{"name": f"skill_{i}", "level": "beginner"} for i in range(5)]
        await mongo_db.users.insert_one(make_user(1, now, skills=skills))

        records = await SkillTrendSource(mongo_db, limit=3).extract()

        assert len(records) == 3


class TestEmbeddedArraySources:

    @pytest.mark.asyncio
    async def test_resource_engagement_flattens(self, mongo_db, now):
        await mongo_db.userprogresses.insert_one({
            "_id": "p1",
            "userId": "uid_1",
            "completedResources": [
                {"resourceId": i, "category": "video", "timeSpent": 10, "completedAt": now}
                for i in range(60)
            ],
            "updatedAt": now,
        })

        records = await ResourceEngagementSource(mongo_db).extract()

        assert len(records) == 50
        assert records[0]["resourceId"] == "0"
        assert records[0]["userId"] == "uid_1"

    @pytest.mark.asyncio
    async def test_mock_interview_flattens(self, mongo_db, now):
        await mongo_db.mockinterviewprogresses.insert_one(
            make_mock_progress(1, now, percentages=[50] * 25)
        )

        records = await MockInterviewPerformanceSource(mongo_db).extract()

        assert len(records) == 20
        assert records[0]["_id"] == "test_1_0"
        assert records[0]["timeSpent"] == 600

    @pytest.mark.asyncio
    async def test_roadmaps_pass_through(self, mongo_db, now):
        await mongo_db.roadmapprogresses.insert_one(make_roadmap(1, now))

        records = await RoadmapProgressSource(mongo_db).extract()

        assert records[0]["careerDomain"] == "Data Science"


class TestRoiMetricSource:

    @pytest.mark.asyncio
    async def test_aggregates_per_domain(self, mongo_db, now):
        await mongo_db.roadmapprogresses.insert_many([
            make_roadmap(1, now, domain="Data Science", milestones_per_stage=(2, 2), completed=1),
            make_roadmap(2, now, domain="Data Science", milestones_per_stage=(2, 2), completed=3),
            make_roadmap(3, now, domain="Design", milestones_per_stage=(), completed=0),
        ])
        await mongo_db.resumes.insert_many([
            make_resume(1, now, score=60),
            make_resume(2, now, score=80),
        ])
        await mongo_db.mockinterviewprogresses.insert_many([
            make_mock_progress(1, now, percentages=(70, 81)),
            make_mock_progress(3, now, percentages=()),
        ])

        records = await RoiMetricSource(mongo_db).extract()
        by_domain = {r["careerDomain"]: r for r in records}

        data_science = by_domain["Data Science"]
        assert data_science["totalUsers"] == 2
        assert data_science["avgCompletionRate"] == 50.0
        assert data_science["avgAtsScore"] == 70.0
        assert data_science["avgMockInterviewScore"] == 76
        assert data_science["jobApplications"] == 0

        design = by_domain["Design"]
        assert design["totalUsers"] == 1
        assert design["avgAtsScore"] is None
        assert design["avgMockInterviewScore"] is None


class TestExtractErrors:

    @pytest.mark.asyncio
    async def test_driver_error_wrapped(self, mongo_db):
        source = UserActivitySource(mongo_db)

        with patch.object(source, "fetch_documents", new=AsyncMock(side_effect=RuntimeError("boom"))):
            with pytest.raises(ExtractionError) as exc_info:
                await source.extract()

        assert exc_info.value.context["collection"] == "users"
        assert isinstance(exc_info.value.original_exception, RuntimeError)


def test_build_sources_covers_every_entity(mongo_db):
    sources = build_sources(mongo_db)

    assert set(sources) == set(EntityType)
    assert sources[EntityType.USER_ACTIVITY].limit == 5000
    assert sources[EntityType.SKILL_TREND].limit == 100
