"""
Entity sources, one per warehouse table.

``build_sources`` wires every source to the operational database with the
configured full-sync cap applied to the per-record collections.
"""

from typing import Dict, Optional
from motor.motor_asyncio import AsyncIOMotorDatabase
from ingestion.base import EntitySource
from ingestion.extractors.profile_extractors import UserActivitySource, SkillTrendSource
from ingestion.extractors.resume_extractor import AtsScoreSource
from ingestion.extractors.progress_extractors import (
    ResourceEngagementSource,
    RoadmapProgressSource,
    MockInterviewPerformanceSource,
)
from ingestion.extractors.scholarship_extractor import ScholarshipApplicationSource
from ingestion.extractors.roi_extractor import RoiMetricSource
from models.base import EntityType
from core.config import Settings, settings as default_settings


def build_sources(
    db: AsyncIOMotorDatabase,
    config: Optional[Settings] = None
) -> Dict[EntityType, EntitySource]:
    config = config or default_settings
    row_limit = config.FULL_SYNC_ROW_LIMIT

    sources = [
        UserActivitySource(db, limit=row_limit),
        AtsScoreSource(db, limit=row_limit),
        SkillTrendSource(db),
        ResourceEngagementSource(db),
        RoadmapProgressSource(db, limit=row_limit),
        MockInterviewPerformanceSource(db),
        ScholarshipApplicationSource(db, limit=row_limit),
        RoiMetricSource(db),
    ]
    return {source.entity_type: source for source in sources}


__all__ = [
    "build_sources",
    "UserActivitySource",
    "SkillTrendSource",
    "AtsScoreSource",
    "ResourceEngagementSource",
    "RoadmapProgressSource",
    "MockInterviewPerformanceSource",
    "ScholarshipApplicationSource",
    "RoiMetricSource",
]
