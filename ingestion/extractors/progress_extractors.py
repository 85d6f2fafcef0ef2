"""
Extractors for learning progress: completed resources, roadmaps and mock
interview tests.

``userprogresses`` and ``mockinterviewprogresses`` embed their events in
arrays; each embedded event becomes one record, bounded per document.
"""

from typing import List, Dict, Any, Optional
from datetime import datetime
from ingestion.base import EntitySource
from models.base import EntityType
import logging

logger = logging.getLogger(__name__)


class ResourceEngagementSource(EntitySource):
    entity_type = EntityType.RESOURCE_ENGAGEMENT
    collection_name = "userprogresses"
    recency_field = "updatedAt"
    default_limit = 2000
    per_document_limit = 50

    async def fetch_records(
        self,
        since: Optional[datetime] = None,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        records = []
        for progress in await self.fetch_documents(since, limit):
            for resource in (progress.get("completedResources") or [])[:self.per_document_limit]:
                resource_id = resource.get("resourceId")
                if resource_id is None:
                    logger.debug(f"Skipping completed resource without id in {progress.get('_id')}")
                    continue
                records.append({
                    "userId": progress.get("userId"),
                    "resourceId": str(resource_id),
                    "resourceTitle": resource.get("title"),
                    "category": resource.get("category"),
                    "timeSpent": resource.get("timeSpent") or 0,
                    "rating": resource.get("rating") or None,
                    "completedAt": resource.get("completedAt"),
                })
        return records


class RoadmapProgressSource(EntitySource):
    entity_type = EntityType.ROADMAP_PROGRESS
    collection_name = "roadmapprogresses"
    recency_field = "updatedAt"
    default_limit = 5000


class MockInterviewPerformanceSource(EntitySource):
    entity_type = EntityType.MOCK_INTERVIEW_PERFORMANCE
    collection_name = "mockinterviewprogresses"
    recency_field = "updatedAt"
    default_limit = 2000
    per_document_limit = 20

    async def fetch_records(
        self,
        since: Optional[datetime] = None,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        records = []
        for mock in await self.fetch_documents(since, limit):
            for test in (mock.get("aptitudeTests") or [])[:self.per_document_limit]:
                records.append({
                    "_id": test.get("_id"),
                    "userId": mock.get("userId"),
                    "testType": test.get("testType"),
                    "score": test.get("score"),
                    "totalQuestions": test.get("totalQuestions") or None,
                    "correctAnswers": test.get("correctAnswers") or None,
                    "timeSpent": test.get("timeTaken", test.get("timeSpent")) or None,
                    "difficulty": test.get("difficulty"),
                    "completedAt": test.get("completedAt"),
                })
        return records
