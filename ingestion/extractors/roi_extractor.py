"""
Weekly ROI aggregation per career domain.

For every roadmap the owner's resume and mock interview progress are looked
up one by one and folded into per-domain accumulators. Read volume grows
with the number of roadmaps; the job runs weekly.
"""

from typing import List, Dict, Any, Optional
from datetime import datetime
from ingestion.base import EntitySource
from ingestion.transformers.enrichment import (
    aptitude_average,
    average,
    milestone_counts,
    progress_percentage,
)
from ingestion.transformers.row_transformer import RowTransformer
from models.base import EntityType
import logging

logger = logging.getLogger(__name__)


class RoiMetricSource(EntitySource):
    entity_type = EntityType.ROI_METRIC
    collection_name = "roadmapprogresses"
    recency_field = "updatedAt"
    resume_collection = "resumes"
    mock_interview_collection = "mockinterviewprogresses"

    async def fetch_records(
        self,
        since: Optional[datetime] = None,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        domains: Dict[str, Dict[str, Any]] = {}

        for roadmap in await self.fetch_documents(since, limit):
            domain = roadmap.get("careerDomain")
            if not domain:
                logger.debug(f"Skipping roadmap {roadmap.get('_id')} without career domain")
                continue

            acc = domains.setdefault(domain, {
                "totalUsers": 0,
                "completion": [],
                "atsScores": [],
                "mockScores": [],
            })
            acc["totalUsers"] += 1
            total, completed = milestone_counts(roadmap)
            acc["completion"].append(progress_percentage(completed, total))

            user_id = roadmap.get("userId")
            resume = await self.db[self.resume_collection].find_one({"userId": user_id})
            if resume:
                score = RowTransformer.ats_score_of(resume)
                if score:
                    acc["atsScores"].append(float(score))

            mock = await self.db[self.mock_interview_collection].find_one({"userId": user_id})
            if mock:
                mock_score = aptitude_average(mock)
                if mock_score > 0:
                    acc["mockScores"].append(mock_score)

        return [
            {
                "careerDomain": domain,
                "totalUsers": acc["totalUsers"],
                "avgCompletionRate": average(acc["completion"]),
                "avgAtsScore": average(acc["atsScores"]) if acc["atsScores"] else None,
                "avgMockInterviewScore": average(acc["mockScores"]) if acc["mockScores"] else None,
                "jobApplications": 0,
                "successRate": None,
                "avgTimeToComplete": None,
            }
            for domain, acc in domains.items()
        ]
