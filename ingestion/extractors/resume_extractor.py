"""
ATS score extractor over the ``resumes`` collection
"""

from typing import Dict, Any
from ingestion.base import EntitySource
from models.base import EntityType


class AtsScoreSource(EntitySource):
    """Resumes that have been scored, newest first"""

    entity_type = EntityType.ATS_SCORE
    collection_name = "resumes"
    recency_field = "createdAt"
    default_limit = 5000

    def base_filter(self) -> Dict[str, Any]:
        # Older resumes carry the flat field, newer ones the analysis block
        return {
            "$or": [
                {"atsScore": {"$exists": True}},
                {"atsAnalysis.overallScore": {"$exists": True}},
            ]
        }
