"""
Scholarship application extractor
"""

from ingestion.base import EntitySource
from models.base import EntityType


class ScholarshipApplicationSource(EntitySource):
    entity_type = EntityType.SCHOLARSHIP_APPLICATION
    collection_name = "scholarshipapplications"
    recency_field = "createdAt"
    default_limit = 5000
