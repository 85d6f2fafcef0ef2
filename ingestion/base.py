"""
Abstract base class for operational entity sources
"""

from abc import ABC
from typing import List, Dict, Any, Optional
from datetime import datetime
from motor.motor_asyncio import AsyncIOMotorDatabase
from ingestion.transformers.row_transformer import RowTransformer
from models.base import EntityType
from models.warehouse import WarehouseTable, table_for
from schemas.rows import WarehouseRow
from core.exceptions import ETLException, ExtractionError
import logging

logger = logging.getLogger(__name__)


class EntitySource(ABC):
    """
    Abstract base class for all entity sources.

    Responsibilities:
    - Read one entity type from the operational store (read-only)
    - Apply the recency filter for incremental runs
    - Map records to warehouse rows via RowTransformer

    Subclasses declare the collection and recency field, and override
    ``fetch_records`` when one stored document fans out into several
    records (embedded arrays) or records are aggregated in memory.
    """

    entity_type: EntityType
    collection_name: str
    recency_field: str = "updatedAt"
    default_limit: Optional[int] = None

    def __init__(self, db: AsyncIOMotorDatabase, limit: Optional[int] = None):
        self.db = db
        self.limit = limit if limit is not None else self.default_limit

    @property
    def table(self) -> WarehouseTable:
        return table_for(self.entity_type)

    @property
    def collection(self):
        return self.db[self.collection_name]

    def base_filter(self) -> Dict[str, Any]:
        """Filter applied on every run"""
        return {}

    def build_filter(self, since: Optional[datetime] = None) -> Dict[str, Any]:
        query = dict(self.base_filter())
        if since is not None:
            query[self.recency_field] = {"$gte": since}
        return query

    async def fetch_documents(
        self,
        since: Optional[datetime] = None,
        limit: Optional[int] = None,
        projection: Optional[Dict[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        """Newest-first documents of the backing collection"""
        cursor = self.collection.find(
            self.build_filter(since),
            projection,
            sort=[(self.recency_field, -1)],
            limit=limit or 0,
        )
        return await cursor.to_list(length=None)

    async def fetch_records(
        self,
        since: Optional[datetime] = None,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        return await self.fetch_documents(since, limit)

    async def extract(
        self,
        since: Optional[datetime] = None,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """
        Fetch source records for this entity type.

        Args:
            since: Lower bound on the recency field (incremental runs)
            limit: Cap on documents read; defaults to the source's own cap

        Returns:
            List of source records, one per warehouse row
        """
        try:
            records = await self.fetch_records(since, limit if limit is not None else self.limit)
        except ETLException:
            raise
        except Exception as e:
            raise ExtractionError(
                "Failed to read operational collection",
                context={
                    "entity_type": self.entity_type.value,
                    "collection": self.collection_name,
                    "since": since.isoformat() if since else None,
                },
                original_exception=e
            )

        logger.info(
            f"Extracted {len(records)} {self.entity_type.value} records "
            f"from {self.collection_name}"
        )
        return records

    def transform(self, record: Dict[str, Any], now: Optional[datetime] = None) -> WarehouseRow:
        return RowTransformer(self.entity_type, now=now).transform(record)

    def transform_all(
        self,
        records: List[Dict[str, Any]],
        now: Optional[datetime] = None
    ) -> List[WarehouseRow]:
        """Transform a batch against one shared reference time"""
        transformer = RowTransformer(self.entity_type, now=now)
        return [transformer.transform(record) for record in records]
