"""
Provision the warehouse dataset and tables.

Creation only: existing tables are left exactly as they are, never dropped
or altered, so running this any number of times is safe.
"""

import asyncio
from typing import List, Optional
from google.cloud import bigquery
from google.api_core.exceptions import GoogleAPIError, NotFound
from pydantic import BaseModel, Field
from models.base import PartitionType
from models.warehouse import WarehouseTable, WAREHOUSE_TABLES
from core.config import settings
from core.exceptions import SchemaProvisioningError
import logging

logger = logging.getLogger(__name__)

PARTITION_TYPES = {
    PartitionType.DAY: bigquery.TimePartitioningType.DAY,
    PartitionType.MONTH: bigquery.TimePartitioningType.MONTH,
}


class SchemaReport(BaseModel):
    dataset_id: str
    dataset_created: bool = False
    tables_created: List[str] = Field(default_factory=list)
    tables_existing: List[str] = Field(default_factory=list)


class WarehouseSchemaManager:
    """Create-if-absent provisioning of the analytical dataset"""

    def __init__(
        self,
        client: bigquery.Client,
        project_id: Optional[str] = None,
        dataset_id: Optional[str] = None,
        location: Optional[str] = None,
        tables: Optional[List[WarehouseTable]] = None
    ):
        self.client = client
        self.project_id = project_id or settings.GCP_PROJECT_ID
        self.dataset_id = dataset_id or settings.BIGQUERY_DATASET_ID
        self.location = location or settings.BIGQUERY_LOCATION
        self.tables = tables or list(WAREHOUSE_TABLES.values())

    async def ensure_schema(self, dataset_id: Optional[str] = None) -> SchemaReport:
        """
        Ensure the dataset and every declared table exist.

        Returns:
            SchemaReport listing what was created and what already existed

        Raises:
            SchemaProvisioningError: The dataset or a table could not be provisioned
        """
        dataset_id = dataset_id or self.dataset_id
        full_dataset_id = f"{self.project_id}.{dataset_id}"
        report = SchemaReport(dataset_id=full_dataset_id)

        try:
            report.dataset_created = await asyncio.to_thread(self._ensure_dataset, full_dataset_id)

            for table in self.tables:
                table_id = f"{full_dataset_id}.{table.name}"
                if await asyncio.to_thread(self._ensure_table, table_id, table):
                    report.tables_created.append(table.name)
                else:
                    report.tables_existing.append(table.name)

        except GoogleAPIError as e:
            raise SchemaProvisioningError(
                "Failed to provision warehouse schema",
                context={
                    "dataset_id": full_dataset_id,
                    "tables_created": report.tables_created,
                },
                original_exception=e
            )

        logger.info(
            f"Warehouse schema ready: {len(report.tables_created)} tables created, "
            f"{len(report.tables_existing)} already present"
        )
        return report

    async def check_connection(self) -> bool:
        """Run a trivial query; raises SchemaProvisioningError when unreachable"""
        try:
            await asyncio.to_thread(lambda: list(self.client.query("SELECT 1 AS ok").result()))
        except GoogleAPIError as e:
            raise SchemaProvisioningError(
                "Warehouse connection check failed",
                context={"project_id": self.project_id},
                original_exception=e
            )
        logger.info("Warehouse connection OK")
        return True

    def _ensure_dataset(self, full_dataset_id: str) -> bool:
        try:
            self.client.get_dataset(full_dataset_id)
            return False
        except NotFound:
            dataset = bigquery.Dataset(full_dataset_id)
            dataset.location = self.location
            dataset.description = "Career insights analytics"
            self.client.create_dataset(dataset, exists_ok=True)
            logger.info(f"Created dataset {full_dataset_id}")
            return True

    def _ensure_table(self, table_id: str, declaration: WarehouseTable) -> bool:
        try:
            self.client.get_table(table_id)
            return False
        except NotFound:
            self.client.create_table(self.build_table(table_id, declaration), exists_ok=True)
            logger.info(f"Created table {table_id}")
            return True

    @staticmethod
    def build_table(table_id: str, declaration: WarehouseTable) -> bigquery.Table:
        schema = [
            bigquery.SchemaField(column.name, column.type, mode=column.mode)
            for column in declaration.columns
        ]
        table = bigquery.Table(table_id, schema=schema)
        table.description = declaration.description

        if declaration.partition_type is not None:
            table.time_partitioning = bigquery.TimePartitioning(
                type_=PARTITION_TYPES[declaration.partition_type],
                field=declaration.partition_field,
            )
        if declaration.clustering:
            table.clustering_fields = list(declaration.clustering)

        return table
