"""
Stream warehouse rows into BigQuery tables
"""

import asyncio
from typing import List, Dict, Any, Optional, Sequence
from google.cloud import bigquery
from google.api_core.exceptions import GoogleAPIError
from pydantic import BaseModel
from models.warehouse import WarehouseTable
from schemas.rows import WarehouseRow
from core.config import settings
from core.exceptions import PartialInsertError, RowInsertError, WarehouseError
import logging

logger = logging.getLogger(__name__)


class InsertResult(BaseModel):
    table_name: str
    inserted_count: int = 0
    submitted_count: int = 0


class BigQueryLoader:
    """
    Append rows to warehouse tables with streaming inserts.

    Ensures:
    - No network call for an empty row list
    - Valid rows of a batch are kept when other rows are rejected
    - Rejected rows are reported with row-level detail
    """

    def __init__(
        self,
        client: bigquery.Client,
        project_id: Optional[str] = None,
        dataset_id: Optional[str] = None,
        batch_size: Optional[int] = None
    ):
        self.client = client
        self.project_id = project_id or settings.GCP_PROJECT_ID
        self.dataset_id = dataset_id or settings.BIGQUERY_DATASET_ID
        self.batch_size = batch_size or settings.WAREHOUSE_BATCH_SIZE

    def table_id(self, table: WarehouseTable) -> str:
        return f"{self.project_id}.{self.dataset_id}.{table.name}"

    async def insert_rows(
        self,
        table: WarehouseTable,
        rows: Sequence[WarehouseRow]
    ) -> InsertResult:
        """
        Insert rows into a warehouse table.

        Args:
            table: Target table declaration
            rows: Validated row models for that table

        Returns:
            InsertResult with the number of accepted rows

        Raises:
            PartialInsertError: Some rows were rejected (accepted rows stay written)
            WarehouseError: A request failed as a whole
        """
        if not rows:
            return InsertResult(table_name=table.name)

        table_id = self.table_id(table)
        json_rows = [row.to_warehouse() for row in rows]
        row_errors: List[RowInsertError] = []
        inserted = 0

        for start in range(0, len(json_rows), self.batch_size):
            batch = json_rows[start:start + self.batch_size]

            try:
                errors = await asyncio.to_thread(
                    self.client.insert_rows_json,
                    table_id,
                    batch,
                    skip_invalid_rows=True,
                )
            except GoogleAPIError as e:
                raise WarehouseError(
                    "Streaming insert request failed",
                    context={
                        "table_name": table.name,
                        "operation": "INSERT",
                        "batch_start": start,
                        "batch_size": len(batch),
                        "inserted_before_failure": inserted,
                    },
                    original_exception=e
                )

            batch_errors = self._normalize_errors(errors, offset=start)
            row_errors.extend(batch_errors)
            inserted += len(batch) - len({e.row_index for e in batch_errors})

            logger.debug(
                f"Batch {start // self.batch_size + 1} for {table.name}: "
                f"{len(batch)} submitted, {len(batch_errors)} rejected"
            )

        if row_errors:
            error = PartialInsertError(
                f"{len({e.row_index for e in row_errors})} rows rejected by {table.name}",
                row_errors=row_errors,
                inserted_count=inserted,
                context={"table_name": table.name, "operation": "INSERT"},
            )
            for row_error in row_errors[:10]:
                logger.error(
                    f"Row {row_error.row_index} rejected by {table.name}: "
                    f"{row_error.reason} {row_error.message}"
                )
            raise error

        logger.info(f"Inserted {inserted} rows into {table.name}")
        return InsertResult(table_name=table.name, inserted_count=inserted, submitted_count=len(json_rows))

    @staticmethod
    def _normalize_errors(errors: Optional[List[Dict[str, Any]]], offset: int = 0) -> List[RowInsertError]:
        """Flatten the client's ``[{index, errors: [...]}]`` shape"""
        normalized = []
        for entry in errors or []:
            row_index = offset + int(entry.get("index", 0))
            details = entry.get("errors") or [{}]
            for detail in details:
                normalized.append(RowInsertError(
                    row_index=row_index,
                    reason=detail.get("reason"),
                    message=detail.get("message"),
                    location=detail.get("location"),
                ))
        return normalized
