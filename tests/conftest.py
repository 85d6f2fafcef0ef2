"""
Pytest configuration and fixtures
"""

import pytest
from collections import defaultdict
from datetime import datetime
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, Mock, patch
from google.api_core.exceptions import Conflict, NotFound
from mongomock_motor import AsyncMongoMockClient
from core.cache import TTLCache
from ingestion.loaders.bigquery_loader import BigQueryLoader
from ingestion.loaders.schema_manager import WarehouseSchemaManager
from ingestion.runner import SyncOrchestrator
from models.sync_run import SyncState

TEST_PROJECT = "test-project"
TEST_DATASET = "test_dataset"


class FakeBigQueryClient:
    """
    In-memory stand-in for ``google.cloud.bigquery.Client``.

    Records every streaming insert; ``reject_rows`` holds per-request row
    indexes to report as invalid, mimicking ``skip_invalid_rows=True``.
    """

    def __init__(self, reject_rows=None):
        self.datasets: Dict[str, Any] = {}
        self.tables: Dict[str, Any] = {}
        self.rows: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
        self.insert_calls: List[Dict[str, Any]] = []
        self.queries: List[str] = []
        self.reject_rows = set(reject_rows or ())
        self.fail_with: Optional[Exception] = None

    def get_dataset(self, dataset_id):
        if dataset_id not in self.datasets:
            raise NotFound(f"Dataset {dataset_id} not found")
        return self.datasets[dataset_id]

    def create_dataset(self, dataset, exists_ok=False):
        dataset_id = f"{dataset.project}.{dataset.dataset_id}"
        if dataset_id in self.datasets:
            if exists_ok:
                return self.datasets[dataset_id]
            raise Conflict(f"Dataset {dataset_id} already exists")
        self.datasets[dataset_id] = dataset
        return dataset

    def get_table(self, table_id):
        if table_id not in self.tables:
            raise NotFound(f"Table {table_id} not found")
        return self.tables[table_id]

    def create_table(self, table, exists_ok=False):
        if self.fail_with is not None:
            raise self.fail_with
        table_id = f"{table.project}.{table.dataset_id}.{table.table_id}"
        if table_id in self.tables:
            if exists_ok:
                return self.tables[table_id]
            raise Conflict(f"Table {table_id} already exists")
        self.tables[table_id] = table
        return table

    def insert_rows_json(self, table_id, json_rows, skip_invalid_rows=False, **kwargs):
        if self.fail_with is not None:
            raise self.fail_with
        json_rows = list(json_rows)
        self.insert_calls.append({
            "table_id": table_id,
            "rows": json_rows,
            "skip_invalid_rows": skip_invalid_rows,
        })

        errors = []
        for index, row in enumerate(json_rows):
            if index in self.reject_rows:
                errors.append({
                    "index": index,
                    "errors": [{
                        "reason": "invalid",
                        "location": "userId",
                        "message": "Rejected by test",
                    }],
                })
            elif skip_invalid_rows or not self.reject_rows:
                self.rows[table_id].append(row)
        return errors

    def query(self, sql):
        self.queries.append(sql)
        job = Mock()
        job.result.return_value = [{"ok": 1}]
        return job

    def close(self):
        pass


@pytest.fixture
def fake_bigquery():
    return FakeBigQueryClient()


@pytest.fixture
def mongo_db():
    """Fresh in-memory operational database per test"""
    client = AsyncMongoMockClient()
    return client["career-advisor-test"]


@pytest.fixture
def loader(fake_bigquery):
    return BigQueryLoader(fake_bigquery, project_id=TEST_PROJECT, dataset_id=TEST_DATASET, batch_size=500)


@pytest.fixture
def schema_manager(fake_bigquery):
    return WarehouseSchemaManager(fake_bigquery, project_id=TEST_PROJECT, dataset_id=TEST_DATASET)


@pytest.fixture
def dashboard_cache():
    return TTLCache(default_ttl=300)


@pytest.fixture
def store_ping():
    """The in-memory store has no ``ping`` command; treat it as reachable"""
    with patch("ingestion.runner.ping_operational_store", new=AsyncMock()) as mock_ping:
        yield mock_ping


@pytest.fixture
def orchestrator(mongo_db, loader, schema_manager, dashboard_cache, store_ping):
    return SyncOrchestrator(
        db=mongo_db,
        loader=loader,
        schema_manager=schema_manager,
        state=SyncState(history_size=10),
        cache_target=dashboard_cache,
    )


@pytest.fixture
def now():
    return datetime.utcnow().replace(microsecond=0)
