"""
One-shot migration of operational collections between databases.

Source collections are only read. A collection is copied wholesale when
the target is empty, merged by natural key when one is registered for it,
and otherwise left for manual review.
"""

import enum
from typing import Any, Callable, Dict, Optional
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pydantic import BaseModel, Field
from core.exceptions import MergeError
import logging

logger = logging.getLogger(__name__)

NaturalKeyFn = Callable[[Dict[str, Any]], Dict[str, Any]]


class MergeResult(BaseModel):
    inserted: int = 0
    updated: int = 0


class MigrationAction(str, enum.Enum):
    COPIED = "copied"
    MERGED = "merged"
    SKIPPED_EMPTY = "skipped_empty"
    SKIPPED_EXISTING = "skipped_existing"


class CollectionReport(BaseModel):
    collection: str
    action: MigrationAction
    source_count: int = 0
    inserted: int = 0
    updated: int = 0


class MigrationReport(BaseModel):
    collections: Dict[str, CollectionReport] = Field(default_factory=dict)
    final_counts: Dict[str, int] = Field(default_factory=dict)

    @property
    def needs_review(self):
        return [
            name for name, report in self.collections.items()
            if report.action == MigrationAction.SKIPPED_EXISTING
        ]


def scholarship_natural_key(doc: Dict[str, Any]) -> Dict[str, Any]:
    return {"title": doc.get("title"), "provider": doc.get("provider")}


MERGE_KEYS: Dict[str, NaturalKeyFn] = {
    "scholarships": scholarship_natural_key,
}


async def merge_collections(
    source: AsyncIOMotorCollection,
    target: AsyncIOMotorCollection,
    natural_key_fn: NaturalKeyFn
) -> MergeResult:
    """
    Upsert every source document into target by natural key.

    A matched target document is overwritten in place (its ``_id`` is kept)
    and counts as updated; an unmatched one is inserted with the source
    ``_id``. Running the merge again reports every document as updated.
    """
    result = MergeResult()

    async for doc in source.find({}):
        key = natural_key_fn(doc)
        fields = {k: v for k, v in doc.items() if k != "_id"}

        try:
            existing = await target.find_one(key, {"_id": 1})
            if existing is None:
                await target.insert_one(dict(doc))
                result.inserted += 1
            else:
                await target.update_one({"_id": existing["_id"]}, {"$set": fields})
                result.updated += 1
        except Exception as e:
            raise MergeError(
                "Failed to merge document",
                context={
                    "collection": target.name,
                    "natural_key": key,
                    "inserted_so_far": result.inserted,
                    "updated_so_far": result.updated,
                },
                original_exception=e
            )

    logger.info(
        f"Merged {source.name} into {target.name}: "
        f"{result.inserted} new, {result.updated} updated"
    )
    return result


async def migrate_database(
    source_db: AsyncIOMotorDatabase,
    target_db: AsyncIOMotorDatabase,
    merge_keys: Optional[Dict[str, NaturalKeyFn]] = None
) -> MigrationReport:
    """Walk every source collection and copy, merge or skip it"""
    merge_keys = MERGE_KEYS if merge_keys is None else merge_keys
    report = MigrationReport()

    for name in sorted(await source_db.list_collection_names()):
        source = source_db[name]
        target = target_db[name]

        source_count = await source.count_documents({})
        if source_count == 0:
            logger.info(f"{name}: skipped (empty collection)")
            report.collections[name] = CollectionReport(
                collection=name, action=MigrationAction.SKIPPED_EMPTY
            )
            continue

        existing_count = await target.count_documents({})

        if existing_count == 0:
            documents = await source.find({}).to_list(length=None)
            try:
                await target.insert_many(documents)
            except Exception as e:
                raise MergeError(
                    "Failed to copy collection",
                    context={"collection": name, "documents": len(documents)},
                    original_exception=e
                )
            logger.info(f"{name}: copied {len(documents)} documents")
            report.collections[name] = CollectionReport(
                collection=name,
                action=MigrationAction.COPIED,
                source_count=source_count,
                inserted=len(documents),
            )

        elif name in merge_keys:
            logger.info(
                f"{name}: target already has {existing_count} documents, "
                f"merging {source_count} by natural key"
            )
            merged = await merge_collections(source, target, merge_keys[name])
            report.collections[name] = CollectionReport(
                collection=name,
                action=MigrationAction.MERGED,
                source_count=source_count,
                inserted=merged.inserted,
                updated=merged.updated,
            )

        else:
            logger.warning(
                f"{name}: target already has {existing_count} documents; "
                f"skipped, manual action needed"
            )
            report.collections[name] = CollectionReport(
                collection=name,
                action=MigrationAction.SKIPPED_EXISTING,
                source_count=source_count,
            )

    for name in sorted(await target_db.list_collection_names()):
        report.final_counts[name] = await target_db[name].count_documents({})

    return report
