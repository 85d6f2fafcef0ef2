"""
Extractors backed by the ``users`` collection: per-user activity and the
aggregated skill trends.
"""

from typing import List, Dict, Any, Optional
from datetime import datetime
from ingestion.base import EntitySource
from ingestion.transformers.enrichment import skill_level_value
from models.base import EntityType


class UserActivitySource(EntitySource):
    """Active users, one activity row per profile"""

    entity_type = EntityType.USER_ACTIVITY
    collection_name = "users"
    recency_field = "updatedAt"
    default_limit = 5000

    def base_filter(self) -> Dict[str, Any]:
        return {"isActive": True}


class SkillTrendSource(EntitySource):
    """
    Skill popularity across active users.

    Skills are unwound and grouped in memory by name: user count and mean
    encoded level per skill, most common first, capped at ``limit`` skills.
    """

    entity_type = EntityType.SKILL_TREND
    collection_name = "users"
    recency_field = "updatedAt"
    default_limit = 100

    def base_filter(self) -> Dict[str, Any]:
        return {"isActive": True}

    async def fetch_records(
        self,
        since: Optional[datetime] = None,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        users = await self.fetch_documents(since, projection={"skills": 1, "updatedAt": 1})

        groups: Dict[str, List[int]] = {}
        for user in users:
            for skill in user.get("skills") or []:
                if isinstance(skill, dict):
                    name, level = skill.get("name"), skill.get("level")
                else:
                    name, level = skill, None
                if not name:
                    continue
                groups.setdefault(name, []).append(skill_level_value(level))

        skills = [
            {
                "name": name,
                "userCount": len(levels),
                "avgLevel": sum(levels) / len(levels),
            }
            for name, levels in groups.items()
        ]
        skills.sort(key=lambda s: (-s["userCount"], s["name"]))
        return skills[:limit] if limit else skills
