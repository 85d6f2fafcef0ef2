"""
Table-driven enrichment rules applied while building warehouse rows.

Bucket lists and thresholds must not change: rows already in the warehouse
were produced with them.
"""

import math
from datetime import date, datetime
from typing import Iterable, Optional

SKILL_CATEGORIES = (
    ("programming", ("javascript", "python", "java", "c++", "ruby", "go", "rust")),
    ("web", ("react", "angular", "vue", "html", "css", "nodejs")),
    ("data", ("sql", "mongodb", "postgresql", "redis", "bigquery")),
    ("cloud", ("aws", "azure", "gcp", "docker", "kubernetes")),
    ("ai", ("machine learning", "deep learning", "tensorflow", "pytorch", "nlp")),
)

# Long-form names folded to their keyword before matching
SKILL_ALIASES = (
    ("amazon web services", "aws"),
)

STATE_CODES = ("CA", "NY", "TX", "FL", "IL", "PA", "OH", "GA", "NC", "MI")

SKILL_LEVEL_VALUES = {
    "beginner": 1,
    "intermediate": 2,
    "advanced": 3,
}
EXPERT_LEVEL_VALUE = 4


def categorize_skill(skill_name: str) -> str:
    """First category whose keyword occurs in the skill name, else 'other'"""
    lower_skill = (skill_name or "").lower()
    for alias, keyword in SKILL_ALIASES:
        lower_skill = lower_skill.replace(alias, keyword)

    for category, keywords in SKILL_CATEGORIES:
        if any(keyword in lower_skill for keyword in keywords):
            return category
    return "other"


def calculate_demand_score(user_count: int) -> int:
    return min(100, user_count * 5)


def extract_state(location: Optional[str]) -> Optional[str]:
    if not location:
        return None
    upper = location.upper()
    for state in STATE_CODES:
        if state in upper:
            return state
    return None


def skill_level_value(level: Optional[str]) -> int:
    return SKILL_LEVEL_VALUES.get(level, EXPERT_LEVEL_VALUE)


def map_level_to_string(avg_level: float) -> str:
    if avg_level < 1.5:
        return "beginner"
    if avg_level < 2.5:
        return "intermediate"
    if avg_level < 3.5:
        return "advanced"
    return "expert"


def average(values: Iterable[float]) -> float:
    values = list(values)
    if not values:
        return 0
    return sum(values) / len(values)


def event_date(timestamp: Optional[datetime], now: Optional[datetime] = None) -> date:
    """Calendar date of the event; rows with no source timestamp land today"""
    return (timestamp or now or datetime.utcnow()).date()


def month_year(moment: Optional[datetime] = None) -> str:
    moment = moment or datetime.utcnow()
    return f"{moment.year}-{moment.month:02d}"


def milestone_counts(roadmap: dict) -> tuple:
    """(total, completed) milestones of a roadmap progress document"""
    stages = (roadmap.get("roadmapData") or {}).get("stages") or []
    total = sum(len(stage.get("milestones") or []) for stage in stages)
    completed = len(roadmap.get("completedMilestones") or [])
    return total, completed


def progress_percentage(completed: int, total: int) -> float:
    return (completed / total) * 100 if total > 0 else 0.0


def aptitude_average(mock_progress: dict) -> int:
    """Rounded mean aptitude percentage of a mock interview document, 0 if none"""
    tests = mock_progress.get("aptitudeTests") or []
    if not tests:
        return 0
    # Half-up, not banker's rounding
    return int(math.floor(average(test.get("percentage") or 0 for test in tests) + 0.5))
