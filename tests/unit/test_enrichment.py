"""
Unit tests for the enrichment rules
"""

import pytest
from datetime import date, datetime
from ingestion.transformers.enrichment import (
    categorize_skill,
    calculate_demand_score,
    extract_state,
    skill_level_value,
    map_level_to_string,
    average,
    event_date,
    month_year,
    milestone_counts,
    progress_percentage,
    aptitude_average,
)


class TestCategorizeSkill:
    """Test skill bucketing"""

    @pytest.mark.parametrize("skill,expected", [
        ("Python", "programming"),
        ("React", "web"),
        ("PostgreSQL", "data"),
        ("Kubernetes", "cloud"),
        ("Deep Learning", "ai"),
        ("Public Speaking", "other"),
    ])
    def test_buckets(self, skill, expected):
        assert categorize_skill(skill) == expected

    def test_long_form_cloud_names(self):
        assert categorize_skill("Amazon Web Services") == "cloud"
        assert categorize_skill("Microsoft Azure") == "cloud"

    def test_unaliased_names_keep_substring_buckets(self):
        # "google" contains "go"
        assert categorize_skill("Google Cloud") == "programming"
        assert categorize_skill("Node.js") == "other"
        assert categorize_skill("k8s") == "other"

    def test_first_bucket_wins(self):
        # "javascript" also contains "java"; both live in programming
        assert categorize_skill("JavaScript") == "programming"
        # "go" is a substring of "mongodb"
        assert categorize_skill("MongoDB") == "programming"

    def test_empty_name(self):
        assert categorize_skill("") == "other"
        assert categorize_skill(None) == "other"


class TestDemandScore:
    def test_capped_at_100(self):
        assert calculate_demand_score(30) == 100
        assert calculate_demand_score(20) == 100

    def test_linear_below_cap(self):
        assert calculate_demand_score(10) == 50
        assert calculate_demand_score(0) == 0


class TestExtractState:
    def test_finds_state_code(self):
        assert extract_state("Austin, TX") == "TX"
        assert extract_state("san francisco, ca") == "CA"

    def test_no_match(self):
        assert extract_state("Berlin") is None
        assert extract_state(None) is None
        assert extract_state("") is None

    def test_first_code_in_list_order(self):
        # CA is checked before NY
        assert extract_state("NY / CA remote") == "CA"


class TestLevels:
    def test_level_encoding(self):
        assert skill_level_value("beginner") == 1
        assert skill_level_value("intermediate") == 2
        assert skill_level_value("advanced") == 3
        assert skill_level_value("expert") == 4
        assert skill_level_value(None) == 4

    @pytest.mark.parametrize("avg,expected", [
        (1.0, "beginner"),
        (1.49, "beginner"),
        (1.5, "intermediate"),
        (2.49, "intermediate"),
        (2.5, "advanced"),
        (3.49, "advanced"),
        (3.5, "expert"),
        (4.0, "expert"),
    ])
    def test_map_level_to_string(self, avg, expected):
        assert map_level_to_string(avg) == expected


class TestHelpers:
    def test_average(self):
        assert average([1, 2, 3]) == 2
        assert average([]) == 0

    def test_event_date_falls_back_to_now(self):
        now = datetime(2024, 3, 5, 12, 0)
        assert event_date(datetime(2024, 1, 15, 23, 59), now) == date(2024, 1, 15)
        assert event_date(None, now) == date(2024, 3, 5)

    def test_month_year(self):
        assert month_year(datetime(2024, 1, 15)) == "2024-01"
        assert month_year(datetime(2023, 12, 1)) == "2023-12"

    def test_milestone_counts(self):
        roadmap = {
            "roadmapData": {"stages": [
                {"milestones": [1, 2, 3]},
                {"milestones": [4]},
                {},
            ]},
            "completedMilestones": ["a", "b"],
        }
        assert milestone_counts(roadmap) == (4, 2)
        assert milestone_counts({}) == (0, 0)

    def test_progress_percentage(self):
        assert progress_percentage(1, 4) == 25.0
        assert progress_percentage(3, 0) == 0.0

    def test_aptitude_average_rounds_half_up(self):
        assert aptitude_average({"aptitudeTests": [{"percentage": 70}, {"percentage": 81}]}) == 76
        assert aptitude_average({"aptitudeTests": [{"percentage": 62}, {"percentage": 65}]}) == 64
        assert aptitude_average({"aptitudeTests": []}) == 0
        assert aptitude_average({}) == 0
