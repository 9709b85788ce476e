"""Unit tests for reference data lookups."""

import json

import pytest

from billing_records.repositories.reference_data import DEFAULT_PROJECTS, ReferenceData


class TestDefaults:
    """Test the built-in sample projects."""

    def test_default_projects(self):
        ref = ReferenceData.default()

        assert [p.id for p in ref.projects] == ["proj1", "proj2", "proj3", "proj4"]
        assert ref.users == []

    def test_sample_settings(self):
        ref = ReferenceData.default()

        assert str(ref.get_project("proj2").rate_per_hour) == "90"
        assert ref.get_project("proj4").count_metric_label == "Items Reviewed"


class TestLookups:
    """Test identifier resolution."""

    def test_find_user(self, reference_data):
        assert reference_data.find_user("EMPLOYEE2").id == "u2"
        assert reference_data.find_user("john doe").id == "u1"
        assert reference_data.find_user("nobody") is None

    def test_find_project(self, reference_data):
        assert reference_data.find_project("content moderation x").id == "proj4"
        assert reference_data.find_project("proj999") is None

    def test_get_by_id_is_exact(self, reference_data):
        """Test that get_* only resolve ids."""
        assert reference_data.get_user("u1").username == "employee1"
        assert reference_data.get_user("employee1") is None
        assert reference_data.get_project("Website Redesign") is None

    def test_user_display_name(self, reference_data):
        assert reference_data.user_display_name("u2") == "Jane Smith"
        assert reference_data.user_display_name("u9") == "Unknown User"


class TestFromFile:
    """Test loading reference data from JSON."""

    def test_users_and_projects(self, tmp_path):
        path = tmp_path / "reference.json"
        path.write_text(
            json.dumps(
                {
                    "users": [
                        {"id": "u7", "username": "sam", "first_name": "Sam", "last_name": "Lee"}
                    ],
                    "projects": [
                        {"id": "p1", "name": "Audit", "billing_type": "hourly", "rate_per_hour": 120}
                    ],
                }
            ),
            encoding="utf-8",
        )

        ref = ReferenceData.from_file(path)

        assert ref.find_user("sam lee").id == "u7"
        assert [p.id for p in ref.projects] == ["p1"]

    def test_projects_default_when_absent(self, tmp_path):
        path = tmp_path / "reference.json"
        path.write_text(json.dumps({"users": []}), encoding="utf-8")

        assert len(ReferenceData.from_file(path).projects) == len(DEFAULT_PROJECTS)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "reference.json"
        path.write_text("[", encoding="utf-8")

        with pytest.raises(ValueError, match="not valid JSON"):
            ReferenceData.from_file(path)

    def test_invalid_entry(self, tmp_path):
        path = tmp_path / "reference.json"
        path.write_text(json.dumps({"projects": [{"id": "p1"}]}), encoding="utf-8")

        with pytest.raises(ValueError, match="Invalid reference data"):
            ReferenceData.from_file(path)
