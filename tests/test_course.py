"""
Tests for course name normalization and the par table.
"""

import json

import pytest

from scorebot.config import COURSE_PARS
from scorebot.scoring.course import ParTable, load_par_table, normalize_course_name


class TestNormalizeCourseName:
    """Tests for normalize_course_name."""

    def test_strips_year_suffix(self):
        assert normalize_course_name("Charlotte National '25") == "Charlotte National"

    def test_no_apostrophe_unchanged(self):
        assert normalize_course_name("No Apostrophe") == "No Apostrophe"

    def test_leading_apostrophe_kept(self):
        assert normalize_course_name("'LeadingOnly") == "'LeadingOnly"

    def test_empty_string(self):
        assert normalize_course_name("") == ""

    def test_trims_whitespace(self):
        assert normalize_course_name("  Pine Valley  ") == "Pine Valley"

    def test_uses_last_apostrophe(self):
        assert normalize_course_name("O'Brien Park '24") == "O'Brien Park"

    def test_idempotent_for_single_marker(self):
        once = normalize_course_name("Charlotte National '25")
        assert normalize_course_name(once) == once


class TestParTable:
    """Tests for ParTable lookups and validation."""

    def test_lookup_known_course(self):
        table = ParTable({"Test Course": [4, 3, 5]})
        assert table.lookup("Test Course") == (4, 3, 5)

    def test_lookup_unknown_course_returns_none(self):
        table = ParTable({"Test Course": [4, 3, 5]})
        assert table.lookup("Elsewhere") is None

    def test_lookup_is_case_sensitive(self):
        table = ParTable({"Test Course": [4]})
        assert table.lookup("test course") is None

    def test_empty_table(self):
        table = ParTable()
        assert len(table) == 0
        assert table.lookup("Anything") is None

    def test_contains(self):
        table = ParTable({"Test Course": [4]})
        assert "Test Course" in table
        assert "Other" not in table

    def test_rejects_zero_par(self):
        with pytest.raises(ValueError):
            ParTable({"Bad": [4, 0, 3]})

    def test_rejects_non_integer_par(self):
        with pytest.raises(ValueError):
            ParTable({"Bad": [4, "3"]})

    def test_rejects_string_sequence(self):
        with pytest.raises(ValueError):
            ParTable({"Bad": "434"})

    def test_source_mapping_changes_do_not_leak(self):
        source = {"Test Course": [4, 3]}
        table = ParTable(source)
        source["Test Course"].append(5)
        source["New"] = [3]
        assert table.lookup("Test Course") == (4, 3)
        assert table.lookup("New") is None


class TestLoadParTable:
    """Tests for load_par_table."""

    def test_defaults_from_config(self, monkeypatch):
        monkeypatch.delenv("COURSE_PARS_FILE", raising=False)
        table = load_par_table()
        for course, pars in COURSE_PARS.items():
            assert table.lookup(course) == tuple(pars)

    def test_charlotte_national_pars(self, monkeypatch):
        monkeypatch.delenv("COURSE_PARS_FILE", raising=False)
        table = load_par_table()
        assert table.lookup("Charlotte National") == (4, 3, 5, 4, 4, 3, 5, 4, 4)

    def test_file_adds_courses(self, tmp_path):
        path = tmp_path / "pars.json"
        path.write_text(json.dumps({"Riverside": [3, 3, 4]}), encoding="utf-8")

        table = load_par_table(path)

        assert table.lookup("Riverside") == (3, 3, 4)
        assert table.lookup("Charlotte National") is not None

    def test_file_from_env(self, tmp_path, monkeypatch):
        path = tmp_path / "pars.json"
        path.write_text(json.dumps({"Lakeside": [5, 4]}), encoding="utf-8")
        monkeypatch.setenv("COURSE_PARS_FILE", str(path))

        table = load_par_table()

        assert table.lookup("Lakeside") == (5, 4)

    def test_file_must_be_object(self, tmp_path):
        path = tmp_path / "pars.json"
        path.write_text(json.dumps([4, 3]), encoding="utf-8")

        with pytest.raises(ValueError):
            load_par_table(path)
