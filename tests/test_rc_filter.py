"""Unit tests for in-memory RC filtering and pagination."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.dirname(__file__))

from app.services.rc_filter import filter_records, paginate
from helpers import make_rc


def sample_records():
    return [
        make_rc("1", "KA01AA0001", owner_name="Rohit Kumar", state="KA", make="Maruti Swift", stolen=True),
        make_rc("2", "KA02AA0002", owner_name="Priya Singh", state="KA", make="Hyundai", suspicious=True),
        make_rc("3", "DL01AA0003", owner_name="Rohan Mehta", state="DL", make="SWIFT Dzire"),
        make_rc("4", "MH01AA0004", owner_name=None, state="MH", make=None, stolen=None, suspicious=None),
    ]


class TestFilterRecords:
    def test_no_criteria_returns_everything(self):
        records = sample_records()
        assert filter_records(records) == records

    def test_blank_string_criteria_ignored(self):
        assert len(filter_records(sample_records(), state="  ", make="", owner_name=" ")) == 4

    def test_stolen_true_exact_subset(self):
        result = filter_records(sample_records(), stolen=True)
        assert [rc.id for rc in result] == ["1"]

    def test_stolen_false_excludes_null_flag(self):
        result = filter_records(sample_records(), stolen=False)
        assert [rc.id for rc in result] == ["2", "3"]

    def test_suspicious_true(self):
        assert [rc.id for rc in filter_records(sample_records(), suspicious=True)] == ["2"]

    def test_make_and_state_case_insensitive(self):
        result = filter_records(sample_records(), make="swift", state="ka")
        assert [rc.id for rc in result] == ["1"]

    def test_make_matches_any_case(self):
        result = filter_records(sample_records(), make="sWiFt")
        assert [rc.id for rc in result] == ["1", "3"]

    def test_owner_name_substring(self):
        result = filter_records(sample_records(), owner_name="roh")
        assert [rc.id for rc in result] == ["1", "3"]

    def test_missing_field_fails_criterion(self):
        assert "4" not in [rc.id for rc in filter_records(sample_records(), make="a")]
        assert "4" not in [rc.id for rc in filter_records(sample_records(), owner_name="a")]


class TestPaginate:
    def test_last_partial_page(self):
        result = paginate(list(range(25)), page=2, size=10)
        assert result["items"] == [20, 21, 22, 23, 24]
        assert result["total"] == 25
        assert result["total_pages"] == 3
        assert result["page"] == 2
        assert result["size"] == 10

    def test_negative_page_behaves_as_first(self):
        result = paginate(list(range(25)), page=-1, size=10)
        assert result["page"] == 0
        assert result["items"] == list(range(10))

    def test_zero_size_uses_default(self):
        result = paginate(list(range(25)), page=0, size=0)
        assert result["size"] == 10
        assert len(result["items"]) == 10

    def test_defaults(self):
        result = paginate(list(range(3)))
        assert result["page"] == 0
        assert result["size"] == 10
        assert result["items"] == [0, 1, 2]
        assert result["total_pages"] == 1

    def test_page_past_end_is_empty(self):
        result = paginate(list(range(5)), page=4, size=2)
        assert result["items"] == []
        assert result["total_pages"] == 3

    def test_empty_list(self):
        result = paginate([], page=0, size=10)
        assert result["items"] == []
        assert result["total"] == 0
        assert result["total_pages"] == 0
