"""
Unit Tests — Header Mapper
==========================
Synonym matching, first-match-wins ordering, shared columns and missing fields.
"""
from app.core.constants import CANONICAL_FIELDS
from app.models.header_mapping import HeaderMapping, NOT_FOUND
from app.parser.header_mapper import HEADER_SYNONYMS, find_header_index, map_headers


SCENARIO_HEADERS = [
    "Bug Title", "Detail", "How To Repro", "Observed",
    "Expected", "Area", "Found In", "Related TC",
]


class TestSynonymTable:

    def test_covers_every_canonical_field(self):
        assert set(HEADER_SYNONYMS) == set(CANONICAL_FIELDS)

    def test_subject_synonyms(self):
        assert HEADER_SYNONYMS["subject"] == ("subject", "title", "summary", "issue", "bug")


class TestFindHeaderIndex:

    def test_case_insensitive_substring(self):
        assert find_header_index(["ID", "ISSUE TITLE"], ["title"]) == 1

    def test_first_matching_column_wins(self):
        assert find_header_index(["Summary", "Bug Subject"], ["subject", "summary"]) == 0

    def test_not_found(self):
        assert find_header_index(["a", "b"], ["x"]) == NOT_FOUND

    def test_empty_headers(self):
        assert find_header_index([], ["x"]) == NOT_FOUND


class TestMapHeaders:

    def test_scenario_headers_map_every_field(self):
        mapping = map_headers(SCENARIO_HEADERS)
        assert mapping.as_dict() == {
            "subject": 0,
            "description": 1,
            "steps_to_reproduce": 2,
            "actual_result": 3,
            "expected_result": 4,
            "feature_tag": 5,
            "bug_origin": 6,
            "test_case_id": 7,
        }

    def test_missing_optional_fields_are_not_found(self):
        mapping = map_headers(["Title"])
        assert mapping.subject == 0
        for field_name in CANONICAL_FIELDS:
            if field_name != "subject":
                assert mapping.index_of(field_name) == NOT_FOUND

    def test_no_subject_column(self):
        mapping = map_headers(["Description", "Module"])
        assert not mapping.has("subject")
        assert mapping.description == 0
        assert mapping.feature_tag == 1

    def test_same_column_may_serve_two_fields(self):
        # "Summary" is a synonym for both subject and description
        mapping = map_headers(["Summary", "Area"])
        assert mapping.subject == 0
        assert mapping.description == 0

    def test_returns_header_mapping(self):
        assert isinstance(map_headers(["Title"]), HeaderMapping)


class TestHeaderMappingCell:

    def test_cell_trims_value(self):
        mapping = HeaderMapping(subject=1)
        assert mapping.cell(["x", "  Crash  "], "subject") == "Crash"

    def test_cell_out_of_range(self):
        mapping = HeaderMapping(subject=5)
        assert mapping.cell(["x"], "subject") == ""

    def test_cell_unmapped(self):
        assert HeaderMapping().cell(["x"], "subject") == ""
