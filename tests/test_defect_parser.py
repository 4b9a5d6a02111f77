"""
Unit Tests — Defect Parser (public entry point)
===============================================
End-to-end CSV and plain-text ingestion, format routing, failure taxonomy
and report-level properties.
"""
import pytest

from app.parser.defect_parser import (
    decode_content,
    detect_format,
    load_defect_file,
    parse_csv_text,
    parse_defect_file,
    parse_label_text,
)
from app.parser.errors import (
    DefectParseError,
    EmptyFileError,
    EmptyResultError,
    FileReadError,
    SchemaError,
    UnsupportedFileTypeError,
)


SCENARIO_CSV = (
    '"Bug Title","Detail","How To Repro","Observed","Expected","Area","Found In","Related TC"\n'
    '"Login crash","App crashes on login","Open app, login","Crash","No crash","Auth","Prod","TC-9"\n'
)


def _make_csv(*rows: str, header: str = "Title,Description,Feature") -> str:
    return "\n".join((header,) + rows) + "\n"


# ===========================================================================
# 1. CSV happy path
# ===========================================================================
class TestCsvParsing:

    def test_every_column_mapped_from_synonyms(self):
        report = parse_csv_text(SCENARIO_CSV)
        assert report.source_format == "csv"
        assert len(report.records) == 1

        rec = report.records[0]
        assert rec.id == "BUG-1"
        assert rec.subject == "Login crash"
        assert rec.description == "App crashes on login"
        assert rec.steps_to_reproduce == "Open app, login"
        assert rec.actual_result == "Crash"
        assert rec.expected_result == "No crash"
        assert rec.feature_tag == "Auth"
        assert rec.bug_origin == "Prod"
        assert rec.test_case_id == "TC-9"

    def test_header_mapping_reported(self):
        report = parse_csv_text(SCENARIO_CSV)
        assert report.header_mapping["subject"] == 0
        assert report.header_mapping["test_case_id"] == 7

    def test_quoted_multiline_description(self):
        text = 'Title,Description\n"Crash","Line one\nLine two"\n"Hang","Freeze"\n'
        report = parse_csv_text(text)
        assert [r.subject for r in report.records] == ["Crash", "Hang"]
        assert report.records[0].description == "Line one\nLine two"

    def test_crlf_file(self):
        text = "Title,Description\r\nA,a\r\nB,b\r\n"
        report = parse_csv_text(text)
        assert [r.id for r in report.records] == ["BUG-1", "BUG-2"]

    def test_single_cell_row_skipped_without_aborting(self):
        text = _make_csv("A,a,x", "lonely", "B,b,y")
        report = parse_csv_text(text)
        assert [r.id for r in report.records] == ["BUG-1", "BUG-3"]
        assert report.skipped_rows[0].row_number == 2

    def test_record_count_matches_rows_minus_skipped(self):
        text = _make_csv("A,a,x", ",desc,", "C,c,z", "only,,", "E,e,")
        report = parse_csv_text(text)
        assert report.total_rows == 5
        assert len(report.records) == report.total_rows - len(report.skipped_rows)
        assert len(report.records) == 3

    def test_all_fields_populated(self):
        report = parse_csv_text(_make_csv("A,a,", "B,b,"))
        for rec in report.records:
            assert rec.id
            assert all(isinstance(v, str) for v in rec.model_dump().values())
        assert report.records[0].feature_tag == "Untagged"

    def test_repeated_parse_is_identical(self):
        first = parse_csv_text(SCENARIO_CSV)
        second = parse_csv_text(SCENARIO_CSV)
        assert first.model_dump() == second.model_dump()

    def test_custom_delimiter(self):
        report = parse_csv_text("Title;Description\nA;B\n", delimiter=";")
        assert report.records[0].description == "B"


# ===========================================================================
# 2. CSV failures
# ===========================================================================
class TestCsvFailures:

    def test_header_only_is_empty_file(self):
        with pytest.raises(EmptyFileError):
            parse_csv_text("Subject,Description\n")

    @pytest.mark.parametrize("text", ["", "\n\n", "  \r\n  "])
    def test_blank_input_is_empty_file(self, text):
        with pytest.raises(EmptyFileError):
            parse_csv_text(text)

    def test_missing_subject_column_is_schema_error(self):
        with pytest.raises(SchemaError) as exc_info:
            parse_csv_text("Description,Module\nfoo,bar\n")
        assert "subject/title" in exc_info.value.message

    def test_all_rows_skipped_is_empty_result(self):
        with pytest.raises(EmptyResultError):
            parse_csv_text("Title,Description\n,desc\nonly,\n")

    def test_errors_share_base_class(self):
        for cls in (EmptyFileError, SchemaError, EmptyResultError, FileReadError, UnsupportedFileTypeError):
            assert issubclass(cls, DefectParseError)


# ===========================================================================
# 3. Plain-text path
# ===========================================================================
class TestTextParsing:

    def test_label_blocks(self):
        report = parse_label_text("Subject: A\nFeature: X\n-----\nSubject: B\n")
        assert report.source_format == "text"
        assert [r.subject for r in report.records] == ["A", "B"]
        assert report.header_mapping is None

    @pytest.mark.parametrize("text", ["", "   ", "-----\n\n"])
    def test_empty_text_file(self, text):
        with pytest.raises(EmptyFileError):
            parse_label_text(text)


# ===========================================================================
# 4. Routing and decoding
# ===========================================================================
class TestRouting:

    @pytest.mark.parametrize("filename,content_type,expected", [
        ("log.csv", None, "csv"),
        ("LOG.CSV", "text/csv", "csv"),
        ("notes.txt", None, "text"),
        ("export.log", "text/plain; charset=utf-8", "text"),
    ])
    def test_detect_format(self, filename, content_type, expected):
        assert detect_format(filename, content_type) == expected

    def test_unsupported_type(self):
        with pytest.raises(UnsupportedFileTypeError):
            detect_format("image.png", "image/png")

    def test_parse_defect_file_bytes_csv(self):
        report = parse_defect_file("defects.csv", SCENARIO_CSV.encode("utf-8"))
        assert report.source_format == "csv"
        assert report.records[0].subject == "Login crash"

    def test_parse_defect_file_text(self):
        report = parse_defect_file("defects.txt", "Subject: A\nFeature: X")
        assert report.source_format == "text"

    def test_bom_stripped(self):
        data = "\ufeffTitle,Description\nA,B\n".encode("utf-8")
        report = parse_defect_file("bom.csv", data)
        assert report.header_mapping["subject"] == 0

    def test_non_utf8_bytes_replaced_not_rejected(self):
        assert decode_content(b"Title\n\xff ok") == "Title\n\ufffd ok"

    def test_cp1252_csv_still_yields_records(self):
        data = "Title,Description\nCafé crash,boom\n".encode("cp1252")
        report = parse_defect_file("defects.csv", data)
        assert len(report.records) == 1
        assert report.records[0].subject == "Caf\ufffd crash"
        assert report.records[0].description == "boom"


# ===========================================================================
# 5. Loading from disk
# ===========================================================================
class TestLoadDefectFile:

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileReadError):
            load_defect_file(tmp_path / "missing.csv")

    def test_reads_and_parses(self, tmp_path):
        path = tmp_path / "defects.csv"
        path.write_text(SCENARIO_CSV, encoding="utf-8")
        report = load_defect_file(path)
        assert report.records[0].feature_tag == "Auth"
