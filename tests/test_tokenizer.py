"""
Unit Tests — Quoted-Field Tokenizer
===================================
Delimiters inside quotes, doubled-quote escaping, trimming, wrapping-quote
removal, and graceful handling of malformed rows.
"""
import pytest

from app.parser.tokenizer import strip_wrapping_quotes, tokenize_row


# ===========================================================================
# 1. Basic splitting
# ===========================================================================
class TestBasicSplitting:

    def test_plain_fields(self):
        assert tokenize_row("a,b,c") == ["a", "b", "c"]

    def test_fields_are_trimmed(self):
        assert tokenize_row("  a ,  b  ") == ["a", "b"]

    def test_empty_fields_kept(self):
        assert tokenize_row("a,,c") == ["a", "", "c"]

    def test_trailing_delimiter_yields_empty_last_field(self):
        assert tokenize_row("a,") == ["a", ""]

    @pytest.mark.parametrize("row", ["", "   ", "\t"])
    def test_empty_row_yields_empty_list(self, row):
        assert tokenize_row(row) == []

    def test_custom_delimiter(self):
        assert tokenize_row('a;"b;c"', delimiter=";") == ["a", "b;c"]

    def test_custom_quote_char(self):
        assert tokenize_row("'a,b',c", quote_char="'") == ["a,b", "c"]


# ===========================================================================
# 2. Quoting
# ===========================================================================
class TestQuoting:

    def test_comma_inside_quotes_is_literal(self):
        assert tokenize_row('"Open app, login",x') == ["Open app, login", "x"]

    def test_doubled_quote_becomes_single_quote(self):
        assert tokenize_row('"He said ""hi""",x') == ['He said "hi"', "x"]

    def test_empty_quoted_field(self):
        assert tokenize_row('a,"",c') == ["a", "", "c"]

    def test_embedded_newline_preserved(self):
        assert tokenize_row('"line1\nline2",x') == ["line1\nline2", "x"]

    def test_value_still_wrapped_is_unwrapped(self):
        # """quoted""" -> "quoted" after escaping, then the wrapping pair is stripped
        assert tokenize_row('"""quoted"""') == ["quoted"]

    def test_whitespace_inside_quotes_trimmed(self):
        assert tokenize_row('"  padded  ",b') == ["padded", "b"]

    def test_every_field_quoted(self):
        row = '"Login crash","App crashes on login","Open app, login","Crash"'
        assert tokenize_row(row) == ["Login crash", "App crashes on login", "Open app, login", "Crash"]


# ===========================================================================
# 3. Malformed input
# ===========================================================================
class TestMalformed:

    def test_unterminated_quote_flushes_last_field(self):
        assert tokenize_row('a,"abc,def') == ["a", "abc,def"]

    def test_lone_quote_does_not_raise(self):
        assert tokenize_row('"') == [""]

    def test_deterministic(self):
        row = '"x, y",""" z """,w'
        assert tokenize_row(row) == tokenize_row(row)


# ===========================================================================
# 4. strip_wrapping_quotes
# ===========================================================================
class TestStripWrappingQuotes:

    def test_strips_matched_pair(self):
        assert strip_wrapping_quotes('"abc"') == "abc"

    def test_leaves_unmatched(self):
        assert strip_wrapping_quotes('"abc') == '"abc'

    def test_single_quote_char_untouched(self):
        assert strip_wrapping_quotes('"') == '"'


# ===========================================================================
# 5. Quoting round-trip
# ===========================================================================
def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


class TestQuotingRoundTrip:

    @pytest.mark.parametrize("value", [
        "Open app, login",
        'Button labelled "Save"',
        'a, "b", c',
    ])
    def test_quoted_value_tokenizes_back(self, value):
        row = ",".join([_quote(value), "tail"])
        assert tokenize_row(row) == [value, "tail"]
