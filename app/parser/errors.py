"""
Parser Errors
=============
Typed failures raised by the ingestion engine.

Taxonomy:
    EmptyFileError           — no rows, or a header with no data rows
    SchemaError              — CSV header has no subject/title column
    RowError                 — one data row unusable; never escapes the record builder
    EmptyResultError         — parse finished but no record survived row filtering
    FileReadError            — underlying bytes / file could not be read
    UnsupportedFileTypeError — upload is neither .csv nor plain text

Every error carries a ``kind`` tag and a human-readable message that the API
surfaces verbatim.
"""


class DefectParseError(Exception):
    """Base class for all ingestion failures."""
    kind = "parse_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class EmptyFileError(DefectParseError):
    kind = "empty_file"


class SchemaError(DefectParseError):
    kind = "schema"


class RowError(DefectParseError):
    kind = "row"

    def __init__(self, row_number: int, message: str) -> None:
        super().__init__(message)
        self.row_number = row_number


class EmptyResultError(DefectParseError):
    kind = "empty_result"


class FileReadError(DefectParseError):
    kind = "io"


class UnsupportedFileTypeError(DefectParseError):
    kind = "unsupported_type"
