"""
Defect Parser
=============
Public entry point of the ingestion engine: routes a defect log to the CSV or
label-block path and enforces the failure taxonomy.

Pipeline (CSV):
    1. Split text into logical rows (quoted newlines preserved)
    2. Tokenize the header row and every data row
    3. Map headers onto canonical fields (subject required)
    4. Build records with defaults, unique ids and per-row isolation

Pipeline (plain text):
    1. Split into label blocks
    2. Scan each block for "Label: value" lines

States:
    AWAITING_INPUT → SPLITTING → TOKENIZING | LABEL_SCANNING
                   → MAPPING (CSV only) → BUILDING → DONE
    FAILED is reachable from SPLITTING (empty file) and MAPPING (no subject).
    BUILDING never fails as a whole; an empty outcome is EmptyResultError.

Contract:
    - DETERMINISTIC: same text → same records (ids included, unless a true
      id collision forces a random suffix).
    - Synchronous, runs to completion; no shared state between calls.
"""
import enum
import logging
from pathlib import Path
from typing import Optional, Union

from app.core.config import CSV_DELIMITER, CSV_QUOTE_CHAR
from app.core.constants import SOURCE_CSV, SOURCE_TEXT
from app.models.parse_report import ParseReport
from app.parser.errors import (
    EmptyFileError,
    EmptyResultError,
    FileReadError,
    SchemaError,
    UnsupportedFileTypeError,
)
from app.parser.header_mapper import map_headers
from app.parser.label_block_parser import parse_label_blocks, split_blocks
from app.parser.record_builder import build_records
from app.parser.row_splitter import split_rows
from app.parser.tokenizer import tokenize_row

logger = logging.getLogger(__name__)


class ParseStage(str, enum.Enum):
    AWAITING_INPUT = "awaiting_input"
    SPLITTING = "splitting"
    TOKENIZING = "tokenizing"
    LABEL_SCANNING = "label_scanning"
    MAPPING = "mapping"
    BUILDING = "building"
    DONE = "done"
    FAILED = "failed"


def _enter(stage: ParseStage) -> None:
    logger.debug("Parse stage → %s", stage.value)


# ---------------------------------------------------------------------------
# Format Detection / Decoding
# ---------------------------------------------------------------------------
def detect_format(filename: str, content_type: Optional[str] = None) -> str:
    """
    Decide which ingestion path a file takes.

    ``.csv`` → CSV path. ``.txt`` or MIME ``text/plain`` → label-block path.
    Anything else is rejected.
    """
    name = (filename or "").lower()
    if name.endswith(".csv"):
        return SOURCE_CSV
    mime = (content_type or "").split(";")[0].strip().lower()
    if name.endswith(".txt") or mime == "text/plain":
        return SOURCE_TEXT
    raise UnsupportedFileTypeError("Invalid file type. Please upload a .txt or .csv file.")


def decode_content(data: bytes) -> str:
    """
    Decode uploaded bytes as UTF-8, dropping a leading BOM.

    Bytes that are not valid UTF-8 (e.g. a cp1252 export) become U+FFFD
    instead of failing the whole file.
    """
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        logger.warning("File is not valid UTF-8 (%s); undecodable bytes replaced with U+FFFD", e.reason)
        return data.decode("utf-8-sig", errors="replace")


# ---------------------------------------------------------------------------
# CSV Path
# ---------------------------------------------------------------------------
def parse_csv_text(
    text: str,
    delimiter: str = CSV_DELIMITER,
    quote_char: str = CSV_QUOTE_CHAR,
) -> ParseReport:
    """
    Parse a delimited defect log into a ParseReport.

    Raises
    ------
    EmptyFileError
        No rows, or a header row with no data rows.
    SchemaError
        No header column matches the subject/title synonyms.
    EmptyResultError
        Every data row was skipped.
    """
    _enter(ParseStage.SPLITTING)
    rows = split_rows(text, quote_char=quote_char)
    logger.info("Total rows detected: %d", len(rows))

    if not rows:
        _enter(ParseStage.FAILED)
        raise EmptyFileError("CSV file appears to be empty")
    if len(rows) == 1:
        _enter(ParseStage.FAILED)
        raise EmptyFileError("CSV file contains a header row but no data rows")

    _enter(ParseStage.TOKENIZING)
    headers = tokenize_row(rows[0], delimiter, quote_char)
    data_rows = [tokenize_row(row, delimiter, quote_char) for row in rows[1:]]
    logger.info("CSV headers detected: %s", headers)

    _enter(ParseStage.MAPPING)
    mapping = map_headers(headers)
    if not mapping.has("subject"):
        logger.warning("Could not find subject/title field in CSV headers")
        _enter(ParseStage.FAILED)
        raise SchemaError(
            "Could not identify required fields in CSV headers. "
            "Please ensure your CSV includes at least a subject/title column."
        )

    _enter(ParseStage.BUILDING)
    records, skipped = build_records(data_rows, mapping)

    if not records:
        _enter(ParseStage.FAILED)
        raise EmptyResultError("No defect data could be extracted from the file")

    _enter(ParseStage.DONE)
    logger.info("Defects parsed successfully: %d", len(records))
    return ParseReport(
        source_format=SOURCE_CSV,
        records=records,
        skipped_rows=skipped,
        total_rows=len(data_rows),
        header_mapping=mapping.as_dict(),
    )


# ---------------------------------------------------------------------------
# Plain-Text Path
# ---------------------------------------------------------------------------
def parse_label_text(text: str) -> ParseReport:
    """
    Parse label-block text into a ParseReport.

    Raises
    ------
    EmptyFileError
        Text is empty or contains no non-blank block.
    EmptyResultError
        No record could be built.
    """
    _enter(ParseStage.SPLITTING)
    if not text or not text.strip() or not split_blocks(text):
        _enter(ParseStage.FAILED)
        raise EmptyFileError("Text file appears to be empty")

    _enter(ParseStage.LABEL_SCANNING)
    records = parse_label_blocks(text)

    _enter(ParseStage.BUILDING)
    if not records:
        _enter(ParseStage.FAILED)
        raise EmptyResultError("No defect data could be extracted from the file")

    _enter(ParseStage.DONE)
    logger.info("Defects parsed successfully: %d", len(records))
    return ParseReport(source_format=SOURCE_TEXT, records=records, total_rows=len(records))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def parse_defect_file(
    filename: str,
    content: Union[bytes, str],
    content_type: Optional[str] = None,
) -> ParseReport:
    """
    Parse an uploaded defect log, choosing the path from its name / MIME type.

    Parameters
    ----------
    filename : str
        Original file name; ``.csv`` selects the CSV path.
    content : bytes | str
        Raw file content. Bytes are decoded as UTF-8.
    content_type : str | None
        MIME type reported by the client, if any.

    Returns
    -------
    ParseReport
        Records in source order plus diagnostics.
    """
    _enter(ParseStage.AWAITING_INPUT)
    source_format = detect_format(filename, content_type)
    text = decode_content(content) if isinstance(content, bytes) else content
    logger.info("Processing file: %s (%s, %d chars)", filename, source_format, len(text))

    if source_format == SOURCE_CSV:
        return parse_csv_text(text)
    return parse_label_text(text)


def load_defect_file(path: Union[str, Path]) -> ParseReport:
    """Read a defect log from disk and parse it."""
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise FileReadError(f"Could not read file {path}: {e}") from e
    return parse_defect_file(path.name, data)
