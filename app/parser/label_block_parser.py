"""
Label-Block Parser
==================
Parses the plain-text defect format: free-text blocks of "Label: value" lines.

    Subject: Login fails
    Description: Crash on submit
    Feature: Auth
    -----
    Subject: Next bug
    ...

Blocks are separated by blank lines or by a line made only of three or more
dashes. Every non-empty block yields a record (no required fields here).
"""
import logging
import re
from typing import Optional

from app.core.constants import CANONICAL_FIELDS, FIELD_DEFAULTS, ID_PREFIX
from app.models.defect_record import DefectRecord

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Label Table
# ---------------------------------------------------------------------------
# Checked in order; the first field whose phrase appears in a line claims it.
LABEL_PHRASES: dict[str, tuple[str, ...]] = {
    "subject":            ("subject:", "title:"),
    "description":        ("description:",),
    "steps_to_reproduce": ("steps to reproduce:", "reproduction:"),
    "actual_result":      ("actual result:", "actual:"),
    "expected_result":    ("expected result:", "expected:"),
    "feature_tag":        ("feature:", "module:"),
    "bug_origin":         ("origin:", "environment:"),
    "test_case_id":       ("test case:", "test id:"),
}

_BLOCK_SEPARATOR = re.compile(r"\n[ \t]*\n|^[ \t]*-{3,}[ \t]*$", re.MULTILINE)


def split_blocks(text: str) -> list[str]:
    """Split text into trimmed, non-empty label blocks."""
    normalized = text.replace("\r\n", "\n")
    return [b.strip() for b in _BLOCK_SEPARATOR.split(normalized) if b.strip()]


def extract_value_after_label(line: str) -> str:
    """Everything after the first colon, trimmed. "" if the line has no colon."""
    _, sep, value = line.partition(":")
    return value.strip() if sep else ""


def match_label(line: str) -> Optional[str]:
    """Return the canonical field a line is labelled with, if any."""
    lowered = line.lower()
    for field_name, phrases in LABEL_PHRASES.items():
        if any(phrase in lowered for phrase in phrases):
            return field_name
    return None


def parse_block(block: str, index: int) -> DefectRecord:
    """Build the record for one block. ``index`` is 1-based."""
    found: dict[str, str] = {}
    for line in block.split("\n"):
        field_name = match_label(line)
        if field_name is None or field_name in found:
            continue
        found[field_name] = extract_value_after_label(line)

    values = {name: found.get(name) or FIELD_DEFAULTS[name] for name in CANONICAL_FIELDS}
    return DefectRecord(id=f"{ID_PREFIX}-{index}", **values)


def parse_label_blocks(text: str) -> list[DefectRecord]:
    """
    Parse label-block text into DefectRecords, one per block.

    Returns
    -------
    list[DefectRecord]
        Records in block order. Empty list for empty text.
    """
    if not text or not text.strip():
        return []

    blocks = split_blocks(text)
    records = [parse_block(block, idx) for idx, block in enumerate(blocks, start=1)]
    logger.info("Parsed %d label block(s)", len(records))
    return records
