"""
Header Mapper
=============
Maps an arbitrary CSV header row onto the canonical defect fields.

Matching Strategy:
    1. STATIC SYNONYM TABLE — field → ordered candidate substrings
    2. Case-insensitive substring test per header column
    3. Left-to-right over columns, first matching column wins
    4. Fields are resolved independently; one column may serve several fields

Only the subject field is structurally required; the caller decides what a
missing subject means.
"""
import logging
from typing import Sequence

from app.models.header_mapping import HeaderMapping, NOT_FOUND

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Synonym Table
# ---------------------------------------------------------------------------
HEADER_SYNONYMS: dict[str, tuple[str, ...]] = {
    "subject":            ("subject", "title", "summary", "issue", "bug"),
    "description":        ("description", "desc", "details", "detail", "summary"),
    "steps_to_reproduce": ("steps", "reproduce", "reproduction", "how to"),
    "actual_result":      ("actual", "result", "observed", "outcome"),
    "expected_result":    ("expected", "should", "desired"),
    "feature_tag":        ("feature", "module", "component", "area", "func"),
    "bug_origin":         ("origin", "environment", "env", "found in", "source"),
    "test_case_id":       ("test", "case", "tc", "testcase"),
}


def find_header_index(headers: Sequence[str], candidates: Sequence[str]) -> int:
    """Return the index of the first header containing any candidate, or -1."""
    lowered = [c.lower() for c in candidates]
    for idx, header in enumerate(headers):
        h = (header or "").lower()
        if any(name in h for name in lowered):
            return idx
    return NOT_FOUND


def map_headers(
    headers: Sequence[str],
    synonyms: dict[str, tuple[str, ...]] = HEADER_SYNONYMS,
) -> HeaderMapping:
    """
    Build a HeaderMapping for the given header fields.

    Parameters
    ----------
    headers : Sequence[str]
        Tokenized header row.
    synonyms : dict
        Field → candidate substrings. Defaults to HEADER_SYNONYMS.

    Returns
    -------
    HeaderMapping
        Column index per canonical field, NOT_FOUND where nothing matched.
    """
    indices = {field_name: find_header_index(headers, candidates)
               for field_name, candidates in synonyms.items()}
    mapping = HeaderMapping(**indices)
    logger.info("Header mapping: %s", mapping.as_dict())
    return mapping
