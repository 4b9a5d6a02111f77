"""
Constants
Centralised storage for canonical defect fields, their fallback values and id rules.
"""
# Canonical field order (attribute names on DefectRecord, excluding id)
CANONICAL_FIELDS = (
    "subject",
    "description",
    "steps_to_reproduce",
    "actual_result",
    "expected_result",
    "feature_tag",
    "bug_origin",
    "test_case_id",
)

FIELD_DEFAULTS: dict[str, str] = {
    "subject":            "Unknown",
    "description":        "",
    "steps_to_reproduce": "",
    "actual_result":      "",
    "expected_result":    "",
    "feature_tag":        "Untagged",
    "bug_origin":         "Unknown",
    "test_case_id":       "N/A",
}

ID_PREFIX = "BUG"
ID_SUFFIX_LENGTH = 3
ID_SUFFIX_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"

SOURCE_CSV = "csv"
SOURCE_TEXT = "text"
