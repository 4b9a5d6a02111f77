"""
Header Mapping
==============
Per-file lookup from canonical field name to source column index.
Built once from the header row, read by every data row.
"""
from dataclasses import dataclass, fields
from typing import Sequence

NOT_FOUND = -1


@dataclass(frozen=True)
class HeaderMapping:
    """Zero-based column index per canonical field, or NOT_FOUND (-1)."""
    subject: int = NOT_FOUND
    description: int = NOT_FOUND
    steps_to_reproduce: int = NOT_FOUND
    actual_result: int = NOT_FOUND
    expected_result: int = NOT_FOUND
    feature_tag: int = NOT_FOUND
    bug_origin: int = NOT_FOUND
    test_case_id: int = NOT_FOUND

    def index_of(self, field_name: str) -> int:
        return getattr(self, field_name)

    def has(self, field_name: str) -> bool:
        return self.index_of(field_name) != NOT_FOUND

    def cell(self, cells: Sequence[str], field_name: str) -> str:
        """Return the trimmed cell mapped to ``field_name``, or "" if unmapped / out of range."""
        idx = self.index_of(field_name)
        if 0 <= idx < len(cells):
            return (cells[idx] or "").strip()
        return ""

    def as_dict(self) -> dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
