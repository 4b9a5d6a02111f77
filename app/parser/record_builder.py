"""
Record Builder
==============
Converts tokenized data rows into DefectRecord objects.

Per-row pipeline:
    1. Skip rows with too little signal (≤ 1 populated cell, or an identified
       subject column that is empty for this row)
    2. Allocate a unique id: BUG-<n>, suffixed with a random token on collision
    3. Copy mapped, in-range, non-empty cells; fall back to field defaults
    4. Append in source order

Contract:
    - One bad row never aborts the batch: it is logged, recorded as a
      SkippedRow, and the loop continues.
    - Ids are unique within the returned list.
    - Every field of every record is populated.
"""
import logging
import secrets
from typing import Optional, Sequence

from app.core.constants import (
    CANONICAL_FIELDS,
    FIELD_DEFAULTS,
    ID_PREFIX,
    ID_SUFFIX_ALPHABET,
    ID_SUFFIX_LENGTH,
)
from app.models.defect_record import DefectRecord
from app.models.header_mapping import HeaderMapping
from app.models.parse_report import SkippedRow
from app.parser.errors import RowError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Id Allocation
# ---------------------------------------------------------------------------
def _random_suffix(length: int = ID_SUFFIX_LENGTH) -> str:
    return "".join(secrets.choice(ID_SUFFIX_ALPHABET) for _ in range(length))


class IdAllocator:
    """Hands out BUG-<n> ids, disambiguating collisions within one batch."""

    def __init__(self, prefix: str = ID_PREFIX) -> None:
        self.prefix = prefix
        self._used: set[str] = set()

    def __contains__(self, defect_id: str) -> bool:
        return defect_id in self._used

    def allocate(self, position: int) -> str:
        base = f"{self.prefix}-{position}"
        defect_id = base
        while defect_id in self._used:
            defect_id = f"{base}-{_random_suffix()}"
        if defect_id != base:
            logger.debug("Id %s already taken, using %s", base, defect_id)
        self._used.add(defect_id)
        return defect_id


# ---------------------------------------------------------------------------
# Row Checks
# ---------------------------------------------------------------------------
def _populated_count(cells: Sequence[str]) -> int:
    return sum(1 for c in cells if c and c.strip())


def _check_row(cells: Sequence[str], mapping: HeaderMapping, row_number: int) -> None:
    """Raise RowError if the row lacks the minimal signal for a record."""
    if _populated_count(cells) <= 1:
        raise RowError(row_number, "insufficient data: one or fewer populated cells")
    if mapping.has("subject") and not mapping.cell(cells, "subject"):
        raise RowError(row_number, "insufficient data: subject is empty")


def build_record(defect_id: str, cells: Sequence[str], mapping: HeaderMapping) -> DefectRecord:
    """Create one DefectRecord from a row, applying per-field defaults."""
    values = {}
    for field_name in CANONICAL_FIELDS:
        value = mapping.cell(cells, field_name)
        values[field_name] = value if value else FIELD_DEFAULTS[field_name]
    return DefectRecord(id=defect_id, **values)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def build_records(
    rows: Sequence[Sequence[str]],
    mapping: HeaderMapping,
    row_numbers: Optional[Sequence[int]] = None,
) -> tuple[list[DefectRecord], list[SkippedRow]]:
    """
    Build the DefectRecord collection for a batch of tokenized rows.

    Parameters
    ----------
    rows : Sequence[Sequence[str]]
        Data rows (header excluded), each already tokenized.
    mapping : HeaderMapping
        Column index per canonical field.
    row_numbers : Sequence[int] | None
        Source numbering per row. Defaults to the 1-based position.
        Supplied numbering may repeat; ids stay unique regardless.

    Returns
    -------
    tuple[list[DefectRecord], list[SkippedRow]]
        Records in source order, and diagnostics for every dropped row.
    """
    if row_numbers is not None and len(row_numbers) != len(rows):
        raise ValueError("row_numbers must have one entry per row")

    allocator = IdAllocator()
    records: list[DefectRecord] = []
    skipped: list[SkippedRow] = []

    for i, cells in enumerate(rows):
        row_number = row_numbers[i] if row_numbers is not None else i + 1
        try:
            _check_row(cells, mapping, row_number)
            defect_id = allocator.allocate(row_number)
            records.append(build_record(defect_id, cells, mapping))
        except RowError as e:
            logger.warning("Skipping row %d - %s", row_number, e.message)
            skipped.append(SkippedRow(row_number=row_number, reason=e.message))
        except Exception as e:
            logger.warning("Error processing row %d: %s", row_number, e, exc_info=True)
            skipped.append(SkippedRow(row_number=row_number, reason=f"row error: {e}"))

    logger.info("Built %d record(s), skipped %d row(s)", len(records), len(skipped))
    return records, skipped
