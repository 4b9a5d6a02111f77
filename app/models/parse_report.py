"""
Parse Report Model
==================
Result of a single parse call: the extracted records plus row-level diagnostics.
"""
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .defect_record import DefectRecord


class SkippedRow(BaseModel):
    """A data row dropped by the record builder, with the reason."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    row_number: int
    reason: str


class ParseReport(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    source_format: Literal["csv", "text"]
    records: list[DefectRecord] = Field(default_factory=list)
    skipped_rows: list[SkippedRow] = Field(default_factory=list)
    total_rows: int = 0
    header_mapping: Optional[dict[str, int]] = None
