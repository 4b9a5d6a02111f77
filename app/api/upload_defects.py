"""
POST /api/defects/upload
========================
Accepts a .csv or plain-text defect log, parses it, and on success replaces
the session's current defect set.

Error Mapping:
    UnsupportedFileTypeError → 415
    upload larger than MAX_UPLOAD_BYTES → 413
    any other DefectParseError → 422 with {"error": kind, "message": text}

A failed upload leaves the previous defect set untouched.
"""
import logging
from typing import List, Literal

from fastapi import APIRouter, File, HTTPException, UploadFile
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.core.config import MAX_UPLOAD_BYTES
from app.models.defect_record import DefectRecord
from app.models.parse_report import SkippedRow
from app.parser.defect_parser import parse_defect_file
from app.parser.errors import DefectParseError, FileReadError, UnsupportedFileTypeError
from app.state.defect_session import get_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Defects"])


class UploadResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    filename: str
    source_format: Literal["csv", "text"]
    record_count: int
    skipped_rows: List[SkippedRow]
    defects: List[DefectRecord]


def _error_detail(err: DefectParseError) -> dict:
    return {"error": err.kind, "message": err.message}


def _too_large() -> HTTPException:
    return HTTPException(
        status_code=413,
        detail={"error": "too_large", "message": f"File exceeds {MAX_UPLOAD_BYTES} bytes"},
    )


@router.post("/defects/upload", response_model=UploadResponse)
async def upload_defects(file: UploadFile = File(...)):
    filename = file.filename or ""
    if file.size is not None and file.size > MAX_UPLOAD_BYTES:
        raise _too_large()

    # Never buffer more than one byte past the limit
    try:
        content = await file.read(MAX_UPLOAD_BYTES + 1)
    except OSError as e:
        logger.error("Failed to read upload %s: %s", filename, e)
        raise HTTPException(status_code=422, detail=_error_detail(FileReadError(str(e))))

    if len(content) > MAX_UPLOAD_BYTES:
        raise _too_large()

    try:
        report = parse_defect_file(filename, content, file.content_type)
    except UnsupportedFileTypeError as e:
        raise HTTPException(status_code=415, detail=_error_detail(e))
    except DefectParseError as e:
        logger.warning("Upload %s rejected (%s): %s", filename, e.kind, e.message)
        raise HTTPException(status_code=422, detail=_error_detail(e))

    get_session().replace_defects(report.records, filename)
    logger.info("Successfully processed %d defects from %s", len(report.records), filename)

    return UploadResponse(
        filename=filename,
        source_format=report.source_format,
        record_count=len(report.records),
        skipped_rows=report.skipped_rows,
        defects=report.records,
    )
