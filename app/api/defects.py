"""
GET  /api/defects         — current defect set (optionally first N)
POST /api/defects/sample  — load the demonstration defect set
"""
from typing import List, Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.data.sample_defects import SAMPLE_DEFECTS, SAMPLE_SOURCE_NAME
from app.models.defect_record import DefectRecord
from app.state.defect_session import get_session

router = APIRouter(prefix="/api", tags=["Defects"])


class DefectListResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    source_name: str
    total: int
    defects: List[DefectRecord]


@router.get("/defects", response_model=DefectListResponse)
async def list_defects(limit: Optional[int] = Query(default=None, ge=0)):
    session = get_session()
    return DefectListResponse(
        source_name=session.source_name,
        total=len(session.defects),
        defects=session.first(limit),
    )


@router.post("/defects/sample", response_model=DefectListResponse)
async def load_sample_defects():
    session = get_session()
    session.replace_defects(SAMPLE_DEFECTS, SAMPLE_SOURCE_NAME)
    return DefectListResponse(
        source_name=session.source_name,
        total=len(session.defects),
        defects=session.first(),
    )
