"""
POST /api/analyze
=================
Analyzes the session's current defect set.

Uses the remote model when OPENAI_API_KEY is configured, otherwise (or on any
remote failure) the local heuristic analyzer. Returns 409 when no defects are
loaded.
"""
import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.models.analysis_results import AnalysisResults
from app.services.analysis_service import AnalysisService
from app.state.defect_session import get_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Analysis"])


class AnalysisResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    provider: str
    defect_count: int
    analysis: AnalysisResults


@router.post("/analyze", response_model=AnalysisResponse)
async def analyze_defects():
    session = get_session()
    if not session.has_defects:
        raise HTTPException(
            status_code=409,
            detail={"error": "no_defects", "message": "Upload a defect file before requesting analysis"},
        )

    service = AnalysisService()
    try:
        outcome = await service.analyze(session.defects)
    finally:
        await service.close()

    session.store_analysis(outcome.results, outcome.provider)
    return AnalysisResponse(
        provider=outcome.provider,
        defect_count=len(session.defects),
        analysis=outcome.results,
    )
