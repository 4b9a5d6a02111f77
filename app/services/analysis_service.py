"""
Analysis Service
================
Chooses between remote-model analysis and local heuristics.

Decision:
    1. No provider configured → heuristics
    2. Remote call fails, or its reply has no usable JSON → heuristics
    3. Otherwise → remote results, gaps filled locally

The parser never depends on this module; it only consumes DefectRecords.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from app.llm.client import LLMClient, ProviderConfig, extract_json_object, get_provider, map_response_to_results
from app.llm.prompts import SYSTEM_PROMPT, build_defect_digest
from app.models.analysis_results import AnalysisResults
from app.models.defect_record import DefectRecord
from app.services.heuristic_analyzer import analyze_defects_locally

logger = logging.getLogger(__name__)

PROVIDER_HEURISTIC = "heuristic"


@dataclass
class AnalysisOutcome:
    """Analysis plus which engine produced it."""
    results: AnalysisResults
    provider: str
    fallback_reason: str = ""


class AnalysisService:
    """
    Runs defect analysis with automatic fallback to local heuristics.

    Usage:
        service = AnalysisService()
        outcome = await service.analyze(records)
        await service.close()
    """

    def __init__(
        self,
        client: Optional[LLMClient] = None,
        provider: Optional[ProviderConfig] = None,
    ) -> None:
        self.client = client or LLMClient()
        self.provider = provider if provider is not None else get_provider()

    async def close(self) -> None:
        await self.client.close()

    def _fallback(self, defects: Sequence[DefectRecord], reason: str) -> AnalysisOutcome:
        if reason:
            logger.warning("Remote analysis unavailable (%s); using heuristics", reason)
        return AnalysisOutcome(
            results=analyze_defects_locally(defects),
            provider=PROVIDER_HEURISTIC,
            fallback_reason=reason,
        )

    async def analyze(self, defects: Sequence[DefectRecord]) -> AnalysisOutcome:
        """
        Analyze a defect set.

        Parameters
        ----------
        defects : Sequence[DefectRecord]
            Parsed records, in source order.

        Returns
        -------
        AnalysisOutcome
            Results and the provider name ("heuristic" when local).
        """
        if self.provider is None:
            logger.info("No remote analysis key configured. Using heuristic analysis.")
            return self._fallback(defects, "")

        digest = build_defect_digest(defects)
        response = await self.client.call(digest, SYSTEM_PROMPT, self.provider)
        if not response.success:
            return self._fallback(defects, response.error)

        try:
            data = extract_json_object(response.content)
            results = map_response_to_results(data, defects)
        except ValueError as e:
            return self._fallback(defects, str(e))

        logger.info("Remote analysis via %s completed for %d defect(s)", self.provider.name, len(defects))
        return AnalysisOutcome(results=results, provider=self.provider.name)
