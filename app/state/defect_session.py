"""
Defect Session
In-memory holder of the current defect set and its last analysis.

Rules:
    - A new defect set replaces the previous one wholesale
    - Replacing the set invalidates the cached analysis
    - Failed uploads never reach this object, so prior state survives them
"""
import logging
from datetime import datetime, timezone
from typing import Optional, Sequence

from app.models.analysis_results import AnalysisResults
from app.models.defect_record import DefectRecord

logger = logging.getLogger(__name__)


class DefectSession:

    def __init__(self) -> None:
        self._reset()

    def _reset(self) -> None:
        self.defects: list[DefectRecord] = []
        self.source_name: str = ""
        self.loaded_at: Optional[datetime] = None
        self.analysis: Optional[AnalysisResults] = None
        self.analysis_provider: str = ""

    @property
    def has_defects(self) -> bool:
        return bool(self.defects)

    def replace_defects(self, defects: Sequence[DefectRecord], source_name: str) -> None:
        self.defects = list(defects)
        self.source_name = source_name
        self.loaded_at = datetime.now(timezone.utc)
        self.analysis = None
        self.analysis_provider = ""
        logger.info("Session now holds %d defect(s) from %s", len(self.defects), source_name)

    def first(self, limit: Optional[int] = None) -> list[DefectRecord]:
        """Defects in source order, optionally truncated to the first ``limit``."""
        if limit is None:
            return list(self.defects)
        return self.defects[:max(limit, 0)]

    def store_analysis(self, analysis: AnalysisResults, provider: str) -> None:
        self.analysis = analysis
        self.analysis_provider = provider

    def clear(self) -> None:
        self._reset()


# Process-wide session used by the API routers
session = DefectSession()


def get_session() -> DefectSession:
    return session
