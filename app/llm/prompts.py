"""
LLM Prompts
===========
System prompt and defect digest for the remote analysis call.

Digest Rules:
    - Distributions (feature, origin) cover the WHOLE defect set
    - Only the first DIGEST_SAMPLE_SIZE defects are listed verbatim
    - Description truncated to 200 chars, steps to 100 chars
    - The response format is pinned to a single JSON object
"""
import logging
from typing import Sequence

from app.core.config import DIGEST_SAMPLE_SIZE
from app.models.defect_record import DefectRecord
from app.services.heuristic_analyzer import feature_distribution, origin_distribution

logger = logging.getLogger(__name__)

DESCRIPTION_LIMIT = 200
STEPS_LIMIT = 100


SYSTEM_PROMPT = (
    "You are an expert software quality analyst. Analyze defect data and "
    "provide insights in JSON format with the exact structure shown in the "
    "user prompt."
)

RESPONSE_FORMAT = (
    "Respond with ONE JSON object and nothing else:\n"
    "{\n"
    '  "rootCauses": [{"name": "<category>", "count": <int>}],\n'
    '  "reworkRate": <0-100>,\n'
    '  "bugBounceRate": <0-100>,\n'
    '  "badFixRate": <0-100>,\n'
    '  "recommendations": {\n'
    '    "process": ["..."],\n'
    '    "testCoverage": ["..."],\n'
    '    "training": ["..."]\n'
    "  }\n"
    "}"
)


def _truncate(text: str, limit: int) -> str:
    return text[:limit] + ("..." if len(text) > limit else "")


def build_defect_digest(
    defects: Sequence[DefectRecord],
    sample_size: int = DIGEST_SAMPLE_SIZE,
) -> str:
    """
    Build the user prompt summarising a defect set.

    Parameters
    ----------
    defects : Sequence[DefectRecord]
        Full defect set in source order.
    sample_size : int
        How many defects to list individually.

    Returns
    -------
    str
        Prompt text ending with the required JSON response format.
    """
    lines = [f"Analyze the following {len(defects)} software defects and provide insights:", ""]

    lines.append("Feature Distribution:")
    lines.extend(f"- {item.name}: {item.value} defects" for item in feature_distribution(defects))
    lines.append("")

    lines.append("Origin Distribution:")
    lines.extend(f"- {item.name}: {item.value} defects" for item in origin_distribution(defects))
    lines.append("")

    lines.append("Sample Defects:")
    for idx, defect in enumerate(defects[:sample_size], start=1):
        lines.append("")
        lines.append(f"Defect {idx}: {defect.subject}")
        lines.append(f"Description: {_truncate(defect.description, DESCRIPTION_LIMIT)}")
        lines.append(f"Steps: {_truncate(defect.steps_to_reproduce, STEPS_LIMIT)}")
        lines.append(f"Feature: {defect.feature_tag}, Origin: {defect.bug_origin}")

    lines.append("")
    lines.append("Based on these defects, provide the following analysis:")
    lines.append("1. Root causes (name and count)")
    lines.append("2. Rework rate (percentage)")
    lines.append("3. Bug bounce rate (percentage)")
    lines.append("4. Bad fix rate (percentage)")
    lines.append("5. Recommendations for process improvements, test coverage, and training")
    lines.append("")
    lines.append(RESPONSE_FORMAT)

    digest = "\n".join(lines)
    logger.debug("Built defect digest: %d chars, %d sampled", len(digest), min(len(defects), sample_size))
    return digest
