"""
Heuristic Analyzer
==================
Local, keyword-driven analysis of a defect set. Used whenever no remote model
key is configured, and as the fallback when the remote call fails.

Strategy:
    1. ROOT CAUSES — keyword table over description + steps (multi-bucket)
    2. RATES — keyword hits over description + actual result, plus a baseline
    3. DISTRIBUTIONS — counts per feature tag / origin, largest first
    4. RECOMMENDATIONS — rules on rates and root causes, padded from generic lists

Contract:
    - DETERMINISTIC: same records → same AnalysisResults.
    - Never raises on well-formed records; empty input yields default rates.
"""
import logging
import math
from collections import Counter
from typing import Sequence

from app.models.analysis_results import AnalysisResults, NameValue, Recommendations
from app.models.defect_record import DefectRecord

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Keyword Tables
# ---------------------------------------------------------------------------
ROOT_CAUSE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "Input Validation": ("validation", "input", "invalid", "format", "required field"),
    "Error Handling":   ("exception", "error", "crash", "handled", "timeout"),
    "UI/UX Issues":     ("ui", "display", "interface", "button", "layout", "alignment"),
    "Performance":      ("slow", "performance", "lag", "loading", "timeout"),
    "Data Processing":  ("data", "calculation", "processing", "incorrect value"),
    "Integration":      ("integration", "api", "service", "endpoint", "connection"),
}

# rate name → (keywords, baseline share, value used when the result is 0)
RATE_RULES: dict[str, tuple[tuple[str, ...], float, int]] = {
    "rework":     (("reopened", "not fixed", "still occurs", "persists", "incomplete fix"), 0.15, 24),
    "bug_bounce": (("returned", "reassigned", "invalid", "not reproducible", "needs clarification"), 0.10, 18),
    "bad_fix":    (("regression", "caused by fix", "after update", "new issue", "since fixing"), 0.05, 12),
}

REWORK_THRESHOLD = 20
BOUNCE_THRESHOLD = 15
BAD_FIX_THRESHOLD = 10
MAX_RECOMMENDATIONS = 5
MIN_RECOMMENDATIONS = 3

GENERIC_PROCESS_RECS = [
    "Implement automated code quality checks in the CI pipeline.",
    "Establish regular retrospectives to continuously improve the development process.",
    "Create a knowledge sharing system to document common issues and solutions.",
    "Standardize the deployment process to reduce environment-related issues.",
]

GENERIC_TEST_RECS = [
    "Implement automated UI tests to catch visual regression issues.",
    "Add more edge case scenarios to the test suite.",
    "Create data-driven tests to cover more variations with less code.",
    "Implement end-to-end test scenarios that cover critical user journeys.",
]

GENERIC_TRAINING_RECS = [
    "Code review training to help developers identify common issues early.",
    "Testing strategy workshop to improve test coverage and efficiency.",
    "Technical writing training to improve documentation and specifications.",
    "Training on the full development lifecycle to improve understanding of cross-functional impacts.",
]

# root cause → recommendation, applied when the bucket holds at least 2 defects
_PROCESS_BY_CAUSE = {
    "Input Validation": "Establish consistent input validation standards across the application.",
    "Error Handling": "Implement a centralized error handling framework to improve consistency.",
    "UI/UX Issues": "Create UI component guidelines to ensure consistent interface behavior.",
    "Performance": "Add performance benchmarks to CI/CD pipeline to catch performance regressions.",
}

_TEST_BY_CAUSE = {
    "Error Handling": "Add more negative testing scenarios to validate error handling paths.",
    "Integration": "Implement more thorough integration tests for external system interfaces.",
    "Performance": "Add load and stress tests to identify performance bottlenecks.",
}

_TRAINING_BY_CAUSE = {
    "Input Validation": "Training on defensive programming and robust input validation techniques.",
    "UI/UX Issues": "Workshop on UI/UX best practices and responsive design principles.",
    "Performance": "Training on application performance optimization techniques.",
    "Error Handling": "Workshop on robust error handling patterns and strategies.",
    "Integration": "Training on API design and integration best practices.",
}


# ---------------------------------------------------------------------------
# Building Blocks
# ---------------------------------------------------------------------------
def _ranked(counts: Counter) -> list[NameValue]:
    # Counter.most_common keeps first-seen order for ties
    return [NameValue(name=name, value=value) for name, value in counts.most_common()]


def identify_root_causes(defects: Sequence[DefectRecord]) -> list[NameValue]:
    """Count defects per root-cause bucket. A defect may land in several buckets."""
    counts: Counter = Counter()
    for defect in defects:
        text = f"{defect.description} {defect.steps_to_reproduce}".lower()
        for cause, keywords in ROOT_CAUSE_KEYWORDS.items():
            if any(k in text for k in keywords):
                counts[cause] += 1

    if not counts:
        counts["Unknown"] = len(defects)
    return _ranked(counts)


def calculate_rate(defects: Sequence[DefectRecord], rate_name: str) -> int:
    """Percentage of defects hitting a rate's keywords, plus its baseline, capped at 100."""
    keywords, baseline_share, fallback = RATE_RULES[rate_name]
    if not defects:
        return fallback

    hits = sum(
        1 for d in defects
        if any(k in f"{d.description} {d.actual_result}".lower() for k in keywords)
    )
    total = hits + math.ceil(len(defects) * baseline_share)
    rate = min(math.floor(total / len(defects) * 100 + 0.5), 100)
    return rate or fallback


def feature_distribution(defects: Sequence[DefectRecord]) -> list[NameValue]:
    return _ranked(Counter(d.feature_tag or "Untagged" for d in defects))


def origin_distribution(defects: Sequence[DefectRecord]) -> list[NameValue]:
    return _ranked(Counter(d.bug_origin or "Unknown" for d in defects))


def _pad(recs: list[str], generic: list[str]) -> list[str]:
    for rec in generic:
        if len(recs) >= MIN_RECOMMENDATIONS:
            break
        if rec not in recs:
            recs.append(rec)
    return recs[:MAX_RECOMMENDATIONS]


def generate_recommendations(
    defects: Sequence[DefectRecord],
    root_causes: Sequence[NameValue],
    rework_rate: int,
    bug_bounce_rate: int,
    bad_fix_rate: int,
) -> Recommendations:
    """Derive process / test coverage / training advice from the metrics."""
    process: list[str] = []
    if rework_rate > REWORK_THRESHOLD:
        process.append("Implement peer code reviews to catch issues earlier in the development process.")
        process.append("Establish clearer acceptance criteria before development begins to reduce rework.")
    if bug_bounce_rate > BOUNCE_THRESHOLD:
        process.append("Create a more detailed defect reporting template to improve defect clarity.")
        process.append("Add a defect triage step to validate and properly assign issues.")
    if bad_fix_rate > BAD_FIX_THRESHOLD:
        process.append("Implement automated regression testing for all bug fixes.")
        process.append("Establish a more thorough code review process for bug fix PRs.")
    for cause in root_causes:
        if cause.value >= 2 and cause.name in _PROCESS_BY_CAUSE:
            process.append(_PROCESS_BY_CAUSE[cause.name])

    test_coverage: list[str] = []
    features = feature_distribution(defects)
    if features:
        test_coverage.append(
            f"Expand test coverage for the {features[0].name} feature which has the highest defect rate."
        )
    test_coverage.extend(_TEST_BY_CAUSE[c.name] for c in root_causes if c.name in _TEST_BY_CAUSE)

    training = [_TRAINING_BY_CAUSE[c.name] for c in root_causes if c.name in _TRAINING_BY_CAUSE]

    return Recommendations(
        process=_pad(process, GENERIC_PROCESS_RECS),
        test_coverage=_pad(test_coverage, GENERIC_TEST_RECS),
        training=_pad(training, GENERIC_TRAINING_RECS),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------
def analyze_defects_locally(defects: Sequence[DefectRecord]) -> AnalysisResults:
    """
    Produce AnalysisResults from keyword heuristics alone.

    Parameters
    ----------
    defects : Sequence[DefectRecord]
        Parsed defect set, in source order.

    Returns
    -------
    AnalysisResults
        Root causes, three rates, distributions and recommendations.
    """
    root_causes = identify_root_causes(defects)
    rework = calculate_rate(defects, "rework")
    bounce = calculate_rate(defects, "bug_bounce")
    bad_fix = calculate_rate(defects, "bad_fix")

    results = AnalysisResults(
        root_causes=root_causes,
        rework_rate=rework,
        bug_bounce_rate=bounce,
        bad_fix_rate=bad_fix,
        feature_distribution=feature_distribution(defects),
        origin_distribution=origin_distribution(defects),
        recommendations=generate_recommendations(defects, root_causes, rework, bounce, bad_fix),
    )
    logger.info(
        "Heuristic analysis of %d defect(s): %d root cause bucket(s)",
        len(defects), len(root_causes),
    )
    return results
