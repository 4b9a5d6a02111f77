"""
Defect Record Model
===================
Pydantic model for one structured bug-report entry.
This is the contract between the ingestion engine and every downstream consumer
(session state, heuristic analyzer, remote digest, HTTP responses).

Fields:
    id                  — unique within a batch, never empty (BUG-<n>[-xyz])
    subject             — short title (default "Unknown")
    description         — free text (default "")
    steps_to_reproduce  — free text (default "")
    actual_result       — observed behaviour (default "")
    expected_result     — desired behaviour (default "")
    feature_tag         — feature / module / area (default "Untagged")
    bug_origin          — environment the bug was found in (default "Unknown")
    test_case_id        — related test case (default "N/A")

JSON names are camelCase (stepsToReproduce, featureTag, ...) so the browser
client receives the same shape it always has.
"""
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.core.constants import FIELD_DEFAULTS


class DefectRecord(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(min_length=1)
    subject: str = FIELD_DEFAULTS["subject"]
    description: str = FIELD_DEFAULTS["description"]
    steps_to_reproduce: str = FIELD_DEFAULTS["steps_to_reproduce"]
    actual_result: str = FIELD_DEFAULTS["actual_result"]
    expected_result: str = FIELD_DEFAULTS["expected_result"]
    feature_tag: str = FIELD_DEFAULTS["feature_tag"]
    bug_origin: str = FIELD_DEFAULTS["bug_origin"]
    test_case_id: str = FIELD_DEFAULTS["test_case_id"]
