"""
Analysis Results Model
======================
Structure returned by both the heuristic analyzer and the remote-model bridge.

Fields:
    root_causes          — [{name, value}] root-cause buckets, largest first
    rework_rate          — percentage 0–100
    bug_bounce_rate      — percentage 0–100
    bad_fix_rate         — percentage 0–100
    feature_distribution — [{name, value}] defects per feature tag
    origin_distribution  — [{name, value}] defects per origin / environment
    recommendations      — process / testCoverage / training lists
"""
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class NameValue(BaseModel):
    name: str
    value: int


class Recommendations(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    process: list[str] = Field(default_factory=list)
    test_coverage: list[str] = Field(default_factory=list)
    training: list[str] = Field(default_factory=list)


class AnalysisResults(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    root_causes: list[NameValue] = Field(default_factory=list)
    rework_rate: int = 0
    bug_bounce_rate: int = 0
    bad_fix_rate: int = 0
    feature_distribution: list[NameValue] = Field(default_factory=list)
    origin_distribution: list[NameValue] = Field(default_factory=list)
    recommendations: Recommendations = Field(default_factory=Recommendations)
