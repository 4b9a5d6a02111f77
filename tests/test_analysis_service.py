"""
Analysis Service Tests
======================
Provider selection and heuristic fallback. The LLM client is mocked; no
network access.
"""
import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

from app.llm.client import LLMResponse, ProviderConfig
from app.models.defect_record import DefectRecord
from app.services.analysis_service import PROVIDER_HEURISTIC, AnalysisService


def _make_defects() -> list[DefectRecord]:
    return [
        DefectRecord(id="BUG-1", subject="Login crash", description="Crash on submit", feature_tag="Auth"),
        DefectRecord(id="BUG-2", subject="Slow search", description="Slow loading", feature_tag="Search"),
    ]


def _make_client(response: LLMResponse) -> MagicMock:
    client = MagicMock()
    client.call = AsyncMock(return_value=response)
    client.close = AsyncMock()
    return client


def _provider() -> ProviderConfig:
    return ProviderConfig(name="openai", api_key="sk-test", base_url="https://llm.test/v1", model="m")


# ===================================================================
# Test 1: No key configured → heuristics, remote never called
# ===================================================================
def test_no_provider_uses_heuristics():
    client = _make_client(LLMResponse("", "openai"))
    with patch("app.services.analysis_service.get_provider", return_value=None):
        service = AnalysisService(client=client)
        outcome = asyncio.run(service.analyze(_make_defects()))

    assert outcome.provider == PROVIDER_HEURISTIC
    assert outcome.fallback_reason == ""
    client.call.assert_not_called()


# ===================================================================
# Test 2: Remote success → remote results
# ===================================================================
def test_remote_success():
    payload = {
        "rootCauses": [{"name": "Error Handling", "count": 2}],
        "reworkRate": 30,
        "bugBounceRate": 20,
        "badFixRate": 5,
        "recommendations": {"process": ["p1"], "testCoverage": ["t1"], "training": ["tr1"]},
    }
    client = _make_client(LLMResponse(f"```json\n{json.dumps(payload)}\n```", "openai"))
    service = AnalysisService(client=client, provider=_provider())
    outcome = asyncio.run(service.analyze(_make_defects()))

    assert outcome.provider == "openai"
    assert outcome.results.rework_rate == 30
    assert outcome.results.bad_fix_rate == 5
    assert outcome.results.recommendations.training == ["tr1"]
    client.call.assert_awaited_once()
    digest = client.call.await_args.args[0]
    assert "Analyze the following 2 software defects" in digest


# ===================================================================
# Test 3: Remote failure → heuristics with reason
# ===================================================================
def test_remote_failure_falls_back():
    client = _make_client(LLMResponse("", "openai", success=False, error="timeout"))
    service = AnalysisService(client=client, provider=_provider())
    outcome = asyncio.run(service.analyze(_make_defects()))

    assert outcome.provider == PROVIDER_HEURISTIC
    assert outcome.fallback_reason == "timeout"
    assert outcome.results.feature_distribution


# ===================================================================
# Test 4: Reply without JSON → heuristics
# ===================================================================
def test_unparseable_reply_falls_back():
    client = _make_client(LLMResponse("I cannot help with that.", "openai"))
    service = AnalysisService(client=client, provider=_provider())
    outcome = asyncio.run(service.analyze(_make_defects()))

    assert outcome.provider == PROVIDER_HEURISTIC
    assert "JSON" in outcome.fallback_reason


# ===================================================================
# Test 5: close() releases the client
# ===================================================================
def test_close_delegates_to_client():
    client = _make_client(LLMResponse("", "openai"))
    service = AnalysisService(client=client, provider=_provider())
    asyncio.run(service.close())
    client.close.assert_awaited_once()
