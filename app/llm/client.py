"""
LLM Client
==========
Asynchronous client for the remote defect-analysis model.

Provider:
    - Any OpenAI-compatible chat-completions endpoint (OpenAI by default)
    - Configured entirely from environment (see app.core.config)
    - No key configured → provider is None and callers use local heuristics

Call Policy:
    - ONE attempt per analysis. No retries, no provider rotation.
    - Network errors, HTTP errors and timeouts are reported as a failed
      LLMResponse; the analysis service decides what to fall back to.

Response Parsing:
    - JSON may arrive inside a ```json fence or as a bare {...} span
    - Percentages are parsed from numbers or strings ("24%") and clamped 0–100
    - Missing parts are filled from local computations or generic defaults
"""
import json
import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Optional, Sequence

import httpx

from app.core.config import LLM_TIMEOUT_SECONDS, OPENAI_API_KEY, OPENAI_BASE_URL, OPENAI_MODEL
from app.models.analysis_results import AnalysisResults, NameValue, Recommendations
from app.models.defect_record import DefectRecord
from app.services.heuristic_analyzer import feature_distribution, origin_distribution

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Provider Configuration
# ---------------------------------------------------------------------------
@dataclass
class ProviderConfig:
    """Configuration for the remote analysis provider."""
    name: str
    api_key: str
    base_url: str
    model: str
    timeout_seconds: float = 30.0
    temperature: float = 0.3
    max_tokens: int = 2000


def get_provider() -> Optional[ProviderConfig]:
    """Return the configured provider, or None when no API key is set."""
    if not OPENAI_API_KEY or not OPENAI_API_KEY.strip():
        return None
    return ProviderConfig(
        name="openai",
        api_key=OPENAI_API_KEY.strip(),
        base_url=OPENAI_BASE_URL.rstrip("/"),
        model=OPENAI_MODEL,
        timeout_seconds=LLM_TIMEOUT_SECONDS,
    )


# ---------------------------------------------------------------------------
# LLM Response
# ---------------------------------------------------------------------------
@dataclass
class LLMResponse:
    """Raw outcome of one remote call."""
    content: str
    provider_name: str
    success: bool = True
    error: str = ""


# ---------------------------------------------------------------------------
# Response Parsing
# ---------------------------------------------------------------------------
_FENCED_JSON = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")
_BARE_JSON = re.compile(r"\{[\s\S]*\}")
_PERCENT = re.compile(r"(\d+)(\.\d+)?%?")

DEFAULT_RATES = {"reworkRate": 24, "bugBounceRate": 18, "badFixRate": 12}
MAX_REMOTE_RECOMMENDATIONS = 5


def extract_json_object(raw: str) -> dict:
    """
    Pull the JSON object out of a model reply.

    Raises
    ------
    ValueError
        No JSON object could be found or decoded.
    """
    if not raw or not raw.strip():
        raise ValueError("Empty response from LLM")

    match = _FENCED_JSON.search(raw) or _BARE_JSON.search(raw)
    if not match:
        raise ValueError("AI response did not contain valid JSON")

    candidate = match.group(1) if match.re is _FENCED_JSON else match.group(0)
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise ValueError(f"Failed to parse AI response as JSON: {e}") from e

    if not isinstance(data, dict):
        raise ValueError("AI response JSON is not an object")
    return data


def _clamp_percent(value: float) -> int:
    # Half-up, so 24.5 -> 25 (matches calculate_rate)
    return max(0, min(100, math.floor(value + 0.5)))


def parse_percentage(value: Any, default: int) -> int:
    """Clamp a numeric or "NN%" value to an int in 0–100, else return default."""
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return default
        return _clamp_percent(value)
    if isinstance(value, str):
        m = _PERCENT.search(value)
        if m:
            return _clamp_percent(float(m.group(0).rstrip("%")))
    return default


def _parse_name_values(raw: Any) -> list[NameValue]:
    """Accept [{name|category, count|value}] or {name: count}."""
    items: list[NameValue] = []
    if isinstance(raw, list):
        for entry in raw:
            if not isinstance(entry, dict):
                continue
            name = entry.get("name") or entry.get("category") or "Unknown"
            value = entry.get("count") or entry.get("value") or 1
            try:
                items.append(NameValue(name=str(name), value=int(value)))
            except (TypeError, ValueError):
                continue
    elif isinstance(raw, dict):
        for name, value in raw.items():
            try:
                items.append(NameValue(name=str(name), value=int(value)))
            except (TypeError, ValueError):
                continue
    return items


def _recommendations(data: dict, key: str, label: str) -> list[str]:
    defaults = [
        f"Implement standard {label} improvements",
        f"Review current {label} practices",
        f"Establish {label} metrics and tracking",
    ]
    recs = (data.get("recommendations") or {}).get(key)
    if isinstance(recs, list) and recs:
        return [str(r) for r in recs[:MAX_REMOTE_RECOMMENDATIONS]]
    return defaults


def map_response_to_results(data: dict, defects: Sequence[DefectRecord]) -> AnalysisResults:
    """Map the model's JSON onto AnalysisResults, filling gaps locally."""
    if not isinstance(data.get("recommendations"), dict):
        data = {**data, "recommendations": {}}

    features = _parse_name_values(data.get("featureDistribution"))
    origins = _parse_name_values(data.get("originDistribution"))

    return AnalysisResults(
        root_causes=_parse_name_values(data.get("rootCauses")),
        rework_rate=parse_percentage(data.get("reworkRate"), DEFAULT_RATES["reworkRate"]),
        bug_bounce_rate=parse_percentage(data.get("bugBounceRate"), DEFAULT_RATES["bugBounceRate"]),
        bad_fix_rate=parse_percentage(data.get("badFixRate"), DEFAULT_RATES["badFixRate"]),
        feature_distribution=features or feature_distribution(defects),
        origin_distribution=origins or origin_distribution(defects),
        recommendations=Recommendations(
            process=_recommendations(data, "process", "process"),
            test_coverage=_recommendations(data, "testCoverage", "testCoverage"),
            training=_recommendations(data, "training", "training"),
        ),
    )


# ---------------------------------------------------------------------------
# LLM Client
# ---------------------------------------------------------------------------
class LLMClient:
    """
    Async HTTP client for the remote analysis provider.

    Usage:
        client = LLMClient()
        response = await client.call(digest, SYSTEM_PROMPT, provider)
        await client.close()
    """

    def __init__(self) -> None:
        self._http: Optional[httpx.AsyncClient] = None

    async def _get_http(self, timeout: float) -> httpx.AsyncClient:
        """Lazy-initialise the HTTP client."""
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(timeout=httpx.Timeout(timeout))
        return self._http

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._http and not self._http.is_closed:
            await self._http.aclose()
            self._http = None

    async def call(
        self,
        user_prompt: str,
        system_prompt: str,
        provider: ProviderConfig,
    ) -> LLMResponse:
        """
        Send one chat-completions request.

        Returns
        -------
        LLMResponse
            ``success=False`` with an error string on any transport failure.
        """
        try:
            content = await self._call_openai_compatible(user_prompt, system_prompt, provider)
        except httpx.TimeoutException:
            logger.warning("Provider %s: timeout after %.0fs", provider.name, provider.timeout_seconds)
            return LLMResponse("", provider.name, success=False, error="timeout")
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning("Provider %s: HTTP %d", provider.name, status)
            return LLMResponse("", provider.name, success=False, error=f"HTTP {status}")
        except httpx.HTTPError as e:
            logger.warning("Provider %s: %s", provider.name, e)
            return LLMResponse("", provider.name, success=False, error=str(e))
        except ValueError as e:
            logger.warning("Provider %s: response body is not JSON (%s)", provider.name, e)
            return LLMResponse("", provider.name, success=False, error="Invalid response body")

        if not content.strip():
            return LLMResponse("", provider.name, success=False, error="Empty response from LLM")
        return LLMResponse(content, provider.name)

    async def _call_openai_compatible(
        self,
        user_prompt: str,
        system_prompt: str,
        provider: ProviderConfig,
    ) -> str:
        """Call an OpenAI-compatible chat-completions API."""
        http = await self._get_http(provider.timeout_seconds)
        url = f"{provider.base_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {provider.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": provider.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": provider.temperature,
            "max_tokens": provider.max_tokens,
        }
        resp = await http.post(url, json=payload, headers=headers)
        resp.raise_for_status()
        data = resp.json()

        try:
            choices = data.get("choices", [])
            if choices:
                return choices[0].get("message", {}).get("content", "") or ""
        except (IndexError, KeyError, TypeError, AttributeError):
            pass
        return ""
