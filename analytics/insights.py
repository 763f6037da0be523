"""
Natural-language trend summary of an ingestion run

Best effort only: a missing credential or any client failure degrades to a
fixed fallback message, never to an exception.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol, Sequence, Union

from analytics.aggregator import AggregateSummary

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "Unable to connect to the insight service. Ensure API access is configured."
EMPTY_REPLY_MESSAGE = "Analysis failed to generate."


class InsightClient(Protocol):
    def complete(self, prompt: str) -> str: ...


class OpenAIInsightClient:
    """Chat completion client for OpenAI-compatible endpoints"""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: Optional[str] = None,
        max_tokens: int = 300,
    ):
        from openai import OpenAI

        kwargs: dict = {"api_key": api_key}
        if base_url:
            kwargs["base_url"] = base_url
        self._client = OpenAI(**kwargs)
        self.model = model
        self.max_tokens = max_tokens

    def complete(self, prompt: str) -> str:
        response = self._client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=0.4,
            max_tokens=self.max_tokens,
        )
        return response.choices[0].message.content or ""


@dataclass(frozen=True)
class InsightResult:
    text: str
    fallback: bool = False


def _fmt(value: float) -> str:
    return f"{value:,.0f}"


def build_prompt(
    total_count: float,
    age_groups: Mapping[str, float],
    region_names: Sequence[str],
) -> str:
    return (
        "Act as a senior social data analyst. Analyze this Indian demographic/biometric "
        "dataset summary:\n"
        f"Total Count: {_fmt(total_count)}\n"
        f"Age Groups: 0-5: {_fmt(age_groups.get('0-5', 0))}, "
        f"5-17: {_fmt(age_groups.get('5-17', 0))}, "
        f"18+: {_fmt(age_groups.get('18+', 0))}\n"
        f"Top Regions: {', '.join(region_names) if region_names else 'none'}\n"
        "Identify 3 potential social trends or areas requiring governmental focus based on "
        "these volumes. Keep it professional, concise (max 150 words)."
    )


def prompt_for(summary: Union[AggregateSummary, Mapping[str, Any]]) -> str:
    """Prompt from a summary object or its dict form"""
    if isinstance(summary, AggregateSummary):
        return build_prompt(summary.total_count, summary.age_groups, list(summary.by_region))
    return build_prompt(
        summary.get("total_count", 0),
        summary.get("age_groups", {}),
        list(summary.get("region_names") or summary.get("by_region", {})),
    )


def generate_insight(
    summary: Union[AggregateSummary, Mapping[str, Any]],
    client: Optional[InsightClient] = None,
) -> InsightResult:
    if client is None:
        logger.warning("No insight client configured; returning fallback text")
        return InsightResult(FALLBACK_MESSAGE, fallback=True)

    prompt = prompt_for(summary)
    try:
        text = client.complete(prompt)
    except Exception as e:
        logger.warning("Insight request failed: %s", e)
        return InsightResult(FALLBACK_MESSAGE, fallback=True)

    text = (text or "").strip()
    if not text:
        return InsightResult(EMPTY_REPLY_MESSAGE, fallback=True)
    return InsightResult(text)
