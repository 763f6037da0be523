"""
tests/test_insights.py

Prompt construction and the fallback paths of the insight summarizer.
The upstream model is replaced by small fakes; nothing goes over the network.
"""

from __future__ import annotations

from analytics.aggregator import aggregate
from analytics.classifier import FileDescriptor
from analytics.insights import (
    EMPTY_REPLY_MESSAGE,
    FALLBACK_MESSAGE,
    build_prompt,
    generate_insight,
    prompt_for,
)


class _FakeClient:
    def __init__(self, reply: str = "Three trends.") -> None:
        self.reply = reply
        self.prompts: list[str] = []

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.reply


class _FailingClient:
    def complete(self, prompt: str) -> str:
        raise ConnectionError("upstream unavailable")


class TestPrompt:
    def test_contains_scalar_fields(self) -> None:
        prompt = build_prompt(
            1_000_000, {"0-5": 150_000, "5-17": 350_000, "18+": 500_000}, ["Delhi", "Gujarat"]
        )
        assert "Total Count: 1,000,000" in prompt
        assert "0-5: 150,000" in prompt
        assert "5-17: 350,000" in prompt
        assert "18+: 500,000" in prompt
        assert "Delhi, Gujarat" in prompt

    def test_summary_and_dict_forms_agree(self, small_regions, rng) -> None:
        s = aggregate([FileDescriptor("biometric.csv")], small_regions, rng)
        as_dict = {
            "total_count": s.total_count,
            "age_groups": dict(s.age_groups),
            "region_names": list(s.by_region),
        }
        assert prompt_for(s) == prompt_for(as_dict)

    def test_no_regions(self) -> None:
        assert "Top Regions: none" in build_prompt(0, {}, [])


class TestGenerateInsight:
    def test_reply_is_returned(self) -> None:
        client = _FakeClient("  Rising enrollment in Delhi.  ")
        result = generate_insight({"total_count": 10}, client)
        assert result.text == "Rising enrollment in Delhi."
        assert result.fallback is False
        assert len(client.prompts) == 1

    def test_missing_client_falls_back(self) -> None:
        result = generate_insight({"total_count": 10}, None)
        assert result.text == FALLBACK_MESSAGE
        assert result.fallback is True

    def test_client_error_falls_back(self) -> None:
        result = generate_insight({"total_count": 10}, _FailingClient())
        assert result.text == FALLBACK_MESSAGE
        assert result.fallback is True

    def test_empty_reply(self) -> None:
        result = generate_insight({"total_count": 10}, _FakeClient(""))
        assert result.text == EMPTY_REPLY_MESSAGE
        assert result.fallback is True
