from __future__ import annotations

import json
from unittest.mock import MagicMock, patch

import pytest

from conftest import make_profile
from llm.client import LLMClient
from tx_risk.recommendations import (
    CRITICAL_TIER_RECOMMENDATIONS,
    HIGH_TIER_RECOMMENDATIONS,
    LOW_TIER_RECOMMENDATIONS,
    RecommendationGenerator,
    fallback_recommendations,
    validate_recommendations,
)
from tx_risk.types import RiskScore


def _risk(overall: float) -> RiskScore:
    return RiskScore(overall=overall, confidence=80)


def _failing_client(exc: Exception) -> MagicMock:
    client = MagicMock(spec=LLMClient)
    client.recommend.side_effect = exc
    return client


@pytest.mark.parametrize(
    "overall, expected",
    [
        (100, CRITICAL_TIER_RECOMMENDATIONS),
        (80, CRITICAL_TIER_RECOMMENDATIONS),
        (79.9, HIGH_TIER_RECOMMENDATIONS),
        (60, HIGH_TIER_RECOMMENDATIONS),
        (59.9, LOW_TIER_RECOMMENDATIONS),
        (0, LOW_TIER_RECOMMENDATIONS),
    ],
)
def test_fallback_tiers(overall, expected):
    assert fallback_recommendations(_risk(overall)) == expected


@pytest.mark.asyncio
@pytest.mark.parametrize("overall", [5, 45, 65, 92])
async def test_ai_rejection_falls_back_deterministically(overall):
    generator = RecommendationGenerator(_failing_client(RuntimeError("quota exceeded")))

    first = await generator.generate(make_profile(), None, "10", _risk(overall))
    second = await generator.generate(make_profile(), None, "10", _risk(overall))

    assert first == second == fallback_recommendations(_risk(overall))


@pytest.mark.asyncio
async def test_ai_recommendations_used_when_valid():
    client = MagicMock(spec=LLMClient)
    client.recommend.return_value = [
        "Verify the contract source",
        "Send a small test amount",
        "Wait for lower gas",
        "Use a hardware wallet",
        "Double-check the address",
        "Sixth tip is dropped",
    ]
    generator = RecommendationGenerator(client, max_tokens=300)

    recommendations = await generator.generate(make_profile(), make_profile(), "5", _risk(30))

    assert len(recommendations) == 5
    assert recommendations[0] == "Verify the contract source"
    kwargs = client.recommend.call_args.kwargs
    assert kwargs["max_tokens"] == 300
    assert kwargs["recommendation_input"]["overall_risk"]["overall"] == 30


@pytest.mark.asyncio
async def test_malformed_ai_reply_falls_back():
    client = MagicMock(spec=LLMClient)
    client.recommend.return_value = ["only one"]
    generator = RecommendationGenerator(client)

    attempt = await generator.attempt_ai(make_profile(), None, None, _risk(70))
    assert not attempt.ok
    assert attempt.reason == "too_few_entries"

    assert await generator.generate(make_profile(), None, None, _risk(70)) == HIGH_TIER_RECOMMENDATIONS


@pytest.mark.asyncio
async def test_unparsable_provider_text_falls_back():
    client = LLMClient(provider="openai", api_key="sk-test")
    generator = RecommendationGenerator(client)

    with patch.object(LLMClient, "_call_provider", return_value="Sorry, I can't help with that."):
        recommendations = await generator.generate(make_profile(), None, None, _risk(85))

    assert recommendations == CRITICAL_TIER_RECOMMENDATIONS


@pytest.mark.asyncio
async def test_llm_disabled_uses_fallback_without_calling_provider():
    with patch.object(LLMClient, "_call_provider") as call_provider:
        generator = RecommendationGenerator()
        attempt = await generator.attempt_ai(make_profile(), None, None, _risk(10))

    assert attempt.reason == "llm_disabled"
    call_provider.assert_not_called()


@pytest.mark.use_llm
@pytest.mark.asyncio
async def test_llm_enabled_without_api_key_is_disabled():
    generator = RecommendationGenerator()
    attempt = await generator.attempt_ai(make_profile(), None, None, _risk(10))
    assert attempt.reason == "llm_disabled"


def test_validate_recommendations_rejects_non_strings():
    assert validate_recommendations({"recommendations": []}).reason == "not_a_list"
    assert validate_recommendations(["a", "b", 3]).reason == "non_string_entry"
    assert validate_recommendations(["a", " ", "c"]).reason == "non_string_entry"
    assert validate_recommendations([" a ", "b", "c"]).recommendations == ["a", "b", "c"]


def test_llm_client_extracts_array_from_wrapped_text():
    client = LLMClient(provider="openai", api_key="sk-test")
    reply = 'Here you go:\n["one", "two", "three"]\nStay safe.'
    assert client._parse_json_array(reply) == ["one", "two", "three"]
    assert client._parse_json_array(json.dumps(["x", "y", "z"])) == ["x", "y", "z"]

    with pytest.raises(ValueError):
        client._parse_json_array('{"recommendations": ["a"]}')
    with pytest.raises(ValueError):
        client._parse_json_array("   ")


def test_llm_client_requires_provider():
    client = LLMClient(provider=None)
    with pytest.raises(RuntimeError):
        client.recommend(recommendation_input={})
