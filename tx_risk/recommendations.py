"""
Recommendation generation.

The LLM is asked first; its outcome is captured as a `RecommendationAttempt`
instead of an exception, and the deterministic per-tier advice is used
whenever the attempt did not succeed.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from app.config import get_settings
from llm.client import LLMClient
from tx_risk.categorizer import CRITICAL_MIN, HIGH_MIN
from tx_risk.types import AddressRiskProfile, RiskScore

logger = logging.getLogger(__name__)

MIN_RECOMMENDATIONS = 3
MAX_RECOMMENDATIONS = 5

CRITICAL_TIER_RECOMMENDATIONS = [
    "⚠️ High risk detected - Consider avoiding this transaction",
    "🔍 Verify the recipient address through official channels",
    "💰 Start with a small test amount if you must proceed",
]
HIGH_TIER_RECOMMENDATIONS = [
    "⚡ Moderate risk - Proceed with caution",
    "✅ Double-check the recipient address",
    "⏰ Consider waiting for network congestion to decrease",
]
LOW_TIER_RECOMMENDATIONS = [
    "✅ Low risk transaction",
    "⛽ Current gas prices are optimal",
    "🚀 Safe to proceed",
]


@dataclass(frozen=True)
class RecommendationAttempt:
    """Outcome of asking the LLM for recommendations."""
    ok: bool
    recommendations: List[str] = field(default_factory=list)
    reason: Optional[str] = None

    @classmethod
    def success(cls, recommendations: List[str]) -> "RecommendationAttempt":
        return cls(ok=True, recommendations=list(recommendations))

    @classmethod
    def failed(cls, reason: str) -> "RecommendationAttempt":
        return cls(ok=False, reason=reason)


def fallback_recommendations(risk: RiskScore) -> List[str]:
    if risk.overall >= CRITICAL_MIN:
        return list(CRITICAL_TIER_RECOMMENDATIONS)
    if risk.overall >= HIGH_MIN:
        return list(HIGH_TIER_RECOMMENDATIONS)
    return list(LOW_TIER_RECOMMENDATIONS)


def validate_recommendations(items: Any) -> RecommendationAttempt:
    if not isinstance(items, list):
        return RecommendationAttempt.failed("not_a_list")
    cleaned: List[str] = []
    for item in items:
        if not isinstance(item, str) or not item.strip():
            return RecommendationAttempt.failed("non_string_entry")
        cleaned.append(item.strip())
    if len(cleaned) < MIN_RECOMMENDATIONS:
        return RecommendationAttempt.failed("too_few_entries")
    return RecommendationAttempt.success(cleaned[:MAX_RECOMMENDATIONS])


def _build_recommendation_input(
    to_profile: AddressRiskProfile,
    from_profile: Optional[AddressRiskProfile],
    amount: Optional[str],
    overall_risk: RiskScore,
) -> dict:
    return {
        "to_address": to_profile.model_dump(mode="json"),
        "from_address": from_profile.model_dump(mode="json") if from_profile else None,
        "amount": amount,
        "overall_risk": overall_risk.model_dump(mode="json"),
    }


class RecommendationGenerator:
    def __init__(self, llm_client: LLMClient | None = None, *, max_tokens: int | None = None) -> None:
        settings = get_settings()
        if llm_client is not None:
            self._enabled = True
        else:
            self._enabled = settings.LLM_ENABLED and bool(settings.OPENAI_API_KEY)
        self.llm_client = llm_client or LLMClient(
            model=settings.LLM_MODEL,
            provider=settings.LLM_PROVIDER,
            api_key=settings.OPENAI_API_KEY,
            temperature=settings.LLM_TEMPERATURE,
            timeout_s=settings.LLM_TIMEOUT_S,
        )
        self.max_tokens = max_tokens or settings.llm_recommendation_max_tokens

    async def attempt_ai(
        self,
        to_profile: AddressRiskProfile,
        from_profile: Optional[AddressRiskProfile],
        amount: Optional[str],
        overall_risk: RiskScore,
    ) -> RecommendationAttempt:
        if not self._enabled:
            return RecommendationAttempt.failed("llm_disabled")

        recommendation_input = _build_recommendation_input(to_profile, from_profile, amount, overall_risk)
        try:
            items = await asyncio.to_thread(
                self.llm_client.recommend,
                recommendation_input=recommendation_input,
                max_tokens=self.max_tokens,
            )
        except Exception as e:
            logger.warning("AI recommendation call failed: %s", e)
            return RecommendationAttempt.failed(f"llm_error: {e}")

        attempt = validate_recommendations(items)
        if not attempt.ok:
            logger.warning("AI recommendation reply rejected: %s", attempt.reason)
        return attempt

    async def generate(
        self,
        to_profile: AddressRiskProfile,
        from_profile: Optional[AddressRiskProfile],
        amount: Optional[str],
        overall_risk: RiskScore,
    ) -> List[str]:
        attempt = await self.attempt_ai(to_profile, from_profile, amount, overall_risk)
        if attempt.ok:
            return attempt.recommendations
        logger.info("Using fallback recommendations reason=%s", attempt.reason)
        return fallback_recommendations(overall_risk)
