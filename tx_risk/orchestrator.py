from __future__ import annotations

import asyncio
import logging
from typing import Optional, Protocol

from tx_risk.combiner import combine_risk
from tx_risk.config import RiskPolicyConfig, get_risk_policy_config
from tx_risk.errors import AnalysisError, ValidationError
from tx_risk.recommendations import RecommendationGenerator
from tx_risk.types import (
    AddressRiskProfile,
    GasOptimization,
    RiskLevel,
    RiskScore,
    TransactionRiskAnalysis,
)
from tx_risk.warning_rules import generate_warnings

logger = logging.getLogger(__name__)

UNKNOWN_ADDRESS = "unknown"


class AddressAnalyzer(Protocol):
    async def analyze(self, address: str) -> AddressRiskProfile: ...


class GasOptimizationSource(Protocol):
    async def get_optimization(self) -> GasOptimization: ...


def synthetic_sender_profile(
    address: Optional[str] = None,
    *,
    config: RiskPolicyConfig | None = None,
) -> AddressRiskProfile:
    """Zero-risk stand-in for a sender that was not supplied."""
    config = config or get_risk_policy_config()
    return AddressRiskProfile(
        address=address or UNKNOWN_ADDRESS,
        is_contract=False,
        transaction_count=0,
        balance="0",
        risk_score=RiskScore(
            overall=0,
            confidence=config.neutral_confidence,
            category=RiskLevel.LOW,
            factors=[],
        ),
        flags=[],
    )


def _normalize_address(address: Optional[str]) -> Optional[str]:
    if address is None:
        return None
    return str(address).strip() or None


async def _no_sender() -> None:
    return None


class RiskOrchestrator:
    def __init__(
        self,
        analyzer: AddressAnalyzer,
        gas_source: GasOptimizationSource,
        recommender: RecommendationGenerator | None = None,
        *,
        config: RiskPolicyConfig | None = None,
    ) -> None:
        self.analyzer = analyzer
        self.gas_source = gas_source
        self.recommender = recommender or RecommendationGenerator()
        self.config = config or get_risk_policy_config()

    async def analyze(
        self,
        *,
        to_address: Optional[str],
        from_address: Optional[str] = None,
        amount: Optional[str] = None,
    ) -> TransactionRiskAnalysis:
        to_address = _normalize_address(to_address)
        if not to_address:
            raise ValidationError("toAddress is required")
        from_address = _normalize_address(from_address)

        logger.info("Analyzing transaction risk: %s -> %s", from_address or UNKNOWN_ADDRESS, to_address)

        # join on all three lookups before deciding; the first failure wins
        results = await asyncio.gather(
            self.analyzer.analyze(to_address),
            self.analyzer.analyze(from_address) if from_address else _no_sender(),
            self.gas_source.get_optimization(),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException) and not isinstance(result, Exception):
                raise result
            if isinstance(result, Exception):
                logger.error("Risk analysis lookups failed: %s", result)
                raise AnalysisError(str(result) or type(result).__name__) from result
        to_profile, from_profile, gas_optimization = results

        overall_risk = combine_risk(from_profile, to_profile, amount, config=self.config)

        recommendations = await self.recommender.generate(to_profile, from_profile, amount, overall_risk)
        warnings = generate_warnings(from_profile, to_profile, overall_risk)

        logger.info(
            "Transaction risk overall=%.1f category=%s warnings=%s",
            overall_risk.overall,
            overall_risk.category.value,
            len(warnings),
        )

        return TransactionRiskAnalysis(
            from_address=from_profile or synthetic_sender_profile(config=self.config),
            to_address=to_profile,
            amount=amount or "0",
            estimated_gas=str(self.config.estimated_transfer_gas),
            gas_optimization=gas_optimization,
            overall_risk=overall_risk,
            recommendations=recommendations,
            warnings=warnings,
        )


async def analyze_transaction_risk(
    analyzer: AddressAnalyzer,
    gas_source: GasOptimizationSource,
    *,
    to_address: Optional[str],
    from_address: Optional[str] = None,
    amount: Optional[str] = None,
    recommender: RecommendationGenerator | None = None,
) -> TransactionRiskAnalysis:
    orchestrator = RiskOrchestrator(analyzer, gas_source, recommender)
    return await orchestrator.analyze(to_address=to_address, from_address=from_address, amount=amount)
