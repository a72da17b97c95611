from __future__ import annotations

import asyncio
from unittest.mock import MagicMock

import pytest

from conftest import make_profile
from llm.client import LLMClient
from tx_risk.errors import AnalysisError, ValidationError
from tx_risk.orchestrator import RiskOrchestrator, analyze_transaction_risk, synthetic_sender_profile
from tx_risk.recommendations import LOW_TIER_RECOMMENDATIONS, RecommendationGenerator
from tx_risk.types import GasOptimization, NetworkCongestion, RiskLevel

RECIPIENT = "0xAAA"
SENDER = "0xBBB"


class FakeAnalyzer:
    def __init__(self, profiles=None, *, fail_for=None, delay: float = 0.0):
        self.profiles = profiles or {}
        self.fail_for = fail_for or set()
        self.delay = delay
        self.calls = []

    async def analyze(self, address):
        self.calls.append(address)
        if self.delay:
            await asyncio.sleep(self.delay)
        if address in self.fail_for:
            raise ValueError(f"Invalid address format: {address}")
        return self.profiles.get(address) or make_profile(address)


class FakeGasSource:
    def __init__(self, *, fail: bool = False, delay: float = 0.0):
        self.fail = fail
        self.delay = delay
        self.calls = 0

    async def get_optimization(self):
        self.calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise RuntimeError("gas oracle unavailable")
        return GasOptimization(
            current_gas_price="10.00 GWEI",
            recommended_gas_price="8.00 GWEI",
            potential_savings="20.0%",
            network_congestion=NetworkCongestion.LOW,
        )


def _orchestrator(analyzer, gas_source=None, recommender=None):
    return RiskOrchestrator(analyzer, gas_source or FakeGasSource(), recommender or RecommendationGenerator())


@pytest.mark.asyncio
async def test_end_to_end_without_sender():
    analyzer = FakeAnalyzer({RECIPIENT: make_profile(RECIPIENT, overall=50, confidence=90)})

    result = await _orchestrator(analyzer).analyze(to_address=RECIPIENT, amount="2000")

    assert result.overall_risk.overall == pytest.approx(55)
    assert result.overall_risk.category == RiskLevel.MEDIUM
    assert result.overall_risk.confidence == 90
    assert analyzer.calls == [RECIPIENT]
    assert result.from_address.risk_score.overall == 0
    assert result.from_address.address == "unknown"
    assert result.amount == "2000"
    assert result.estimated_gas == "21000"
    assert result.recommendations == LOW_TIER_RECOMMENDATIONS
    assert result.gas_optimization.network_congestion == NetworkCongestion.LOW


@pytest.mark.asyncio
async def test_sender_is_analyzed_when_supplied():
    analyzer = FakeAnalyzer(
        {
            RECIPIENT: make_profile(RECIPIENT, overall=40, confidence=80),
            SENDER: make_profile(SENDER, overall=60, confidence=70),
        }
    )

    result = await _orchestrator(analyzer).analyze(to_address=RECIPIENT, from_address=SENDER)

    assert sorted(analyzer.calls) == sorted([RECIPIENT, SENDER])
    assert result.from_address.address == SENDER
    assert result.overall_risk.overall == pytest.approx(40 * 0.7 + 60 * 0.3)
    assert result.overall_risk.confidence == 70
    assert result.amount == "0"


@pytest.mark.asyncio
@pytest.mark.parametrize("to_address", [None, "", "   "])
async def test_missing_recipient_is_a_validation_error(to_address):
    analyzer = FakeAnalyzer()
    gas = FakeGasSource()

    with pytest.raises(ValidationError):
        await _orchestrator(analyzer, gas).analyze(to_address=to_address, from_address=SENDER)

    assert analyzer.calls == []
    assert gas.calls == 0


@pytest.mark.asyncio
async def test_addresses_are_stripped_before_lookup():
    analyzer = FakeAnalyzer()

    result = await _orchestrator(analyzer).analyze(to_address=f"  {RECIPIENT} ", from_address=f"\t{SENDER}\n")

    assert sorted(analyzer.calls) == sorted([RECIPIENT, SENDER])
    assert result.to_address.address == RECIPIENT


@pytest.mark.asyncio
async def test_lookup_failure_becomes_analysis_error():
    analyzer = FakeAnalyzer(fail_for={SENDER})

    with pytest.raises(AnalysisError) as exc_info:
        await _orchestrator(analyzer).analyze(to_address=RECIPIENT, from_address=SENDER)

    assert "Invalid address format" in exc_info.value.details
    assert isinstance(exc_info.value.__cause__, ValueError)


@pytest.mark.asyncio
async def test_gas_failure_becomes_analysis_error():
    with pytest.raises(AnalysisError, match="gas oracle unavailable"):
        await _orchestrator(FakeAnalyzer(), FakeGasSource(fail=True)).analyze(to_address=RECIPIENT)


@pytest.mark.asyncio
async def test_lookups_run_concurrently():
    analyzer = FakeAnalyzer(delay=0.2)
    gas = FakeGasSource(delay=0.2)
    loop = asyncio.get_running_loop()

    started = loop.time()
    await _orchestrator(analyzer, gas).analyze(to_address=RECIPIENT, from_address=SENDER)
    elapsed = loop.time() - started

    # sequential would take ~0.6s
    assert elapsed < 0.5


@pytest.mark.asyncio
async def test_ai_outage_does_not_fail_request():
    client = MagicMock(spec=LLMClient)
    client.recommend.side_effect = TimeoutError("LLM timed out")
    analyzer = FakeAnalyzer({RECIPIENT: make_profile(RECIPIENT, overall=95, confidence=60)})

    result = await _orchestrator(analyzer, recommender=RecommendationGenerator(client)).analyze(
        to_address=RECIPIENT, amount="5000"
    )

    assert result.overall_risk.overall == pytest.approx(86.5)
    assert result.overall_risk.category == RiskLevel.CRITICAL
    assert 3 <= len(result.recommendations) <= 5
    assert "CRITICAL RISK" in result.warnings[0]


@pytest.mark.asyncio
async def test_analyze_transaction_risk_helper():
    result = await analyze_transaction_risk(FakeAnalyzer(), FakeGasSource(), to_address=RECIPIENT)
    assert result.to_address.address == RECIPIENT


def test_synthetic_sender_profile():
    profile = synthetic_sender_profile()
    assert profile.address == "unknown"
    assert profile.is_contract is False
    assert profile.transaction_count == 0
    assert profile.balance == "0"
    assert profile.flags == []
    assert profile.risk_score.overall == 0
    assert profile.risk_score.confidence == 100
    assert profile.risk_score.category == RiskLevel.LOW
    assert profile.risk_score.factors == []


@pytest.mark.asyncio
async def test_response_serializes_camel_case():
    result = await _orchestrator(FakeAnalyzer()).analyze(to_address=RECIPIENT, amount="1")
    body = result.to_public_dict()

    assert set(body) == {
        "fromAddress",
        "toAddress",
        "amount",
        "estimatedGas",
        "gasOptimization",
        "overallRisk",
        "recommendations",
        "warnings",
    }
    assert "riskScore" in body["toAddress"]
    assert "transactionCount" in body["toAddress"]
    assert body["overallRisk"]["category"] == "LOW"
