import os
import pytest
from fastapi.testclient import TestClient

# Keep tests offline: no LLM key, no tracing
os.environ.setdefault("LLM_ENABLED", "false")
os.environ.setdefault("LANGSMITH_TRACING", "false")

from app.main import create_app
from app.config import get_settings
from tx_risk.config import get_risk_policy_config
from tx_risk.types import AddressRiskProfile, RiskScore


@pytest.fixture
def client():
    app = create_app()
    with TestClient(app) as client:
        yield client


@pytest.fixture(autouse=True)
def _configure_llm(monkeypatch, request):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    get_settings.cache_clear()
    get_risk_policy_config.cache_clear()
    if request.node.get_closest_marker("use_llm"):
        monkeypatch.setenv("LLM_ENABLED", "true")
        get_settings.cache_clear()
        yield
        return
    monkeypatch.setenv("LLM_ENABLED", "false")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def make_profile(
    address: str = "0x1111111111111111111111111111111111111111",
    *,
    overall: float = 0,
    confidence: float = 90,
    factors=None,
    is_contract: bool = False,
    is_verified=None,
    transaction_count: int = 10,
    balance: str = "1.5",
) -> AddressRiskProfile:
    return AddressRiskProfile(
        address=address,
        is_contract=is_contract,
        is_verified=is_verified,
        transaction_count=transaction_count,
        balance=balance,
        risk_score=RiskScore(overall=overall, confidence=confidence, factors=factors or []),
        flags=[],
    )
