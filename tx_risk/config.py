"""Configuration for transaction risk scoring policy."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache


@dataclass(frozen=True)
class RiskWeights:
    """Blend of the two address scores."""
    recipient: float = 0.7  # scam contracts sit on the receiving side
    sender: float = 0.3


@dataclass(frozen=True)
class AmountThresholds:
    """Amount-based risk bumps, in native-currency units."""
    large_amount: float = 1000.0   # amount > 1000 → +20
    large_amount_risk: float = 20.0
    medium_amount: float = 100.0   # amount > 100 → +10
    medium_amount_risk: float = 10.0


@dataclass(frozen=True)
class RiskPolicyConfig:
    """Main configuration for transaction risk scoring."""
    weights: RiskWeights = field(default_factory=RiskWeights)
    amounts: AmountThresholds = field(default_factory=AmountThresholds)
    max_risk: float = 100.0
    # confidence used for a sender that was not analyzed
    neutral_confidence: float = 100.0
    estimated_transfer_gas: int = 21000

    @classmethod
    def from_env(cls) -> "RiskPolicyConfig":
        """Load configuration from environment variables."""
        weights = RiskWeights(
            recipient=float(os.getenv("TX_RISK_RECIPIENT_WEIGHT", "0.7")),
            sender=float(os.getenv("TX_RISK_SENDER_WEIGHT", "0.3")),
        )

        amounts = AmountThresholds(
            large_amount=float(os.getenv("TX_RISK_LARGE_AMOUNT", "1000")),
            large_amount_risk=float(os.getenv("TX_RISK_LARGE_AMOUNT_RISK", "20")),
            medium_amount=float(os.getenv("TX_RISK_MEDIUM_AMOUNT", "100")),
            medium_amount_risk=float(os.getenv("TX_RISK_MEDIUM_AMOUNT_RISK", "10")),
        )

        return cls(
            weights=weights,
            amounts=amounts,
            max_risk=float(os.getenv("TX_RISK_MAX_RISK", "100")),
            estimated_transfer_gas=int(os.getenv("TX_RISK_TRANSFER_GAS", "21000")),
        )


@lru_cache(maxsize=1)
def get_risk_policy_config() -> RiskPolicyConfig:
    """Get cached risk policy configuration."""
    return RiskPolicyConfig.from_env()
