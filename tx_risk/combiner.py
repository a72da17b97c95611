from __future__ import annotations

import math
import re
from typing import Optional

from tx_risk.categorizer import categorize_risk
from tx_risk.config import RiskPolicyConfig, get_risk_policy_config
from tx_risk.types import AddressRiskProfile, RiskScore


_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))")


def parse_amount(amount: Optional[str]) -> Optional[float]:
    """
    Read the leading number of the amount, ignoring any trailing text
    ("2000 ETH" -> 2000.0). None when it is missing or does not start with one.
    """
    if amount is None:
        return None
    match = _LEADING_NUMBER.match(str(amount))
    if not match:
        return None
    value = float(match.group(1).replace("Infinity", "inf"))
    if math.isnan(value):
        return None
    return value


def amount_risk(amount: Optional[str], config: RiskPolicyConfig | None = None) -> float:
    config = config or get_risk_policy_config()
    value = parse_amount(amount)
    if value is None:
        return 0.0
    if value > config.amounts.large_amount:
        return config.amounts.large_amount_risk
    if value > config.amounts.medium_amount:
        return config.amounts.medium_amount_risk
    return 0.0


def combine_risk(
    from_profile: Optional[AddressRiskProfile],
    to_profile: AddressRiskProfile,
    amount: Optional[str] = None,
    *,
    config: RiskPolicyConfig | None = None,
) -> RiskScore:
    """
    Blend sender and recipient risk into one transaction score.

    A missing sender contributes zero risk and neutral confidence. Factors are
    the recipient's followed by the sender's, each in original order.
    """
    config = config or get_risk_policy_config()

    to_risk = to_profile.risk_score.overall
    from_risk = from_profile.risk_score.overall if from_profile else 0.0

    weighted = to_risk * config.weights.recipient + from_risk * config.weights.sender
    final_risk = min(config.max_risk, weighted + amount_risk(amount, config))

    from_confidence = (
        from_profile.risk_score.confidence if from_profile else config.neutral_confidence
    )
    confidence = min(to_profile.risk_score.confidence, from_confidence)

    factors = list(to_profile.risk_score.factors)
    if from_profile:
        factors.extend(from_profile.risk_score.factors)

    return RiskScore(
        overall=final_risk,
        confidence=confidence,
        category=categorize_risk(final_risk),
        factors=factors,
    )
