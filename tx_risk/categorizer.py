from __future__ import annotations

from tx_risk.types import RiskLevel

CRITICAL_MIN = 80
HIGH_MIN = 60
MEDIUM_MIN = 40


def categorize_risk(score: float) -> RiskLevel:
    """Map a 0-100 risk score to its category. Lower bounds are inclusive."""
    if score >= CRITICAL_MIN:
        return RiskLevel.CRITICAL
    if score >= HIGH_MIN:
        return RiskLevel.HIGH
    if score >= MEDIUM_MIN:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW
