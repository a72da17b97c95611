from __future__ import annotations

from typing import Callable, List, Optional

from tx_risk.categorizer import CRITICAL_MIN
from tx_risk.combiner import parse_amount
from tx_risk.types import AddressRiskProfile, RiskLevel, RiskScore

UNVERIFIED_CONTRACT_WARNING = "🚨 Unverified smart contract - source code not audited"
CRITICAL_RISK_WARNING = "⛔ CRITICAL RISK: Multiple suspicious factors detected"
NEW_ADDRESS_WARNING = "🆕 NEW ADDRESS: No transaction history available"
DRAINED_ACCOUNT_WARNING = "💸 Empty wallet with transaction history - possible drained account"
MULTIPLE_HIGH_RISK_WARNING = "🔍 Multiple high-risk patterns detected - investigate before proceeding"

HIGH_RISK_PATTERN_MIN = 2

WarningRule = Callable[[Optional[AddressRiskProfile], AddressRiskProfile, RiskScore], Optional[str]]


def rule_unverified_contract(
    from_profile: Optional[AddressRiskProfile],
    to_profile: AddressRiskProfile,
    overall_risk: RiskScore,
) -> Optional[str]:
    if to_profile.is_contract and not to_profile.is_verified:
        return UNVERIFIED_CONTRACT_WARNING
    return None


def rule_critical_risk(
    from_profile: Optional[AddressRiskProfile],
    to_profile: AddressRiskProfile,
    overall_risk: RiskScore,
) -> Optional[str]:
    if overall_risk.overall >= CRITICAL_MIN:
        return CRITICAL_RISK_WARNING
    return None


def rule_new_address(
    from_profile: Optional[AddressRiskProfile],
    to_profile: AddressRiskProfile,
    overall_risk: RiskScore,
) -> Optional[str]:
    if to_profile.transaction_count == 0:
        return NEW_ADDRESS_WARNING
    return None


def rule_drained_account(
    from_profile: Optional[AddressRiskProfile],
    to_profile: AddressRiskProfile,
    overall_risk: RiskScore,
) -> Optional[str]:
    if parse_amount(to_profile.balance) == 0 and to_profile.transaction_count > 0:
        return DRAINED_ACCOUNT_WARNING
    return None


def rule_multiple_high_risk_patterns(
    from_profile: Optional[AddressRiskProfile],
    to_profile: AddressRiskProfile,
    overall_risk: RiskScore,
) -> Optional[str]:
    # overall_risk.factors already holds recipient + sender factors
    suspicious = [
        f for f in overall_risk.factors
        if f.severity in {RiskLevel.HIGH, RiskLevel.CRITICAL}
    ]
    if len(suspicious) >= HIGH_RISK_PATTERN_MIN:
        return MULTIPLE_HIGH_RISK_WARNING
    return None


WARNING_RULES: List[WarningRule] = [
    rule_unverified_contract,
    rule_critical_risk,
    rule_new_address,
    rule_drained_account,
    rule_multiple_high_risk_patterns,
]


def generate_warnings(
    from_profile: Optional[AddressRiskProfile],
    to_profile: AddressRiskProfile,
    overall_risk: RiskScore,
) -> List[str]:
    """Evaluate every rule in order; several warnings may apply at once."""
    warnings: List[str] = []
    for rule in WARNING_RULES:
        message = rule(from_profile, to_profile, overall_risk)
        if message:
            warnings.append(message)
    return warnings
