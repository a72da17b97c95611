from conftest import make_profile
from tx_risk.types import RiskFactor, RiskFactorType, RiskLevel, RiskScore
from tx_risk.warning_rules import (
    CRITICAL_RISK_WARNING,
    DRAINED_ACCOUNT_WARNING,
    MULTIPLE_HIGH_RISK_WARNING,
    NEW_ADDRESS_WARNING,
    UNVERIFIED_CONTRACT_WARNING,
    generate_warnings,
)


def _score(overall: float, severities=()) -> RiskScore:
    factors = [
        RiskFactor(
            type=RiskFactorType.CONTRACT_VERIFICATION,
            severity=severity,
            score=50,
            description=f"factor {i}",
        )
        for i, severity in enumerate(severities)
    ]
    return RiskScore(overall=overall, confidence=80, factors=factors)


def test_unaudited_new_contract_at_critical_risk():
    to_profile = make_profile(is_contract=True, is_verified=False, transaction_count=0, balance="0")

    warnings = generate_warnings(None, to_profile, _score(85))

    assert warnings[:3] == [
        UNVERIFIED_CONTRACT_WARNING,
        CRITICAL_RISK_WARNING,
        NEW_ADDRESS_WARNING,
    ]
    # zero balance with zero history is not a drained account
    assert DRAINED_ACCOUNT_WARNING not in warnings


def test_clean_recipient_has_no_warnings():
    to_profile = make_profile(transaction_count=25, balance="3.2")
    assert generate_warnings(None, to_profile, _score(20)) == []


def test_verified_contract_not_flagged():
    to_profile = make_profile(is_contract=True, is_verified=True)
    assert UNVERIFIED_CONTRACT_WARNING not in generate_warnings(None, to_profile, _score(10))


def test_contract_with_unknown_verification_is_flagged():
    to_profile = make_profile(is_contract=True, is_verified=None)
    assert generate_warnings(None, to_profile, _score(10)) == [UNVERIFIED_CONTRACT_WARNING]


def test_drained_account():
    to_profile = make_profile(transaction_count=12, balance="0.0")
    assert generate_warnings(None, to_profile, _score(30)) == [DRAINED_ACCOUNT_WARNING]


def test_unparsable_balance_is_not_drained():
    to_profile = make_profile(transaction_count=12, balance="n/a")
    assert generate_warnings(None, to_profile, _score(30)) == []


def test_multiple_high_risk_patterns_counts_high_and_critical():
    to_profile = make_profile()
    one = generate_warnings(None, to_profile, _score(30, [RiskLevel.HIGH, RiskLevel.MEDIUM]))
    two = generate_warnings(None, to_profile, _score(30, [RiskLevel.HIGH, RiskLevel.CRITICAL]))
    assert MULTIPLE_HIGH_RISK_WARNING not in one
    assert two == [MULTIPLE_HIGH_RISK_WARNING]


def test_all_rules_fire_together_in_order():
    to_profile = make_profile(is_contract=True, is_verified=False, transaction_count=0, balance="0")
    warnings = generate_warnings(
        make_profile(), to_profile, _score(90, [RiskLevel.CRITICAL, RiskLevel.HIGH])
    )
    assert warnings == [
        UNVERIFIED_CONTRACT_WARNING,
        CRITICAL_RISK_WARNING,
        NEW_ADDRESS_WARNING,
        MULTIPLE_HIGH_RISK_WARNING,
    ]
