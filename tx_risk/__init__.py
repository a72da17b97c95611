"""Transaction risk assessment: scoring, warnings and recommendations."""
from .categorizer import categorize_risk
from .combiner import combine_risk
from .config import RiskPolicyConfig, get_risk_policy_config
from .errors import AnalysisError, RiskAnalysisError, ValidationError
from .orchestrator import RiskOrchestrator, analyze_transaction_risk, synthetic_sender_profile
from .recommendations import RecommendationGenerator, fallback_recommendations
from .types import (
    AddressRiskProfile,
    GasOptimization,
    RiskFactor,
    RiskLevel,
    RiskScore,
    TransactionRiskAnalysis,
)
from .warning_rules import generate_warnings

__all__ = [
    "categorize_risk",
    "combine_risk",
    "RiskPolicyConfig",
    "get_risk_policy_config",
    "AnalysisError",
    "RiskAnalysisError",
    "ValidationError",
    "RiskOrchestrator",
    "analyze_transaction_risk",
    "synthetic_sender_profile",
    "RecommendationGenerator",
    "fallback_recommendations",
    "AddressRiskProfile",
    "GasOptimization",
    "RiskFactor",
    "RiskLevel",
    "RiskScore",
    "TransactionRiskAnalysis",
    "generate_warnings",
]
