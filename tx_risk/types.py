"""Data types for transaction risk analysis."""
from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class RiskLevel(str, Enum):
    """Risk severity / category levels."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class RiskFactorType(str, Enum):
    CONTRACT_VERIFICATION = "CONTRACT_VERIFICATION"
    TRANSACTION_PATTERN = "TRANSACTION_PATTERN"
    ADDRESS_AGE = "ADDRESS_AGE"
    BALANCE_ANALYSIS = "BALANCE_ANALYSIS"
    INTERACTION_HISTORY = "INTERACTION_HISTORY"
    SCAM_DATABASE = "SCAM_DATABASE"
    GAS_ANALYSIS = "GAS_ANALYSIS"


class NetworkCongestion(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class _WireModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RiskFactor(_WireModel):
    type: RiskFactorType
    severity: RiskLevel
    score: float = Field(default=0, ge=0, le=100)
    description: str
    evidence: Optional[str] = None


class RiskScore(_WireModel):
    """
    Overall risk (0 = safest, 100 = highest risk) with its category.

    The category is always derived from `overall`; a supplied category that
    disagrees with the score is replaced.
    """
    overall: float = Field(ge=0, le=100)
    confidence: float = Field(ge=0, le=100)
    category: RiskLevel = RiskLevel.LOW
    factors: List[RiskFactor] = Field(default_factory=list)

    @model_validator(mode="after")
    def _derive_category(self) -> "RiskScore":
        from tx_risk.categorizer import categorize_risk

        self.category = categorize_risk(self.overall)
        return self


class AddressRiskProfile(_WireModel):
    address: str
    is_contract: bool = False
    is_verified: Optional[bool] = None
    contract_name: Optional[str] = None
    transaction_count: int = Field(default=0, ge=0)
    balance: str = "0"
    risk_score: RiskScore
    flags: List[str] = Field(default_factory=list)


class GasOptimization(_WireModel):
    current_gas_price: str
    recommended_gas_price: str
    potential_savings: str
    optimal_time_to_send: Optional[str] = None
    network_congestion: NetworkCongestion


class TransactionRiskAnalysis(_WireModel):
    from_address: AddressRiskProfile
    to_address: AddressRiskProfile
    amount: str
    estimated_gas: str
    gas_optimization: Optional[GasOptimization] = None
    overall_risk: RiskScore
    recommendations: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    def to_public_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
