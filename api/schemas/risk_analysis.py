from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from app.config import get_settings


class RiskAnalysisRequest(BaseModel):
    # toAddress is checked by the orchestrator so a missing value maps to 400, not 422
    toAddress: str | None = None
    fromAddress: str | None = None
    amount: str | None = None
    chainId: int = Field(default_factory=lambda: get_settings().default_chain_id, ge=1)

    @field_validator("amount", mode="before")
    @classmethod
    def _amount_as_string(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None
