from __future__ import annotations

import logging
from typing import Callable

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from api.schemas.risk_analysis import ErrorResponse, RiskAnalysisRequest
from app.config import get_settings
from chain.address_risk import AddressRiskAnalyzer
from chain.gas import GasOptimizer
from tx_risk.errors import AnalysisError, ValidationError
from tx_risk.orchestrator import RiskOrchestrator
from tx_risk.types import TransactionRiskAnalysis

router = APIRouter(tags=["risk-analysis"])
logger = logging.getLogger(__name__)

CORS_METHODS = "GET, POST, PUT, DELETE, OPTIONS"
CORS_ALLOW_HEADERS = "Content-Type, Authorization"


def cors_headers(request: Request) -> dict[str, str]:
    """
    CORS headers for this route, honoring the configured origin list.

    A wildcard list answers `*`; otherwise only a listed request Origin is
    echoed back, and a disallowed or missing Origin gets no allow-origin header.
    """
    allowed = get_settings().CORS_ALLOW_ORIGINS
    headers = {
        "Access-Control-Allow-Methods": CORS_METHODS,
        "Access-Control-Allow-Headers": CORS_ALLOW_HEADERS,
    }
    origin = request.headers.get("origin")
    if "*" in allowed:
        headers["Access-Control-Allow-Origin"] = "*"
    elif origin and origin in allowed:
        headers["Access-Control-Allow-Origin"] = origin
        headers["Vary"] = "Origin"
    return headers


OrchestratorFactory = Callable[[int], RiskOrchestrator]


def _build_orchestrator(chain_id: int) -> RiskOrchestrator:
    return RiskOrchestrator(
        analyzer=AddressRiskAnalyzer(chain_id),
        gas_source=GasOptimizer(chain_id),
    )


def get_orchestrator_factory() -> OrchestratorFactory:
    return _build_orchestrator


def _error(request: Request, status_code: int, error: str, details: str | None = None) -> JSONResponse:
    body = ErrorResponse(error=error, details=details).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body, headers=cors_headers(request))


@router.options("/risk-analysis")
def risk_analysis_options(request: Request) -> Response:
    return Response(status_code=200, headers=cors_headers(request))


@router.post(
    "/risk-analysis",
    response_model=TransactionRiskAnalysis,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def risk_analysis(
    payload: RiskAnalysisRequest,
    request: Request,
    orchestrator_factory: OrchestratorFactory = Depends(get_orchestrator_factory),
):
    try:
        orchestrator = orchestrator_factory(payload.chainId)
        result = await orchestrator.analyze(
            to_address=payload.toAddress,
            from_address=payload.fromAddress,
            amount=payload.amount,
        )
    except ValidationError as e:
        return _error(request, 400, str(e))
    except AnalysisError as e:
        return _error(request, 500, "Failed to analyze transaction risk", e.details)
    except Exception as e:
        logger.exception("Risk analysis error")
        return _error(request, 500, "Failed to analyze transaction risk", str(e) or "Unknown error")

    return JSONResponse(content=result.to_public_dict(), headers=cors_headers(request))
