from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.v1.risk_analysis import router as risk_analysis_router
from app.config import get_settings
from app.core.langsmith import configure_langsmith
from app.core.logging import configure_logging
from app.core.middleware import RequestContextMiddleware
from chain.chains import list_supported_chains


def create_app() -> FastAPI:
    configure_langsmith()

    s = get_settings()
    app = FastAPI(title="Transaction Risk Service", version="0.1.0")

    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=s.CORS_ALLOW_ORIGINS,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.get("/healthz")
    async def healthz():
        s = get_settings()
        return {
            "ok": True,
            "llm_model": s.LLM_MODEL,
            "llm_enabled": s.LLM_ENABLED and bool(s.OPENAI_API_KEY),
            "default_chain_id": s.default_chain_id,
            "supported_chains": list_supported_chains(),
        }

    app.include_router(risk_analysis_router, prefix="/v1")

    return app
configure_logging()
app = create_app()
