from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


HYPEREVM_RPC_URL = "https://api.hyperliquid.xyz/evm"


class Settings(BaseSettings):
    log_level: str = "INFO"
    log_json: bool = False

    # LLM recommendations (optional; deterministic fallback when disabled)
    llm_enabled: bool = True
    llm_provider: str = "openai"
    openai_api_key: str | None = None
    llm_model: str = "gpt-4o-mini"  # safe default- override via env
    llm_temperature: float = 0.0
    llm_timeout_s: int = 30
    llm_recommendation_max_tokens: int = 300

    langsmith_tracing: bool = False
    langsmith_api_key: str | None = None
    langsmith_project: str = "tx-risk"
    langsmith_endpoint: str = "https://api.smith.langchain.com"

    # chain access
    rpc_urls: str = '{"42161": "' + HYPEREVM_RPC_URL + '"}'
    default_chain_id: int = 42161
    verified_contracts: str = "[]"

    cors_allow_origins: str = "*"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def LLM_ENABLED(self) -> bool:
        return self.llm_enabled

    @property
    def LLM_PROVIDER(self) -> str:
        return self.llm_provider

    @property
    def OPENAI_API_KEY(self) -> str | None:
        return self.openai_api_key

    @property
    def LLM_MODEL(self) -> str:
        return self.llm_model

    @property
    def LLM_TEMPERATURE(self) -> float:
        return self.llm_temperature

    @property
    def LLM_TIMEOUT_S(self) -> int:
        return self.llm_timeout_s

    @property
    def RPC_URLS(self) -> str:
        return self.rpc_urls

    @property
    def VERIFIED_CONTRACTS(self) -> str:
        return self.verified_contracts

    @property
    def CORS_ALLOW_ORIGINS(self) -> list[str]:
        return [o.strip() for o in self.cors_allow_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader (process-level).
    """
    return Settings()
