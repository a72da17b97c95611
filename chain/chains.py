from __future__ import annotations

import json
from typing import Dict, Set

from app.config import get_settings


class UnsupportedChainError(ValueError):
    pass


def _load_rpc_urls() -> Dict[int, str]:
    """
    Load RPC URLs from settings.

    Expected env format:
      RPC_URLS='{"42161":"https://api.hyperliquid.xyz/evm","1":"https://eth.llamarpc.com"}'
    """
    settings = get_settings()

    raw = getattr(settings, "RPC_URLS", None)
    if not raw:
        return {}

    try:
        data = json.loads(raw)
    except Exception as e:
        raise ValueError("RPC_URLS must be valid JSON") from e

    # normalize keys to int
    rpc_urls: Dict[int, str] = {}
    for k, v in data.items():
        try:
            chain_id = int(k)
        except ValueError:
            raise ValueError(f"Invalid chain_id key in RPC_URLS: {k}")

        if not isinstance(v, str) or not v:
            raise ValueError(f"Invalid RPC URL for chain {chain_id}")

        rpc_urls[chain_id] = v.rstrip("/")

    return rpc_urls


def get_rpc_url(chain_id: int) -> str:
    """
    Return RPC URL for a given chain_id.
    Raises UnsupportedChainError if not configured.
    """
    rpc_url = _load_rpc_urls().get(chain_id)
    if not rpc_url:
        raise UnsupportedChainError(f"Unsupported chain_id: {chain_id}")

    return rpc_url


def list_supported_chains() -> list[int]:
    return sorted(_load_rpc_urls().keys())


def load_verified_contracts() -> Set[str]:
    """
    Lower-cased contract addresses treated as source-verified.

      VERIFIED_CONTRACTS='["0xabc...", "0xdef..."]'
    """
    raw = get_settings().VERIFIED_CONTRACTS
    if not raw:
        return set()
    try:
        data = json.loads(raw)
    except Exception as e:
        raise ValueError("VERIFIED_CONTRACTS must be a JSON list") from e
    if not isinstance(data, list):
        raise ValueError("VERIFIED_CONTRACTS must be a JSON list")
    return {str(a).lower() for a in data if a}
