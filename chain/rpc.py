from __future__ import annotations

from functools import lru_cache

from web3 import Web3

from chain.chains import get_rpc_url


class Web3RPCError(RuntimeError):
    pass


@lru_cache
def _get_web3(chain_id: int) -> Web3:
    """
    Lazily create and cache a Web3 instance per chain_id.
    """
    rpc_url = get_rpc_url(chain_id)
    w3 = Web3(Web3.HTTPProvider(rpc_url))

    if not w3.is_connected():
        raise Web3RPCError(f"Unable to connect to RPC for chain_id={chain_id}")

    return w3


# ---------------------------
# Account helpers
# ---------------------------

def get_native_balance(chain_id: int, address: str) -> int:
    """
    Return native token balance in wei.
    """
    w3 = _get_web3(chain_id)
    try:
        return w3.eth.get_balance(Web3.to_checksum_address(address))
    except Exception as e:
        raise Web3RPCError(f"get_native_balance failed: {e}") from e


def get_code(chain_id: int, address: str) -> str:
    """
    Return deployed bytecode as a 0x-prefixed hex string ("0x" for EOAs).
    """
    w3 = _get_web3(chain_id)
    try:
        code = w3.eth.get_code(Web3.to_checksum_address(address))
    except Exception as e:
        raise Web3RPCError(f"get_code failed: {e}") from e
    return Web3.to_hex(code) if code else "0x"


def get_transaction_count(chain_id: int, address: str) -> int:
    """
    Return the account nonce (number of sent transactions).
    """
    w3 = _get_web3(chain_id)
    try:
        return w3.eth.get_transaction_count(Web3.to_checksum_address(address))
    except Exception as e:
        raise Web3RPCError(f"get_transaction_count failed: {e}") from e


# ---------------------------
# Network helpers
# ---------------------------

def get_block_number(chain_id: int) -> int:
    w3 = _get_web3(chain_id)
    try:
        return w3.eth.block_number
    except Exception as e:
        raise Web3RPCError(f"get_block_number failed: {e}") from e


def get_gas_price(chain_id: int) -> int:
    """
    Return the current legacy gas price in wei.
    """
    w3 = _get_web3(chain_id)
    try:
        return w3.eth.gas_price
    except Exception as e:
        raise Web3RPCError(f"get_gas_price failed: {e}") from e
