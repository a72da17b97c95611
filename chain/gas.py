from __future__ import annotations

import logging

from chain import rpc
from tools.tool_runner import run_tool
from tx_risk.types import GasOptimization, NetworkCongestion

logger = logging.getLogger(__name__)

HIGH_CONGESTION_GWEI = 50
MEDIUM_CONGESTION_GWEI = 25
RECOMMENDED_DISCOUNT = 0.8
MIN_RECOMMENDED_GWEI = 1.0

DEFAULT_GAS_OPTIMIZATION = GasOptimization(
    current_gas_price="25 GWEI",
    recommended_gas_price="22 GWEI",
    potential_savings="12%",
    network_congestion=NetworkCongestion.MEDIUM,
)


def build_gas_optimization(gas_price_wei: int) -> GasOptimization:
    current_gwei = gas_price_wei / 1e9

    if current_gwei > HIGH_CONGESTION_GWEI:
        congestion = NetworkCongestion.HIGH
    elif current_gwei > MEDIUM_CONGESTION_GWEI:
        congestion = NetworkCongestion.MEDIUM
    else:
        congestion = NetworkCongestion.LOW

    recommended_gwei = max(MIN_RECOMMENDED_GWEI, current_gwei * RECOMMENDED_DISCOUNT)
    if current_gwei > 0:
        savings = max(0.0, (current_gwei - recommended_gwei) / current_gwei * 100)
    else:
        savings = 0.0

    return GasOptimization(
        current_gas_price=f"{current_gwei:.2f} GWEI",
        recommended_gas_price=f"{recommended_gwei:.2f} GWEI",
        potential_savings=f"{savings:.1f}%",
        network_congestion=congestion,
        optimal_time_to_send="Wait 1-2 hours for lower gas" if congestion == NetworkCongestion.HIGH else None,
    )


class GasOptimizer:
    """Gas price advice for the target chain; degrades to a default quote."""

    def __init__(self, chain_id: int) -> None:
        self.chain_id = chain_id

    async def get_optimization(self) -> GasOptimization:
        try:
            gas_price_wei = await run_tool(
                tool_name="web3.eth_gasPrice",
                request={"chainId": self.chain_id},
                fn=lambda: int(rpc.get_gas_price(self.chain_id)),
            )
        except Exception as e:
            logger.warning("gas price lookup failed chain_id=%s: %s; using default quote", self.chain_id, e)
            return DEFAULT_GAS_OPTIMIZATION.model_copy()
        return build_gas_optimization(gas_price_wei)
