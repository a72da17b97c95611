"""
Heuristic risk profile for a single on-chain address.

Every factor is derived from four live reads (balance, code, nonce, latest
block); the overall score is the mean of the factor scores.
"""
from __future__ import annotations

import asyncio
import logging
from decimal import Decimal
from typing import List, Set

from web3 import Web3

from chain import rpc
from chain.chains import load_verified_contracts
from tools.tool_runner import run_tool
from tx_risk.categorizer import CRITICAL_MIN, categorize_risk
from tx_risk.types import (
    AddressRiskProfile,
    RiskFactor,
    RiskFactorType,
    RiskLevel,
    RiskScore,
)

logger = logging.getLogger(__name__)


class InvalidAddressError(ValueError):
    pass


def analyze_contract_verification(bytecode: str) -> RiskFactor:
    if not bytecode or bytecode == "0x":
        return RiskFactor(
            type=RiskFactorType.CONTRACT_VERIFICATION,
            severity=RiskLevel.HIGH,
            score=80,
            description="Not a contract or empty bytecode",
            evidence="No contract code found",
        )

    # longer bytecode tends to mean a real implementation rather than a stub
    complexity = len(bytecode)
    evidence = f"Bytecode length: {complexity} characters"
    if complexity < 100:
        return RiskFactor(
            type=RiskFactorType.CONTRACT_VERIFICATION,
            severity=RiskLevel.CRITICAL,
            score=90,
            description="Very simple contract - potential proxy or malicious code",
            evidence=evidence,
        )
    if complexity < 1000:
        return RiskFactor(
            type=RiskFactorType.CONTRACT_VERIFICATION,
            severity=RiskLevel.HIGH,
            score=60,
            description="Simple contract - verification recommended",
            evidence=evidence,
        )
    return RiskFactor(
        type=RiskFactorType.CONTRACT_VERIFICATION,
        severity=RiskLevel.MEDIUM,
        score=30,
        description="Complex contract - likely legitimate but verify source",
        evidence=evidence,
    )


def analyze_address_activity(tx_count: int) -> RiskFactor:
    if tx_count == 0:
        return RiskFactor(
            type=RiskFactorType.TRANSACTION_PATTERN,
            severity=RiskLevel.HIGH,
            score=70,
            description="New address with no transaction history",
            evidence="Zero transactions found",
        )
    evidence = f"{tx_count} transactions"
    if tx_count < 5:
        return RiskFactor(
            type=RiskFactorType.TRANSACTION_PATTERN,
            severity=RiskLevel.MEDIUM,
            score=40,
            description="Limited transaction history",
            evidence=evidence,
        )
    if tx_count < 50:
        return RiskFactor(
            type=RiskFactorType.TRANSACTION_PATTERN,
            severity=RiskLevel.LOW,
            score=20,
            description="Moderate transaction history",
            evidence=evidence,
        )
    return RiskFactor(
        type=RiskFactorType.TRANSACTION_PATTERN,
        severity=RiskLevel.LOW,
        score=10,
        description="Established address with good transaction history",
        evidence=evidence,
    )


def analyze_balance(balance: str, is_contract: bool) -> RiskFactor:
    balance_num = Decimal(balance)
    evidence = f"Balance: {balance} ETH"

    if balance_num == 0:
        return RiskFactor(
            type=RiskFactorType.BALANCE_ANALYSIS,
            severity=RiskLevel.MEDIUM if is_contract else RiskLevel.HIGH,
            score=40 if is_contract else 60,
            description="Contract with zero balance" if is_contract else "Empty wallet - potential honeypot",
            evidence=evidence,
        )
    if balance_num < Decimal("0.001"):
        return RiskFactor(
            type=RiskFactorType.BALANCE_ANALYSIS,
            severity=RiskLevel.MEDIUM,
            score=35,
            description="Very low balance - limited activity",
            evidence=evidence,
        )
    if balance_num > 10000:
        return RiskFactor(
            type=RiskFactorType.BALANCE_ANALYSIS,
            severity=RiskLevel.LOW,
            score=15,
            description="High balance - likely legitimate entity",
            evidence=evidence,
        )
    return RiskFactor(
        type=RiskFactorType.BALANCE_ANALYSIS,
        severity=RiskLevel.LOW,
        score=20,
        description="Normal balance range",
        evidence=evidence,
    )


def analyze_interaction_history(tx_count: int) -> RiskFactor:
    if tx_count > 1000:
        return RiskFactor(
            type=RiskFactorType.INTERACTION_HISTORY,
            severity=RiskLevel.MEDIUM,
            score=25,
            description="High transaction volume - possible bot or exchange",
            evidence=f"{tx_count} transactions - automated pattern detected",
        )
    return RiskFactor(
        type=RiskFactorType.INTERACTION_HISTORY,
        severity=RiskLevel.LOW,
        score=15,
        description="Normal transaction frequency",
        evidence=f"{tx_count} transactions",
    )


def calculate_confidence(factors: List[RiskFactor]) -> float:
    if not factors:
        return 0.0

    # more factors analyzed → more confidence
    base_confidence = min(90, len(factors) * 20)

    if any(f.severity == RiskLevel.CRITICAL for f in factors):
        return max(base_confidence - 20, 60)
    if any(f.severity == RiskLevel.HIGH for f in factors):
        return max(base_confidence - 10, 70)
    return base_confidence


def generate_flags(risk_score: RiskScore, is_contract: bool, is_verified: bool | None, tx_count: int) -> List[str]:
    flags: List[str] = []
    if risk_score.overall >= CRITICAL_MIN:
        flags.append("SUSPICIOUS_PATTERN")
    if is_contract and not is_verified:
        flags.append("UNVERIFIED_CONTRACT")
    if tx_count == 0:
        flags.append("NEW_ADDRESS")
    return flags


def wei_to_ether_str(balance_wei: int) -> str:
    # from_wei returns int 0 for a zero balance
    return format(Decimal(Web3.from_wei(balance_wei, "ether")).normalize(), "f")


class AddressRiskAnalyzer:
    """Address risk collaborator backed by live RPC reads."""

    def __init__(self, chain_id: int, *, verified_contracts: Set[str] | None = None) -> None:
        self.chain_id = chain_id
        self.verified_contracts = (
            verified_contracts if verified_contracts is not None else load_verified_contracts()
        )

    async def analyze(self, address: str) -> AddressRiskProfile:
        if not address or not Web3.is_address(address):
            raise InvalidAddressError(f"Invalid address format: {address!r}")

        checksum = Web3.to_checksum_address(address)
        request = {"chainId": self.chain_id, "address": checksum}

        balance_wei, code, tx_count, _latest_block = await asyncio.gather(
            run_tool(
                tool_name="web3.eth_getBalance",
                request=request,
                fn=lambda: int(rpc.get_native_balance(self.chain_id, checksum)),
            ),
            run_tool(
                tool_name="web3.eth_getCode",
                request=request,
                fn=lambda: rpc.get_code(self.chain_id, checksum),
            ),
            run_tool(
                tool_name="web3.eth_getTransactionCount",
                request=request,
                fn=lambda: int(rpc.get_transaction_count(self.chain_id, checksum)),
            ),
            run_tool(
                tool_name="web3.eth_blockNumber",
                request={"chainId": self.chain_id},
                fn=lambda: int(rpc.get_block_number(self.chain_id)),
            ),
        )

        is_contract = bool(code) and code != "0x"
        balance = wei_to_ether_str(balance_wei)

        factors: List[RiskFactor] = []
        if is_contract:
            factors.append(analyze_contract_verification(code))
        factors.append(analyze_address_activity(tx_count))
        factors.append(analyze_balance(balance, is_contract))
        factors.append(analyze_interaction_history(tx_count))

        average = sum(f.score for f in factors) / len(factors)
        overall = min(100.0, max(0.0, average))
        risk_score = RiskScore(
            overall=overall,
            confidence=calculate_confidence(factors),
            category=categorize_risk(overall),
            factors=factors,
        )

        is_verified = checksum.lower() in self.verified_contracts if is_contract else None

        logger.info(
            "address analyzed address=%s contract=%s tx_count=%s overall=%.1f",
            checksum,
            is_contract,
            tx_count,
            overall,
        )
        return AddressRiskProfile(
            address=checksum,
            is_contract=is_contract,
            is_verified=is_verified,
            transaction_count=tx_count,
            balance=balance,
            risk_score=risk_score,
            flags=generate_flags(risk_score, is_contract, is_verified, tx_count),
        )
