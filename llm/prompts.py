from __future__ import annotations

import json
from typing import Any, Dict


RECOMMENDATION_SYSTEM_PROMPT = (
    "You are a blockchain security expert reviewing a transfer before the user submits it. "
    "Output ONLY a valid JSON array of 3 to 5 strings. "
    "Do not include markdown, keys, or commentary. "
    "Each string is one concise, actionable recommendation. Focus on: "
    "1. security actions, 2. gas optimization, 3. transaction timing, "
    "4. alternative approaches if the risk is high. "
    "Only reference the data provided."
)


def build_recommendation_prompt(recommendation_input: Dict[str, Any]) -> Dict[str, str]:
    to_profile = recommendation_input.get("to_address") or {}
    from_profile = recommendation_input.get("from_address") or {}
    overall = recommendation_input.get("overall_risk") or {}
    to_score = to_profile.get("risk_score") or {}
    from_score = from_profile.get("risk_score") or {}
    factors = overall.get("factors") or []

    factor_lines = "\n".join(
        f"- {f.get('type')}: {f.get('description')}" for f in factors
    ) or "- none reported"

    examples = [
        [
            "Verify the recipient address through an official channel before sending.",
            "Send a small test amount first and confirm it arrives.",
            "Network congestion is high; waiting 1-2 hours should lower gas costs.",
        ],
    ]
    user = (
        "Provide 3-5 recommendations for this transaction.\n"
        f"To Address Risk: {to_score.get('overall', 0)}/100 ({to_score.get('category', 'LOW')})\n"
        f"From Address Risk: {from_score.get('overall', 0)}/100\n"
        f"Overall Risk: {overall.get('overall', 0)}/100 ({overall.get('category', 'LOW')})\n"
        f"Amount: {recommendation_input.get('amount') or 'Unknown'}\n"
        f"Contract: {'Yes' if to_profile.get('is_contract') else 'No'}\n"
        f"Verified: {'Yes' if to_profile.get('is_verified') else 'No'}\n"
        f"Risk Factors:\n{factor_lines}\n"
        f"Examples: {json.dumps(examples, ensure_ascii=True)}\n"
        "Return only the JSON array, no other text."
    )
    return {"system": RECOMMENDATION_SYSTEM_PROMPT, "user": user}
