from __future__ import annotations

import json
import logging
from typing import Any, List

from llm.prompts import build_recommendation_prompt

logger = logging.getLogger(__name__)


class LLMClient:
    def __init__(
        self,
        *,
        model: str | None = None,
        provider: str | None = None,
        api_key: str | None = None,
        temperature: float = 0.0,
        timeout_s: int = 30,
    ) -> None:
        self.model = model
        self.provider = provider
        self.api_key = api_key
        self.temperature = temperature
        self.timeout_s = timeout_s

    def recommend(self, *, recommendation_input: dict, max_tokens: int | None = None) -> List[Any]:
        prompt = build_recommendation_prompt(recommendation_input)
        raw_text = self._call_provider(prompt=prompt, max_tokens=max_tokens)
        return self._parse_json_array(raw_text)

    def _call_provider(self, *, prompt: dict, max_tokens: int | None = None) -> str:
        if self.provider == "openai":
            return self._call_openai(prompt=prompt, max_tokens=max_tokens)
        raise RuntimeError("LLM provider not configured")

    def _call_openai(self, *, prompt: dict, max_tokens: int | None = None) -> str:
        if not self.api_key:
            raise RuntimeError("OPENAI_API_KEY is not set")
        try:
            from langchain_core.messages import HumanMessage, SystemMessage
            from langchain_openai import ChatOpenAI
        except Exception as e:
            raise RuntimeError(f"LangChain OpenAI client not available: {e}") from e

        messages = [
            SystemMessage(content=prompt["system"]),
            HumanMessage(content=prompt["user"]),
        ]

        logger.info(
            "LLM call start provider=openai model=%s max_tokens=%s",
            self.model or "gpt-4o-mini",
            max_tokens,
        )
        llm = ChatOpenAI(
            model=self.model or "gpt-4o-mini",
            temperature=self.temperature,
            timeout=self.timeout_s,
            api_key=self.api_key,
            max_tokens=max_tokens,
        )
        response = llm.invoke(messages)
        output_text = response.content
        if not output_text:
            raise RuntimeError("OpenAI returned empty content")
        if not isinstance(output_text, str):
            output_text = json.dumps(output_text)
        logger.info("LLM call success provider=openai output_len=%s", len(output_text))
        return output_text

    def _parse_json_array(self, text: str) -> List[Any]:
        if not isinstance(text, str) or not text.strip():
            raise ValueError("LLM returned empty response")
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError:
            start = text.find("[")
            end = text.rfind("]")
            if start != -1 and end != -1 and end > start:
                parsed = json.loads(text[start : end + 1])
            else:
                raise
        if not isinstance(parsed, list):
            raise ValueError(f"LLM returned {type(parsed).__name__}, expected a JSON array")
        return parsed
