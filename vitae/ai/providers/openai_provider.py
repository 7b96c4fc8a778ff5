from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional, Sequence

from openai import AsyncOpenAI, OpenAIError

from vitae.ai.types import ChatMessage
from vitae.ports import AIProviderError

logger = logging.getLogger(__name__)

_FENCED_BLOCK_RE = re.compile(r"```(?:json)?(.*?)```", re.DOTALL)


def clean_json(text: str) -> str:
    """Extract the JSON object from a model reply.

    Fenced blocks win, and the last one is taken since earlier blocks tend to
    be drafts. Otherwise the outermost braces are used.
    """
    text = (text or "").strip()
    blocks = _FENCED_BLOCK_RE.findall(text)
    if blocks:
        return blocks[-1].strip()
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end != -1 and start < end:
        return text[start : end + 1]
    return text


class OpenAIProvider:
    """JSON chat completions against any OpenAI-compatible endpoint (OpenAI, Groq)."""

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        timeout_s: float = 60.0,
        max_retries: int = 2,
        json_mode: bool = True,
    ):
        key = (api_key or "").strip()
        if not key:
            raise RuntimeError("AI provider API key is missing")
        self._json_mode = json_mode
        self._client = AsyncOpenAI(
            api_key=key,
            base_url=base_url or None,
            timeout=timeout_s,
            max_retries=max_retries,
        )

    async def complete_json(
        self,
        messages: Sequence[ChatMessage],
        *,
        model: str,
        temperature: float,
        max_tokens: int = 1200,
    ) -> dict[str, Any]:
        create_kwargs: dict[str, Any] = {
            "model": model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if self._json_mode:
            create_kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await self._client.chat.completions.create(**create_kwargs)
        except OpenAIError as exc:
            logger.warning("ai_completion_failed model=%s: %s", model, exc)
            raise AIProviderError(f"AI completion failed: {exc}") from exc

        content = response.choices[0].message.content if response.choices else ""
        if not content:
            raise AIProviderError("AI completion returned an empty response", code="AI_EMPTY_RESPONSE")

        cleaned = clean_json(content)
        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError as exc:
            logger.warning("ai_completion_invalid_json model=%s content_len=%s", model, len(content))
            raise AIProviderError("AI completion returned invalid JSON", code="AI_INVALID_JSON") from exc
        if not isinstance(parsed, dict):
            raise AIProviderError("AI completion did not return a JSON object", code="AI_INVALID_JSON")
        return parsed

    async def aclose(self) -> None:
        await self._client.close()
