# swms/generation/llm_client.py
from __future__ import annotations
from typing import Any, Dict, Optional
import logging
import os

from openai import AsyncOpenAI

logger = logging.getLogger(__name__)


def _get_api_key() -> Optional[str]:
    return os.getenv("OPENAI_API_KEY") or os.getenv("OPENAI_APIKEY")


class OpenAIJsonClient:
    """
    Thin async wrapper over chat completions in JSON mode.
    complete_json() returns the raw message text; parsing happens in normalizers.
    """

    def __init__(self, model: str = "gpt-4o", *, max_tokens: int = 3000, temperature: float = 0.3,
                 api_key: Optional[str] = None, client: Optional[Any] = None):
        self.model = model
        self.max_tokens = int(max_tokens)
        self.temperature = float(temperature)
        self._client = client if client is not None else AsyncOpenAI(api_key=api_key or _get_api_key())

    async def complete_json(self, system: str, user: str) -> str:
        logger.info("[LLM] request model=%s max_tokens=%d prompt_chars=%d",
                    self.model, self.max_tokens, len(system) + len(user))
        resp = await self._client.chat.completions.create(
            model=self.model,
            messages=[{"role": "system", "content": system},
                      {"role": "user", "content": user}],
            max_tokens=self.max_tokens,
            temperature=self.temperature,
            response_format={"type": "json_object"},
        )
        content = resp.choices[0].message.content if resp.choices else None
        logger.info("[LLM] response chars=%d", len(content or ""))
        return content or ""


def build_client(cfg: Dict[str, Any]) -> Optional[OpenAIJsonClient]:
    """Client from config, or None when no API key is configured."""
    key = _get_api_key()
    if not key:
        logger.info("[LLM] OPENAI_API_KEY not set; AI generation unavailable")
        return None
    return OpenAIJsonClient(
        model=cfg.get("llm_model", "gpt-4o"),
        max_tokens=cfg.get("llm_max_tokens", 3000),
        temperature=cfg.get("llm_temperature", 0.3),
        api_key=key,
    )
