# swms/generation/adapter.py
from __future__ import annotations
from typing import Any, Dict, List, Optional, Protocol, Tuple
import asyncio
import logging
import time

from swms.config import get_config
from swms.generation.llm_client import build_client
from swms.generation.normalizers import normalize_response
from swms.generation.prompts import build_prompt
from swms.generation.site_lookups import emergency_response_for, plant_equipment_for
from swms.generation.trade_scope import canonical_trade
from swms.resolution.aggregator import aggregate
from swms.risk.errors import AIGenerationError, AIMalformedResponseError, AITimeoutError
from swms.risk.models import GeneratedActivity, GeneratedDocument
from swms.schemas.contracts import GenerationRequest

logger = logging.getLogger(__name__)


class JsonCompletionClient(Protocol):
    async def complete_json(self, system: str, user: str) -> str: ...


class AIGenerationAdapter:
    """
    Drives one LLM call per request under a hard deadline.

    asyncio.wait_for cancels the in-flight completion when the deadline passes,
    so a timed-out request does not keep running in the background.
    """

    def __init__(self, client: JsonCompletionClient, *, timeout_s: float = 30.0):
        self.client = client
        self.timeout_s = float(timeout_s)

    @classmethod
    def from_config(cls, cfg: Optional[Dict[str, Any]] = None) -> Optional["AIGenerationAdapter"]:
        cfg = cfg or get_config()
        client = build_client(cfg)
        if client is None:
            return None
        return cls(client, timeout_s=cfg.get("llm_timeout_s", 30.0))

    async def _call(self, system: str, user: str) -> str:
        start = time.perf_counter()
        try:
            text = await asyncio.wait_for(self.client.complete_json(system, user), timeout=self.timeout_s)
        except asyncio.TimeoutError as e:
            logger.warning("[LLM] timed out after %.1fs; request cancelled", self.timeout_s)
            raise AITimeoutError(f"AI generation exceeded {self.timeout_s:.1f}s") from e
        except AIGenerationError:
            raise
        except Exception as e:
            # SDK errors (network, auth, rate limit) all surface as AIGenerationError
            logger.warning("[LLM] call failed: %r", e)
            raise AIGenerationError(f"AI generation failed: {e}") from e
        logger.info("[LLM] completed in %.2fs", time.perf_counter() - start)
        return text

    async def generate_activities_with_warnings(
        self, request: GenerationRequest
    ) -> Tuple[List[GeneratedActivity], List[str]]:
        trade = canonical_trade(request.trade_type)
        pd = request.project_details
        system, user = build_prompt(
            trade, request.description, state=pd.state, site=pd.site_environment,
            hrcw_categories=pd.hrcw_categories,
        )
        text = await self._call(system, user)
        try:
            return normalize_response(
                text, trade=trade, state=pd.state, site=pd.site_environment,
                hrcw_categories=pd.hrcw_categories,
            )
        except AIGenerationError:
            raise
        except Exception as e:
            logger.warning("[LLM] response could not be normalised: %r", e)
            raise AIMalformedResponseError(f"unusable AI response: {e}") from e

    async def generate_activities(self, request: GenerationRequest) -> List[GeneratedActivity]:
        """Canonical activities for the request. Raises AIGenerationError subclasses."""
        acts, _ = await self.generate_activities_with_warnings(request)
        return acts

    async def generate(self, request: GenerationRequest) -> GeneratedDocument:
        """Stand-alone AI document (no catalog tasks). Raises AIGenerationError subclasses."""
        acts, warnings = await self.generate_activities_with_warnings(request)
        trade = canonical_trade(request.trade_type)
        pd = request.project_details
        return aggregate(
            [],
            trade_type=trade,
            state=pd.state,
            project_details=pd,
            generated=acts,
            plant_equipment=plant_equipment_for(trade),
            emergency_response=emergency_response_for(pd.state),
            warnings=warnings,
            source="ai",
        )
