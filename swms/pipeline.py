# swms/pipeline.py
from __future__ import annotations
from typing import Any, Dict, List, Optional, Union
import asyncio
import logging

from swms.catalog.store import TaskCatalog, default_catalog
from swms.config import get_config
from swms.generation.adapter import AIGenerationAdapter
from swms.generation.fallback import fallback_activities
from swms.generation.site_lookups import emergency_response_for, plant_equipment_for
from swms.resolution.aggregator import aggregate
from swms.resolution.resolver import TaskResolver
from swms.risk.errors import (
    AI_MALFORMED,
    AI_TIMEOUT,
    AI_UNAVAILABLE,
    AIGenerationError,
    AIMalformedResponseError,
    AITimeoutError,
    warning_text,
)
from swms.risk.models import GeneratedActivity, GeneratedDocument
from swms.schemas.contracts import GenerationRequest

logger = logging.getLogger(__name__)

RequestLike = Union[GenerationRequest, Dict[str, Any]]


def _coerce_request(request: RequestLike, cfg: Dict[str, Any]) -> GenerationRequest:
    if isinstance(request, GenerationRequest):
        return request
    return GenerationRequest.from_dict(request or {}, default_state=cfg.get("default_state", "NSW"))


def _resolve_adapter(adapter: Optional[AIGenerationAdapter], cfg: Dict[str, Any]) -> Optional[AIGenerationAdapter]:
    if adapter is not None:
        return adapter
    if not cfg.get("use_llm"):
        return None
    return AIGenerationAdapter.from_config(cfg)


async def generate_swms(
    request: RequestLike,
    *,
    catalog: Optional[TaskCatalog] = None,
    adapter: Optional[AIGenerationAdapter] = None,
    config: Optional[Dict[str, Any]] = None,
) -> GeneratedDocument:
    """
    Full request flow: resolve catalog tasks, try the AI path, fall back on any
    per-request failure, then aggregate everything into one document.

    Only catalog integrity errors (raised while loading the default catalog)
    escape; every per-request problem becomes a warning on the document.
    """
    cfg = config if config is not None else get_config()
    req = _coerce_request(request, cfg)
    catalog = catalog if catalog is not None else default_catalog(cfg.get("catalog_path"))
    pd = req.project_details
    min_acts = int(cfg.get("min_activities", 4))

    resolver = TaskResolver(
        catalog,
        general_task_cap=int(cfg.get("general_task_cap", 8)),
        partial_match_limit=int(cfg.get("partial_match_limit", 3)),
    )
    resolution = resolver.resolve(req.selected_activities, req.trade_type)
    trade = resolution.trade
    warnings: List[str] = list(resolution.warnings)

    generated: List[GeneratedActivity] = []
    source = "fallback"
    ai = _resolve_adapter(adapter, cfg)
    if ai is None:
        if cfg.get("use_llm"):
            w = warning_text(AI_UNAVAILABLE, "AI generation enabled but no API key configured; using fallback")
            logger.warning("[PIPELINE] %s", w)
            warnings.append(w)
    else:
        try:
            acts, ai_warnings = await ai.generate_activities_with_warnings(req)
            generated.extend(acts)
            warnings.extend(ai_warnings)
            source = "ai"
        except AITimeoutError as e:
            w = warning_text(AI_TIMEOUT, f"{e}; using fallback")
            logger.warning("[PIPELINE] %s", w)
            warnings.append(w)
        except AIMalformedResponseError as e:
            w = warning_text(AI_MALFORMED, f"{e}; using fallback")
            logger.warning("[PIPELINE] %s", w)
            warnings.append(w)
        except AIGenerationError as e:
            w = warning_text(AI_UNAVAILABLE, f"{e}; using fallback")
            logger.warning("[PIPELINE] %s", w)
            warnings.append(w)

    if len(generated) < min_acts:
        extra = fallback_activities(
            trade, req.description, pd.site_environment, pd.state, pd.hrcw_categories,
            min_activities=min_acts - len(generated),
            exclude_names=[a.name for a in generated],
        )
        if generated:
            extra = extra[: min_acts - len(generated)]
            logger.info("[PIPELINE] AI returned %d activities; topped up with %d fallback", len(generated), len(extra))
        generated.extend(extra)

    doc = aggregate(
        resolution.tasks,
        trade_type=trade,
        state=pd.state,
        project_details=pd,
        hrcw_categories=pd.hrcw_categories,
        generated=generated,
        plant_equipment=plant_equipment_for(trade),
        emergency_response=emergency_response_for(pd.state),
        warnings=warnings,
        source=source,
    )
    logger.info("[PIPELINE] trade=%s source=%s assessments=%d warnings=%d",
                trade, source, len(doc.risk_assessments), len(doc.warnings))
    return doc


def generate_swms_sync(request: RequestLike, **kwargs) -> GeneratedDocument:
    """Blocking wrapper for scripts and tests without a running loop."""
    return asyncio.run(generate_swms(request, **kwargs))
