# swms/generation/fallback.py
from __future__ import annotations
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple
import logging

import yaml

from swms.config import MIN_ACTIVITIES
from swms.generation.normalizers import normalize_items, normalize_task_name
from swms.generation.site_lookups import emergency_response_for, plant_equipment_for
from swms.generation.trade_scope import canonical_trade
from swms.resolution.aggregator import aggregate
from swms.risk.errors import CatalogIntegrityError
from swms.risk.hrcw import stem_hit
from swms.risk.models import GeneratedActivity, GeneratedDocument
from swms.schemas.contracts import ProjectDetails, normalize_state

logger = logging.getLogger(__name__)

RULES_PATH = Path(__file__).resolve().parent / "data" / "fallback_rules.yaml"
SCAN_MODES = ("trade", "description", "both")


@dataclass(frozen=True)
class FallbackRule:
    keywords: Tuple[str, ...]
    scan: str
    activities: Tuple[Dict[str, Any], ...]


@dataclass(frozen=True)
class RuleSet:
    rules: Tuple[FallbackRule, ...]
    padding: Tuple[Dict[str, Any], ...]


def load_rules(path: str | Path = RULES_PATH) -> RuleSet:
    p = Path(path)
    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise CatalogIntegrityError(f"cannot load fallback rules from {p}: {e}") from e

    problems: List[str] = []
    rules: List[FallbackRule] = []
    for i, r in enumerate(data.get("rules") or []):
        scan = str(r.get("scan", "both")).lower()
        kws = tuple(str(k).lower() for k in r.get("keywords") or [])
        acts = tuple(r.get("activities") or [])
        if scan not in SCAN_MODES:
            problems.append(f"rule {i}: unknown scan mode '{scan}'")
        if not kws:
            problems.append(f"rule {i}: no keywords")
        if not acts:
            problems.append(f"rule {i}: no activities")
        rules.append(FallbackRule(kws, scan, acts))
    padding = tuple(data.get("padding") or [])
    if len({normalize_task_name(a.get("name", "")) for a in padding}) < MIN_ACTIVITIES:
        problems.append(f"padding must hold at least {MIN_ACTIVITIES} distinct activities")
    if problems:
        raise CatalogIntegrityError(problems)
    return RuleSet(tuple(rules), padding)


@lru_cache(maxsize=1)
def default_rules() -> RuleSet:
    return load_rules(RULES_PATH)


def rule_matches(rule: FallbackRule, trade: str, description: str) -> bool:
    if rule.scan == "trade":
        text = trade
    elif rule.scan == "description":
        text = description
    else:
        text = f"{trade} {description}"
    low = (text or "").lower()
    return any(stem_hit(low, k) for k in rule.keywords)


def render(value: Any, ctx: Dict[str, str]) -> Any:
    """Fill {state}/{site}/{site_lower} placeholders through nested dicts and lists."""
    if isinstance(value, str):
        return value.format(**ctx)
    if isinstance(value, list):
        return [render(v, ctx) for v in value]
    if isinstance(value, dict):
        return {k: render(v, ctx) for k, v in value.items()}
    return value


def fallback_activities(
    trade_type: str,
    description: str = "",
    site_environment: str = "Commercial",
    state: str = "NSW",
    hrcw_categories: Sequence[int] = (),
    *,
    min_activities: int = MIN_ACTIVITIES,
    exclude_names: Iterable[str] = (),
    rules: Optional[RuleSet] = None,
) -> List[GeneratedActivity]:
    """
    Rule-table activities for the request, padded with distinct generic
    activities until there are at least min_activities. Names in
    exclude_names (already produced elsewhere) are skipped.
    """
    rules = rules or default_rules()
    trade = canonical_trade(trade_type)
    st = normalize_state(state)
    site = site_environment or "Commercial"
    ctx = {"state": st, "site": site, "site_lower": site.lower()}

    blocks: List[Dict[str, Any]] = []
    for rule in rules.rules:
        if rule_matches(rule, trade, description):
            blocks.extend(render(dict(a), ctx) for a in rule.activities)

    taken = {normalize_task_name(n) for n in exclude_names}
    blocks = [b for b in blocks if normalize_task_name(b.get("name", "")) not in taken]
    acts, _ = normalize_items(blocks, trade=trade, state=st, site=site,
                              hrcw_categories=hrcw_categories, origin="fallback")

    have = taken | {normalize_task_name(a.name) for a in acts}
    for pad in rules.padding:
        if len(acts) >= min_activities:
            break
        if normalize_task_name(pad.get("name", "")) in have:
            continue
        extra, _ = normalize_items([render(dict(pad), ctx)], trade=trade, state=st, site=site,
                                   hrcw_categories=hrcw_categories, origin="fallback")
        for a in extra:
            have.add(normalize_task_name(a.name))
            acts.append(a)

    logger.info("[FALLBACK] trade=%s -> %d activities", trade, len(acts))
    return acts


def generate_fallback(
    trade_type: str,
    description: str = "",
    site_environment: str = "Commercial",
    state: str = "NSW",
    hrcw_categories: Sequence[int] = (),
    *,
    project_details: Optional[ProjectDetails] = None,
    warnings: Sequence[str] = (),
) -> GeneratedDocument:
    """Complete document from the rule table alone. Never calls the AI path."""
    trade = canonical_trade(trade_type)
    acts = fallback_activities(trade, description, site_environment, state, hrcw_categories)
    details = project_details or ProjectDetails(
        state=normalize_state(state), site_environment=site_environment, hrcw_categories=list(hrcw_categories),
    )
    return aggregate(
        [],
        trade_type=trade,
        state=state,
        project_details=details,
        hrcw_categories=hrcw_categories,
        generated=acts,
        plant_equipment=plant_equipment_for(trade),
        emergency_response=emergency_response_for(state),
        warnings=warnings,
        source="fallback",
    )
