# swms/generation/normalizers.py
"""
Single boundary between raw model output and GeneratedActivity.

Responses have arrived as {"activities": [...]}, {"SWMS_Tasks": [...]},
{"swms": {"tasks": [...]}}, bare arrays, fenced ```json blocks, camelCase,
PascalCase and snake_case keys, textual risk ratings, and hazards as plain
strings. Everything past this module only sees GeneratedActivity.
"""
from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple
import json
import logging
import math
import re

from pydantic import ValidationError

from swms.generation.trade_defaults import (
    default_cause,
    default_consequence,
    default_environment,
    default_legislation,
    defaults_for,
)
from swms.risk.errors import AIMalformedResponseError
from swms.risk.hrcw import annotate, valid_categories
from swms.risk.models import GeneratedActivity, Hazard, clamp_score

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# key aliases (compared after lowercasing and dropping non-alphanumerics)
# ---------------------------------------------------------------------------

NAME_KEYS = ("name", "task", "taskname", "activity", "activityname", "title", "workactivity")

ACTIVITY_ALIASES: Dict[str, Tuple[str, ...]] = {
    "name": NAME_KEYS,
    "description": ("description", "desc", "details", "taskdescription", "scope"),
    "hazards": ("hazards", "hazard", "risks", "hazardlist", "identifiedhazards"),
    "risk_score": ("riskscore", "initialrisk", "initialriskscore", "riskrating", "risklevel", "risk"),
    "residual_risk": ("residualrisk", "residualriskscore", "residualrating", "residual"),
    "legislation": ("legislation", "compliance", "regulations", "codes", "compliancecodes", "references"),
    "ppe": ("ppe", "personalprotectiveequipment", "ppereq", "pperequired"),
    "tools": ("tools", "equipment", "plant", "toolsequipment"),
    "training_required": ("trainingrequired", "training", "competencies", "qualifications"),
    "hrcw_references": ("hrcwreferences", "hrcw", "hrcwcategories", "highriskconstructionwork"),
    "permit_required": ("permitrequired", "permitsrequired", "permits", "permit"),
    "within_trade_scope": ("istaskwithintradescope", "withintradescope", "inscope", "tradescope"),
    "scope_reason": ("scopereason", "scopejustification"),
    "controls": ("controlmeasures", "controls", "control", "mitigation"),
}

HAZARD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "type": ("type", "hazardtype", "category"),
    "description": ("description", "hazard", "name", "desc"),
    "cause_agent": ("causeagent", "cause", "source"),
    "environmental_condition": ("environmentalcondition", "environment", "condition"),
    "consequence": ("consequence", "outcome", "injury"),
    "risk_rating": ("riskrating", "riskscore", "rating", "risk", "initialrisk"),
    "control_measures": ("controlmeasures", "controls", "control", "mitigation"),
    "residual_risk": ("residualrisk", "residual", "residualrating"),
}

TEXT_RATINGS = {"low": 4, "medium": 8, "moderate": 8, "high": 12, "critical": 16, "extreme": 16, "very high": 16}

FILLER_WORDS = ("and", "the", "of", "for", "with", "using", "apply", "application", "install",
                "installation", "site", "setup", "tool", "preparation")
_FILLER_RE = re.compile(r"\b(" + "|".join(FILLER_WORDS) + r")\b")
_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)


def _k(key: Any) -> str:
    return re.sub(r"[^a-z0-9]", "", str(key).lower())


def _get(d: Dict[str, Any], aliases: Iterable[str]) -> Any:
    """Case/format-insensitive lookup; first alias with a non-empty value wins."""
    folded = {_k(k): v for k, v in d.items()}
    for a in aliases:
        v = folded.get(a)
        if v not in (None, "", [], {}):
            return v
    return None


# ---------------------------------------------------------------------------
# text -> JSON -> task array
# ---------------------------------------------------------------------------

def strip_code_fences(text: str) -> str:
    s = (text or "").strip()
    if "```" in s:
        m = _FENCE_RE.search(s)
        if m:
            return m.group(1).strip()
        s = s.replace("```json", "").replace("```", "")
    return s.strip()


def parse_json(text: str) -> Any:
    s = strip_code_fences(text)
    if not s:
        raise AIMalformedResponseError("empty response")
    try:
        return json.loads(s)
    except json.JSONDecodeError:
        pass
    # tolerate prose around a single JSON object/array
    for open_c, close_c in (("{", "}"), ("[", "]")):
        a, b = s.find(open_c), s.rfind(close_c)
        if a != -1 and b > a:
            try:
                return json.loads(s[a:b + 1])
            except json.JSONDecodeError:
                continue
    raise AIMalformedResponseError("response is not valid JSON")


def _is_task_list(value: Any) -> bool:
    if not isinstance(value, list) or not value:
        return False
    return any(isinstance(x, dict) and _get(x, NAME_KEYS) is not None for x in value)


def find_task_array(data: Any) -> Optional[List[Dict[str, Any]]]:
    """
    First plausible task array: a top-level array, else the first list-valued
    field at the top level, else one nested level down.
    """
    if _is_task_list(data):
        return [x for x in data if isinstance(x, dict)]
    if not isinstance(data, dict):
        return None
    for v in data.values():
        if _is_task_list(v):
            return [x for x in v if isinstance(x, dict)]
    for v in data.values():
        if isinstance(v, dict):
            for inner in v.values():
                if _is_task_list(inner):
                    return [x for x in inner if isinstance(x, dict)]
    return None


# ---------------------------------------------------------------------------
# field coercion
# ---------------------------------------------------------------------------

def coerce_score(value: Any, default: int) -> int:
    """Map numbers or textual ratings (Low/Medium/High/Critical) onto 1-16."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return default
        return clamp_score(round(value))
    s = str(value).strip().lower()
    if not s:
        return default
    m = re.match(r"^-?\d+(\.\d+)?", s)
    if m:
        num = float(m.group(0))
        return clamp_score(round(num)) if math.isfinite(num) else default
    for word, score in sorted(TEXT_RATINGS.items(), key=lambda kv: -len(kv[0])):
        if word in s:
            return score
    return default


def as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        parts = [p.strip() for p in re.split(r"[\n;]", value)]
        return [p for p in parts if p]
    if isinstance(value, dict):
        value = list(value.values())
    out: List[str] = []
    for v in value if isinstance(value, (list, tuple)) else [value]:
        if isinstance(v, dict):
            v = _get(v, ("name", "description", "title", "text")) or ""
        s = str(v).strip()
        if s and s not in out:
            out.append(s)
    return out


def coerce_scope_flag(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() not in ("no", "n", "false", "0", "out of scope")


def normalize_task_name(name: str) -> str:
    low = (name or "").lower()
    key = re.sub(r"[^a-z]", "", _FILLER_RE.sub("", low))
    return key or re.sub(r"[^a-z0-9]", "", low)


def _normalize_hazards(raw: Any, *, name: str, trade: str, site: str,
                       risk: int, residual: int, activity_controls: List[str]) -> List[Hazard]:
    defaults = defaults_for(trade)
    items = raw if isinstance(raw, list) else ([raw] if raw else [])
    out: List[Hazard] = []
    for h in items:
        if isinstance(h, str):
            h = {"description": h}
        if not isinstance(h, dict):
            continue
        desc = _get(h, HAZARD_ALIASES["description"])
        if not desc:
            continue
        rating = coerce_score(_get(h, HAZARD_ALIASES["risk_rating"]), risk)
        controls = as_str_list(_get(h, HAZARD_ALIASES["control_measures"])) or activity_controls or list(defaults.controls)
        out.append(Hazard(
            type=str(_get(h, HAZARD_ALIASES["type"]) or "Physical"),
            description=str(desc),
            cause_agent=str(_get(h, HAZARD_ALIASES["cause_agent"]) or default_cause(name, trade)),
            environmental_condition=str(_get(h, HAZARD_ALIASES["environmental_condition"]) or default_environment(site)),
            consequence=str(_get(h, HAZARD_ALIASES["consequence"]) or default_consequence(name)),
            risk_rating=rating,
            control_measures=controls,
            residual_risk=min(coerce_score(_get(h, HAZARD_ALIASES["residual_risk"]), residual), rating),
        ))
    if not out:
        out.append(Hazard(
            type="Physical",
            description=defaults.hazard,
            cause_agent=default_cause(name, trade),
            environmental_condition=default_environment(site),
            consequence=default_consequence(name),
            risk_rating=risk,
            control_measures=activity_controls or list(defaults.controls),
            residual_risk=min(residual, risk),
        ))
    return out


def normalize_item(item: Dict[str, Any], *, trade: str, state: str, site: str,
                   hrcw_categories: Sequence[int] = (), origin: str = "ai") -> GeneratedActivity:
    """One raw task dict -> GeneratedActivity, gaps filled from trade defaults."""
    name = str(_get(item, ACTIVITY_ALIASES["name"]) or "").strip()
    if not name:
        raise ValueError("task has no name")
    defaults = defaults_for(trade)

    raw_hazards = _get(item, ACTIVITY_ALIASES["hazards"])
    hazard_ratings = [coerce_score(_get(h, HAZARD_ALIASES["risk_rating"]), 0)
                      for h in (raw_hazards if isinstance(raw_hazards, list) else []) if isinstance(h, dict)]
    risk = coerce_score(_get(item, ACTIVITY_ALIASES["risk_score"]), max(hazard_ratings + [0]) or 6)
    residual = min(coerce_score(_get(item, ACTIVITY_ALIASES["residual_risk"]), min(3, risk)), risk)

    hazards = _normalize_hazards(
        raw_hazards, name=name, trade=trade, site=site, risk=risk, residual=residual,
        activity_controls=as_str_list(_get(item, ACTIVITY_ALIASES["controls"])),
    )

    description = str(_get(item, ACTIVITY_ALIASES["description"]) or "").strip()
    selected = valid_categories(hrcw_categories)
    refs: List[int] = []
    permits = as_str_list(_get(item, ACTIVITY_ALIASES["permit_required"]))
    permits = [p for p in permits if p.lower() not in ("none", "n/a", "null", "not required")]
    if selected:
        raw_refs = _get(item, ACTIVITY_ALIASES["hrcw_references"])
        raw_refs = raw_refs if isinstance(raw_refs, list) else ([raw_refs] if raw_refs is not None else [])
        text = " ".join([name, description] + [h.description for h in hazards])
        refs, permits = annotate(text, selected, raw_refs, permits)

    return GeneratedActivity(
        name=name,
        description=description,
        hazards=hazards,
        risk_score=risk,
        residual_risk=residual,
        legislation=as_str_list(_get(item, ACTIVITY_ALIASES["legislation"])) or default_legislation(trade, state),
        ppe=as_str_list(_get(item, ACTIVITY_ALIASES["ppe"])) or list(defaults.ppe),
        tools=as_str_list(_get(item, ACTIVITY_ALIASES["tools"])) or list(defaults.tools),
        training_required=as_str_list(_get(item, ACTIVITY_ALIASES["training_required"])) or list(defaults.training),
        hrcw_references=refs,
        permit_required=permits,
        within_trade_scope=coerce_scope_flag(_get(item, ACTIVITY_ALIASES["within_trade_scope"])),
        scope_reason=(str(_get(item, ACTIVITY_ALIASES["scope_reason"])) if _get(item, ACTIVITY_ALIASES["scope_reason"]) else None),
        origin=origin,
    )


def normalize_items(items: List[Dict[str, Any]], *, trade: str, state: str, site: str,
                    hrcw_categories: Sequence[int] = (), origin: str = "ai") -> Tuple[List[GeneratedActivity], List[str]]:
    """Normalise, drop out-of-scope and duplicate-named tasks. Returns (activities, warnings)."""
    out: List[GeneratedActivity] = []
    warnings: List[str] = []
    seen = set()
    for i, item in enumerate(items):
        try:
            act = normalize_item(item, trade=trade, state=state, site=site,
                                 hrcw_categories=hrcw_categories, origin=origin)
        except (ValueError, ValidationError) as e:
            logger.warning("[NORMALIZE] skipping task #%d: %s", i, e)
            continue
        if not act.within_trade_scope:
            msg = f"dropped out-of-scope activity '{act.name}'" + (f" ({act.scope_reason})" if act.scope_reason else "")
            logger.warning("[NORMALIZE] %s", msg)
            warnings.append(msg)
            continue
        key = normalize_task_name(act.name)
        if key in seen:
            logger.info("[NORMALIZE] duplicate activity '%s' dropped", act.name)
            continue
        seen.add(key)
        out.append(act)
    return out, warnings


def normalize_response(text: str, *, trade: str, state: str, site: str,
                       hrcw_categories: Sequence[int] = ()) -> Tuple[List[GeneratedActivity], List[str]]:
    """Raw completion text -> canonical activities. Raises AIMalformedResponseError."""
    data = parse_json(text)
    items = find_task_array(data)
    if not items:
        raise AIMalformedResponseError("no task array found in response")
    acts, warnings = normalize_items(items, trade=trade, state=state, site=site, hrcw_categories=hrcw_categories)
    if not acts:
        raise AIMalformedResponseError("no usable activities after normalisation")
    logger.info("[NORMALIZE] %d raw tasks -> %d activities", len(items), len(acts))
    return acts, warnings
