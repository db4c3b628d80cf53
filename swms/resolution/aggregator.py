# swms/resolution/aggregator.py
from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional, Sequence
import logging

from swms.risk.hrcw import HRCW_BY_ID, annotate, valid_categories
from swms.risk.models import (
    EmergencyScenario,
    GeneratedActivity,
    GeneratedDocument,
    PlantEquipment,
    RiskAssessment,
    TaskDefinition,
    order_by_hierarchy,
)
from swms.resolution.safety_tables import (
    DEFAULT_CLIENT_REQUIREMENTS,
    EMERGENCY_PROCEDURES,
    GENERAL_REQUIREMENTS,
    REGULATORY_REQUIREMENTS,
    SITE_SPECIFIC_HAZARDS,
    STATE_REGULATORS,
    TRADE_EMERGENCY_PROCEDURES,
    safety_measures_for,
)
from swms.schemas.contracts import ProjectDetails, normalize_state

logger = logging.getLogger(__name__)


def task_to_assessment(task: TaskDefinition) -> RiskAssessment:
    return RiskAssessment(
        task_id=task.task_id,
        activity=task.activity,
        hazards=list(task.hazards),
        initial_risk_score=task.initial_risk_score,
        control_measures=order_by_hierarchy(list(task.control_measures)),
        legislation=list(task.legislation),
        residual_risk_score=task.residual_risk_score,
        responsible=task.responsible,
        origin="catalog",
    )


def _assessment_text(ra: RiskAssessment) -> str:
    return " ".join([ra.activity, *ra.hazards, *ra.control_measures])


def annotate_hrcw(ra: RiskAssessment, hrcw_categories: Sequence[int]) -> RiskAssessment:
    """Add selected HRCW ids whose keywords occur in the assessment, with their permits."""
    if not hrcw_categories:
        return ra
    refs, permits = annotate(_assessment_text(ra), hrcw_categories, ra.hrcw_references, ra.permit_required)
    return ra.model_copy(update={"hrcw_references": refs, "permit_required": permits})


def dedupe(assessments: Iterable[RiskAssessment]) -> List[RiskAssessment]:
    """First occurrence of each dedup key wins; order preserved."""
    seen = set()
    out: List[RiskAssessment] = []
    for ra in assessments:
        key = ra.dedup_key
        if key in seen:
            continue
        seen.add(key)
        out.append(ra)
    return out


def compliance_codes(assessments: Iterable[RiskAssessment]) -> List[str]:
    codes = set()
    for ra in assessments:
        codes.update(c.strip() for c in ra.legislation if c and c.strip())
    return sorted(codes)


def emergency_procedures(trade: str, state: str) -> List[str]:
    out = list(EMERGENCY_PROCEDURES)
    out.extend(TRADE_EMERGENCY_PROCEDURES.get(trade, ()))
    name, phone = STATE_REGULATORS.get(state, STATE_REGULATORS["NSW"])
    out.append(f"Notifiable incidents reported to {name} on {phone}")
    return out


def general_requirements(trade: str, state: str) -> List[str]:
    out = list(GENERAL_REQUIREMENTS)
    name, _ = STATE_REGULATORS.get(state, STATE_REGULATORS["NSW"])
    out.append(f"Work carried out in accordance with {state} WHS legislation as administered by {name}")
    return out


def project_specific(details: Optional[ProjectDetails], trade: str) -> Dict[str, Any]:
    d = details or ProjectDetails()
    cats = valid_categories(d.hrcw_categories)
    return {
        "project_name": d.project_name or d.location or "Construction Project",
        "location": d.location,
        "state": d.state,
        "site_environment": d.site_environment,
        "trade": trade,
        "hrcw_categories": [{"id": c, "title": HRCW_BY_ID[c].title} for c in cats],
        "client_requirements": list(d.client_requirements) or list(DEFAULT_CLIENT_REQUIREMENTS),
        "site_specific_hazards": list(SITE_SPECIFIC_HAZARDS),
        "regulatory_requirements": list(REGULATORY_REQUIREMENTS),
    }


def aggregate(
    tasks: Iterable[TaskDefinition],
    *,
    trade_type: str,
    state: Optional[str] = None,
    project_details: Optional[ProjectDetails] = None,
    hrcw_categories: Optional[Sequence[int]] = None,
    generated: Optional[Sequence[GeneratedActivity]] = None,
    plant_equipment: Optional[Sequence[PlantEquipment]] = None,
    emergency_response: Optional[Sequence[EmergencyScenario]] = None,
    warnings: Optional[Sequence[str]] = None,
    source: str = "catalog",
) -> GeneratedDocument:
    """
    Merge catalog tasks and generated activities into one document.

    Catalog tasks are converted first, then generated activities; the first
    occurrence of a dedup key (activity + hazards) wins. Pure: the same input
    always yields the same document.
    """
    details = project_details or ProjectDetails()
    st = normalize_state(state or details.state)
    cats = valid_categories(hrcw_categories if hrcw_categories is not None else details.hrcw_categories)
    generated = list(generated or [])

    raw = [task_to_assessment(t) for t in tasks]
    raw.extend(a.to_risk_assessment() for a in generated)
    unique = dedupe(raw)
    assessments = [annotate_hrcw(ra, cats) for ra in unique]

    logger.info(
        "[AGGREGATE] trade=%s assessments=%d (from %d, %d generated) hrcw=%s",
        trade_type, len(assessments), len(raw), len(generated), cats,
    )

    return GeneratedDocument(
        risk_assessments=assessments,
        safety_measures=safety_measures_for(trade_type),
        compliance_codes=compliance_codes(assessments),
        emergency_procedures=emergency_procedures(trade_type, st),
        general_requirements=general_requirements(trade_type, st),
        project_specific=project_specific(details, trade_type),
        activities=generated,
        plant_equipment=list(plant_equipment or []),
        emergency_response=list(emergency_response or []),
        warnings=list(warnings or []),
        source=source,
    )
