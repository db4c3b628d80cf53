# swms/schemas/contracts.py
from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Optional, Dict, Any, List
import logging

from swms.risk.hrcw import valid_categories

logger = logging.getLogger(__name__)

AUSTRALIAN_STATES = ("NSW", "VIC", "QLD", "WA", "SA", "TAS", "ACT", "NT")

STATE_NAMES = {
    "new south wales": "NSW",
    "victoria": "VIC",
    "queensland": "QLD",
    "western australia": "WA",
    "south australia": "SA",
    "tasmania": "TAS",
    "australian capital territory": "ACT",
    "northern territory": "NT",
}


def _pick(d: Dict[str, Any], *keys, default=None):
    """First present key among snake_case / camelCase spellings."""
    for k in keys:
        if k in d and d[k] is not None:
            return d[k]
    return default


def normalize_state(value: Optional[str], default: str = "NSW") -> str:
    """State code from a code ("vic") or full name ("Victoria"); unknown values fall back to default."""
    raw = " ".join(str(value or "").replace(".", " ").split())
    code = raw.upper()
    if code in AUSTRALIAN_STATES:
        return code
    code = STATE_NAMES.get(raw.lower())
    if code:
        return code
    if raw:
        logger.warning("[CONTRACTS] unrecognised state %r; using %s", value, default)
    return default


@dataclass
class ProjectDetails:
    location: str = ""
    state: str = "NSW"
    site_environment: str = "Commercial"
    hrcw_categories: List[int] = field(default_factory=list)
    project_name: Optional[str] = None
    client_requirements: List[str] = field(default_factory=list)

    @staticmethod
    def from_dict(d: Optional[Dict[str, Any]], default_state: str = "NSW") -> "ProjectDetails":
        """Coerce the form layer's dict (camelCase or snake_case) into ProjectDetails."""
        if isinstance(d, ProjectDetails):
            return d
        d = d or {}
        reqs = _pick(d, "client_requirements", "clientRequirements", default=[])
        if isinstance(reqs, str):
            reqs = [reqs]
        return ProjectDetails(
            location=str(_pick(d, "location", "projectLocation", "project_location", default="")),
            state=normalize_state(_pick(d, "state"), default_state),
            site_environment=str(_pick(d, "site_environment", "siteEnvironment", default="Commercial")),
            hrcw_categories=valid_categories(_pick(d, "hrcw_categories", "hrcwCategories", default=[])),
            project_name=_pick(d, "project_name", "projectName"),
            client_requirements=[str(r) for r in reqs if str(r).strip()],
        )


@dataclass
class GenerationRequest:
    """Inbound request from the form/UI layer."""
    trade_type: str
    selected_activities: List[str] = field(default_factory=list)
    project_details: ProjectDetails = field(default_factory=ProjectDetails)
    plain_text_description: Optional[str] = None

    @staticmethod
    def from_dict(d: Dict[str, Any], default_state: str = "NSW") -> "GenerationRequest":
        if isinstance(d, GenerationRequest):
            return d
        acts = _pick(d, "selected_activities", "selectedActivities", default=[])
        if isinstance(acts, str):
            acts = [acts]
        return GenerationRequest(
            trade_type=str(_pick(d, "trade_type", "tradeType", default="")).strip(),
            selected_activities=[str(a).strip() for a in acts if str(a).strip()],
            project_details=ProjectDetails.from_dict(
                _pick(d, "project_details", "projectDetails"), default_state=default_state
            ),
            plain_text_description=_pick(d, "plain_text_description", "plainTextDescription"),
        )

    @property
    def description(self) -> str:
        """Free text for keyword scans: the plain description, else the selected activities."""
        if self.plain_text_description and self.plain_text_description.strip():
            return self.plain_text_description.strip()
        return "; ".join(self.selected_activities)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
