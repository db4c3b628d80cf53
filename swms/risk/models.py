from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import List, Optional, Literal, Dict, Any, Tuple
import hashlib, json, re

# Fixed risk scale observed in the curated data (e.g. 3, 8, 12, 16).
# Scores are validated against the scale, never derived as likelihood x consequence.
RISK_SCORE_MIN = 1
RISK_SCORE_MAX = 16

RiskLevel = Literal["Low", "Medium", "High", "Extreme"]
Frequency = Literal["daily", "weekly", "monthly", "project-based"]
Complexity = Literal["basic", "intermediate", "advanced", "specialist"]
Origin = Literal["catalog", "ai", "fallback"]

UNIVERSAL_TRADES = {"universal", "all trades"}

# Hierarchy of controls, most to least effective. Catalog control measures may
# carry a trailing " – L<n>" marker indexing into this tuple (L1 = elimination).
HIERARCHY_OF_CONTROLS = (
    "elimination",
    "substitution",
    "isolation",
    "engineering",
    "administrative",
    "ppe",
)

_LEVEL_MARKER_RE = re.compile(r"\s*[–-]\s*L([1-6])\s*$")


def risk_level(score: int) -> str:
    if score <= 4:
        return "Low"
    if score <= 8:
        return "Medium"
    if score <= 15:
        return "High"
    return "Extreme"


def clamp_score(value: int) -> int:
    return max(RISK_SCORE_MIN, min(RISK_SCORE_MAX, int(value)))


def hierarchy_level(measure: str) -> Optional[str]:
    """Return the hierarchy level named by a measure's ' – L<n>' marker, if any."""
    m = _LEVEL_MARKER_RE.search(measure or "")
    if not m:
        return None
    return HIERARCHY_OF_CONTROLS[int(m.group(1)) - 1]


def order_by_hierarchy(measures: List[str]) -> List[str]:
    """Stable sort: tagged measures by hierarchy level, untagged ones after them."""
    def _key(pair):
        idx, m = pair
        lvl = hierarchy_level(m)
        rank = HIERARCHY_OF_CONTROLS.index(lvl) if lvl else len(HIERARCHY_OF_CONTROLS)
        return (rank, idx)

    return [m for _, m in sorted(enumerate(measures), key=_key)]


class TaskDefinition(BaseModel):
    """Curated catalog entry. Frozen: the catalog is shared read-only across requests."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    task_id: str
    activity: str
    category: str
    subcategory: str
    trade: str
    hazards: Tuple[str, ...] = Field(min_length=1)
    initial_risk_score: int = Field(ge=RISK_SCORE_MIN, le=RISK_SCORE_MAX)
    control_measures: Tuple[str, ...] = Field(min_length=1)
    legislation: Tuple[str, ...] = ()
    residual_risk_score: int = Field(ge=RISK_SCORE_MIN, le=RISK_SCORE_MAX)
    responsible: str
    ppe: Tuple[str, ...] = ()
    training_required: Tuple[str, ...] = ()
    inspection_frequency: str = ""
    related_tasks: Tuple[str, ...] = ()
    applicable_to_all_trades: bool = False
    frequency: Frequency = "project-based"
    complexity: Complexity = "intermediate"

    @model_validator(mode="after")
    def _residual_not_above_initial(self):
        if self.residual_risk_score > self.initial_risk_score:
            raise ValueError(
                f"residual_risk_score {self.residual_risk_score} exceeds "
                f"initial_risk_score {self.initial_risk_score}"
            )
        return self

    @property
    def is_universal(self) -> bool:
        return self.applicable_to_all_trades or self.trade.strip().lower() in UNIVERSAL_TRADES

    @property
    def risk_level(self) -> str:
        return risk_level(self.initial_risk_score)

    @property
    def residual_risk_level(self) -> str:
        return risk_level(self.residual_risk_score)


class RiskAssessment(BaseModel):
    """Flattened, document-owned projection of a task or generated activity."""

    id: Optional[str] = None
    task_id: Optional[str] = None
    activity: str
    hazards: List[str] = Field(min_length=1)
    initial_risk_score: int = Field(ge=RISK_SCORE_MIN, le=RISK_SCORE_MAX)
    control_measures: List[str] = Field(min_length=1)
    legislation: List[str] = []
    residual_risk_score: int = Field(ge=RISK_SCORE_MIN, le=RISK_SCORE_MAX)
    responsible: str = "Site Supervisor"
    risk_level: Optional[RiskLevel] = None
    residual_risk_level: Optional[RiskLevel] = None
    hrcw_references: List[int] = []
    permit_required: List[str] = []
    origin: Origin = "catalog"

    @property
    def dedup_key(self) -> str:
        return f"{self.activity}-{'-'.join(self.hazards)}"

    @model_validator(mode="after")
    def _derive(self):
        """Enforce residual <= initial, fill levels and a stable id."""
        if self.residual_risk_score > self.initial_risk_score:
            raise ValueError("residual_risk_score must not exceed initial_risk_score")
        if self.risk_level is None:
            self.risk_level = risk_level(self.initial_risk_score)
        if self.residual_risk_level is None:
            self.residual_risk_level = risk_level(self.residual_risk_score)
        if not self.id:
            if self.task_id:
                self.id = self.task_id
            else:
                s = json.dumps({"key": self.dedup_key}, ensure_ascii=False)
                self.id = hashlib.md5(s.encode("utf-8")).hexdigest()
        return self


class Hazard(BaseModel):
    type: str = "Physical"
    description: str
    cause_agent: str = ""
    environmental_condition: str = ""
    consequence: str = ""
    risk_rating: int = Field(ge=RISK_SCORE_MIN, le=RISK_SCORE_MAX, default=6)
    control_measures: List[str] = Field(min_length=1)
    residual_risk: int = Field(ge=RISK_SCORE_MIN, le=RISK_SCORE_MAX, default=3)


class GeneratedActivity(BaseModel):
    """Canonical shape of an AI- or fallback-produced activity."""

    name: str
    description: str = ""
    hazards: List[Hazard] = Field(min_length=1)
    risk_score: int = Field(ge=RISK_SCORE_MIN, le=RISK_SCORE_MAX, default=6)
    residual_risk: int = Field(ge=RISK_SCORE_MIN, le=RISK_SCORE_MAX, default=3)
    legislation: List[str] = []
    ppe: List[str] = []
    tools: List[str] = []
    training_required: List[str] = []
    hrcw_references: List[int] = []
    permit_required: List[str] = []
    within_trade_scope: bool = True
    scope_reason: Optional[str] = None
    responsible: str = "Site Supervisor"
    origin: Origin = "ai"

    @model_validator(mode="after")
    def _residual_not_above_initial(self):
        if self.residual_risk > self.risk_score:
            raise ValueError("residual_risk must not exceed risk_score")
        return self

    def text_blob(self) -> str:
        parts = [self.name, self.description] + [h.description for h in self.hazards]
        return " ".join(p for p in parts if p)

    def to_risk_assessment(self) -> RiskAssessment:
        controls: List[str] = []
        for h in self.hazards:
            for c in h.control_measures:
                if c not in controls:
                    controls.append(c)
        return RiskAssessment(
            activity=self.name,
            hazards=[h.description for h in self.hazards],
            initial_risk_score=self.risk_score,
            control_measures=controls,
            legislation=list(self.legislation),
            residual_risk_score=self.residual_risk,
            responsible=self.responsible,
            hrcw_references=list(self.hrcw_references),
            permit_required=list(self.permit_required),
            origin=self.origin,
        )


class SafetyMeasureCategory(BaseModel):
    category: str
    measures: List[str] = []
    equipment: List[str] = []
    procedures: List[str] = []


class PlantEquipment(BaseModel):
    name: str
    type: Literal["Equipment", "Plant", "Vehicle"] = "Equipment"
    category: str = "General"
    certification_required: bool = False
    inspection_status: Literal["Current", "Overdue", "Required"] = "Required"
    risk_level: Literal["Low", "Medium", "High", "Critical"] = "Medium"
    safety_requirements: List[str] = []


class EmergencyScenario(BaseModel):
    scenario: str
    response: str
    contacts: List[str] = []


class GeneratedDocument(BaseModel):
    risk_assessments: List[RiskAssessment] = []
    safety_measures: List[SafetyMeasureCategory] = []
    compliance_codes: List[str] = []
    emergency_procedures: List[str] = []
    general_requirements: List[str] = []
    project_specific: Dict[str, Any] = {}
    activities: List[GeneratedActivity] = []
    plant_equipment: List[PlantEquipment] = []
    emergency_response: List[EmergencyScenario] = []
    warnings: List[str] = []
    source: Origin = "catalog"

    def to_dict(self) -> Dict[str, Any]:
        """Plain JSON-serialisable payload for the storage/PDF collaborators."""
        return self.model_dump(mode="json")
