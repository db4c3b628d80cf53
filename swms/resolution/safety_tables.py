# swms/resolution/safety_tables.py
"""Static safety-measure, emergency and requirement tables used by the aggregator."""
from __future__ import annotations
from typing import Dict, List, Tuple

from swms.risk.models import SafetyMeasureCategory

BASE_SAFETY_MEASURES: Tuple[SafetyMeasureCategory, ...] = (
    SafetyMeasureCategory(
        category="Personal Protective Equipment (PPE)",
        measures=[
            "Hard hats complying with AS/NZS 1801 worn in all construction areas",
            "Safety glasses to AS/NZS 1337 for all work activities",
            "Steel-capped safety boots to AS/NZS 2210.3 on site",
            "High visibility clothing to AS/NZS 4602.1 in vehicle operating areas",
            "Hearing protection to AS/NZS 1270 in high noise environments",
        ],
        equipment=["Hard hats", "Safety glasses", "Steel-capped boots", "Hi-vis clothing", "Hearing protection"],
        procedures=[
            "Daily PPE check before use",
            "Replace damaged PPE immediately",
            "Store PPE in clean, dry conditions",
        ],
    ),
    SafetyMeasureCategory(
        category="Emergency Equipment",
        measures=[
            "First aid kits available at each work area",
            "Emergency contact numbers displayed at site entry",
            "Fire extinguishers suited to site hazards",
            "Eyewash stations where chemical hazards are present",
            "Emergency communication devices for isolated work",
        ],
        equipment=["First aid kit", "Fire extinguishers", "Emergency phones", "Eyewash stations"],
        procedures=[
            "Monthly equipment checks",
            "Emergency drill procedures",
            "Incident reporting protocols",
        ],
    ),
)

TRADE_SAFETY_MEASURES: Dict[str, Tuple[SafetyMeasureCategory, ...]] = {
    "Electrical Installation": (
        SafetyMeasureCategory(
            category="Electrical Safety Equipment",
            measures=[
                "Insulated tools rated to 1000 V for all electrical work",
                "Voltage testers and proving units for dead testing",
                "Class 0 insulated gloves for live-adjacent work",
                "Arc flash PPE for work on energised equipment",
                "Lockout/tagout devices for electrical isolation",
            ],
            equipment=["Insulated tools", "Voltage testers", "Insulated gloves", "Arc flash suits", "LOTO devices"],
            procedures=["Test before touch", "Isolation verification", "Arc flash risk assessment"],
        ),
    ),
    "Plumbing & Gasfitting": (
        SafetyMeasureCategory(
            category="Plumbing Safety Equipment",
            measures=[
                "Pressure testing equipment for water and gas systems",
                "Gas detection equipment for confined spaces",
                "Chemical resistant gloves for drain cleaning",
                "Respiratory protection for sewer work",
                "Confined space entry equipment where required",
            ],
            equipment=["Pressure gauges", "Gas detectors", "Chemical gloves", "Respirators", "Tripod rescue"],
            procedures=["Pressure testing protocols", "Confined space entry procedures", "Gas testing before entry"],
        ),
    ),
    "Tiling & Waterproofing": (
        SafetyMeasureCategory(
            category="Silica and Chemical Controls",
            measures=[
                "Wet cutting or on-tool extraction for all tile and substrate cutting",
                "H-class vacuum for dust clean-up; no dry sweeping",
                "Safety data sheets on hand for adhesives, primers and membranes",
                "Ventilation of enclosed wet areas during membrane application",
            ],
            equipment=["Wet tile saw", "H-class vacuum", "P2 respirators", "Chemical gloves"],
            procedures=["Silica exposure control plan", "SDS review before use"],
        ),
    ),
    "Roofing & Guttering": (
        SafetyMeasureCategory(
            category="Fall Prevention Equipment",
            measures=[
                "Perimeter edge protection before roof access",
                "Safety mesh beneath new roof sheeting",
                "Certified anchor points for harness systems",
            ],
            equipment=["Edge protection", "Safety mesh", "Harnesses", "Anchor points"],
            procedures=["Roof access permit", "Wind speed stop-work trigger", "Rescue plan for suspended workers"],
        ),
    ),
    "Scaffolding & Access": (
        SafetyMeasureCategory(
            category="Scaffold and Access Controls",
            measures=[
                "Scaffold tags showing current inspection status",
                "Handover certificate before first use",
                "Exclusion zones beneath erection and dismantling",
            ],
            equipment=["Scaffold tags", "Barricades", "Harnesses", "Material hoists"],
            procedures=["Scaffold inspection every 30 days and after weather events", "Handover and alteration register"],
        ),
    ),
    "Excavation & Earthworks": (
        SafetyMeasureCategory(
            category="Excavation Controls",
            measures=[
                "Underground services located and marked before digging",
                "Shoring, benching or battering for trenches deeper than 1.5 m",
                "Plant exclusion zones with spotters",
            ],
            equipment=["Service locator", "Trench shields", "Barricades", "Spotter radios"],
            procedures=["Before You Dig enquiry", "Daily excavation check", "Traffic management plan"],
        ),
    ),
    "Demolition & Asbestos Removal": (
        SafetyMeasureCategory(
            category="Asbestos and Demolition Controls",
            measures=[
                "Asbestos register reviewed before any disturbance",
                "Licensed removalist for asbestos-containing material",
                "Air monitoring and clearance certificate on completion",
            ],
            equipment=["Disposable coveralls", "P2 respirators", "Decontamination unit", "Asbestos waste bags"],
            procedures=["Asbestos removal control plan", "Demolition sequence plan"],
        ),
    ),
}

EMERGENCY_PROCEDURES: Tuple[str, ...] = (
    "Emergency contact numbers (000) displayed at site entrance and work areas",
    "Trained first aid officer available during all work hours",
    "Emergency evacuation routes established and communicated to all personnel",
    "Fire extinguishers checked monthly and suited to site fire risks",
    "Emergency assembly point designated and clearly marked",
    "Incident reporting procedures with 24-hour notification requirements",
    "Emergency shutdown procedures for plant and equipment documented",
    "Site emergency coordinator appointed",
)

TRADE_EMERGENCY_PROCEDURES: Dict[str, Tuple[str, ...]] = {
    "Electrical Installation": (
        "Low voltage rescue kit at switchboards and live-adjacent work",
        "Isolate supply before approaching an electric shock casualty",
    ),
    "Plumbing & Gasfitting": (
        "Confined space rescue plan with standby person and retrieval equipment",
        "Gas leak response: isolate supply, eliminate ignition sources, evacuate",
    ),
    "Tiling & Waterproofing": (
        "Eyewash available for adhesive and membrane splash",
    ),
    "Roofing & Guttering": (
        "Suspension trauma rescue plan for harness arrests",
    ),
    "Scaffolding & Access": (
        "Suspension trauma rescue plan for harness arrests",
    ),
    "Excavation & Earthworks": (
        "Trench collapse response: do not enter, call 000, shore before rescue",
    ),
}

STATE_REGULATORS: Dict[str, Tuple[str, str]] = {
    "NSW": ("SafeWork NSW", "13 10 50"),
    "VIC": ("WorkSafe Victoria", "13 23 60"),
    "QLD": ("WorkSafe Queensland", "1300 362 128"),
    "WA": ("WorkSafe WA", "1300 307 877"),
    "SA": ("SafeWork SA", "1300 365 255"),
    "TAS": ("WorkSafe Tasmania", "1300 366 322"),
    "ACT": ("WorkSafe ACT", "(02) 6207 3000"),
    "NT": ("NT WorkSafe", "1800 019 115"),
}

GENERAL_REQUIREMENTS: Tuple[str, ...] = (
    "All personnel complete site-specific induction before commencing work",
    "Daily toolbox talks before work commences covering current hazards",
    "Weekly safety inspections documented with corrective actions tracked",
    "Monthly safety meetings with all site personnel",
    "Incident and near-miss reporting with a no-blame culture",
    "Safety data sheets available for all hazardous chemicals on site",
    "Plant and equipment pre-start checks completed and documented",
    "Competency verified for all high-risk work activities",
    "Worker consultation on health and safety matters",
    "SWMS reviewed and updated when site conditions change",
)

SITE_SPECIFIC_HAZARDS: Tuple[str, ...] = (
    "Weather conditions and seasonal variations",
    "Site access restrictions and traffic management",
    "Proximity to public areas and pedestrian traffic",
    "Underground services and utility locations",
    "Environmental constraints and protected areas",
)

DEFAULT_CLIENT_REQUIREMENTS: Tuple[str, ...] = (
    "Comply with all client-specific safety requirements",
    "Attend client safety meetings as required",
    "Report incidents to client within specified timeframes",
)

REGULATORY_REQUIREMENTS: Tuple[str, ...] = (
    "Obtain all required permits and licences before work commencement",
    "Comply with local council requirements and building codes",
    "Adhere to environmental protection requirements",
    "Maintain insurance certificates and workers compensation",
)


def safety_measures_for(trade: str) -> List[SafetyMeasureCategory]:
    """Base categories, then the trade's own; unknown trades get the base only."""
    out = [m.model_copy(deep=True) for m in BASE_SAFETY_MEASURES]
    out.extend(m.model_copy(deep=True) for m in TRADE_SAFETY_MEASURES.get(trade, ()))
    return out
