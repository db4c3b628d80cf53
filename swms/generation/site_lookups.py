# swms/generation/site_lookups.py
"""Plant/equipment register entries (trade-keyed) and emergency scenarios (state-keyed)."""
from __future__ import annotations
from typing import List, Tuple

from swms.resolution.safety_tables import STATE_REGULATORS
from swms.risk.hrcw import stem_hit
from swms.risk.models import EmergencyScenario, PlantEquipment
from swms.schemas.contracts import normalize_state

# (trade keywords, equipment) ; matched against the lowercased trade name
PLANT_BY_TRADE: Tuple[Tuple[Tuple[str, ...], Tuple[PlantEquipment, ...]], ...] = (
    (("tiling", "tile"), (
        PlantEquipment(
            name="Wet Tile Cutting Saw", type="Equipment", category="Cutting Tools",
            certification_required=False, inspection_status="Current", risk_level="Medium",
            safety_requirements=["Water reservoir kept at working level", "Blade guard securely fitted",
                                 "Emergency stop functional", "RCD electrical protection"],
        ),
        PlantEquipment(
            name="Angle Grinder", type="Equipment", category="Power Tools",
            certification_required=False, inspection_status="Current", risk_level="High",
            safety_requirements=["Guard fitted and adjusted", "Two-handed operation",
                                 "Disc checked for damage before use", "Disc rated for the material being cut"],
        ),
    )),
    (("electrical",), (
        PlantEquipment(
            name="Voltage Tester", type="Equipment", category="Test Equipment",
            certification_required=True, inspection_status="Current", risk_level="Medium",
            safety_requirements=["Proved on a known source before and after use", "Calibration in date"],
        ),
        PlantEquipment(
            name="Cable Puller", type="Equipment", category="Installation Tools",
            risk_level="Low", safety_requirements=["Rated load not exceeded", "Rope inspected before use"],
        ),
    )),
    (("plumbing", "gas"), (
        PlantEquipment(
            name="Pipe Press Tool", type="Equipment", category="Installation Tools",
            risk_level="Low", safety_requirements=["Jaws matched to fitting size", "Battery and charger tagged"],
        ),
        PlantEquipment(
            name="Four-gas Detector", type="Equipment", category="Test Equipment",
            certification_required=True, inspection_status="Current", risk_level="High",
            safety_requirements=["Bump tested before each use", "Calibration in date"],
        ),
    )),
    (("excavation", "earthworks"), (
        PlantEquipment(
            name="Excavator", type="Plant", category="Earthmoving",
            certification_required=True, inspection_status="Current", risk_level="Critical",
            safety_requirements=["Licensed operator", "Daily pre-start check", "Exclusion zone with spotter"],
        ),
    )),
    (("concret",), (
        PlantEquipment(
            name="Concrete Pump", type="Plant", category="Concrete Placement",
            certification_required=True, inspection_status="Current", risk_level="High",
            safety_requirements=["Outriggers on firm ground", "Boom exclusion zone", "Registered plant item"],
        ),
    )),
)

MOBILE_SCAFFOLD = PlantEquipment(
    name="Mobile Scaffold/Platform", type="Plant", category="Access Equipment",
    certification_required=True, inspection_status="Current", risk_level="Medium",
    safety_requirements=["Pre-use inspection checklist completed", "Erected by a competent person",
                         "Load limits marked and observed", "Fall protection in place"],
)


def plant_equipment_for(trade: str) -> List[PlantEquipment]:
    t = (trade or "").lower()
    out: List[PlantEquipment] = []
    for keywords, items in PLANT_BY_TRADE:
        if any(stem_hit(t, k) for k in keywords):
            out.extend(p.model_copy(deep=True) for p in items)
    out.append(MOBILE_SCAFFOLD.model_copy(deep=True))
    return out


def emergency_response_for(state: str) -> List[EmergencyScenario]:
    st = normalize_state(state)
    regulator, phone = STATE_REGULATORS[st]
    return [
        EmergencyScenario(
            scenario="Personal Injury",
            response="Stop work immediately. Provide first aid if trained. Call 000 for serious injuries. "
                     "Notify the site supervisor and complete an incident report.",
            contacts=["Emergency Services: 000", "Site Supervisor", "Company Safety Officer", f"{regulator}: {phone}"],
        ),
        EmergencyScenario(
            scenario="Chemical Spill/Exposure",
            response="Evacuate the area. Remove contaminated clothing. Flush affected areas with clean water "
                     "for at least 15 minutes. Seek medical attention.",
            contacts=["Poison Information Centre: 13 11 26", "Emergency Services: 000", "Site Environmental Officer"],
        ),
        EmergencyScenario(
            scenario="Equipment Failure",
            response="Isolate the equipment from its power source. Secure the area. Tag the equipment "
                     "'Out of Service' and arrange inspection before further use.",
            contacts=["Site Supervisor", "Equipment Supplier/Maintenance", "Health and Safety Representative"],
        ),
    ]
