# swms/generation/trade_defaults.py
"""Per-trade defaults used to fill gaps in generated activities."""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class TradeDefaults:
    hazard: str
    controls: Tuple[str, ...]
    ppe: Tuple[str, ...]
    tools: Tuple[str, ...]
    training: Tuple[str, ...]
    standards: Tuple[str, ...] = ()


GENERIC_DEFAULTS = TradeDefaults(
    hazard="Manual handling strain and slips, trips and falls in the work area",
    controls=(
        "Plan the task sequence to remove unnecessary handling",
        "Use mechanical aids for heavy or awkward loads",
        "Keep access routes clear and housekeeping maintained",
        "Wear task-appropriate PPE",
    ),
    ppe=("Safety helmet", "Safety glasses", "Steel-capped boots", "High visibility vest"),
    tools=("Hand tools",),
    training=("Site induction", "White Card (General Construction Induction)"),
)

TRADE_DEFAULTS: Dict[str, TradeDefaults] = {
    "Tiling & Waterproofing": TradeDefaults(
        hazard="Silica dust and lacerations from tile cutting, and skin irritation from adhesives",
        controls=(
            "Wet cutting or on-tool dust extraction",
            "Blade guards fitted to wet saws",
            "Ventilate enclosed wet areas",
            "P2 respirator, cut-resistant gloves and knee pads",
        ),
        ppe=("P2 respirator", "Safety glasses", "Cut-resistant gloves", "Knee pads"),
        tools=("Wet tile saw", "Mixing drill", "Notched trowel"),
        training=("Silica awareness training", "Wall and floor tiling competency"),
        standards=("AS 3958.1:2007 Ceramic tiles - Guide to the installation of ceramic tiles",
                   "AS 3740:2021 Waterproofing of domestic wet areas"),
    ),
    "Electrical Installation": TradeDefaults(
        hazard="Electric shock or arc flash from contact with energised conductors",
        controls=(
            "Isolate and lock out circuits before work",
            "Test before touch with an approved tester",
            "Insulating barriers over adjacent live parts",
            "Insulated gloves and arc-rated clothing",
        ),
        ppe=("Insulated gloves", "Arc-rated clothing", "Safety glasses"),
        tools=("Voltage tester", "Insulated hand tools", "Lockout kit"),
        training=("Electrical licence", "Low voltage rescue and CPR"),
        standards=("AS/NZS 3000:2018 Wiring Rules",
                   "AS/NZS 4836:2011 Safe working on or near low-voltage electrical installations"),
    ),
    "Plumbing & Gasfitting": TradeDefaults(
        hazard="Burns from hot work and exposure to sewage or gas",
        controls=(
            "Isolate water and gas supplies before cutting in",
            "Hot work permit with extinguisher at hand",
            "Gas detection before entering pits or trenches",
            "Leather gloves and safety glasses",
        ),
        ppe=("Leather gloves", "Safety glasses", "Steel-capped boots"),
        tools=("Pipe cutter", "Press tool", "Gas detector"),
        training=("Plumbing licence", "Confined space awareness"),
        standards=("AS/NZS 3500 Plumbing and drainage", "AS/NZS 5601.1:2022 Gas installations"),
    ),
    "Carpentry & Joinery": TradeDefaults(
        hazard="Lacerations and nail gun injuries, and falls from elevated framing",
        controls=(
            "Guards fitted to saws and sequential trigger nail guns",
            "Edge protection or scaffold for elevated work",
            "Exclusion zone below overhead work",
            "Safety glasses and hearing protection",
        ),
        ppe=("Safety glasses", "Hearing protection", "Hard hat"),
        tools=("Circular saw", "Nail gun", "Drop saw"),
        training=("Carpentry trade qualification", "Working at heights"),
        standards=("AS 1684 Residential timber-framed construction",),
    ),
    "Roofing & Guttering": TradeDefaults(
        hazard="Falls from roof edges or through brittle roofing",
        controls=(
            "Perimeter edge protection before roof access",
            "Safety mesh beneath sheeting",
            "Stop work in high winds",
            "Harness with anchored lanyard where edge protection is not practicable",
        ),
        ppe=("Full body harness", "Cut-resistant gloves", "Sun protection"),
        tools=("Roofing screw gun", "Metal shears", "Harness kit"),
        training=("Working at heights", "Roof work competency"),
        standards=("AS/NZS 1891 Industrial fall-arrest systems and devices",),
    ),
    "Concreting & Cement Work": TradeDefaults(
        hazard="Chemical burns from wet concrete and silica dust from cutting",
        controls=(
            "Exclusion zone under the pump boom",
            "Wet cutting with water suppression",
            "Pump operator and spotter in radio contact",
            "Alkali-resistant gloves, gumboots and eye protection",
        ),
        ppe=("Gumboots", "Alkali-resistant gloves", "Safety glasses"),
        tools=("Concrete vibrator", "Screed", "Power float"),
        training=("Concrete pump operation awareness", "Silica awareness training"),
    ),
    "Excavation & Earthworks": TradeDefaults(
        hazard="Trench collapse and contact with underground services",
        controls=(
            "Locate services before digging",
            "Shoring or benching for trenches deeper than 1.5 m",
            "Plant exclusion zones with spotters",
            "Hard hat and high visibility clothing",
        ),
        ppe=("Hard hat", "High visibility vest", "Steel-capped boots"),
        tools=("Excavator", "Service locator", "Trench shield"),
        training=("Excavator operator competency",),
    ),
}


def defaults_for(trade: str) -> TradeDefaults:
    return TRADE_DEFAULTS.get(trade, GENERIC_DEFAULTS)


def default_legislation(trade: str, state: str) -> List[str]:
    out = [
        f"{state} Work Health and Safety Regulation 2017",
        "Construction Work Code of Practice 2013",
    ]
    out.extend(defaults_for(trade).standards)
    return out


def default_cause(activity: str, trade: str) -> str:
    return f"{(trade or 'construction').lower()} equipment and materials used during {activity.lower()}"


def default_consequence(activity: str) -> str:
    return f"Injury requiring first aid or medical treatment from {activity.lower()} operations"


def default_environment(site: str) -> str:
    return f"{site} site environment with typical workplace conditions"
