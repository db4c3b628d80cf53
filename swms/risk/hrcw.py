# swms/risk/hrcw.py
"""
The 18 High-Risk Construction Work categories (WHS Regulation 291) with the
keywords used to cross-reference tasks and the permits each category calls for.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple
import re


@dataclass(frozen=True)
class HrcwCategory:
    id: int
    title: str
    keywords: Tuple[str, ...]
    permits: Tuple[str, ...] = ()


HRCW_CATEGORIES: Tuple[HrcwCategory, ...] = (
    HrcwCategory(1, "Risk of a person falling more than 2 metres",
                 ("ladder", "ladders", "scaffold", "scaffolds", "scaffolding", "roof", "roofs", "roofing", "height",
                  "heights", "elevated", "fall", "falls", "falling", "platform", "platforms", "tower", "towers",
                  "edge protection"),
                 ("Working at heights permit",)),
    HrcwCategory(2, "Work on a telecommunication tower",
                 ("telecommunication", "telecommunications", "antenna", "antennas", "mobile tower", "radio mast"),
                 ("Telecommunication tower access permit",)),
    HrcwCategory(3, "Demolition of load-bearing elements",
                 ("demolition", "demolish", "load-bearing", "load bearing", "structural wall", "structural walls",
                  "beam", "beams", "column", "columns"),
                 ("Demolition permit", "Engineer-approved demolition sequence")),
    HrcwCategory(4, "Work involving disturbance of asbestos",
                 ("asbestos", "fibro", "acm", "acms"),
                 ("Asbestos removal permit", "Asbestos clearance certificate")),
    HrcwCategory(5, "Structural alterations requiring temporary support",
                 ("alteration", "alterations", "temporary support", "propping", "props", "shoring", "underpinning"),
                 ("Temporary works design certificate",)),
    HrcwCategory(6, "Work in or near confined spaces",
                 ("confined space", "confined spaces", "tank", "tanks", "vessel", "vessels", "pit", "pits", "sewer",
                  "sewers", "tunnel", "tunnels", "enclosed"),
                 ("Confined space entry permit", "Atmospheric testing record")),
    HrcwCategory(7, "Work in shafts, trenches or tunnels deeper than 1.5 m",
                 ("shaft", "shafts", "trench", "trenches", "trenching", "tunnel", "tunnels", "excavation",
                  "excavations", "underground", "boring"),
                 ("Excavation permit",)),
    HrcwCategory(8, "Work involving the use of explosives",
                 ("explosive", "explosives", "blasting", "detonation"),
                 ("Explosives licence and blasting permit",)),
    HrcwCategory(9, "Work on or near pressurised gas mains or piping",
                 ("gas main", "gas mains", "gas line", "gas lines", "pressurised", "natural gas", "gasfitting"),
                 ("Gas isolation permit",)),
    HrcwCategory(10, "Work on or near chemical, fuel or refrigerant lines",
                 ("chemical line", "chemical lines", "fuel", "fuels", "refrigerant", "refrigerants"),
                 ("Line break permit",)),
    HrcwCategory(11, "Work on or near energised electrical installations",
                 ("energised", "live", "switchboard", "switchboards", "high voltage", "electrical installation"),
                 ("Electrical isolation permit",)),
    HrcwCategory(12, "Work in an area with a contaminated or flammable atmosphere",
                 ("contaminated", "flammable", "solvent", "solvents", "fumes", "vapour", "vapours", "vapor"),
                 ("Hot work permit", "Gas-free certificate")),
    HrcwCategory(13, "Tilt-up or precast concrete work",
                 ("tilt-up", "tilt up", "precast"),
                 ("Crane lift plan",)),
    HrcwCategory(14, "Work on, in or adjacent to a road, railway or traffic corridor in use",
                 ("road", "roads", "roadway", "railway", "traffic", "corridor", "highway"),
                 ("Traffic management plan", "Road occupancy licence")),
    HrcwCategory(15, "Work in an area with movement of powered mobile plant",
                 ("mobile plant", "forklift", "forklifts", "excavator", "excavators", "crane", "cranes", "bobcat",
                  "loader", "loaders"),
                 ("Plant operating permit",)),
    HrcwCategory(16, "Work in areas with artificial extremes of temperature",
                 ("extreme temperature", "cold room", "furnace", "heat stress"),
                 ("Chemical Risk Assessment", "Heat stress management plan")),
    HrcwCategory(17, "Work in or near water or other liquid with a risk of drowning",
                 ("drowning", "river", "rivers", "dam", "dams", "pool", "pools", "flood", "flooding", "waterway"),
                 ("Work over water permit",)),
    HrcwCategory(18, "Diving work",
                 ("diving", "diver", "divers", "underwater"),
                 ("Diving work permit",)),
)

HRCW_BY_ID: Dict[int, HrcwCategory] = {c.id: c for c in HRCW_CATEGORIES}


def stem_hit(text: str, stem: str) -> bool:
    # word start, so "roofing" does not fire on "waterproofing" but "concret" hits "concreting"
    return re.search(r"(?<![a-z])" + re.escape(stem), text) is not None


def keyword_hit(text: str, keyword: str) -> bool:
    # whole word: "tank" does not fire on "tanking", "pit" not on "pitch"
    return re.search(r"(?<![a-z])" + re.escape(keyword) + r"(?![a-z])", text) is not None


def valid_categories(categories: Iterable) -> List[int]:
    out: List[int] = []
    for c in categories or []:
        try:
            n = int(c)
        except (TypeError, ValueError):
            continue
        if n in HRCW_BY_ID and n not in out:
            out.append(n)
    return out


def match_categories(text: str, selected: Iterable[int]) -> List[int]:
    """Selected categories whose keywords occur in the text, in selection order."""
    low = (text or "").lower()
    hits: List[int] = []
    for cid in valid_categories(selected):
        cat = HRCW_BY_ID[cid]
        if any(keyword_hit(low, k) for k in cat.keywords):
            hits.append(cid)
    return hits


def permits_for(categories: Iterable[int]) -> List[str]:
    out: List[str] = []
    for cid in valid_categories(categories):
        for p in HRCW_BY_ID[cid].permits:
            if p not in out:
                out.append(p)
    return out


def annotate(text: str, selected: Iterable[int],
             existing_refs: Iterable[int] = (), existing_permits: Iterable[str] = ()) -> Tuple[List[int], List[str]]:
    """
    Cross-reference a task against the selected HRCW categories.
    Returns (hrcw_references, permit_required). Existing references are kept only
    when they belong to the selection; existing permits are always kept.
    """
    sel = valid_categories(selected)
    refs = [r for r in valid_categories(existing_refs) if r in sel]
    for cid in match_categories(text, sel):
        if cid not in refs:
            refs.append(cid)
    permits = [p for p in existing_permits or [] if isinstance(p, str) and p.strip()]
    for p in permits_for(refs):
        if p not in permits:
            permits.append(p)
    return refs, permits
