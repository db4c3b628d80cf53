# swms/generation/trade_scope.py
"""
Hand-authored trade boundaries used in the generation prompt, plus trade-name
aliases so "Tiling" or "electrician" land on the catalog's trade names.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from swms.risk.hrcw import stem_hit


@dataclass(frozen=True)
class TradeScope:
    trade: str
    in_scope: Tuple[str, ...]
    forbidden: Tuple[str, ...]
    aliases: Tuple[str, ...] = ()


TRADE_SCOPES: Tuple[TradeScope, ...] = (
    TradeScope(
        "Tiling & Waterproofing",
        ("substrate preparation", "waterproofing membranes", "tile setting-out and cutting",
         "adhesive and tile installation", "grouting and sealing", "wet area finishing"),
        ("plumbing connections", "electrical work", "structural alterations", "roofing", "concrete pours"),
        ("tiling", "tiler", "waterproofing", "waterproofer"),
    ),
    TradeScope(
        "Electrical Installation",
        ("cabling and conduit", "switchboards", "isolation and lockout", "lighting and power circuits",
         "testing and commissioning"),
        ("plumbing", "gasfitting", "tiling", "structural work", "roof sheeting"),
        ("electrical", "electrician", "electrical work"),
    ),
    TradeScope(
        "Plumbing & Gasfitting",
        ("water supply pipework", "sanitary drainage", "sewer connections", "gas lines", "hot water systems",
         "pressure testing"),
        ("electrical wiring", "tiling", "waterproofing membranes", "roof framing"),
        ("plumbing", "plumber", "gasfitting", "gasfitter"),
    ),
    TradeScope(
        "Carpentry & Joinery",
        ("timber framing", "formwork", "fit-out and joinery", "doors and windows", "decking"),
        ("electrical work", "plumbing", "roof sheeting", "scaffold erection"),
        ("carpentry", "carpenter", "joinery", "joiner"),
    ),
    TradeScope(
        "Roofing & Guttering",
        ("roof sheeting", "flashings", "gutters and downpipes", "roof insulation", "skylights"),
        ("electrical work", "internal fit-out", "scaffold erection"),
        ("roofing", "roofer", "guttering"),
    ),
    TradeScope(
        "Concreting & Cement Work",
        ("formwork set-out", "reinforcement placement", "concrete pours", "finishing and curing",
         "cutting and coring"),
        ("electrical work", "plumbing connections", "tiling"),
        ("concreting", "concreter", "concrete"),
    ),
    TradeScope(
        "Excavation & Earthworks",
        ("service location", "trenching", "bulk excavation", "backfill and compaction", "mobile plant operation"),
        ("building fit-out", "electrical terminations", "roofing"),
        ("excavation", "earthworks", "civil works"),
    ),
    TradeScope(
        "Demolition & Asbestos Removal",
        ("strip-out", "structural demolition", "asbestos removal", "waste segregation"),
        ("new construction", "electrical installation", "finishing trades"),
        ("demolition", "asbestos removal"),
    ),
    TradeScope(
        "Painting & Decorating",
        ("surface preparation", "priming", "interior painting", "exterior painting", "wallpapering"),
        ("plastering repairs beyond patching", "electrical work", "tiling"),
        ("painting", "painter", "decorating"),
    ),
    TradeScope(
        "Scaffolding & Access",
        ("scaffold erection and dismantling", "edge protection", "elevating work platforms", "access ladders"),
        ("roof sheeting", "building fit-out", "electrical work"),
        ("scaffolding", "scaffolder", "access equipment"),
    ),
)

GENERIC_SCOPE = TradeScope(
    "General Construction",
    ("work activities normally performed by the nominated trade",),
    ("work requiring a different licensed trade",),
)

# Minimum activities requested from the generator, by trade complexity.
COMPLEX_TRADES = ("electrical", "plumbing", "hvac", "structural steel", "concret", "scaffold",
                  "roofing", "fire protection", "mechanical", "civil", "demolition", "excavation")
MODERATE_TRADES = ("carpentry", "flooring", "tiling", "plastering", "insulation", "glazing",
                   "waterproofing", "landscaping")

_BY_NAME: Dict[str, TradeScope] = {s.trade.lower(): s for s in TRADE_SCOPES}
_BY_ALIAS: Dict[str, TradeScope] = {a: s for s in TRADE_SCOPES for a in s.aliases}


def scope_for(trade: str) -> Optional[TradeScope]:
    key = (trade or "").strip().lower()
    return _BY_NAME.get(key) or _BY_ALIAS.get(key)


def canonical_trade(trade: str) -> str:
    """Map an alias ("Tiling", "electrician") onto its catalog trade name; unknown names pass through."""
    scope = scope_for(trade)
    return scope.trade if scope else (trade or "").strip()


def minimum_tasks(trade: str) -> int:
    t = (trade or "").lower()
    if any(stem_hit(t, k) for k in COMPLEX_TRADES):
        return 10
    if any(stem_hit(t, k) for k in MODERATE_TRADES):
        return 9
    return 8
