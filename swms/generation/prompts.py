# swms/generation/prompts.py
from __future__ import annotations
from typing import List, Sequence, Tuple

from swms.generation.trade_scope import GENERIC_SCOPE, minimum_tasks, scope_for
from swms.risk.hrcw import HRCW_BY_ID, valid_categories

SYSTEM_TEMPLATE = """You are an Australian construction safety specialist writing Safe Work Method Statements.
Generate {min_tasks}-{max_tasks} DISTINCT {trade} activities for the job described by the user.

Site: {site} environment in {state}.
HRCW categories selected: {hrcw_text}

TRADE BOUNDARY for {trade}:
IN SCOPE: {in_scope}
FORBIDDEN (belongs to other trades, never include): {forbidden}
For every activity set "isTaskWithinTradeScope" to "YES" or "NO" and explain in "scopeReason".

HAZARDS: every hazard must name its "causeAgent" (the equipment, material or process),
the "environmentalCondition" on this {site} site, and the "consequence" (injury type and severity).

CONTROLS: list control measures in hierarchy-of-controls order: elimination, substitution,
isolation, engineering, administrative, then PPE. Rely on PPE only where higher controls are
not reasonably practicable.

LEGISLATION: cite {state} WHS legislation, relevant Australian Standards and Codes of Practice
for each activity individually.
{hrcw_rules}
Risk scores use a 1-16 scale; residualRisk must not exceed riskScore.

Return a JSON object of exactly this shape:
{{
  "activities": [
    {{
      "name": "Unique task name",
      "description": "25+ word description of the work",
      "isTaskWithinTradeScope": "YES",
      "scopeReason": "Why this is {trade} work",
      "riskScore": 8,
      "residualRisk": 3,
      "legislation": ["{state} WHS Regulation 2017 - Part X", "AS/NZS XXXX:YYYY - Standard"],
      "hazards": [
        {{
          "type": "Physical|Chemical|Biological|Ergonomic|Electrical",
          "description": "Hazard with cause and consequence",
          "causeAgent": "...",
          "environmentalCondition": "...",
          "consequence": "...",
          "riskRating": 8,
          "controlMeasures": ["Elimination ...", "Engineering ...", "Administrative ...", "PPE ..."],
          "residualRisk": 3
        }}
      ],
      "ppe": ["..."],
      "tools": ["..."],
      "trainingRequired": ["..."],
      "hrcwReferences": [],
      "permitRequired": []
    }}
  ]
}}
Never repeat a task name. Return JSON only."""

HRCW_RULES_TEMPLATE = """
HRCW: where an activity involves one of the selected categories below, list its number in
"hrcwReferences" and the permit names it needs in "permitRequired".
{categories}
"""

USER_TEMPLATE = "Generate SWMS activities for {trade} work: {description}"


def _hrcw_lines(categories: Sequence[int]) -> List[str]:
    return [f"{c}. {HRCW_BY_ID[c].title}" for c in categories]


def build_prompt(trade: str, description: str, *, state: str, site: str,
                 hrcw_categories: Sequence[int] = ()) -> Tuple[str, str]:
    """Returns (system, user) messages."""
    scope = scope_for(trade) or GENERIC_SCOPE
    cats = valid_categories(hrcw_categories)
    n = minimum_tasks(trade)
    hrcw_rules = HRCW_RULES_TEMPLATE.format(categories="\n".join(_hrcw_lines(cats))) if cats else ""
    system = SYSTEM_TEMPLATE.format(
        min_tasks=n,
        max_tasks=n + 2,
        trade=trade or "construction",
        site=site,
        state=state,
        hrcw_text=", ".join(str(c) for c in cats) or "None selected",
        in_scope="; ".join(scope.in_scope),
        forbidden="; ".join(scope.forbidden),
        hrcw_rules=hrcw_rules,
    )
    user = USER_TEMPLATE.format(trade=trade or "construction", description=description or "general works")
    return system, user
