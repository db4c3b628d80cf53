# swms/resolution/resolver.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple
import logging
import re

from swms.catalog.store import TaskCatalog
from swms.generation.trade_scope import canonical_trade, scope_for
from swms.resolution.safety_tables import TRADE_SAFETY_MEASURES
from swms.risk.errors import RESOLUTION_EMPTY, UNKNOWN_TRADE, warning_text
from swms.risk.models import TaskDefinition

logger = logging.getLogger(__name__)

STOPWORDS = {
    "and", "the", "for", "with", "from", "into", "onto", "of", "to", "in", "on", "at",
    "work", "works", "new", "existing", "all", "any",
}

GENERAL_CATEGORY = "general site work"
GENERAL_SUBCATEGORY = "general safety"
GENERAL_MARKERS = ("general", "daily", "inspection")

_WORD_RE = re.compile(r"[a-z0-9]+")


def tokenize(text: str) -> List[str]:
    """Lowercase word tokens; tokens shorter than 3 chars and stop-words are dropped."""
    out: List[str] = []
    for w in _WORD_RE.findall((text or "").lower()):
        if len(w) < 3 or w in STOPWORDS or w in out:
            continue
        out.append(w)
    return out


def _overlap(query_tokens: Sequence[str], entry_tokens: Sequence[str]) -> int:
    hits = 0
    for q in query_tokens:
        if any(q in e or e in q for e in entry_tokens):
            hits += 1
    return hits


@dataclass(frozen=True)
class Resolution:
    tasks: Tuple[TaskDefinition, ...] = ()
    warnings: Tuple[str, ...] = ()
    known_trade: bool = True
    trade: str = ""

    @property
    def task_ids(self) -> List[str]:
        return [t.task_id for t in self.tasks]


class TaskResolver:
    """
    Maps loosely-phrased activities onto catalog tasks.

    Per activity: exact (substring) search, else partial word overlap (>= 2
    shared words, top N in catalog order), then one hop through related_tasks.
    Universal tasks always lead; trade-general tasks close the list.
    """

    def __init__(self, catalog: TaskCatalog, *, general_task_cap: int = 8, partial_match_limit: int = 3):
        self.catalog = catalog
        self.general_task_cap = general_task_cap
        self.partial_match_limit = partial_match_limit

    # --- trade handling -----------------------------------------------------

    def is_known_trade(self, trade: str) -> bool:
        t = canonical_trade(trade)
        if not t:
            return False
        return self.catalog.has_trade(t) or scope_for(t) is not None or t in TRADE_SAFETY_MEASURES

    def _in_trade(self, task: TaskDefinition, trade: str) -> bool:
        return task.is_universal or task.trade.strip().lower() == trade.lower()

    # --- matching paths -----------------------------------------------------

    def exact_matches(self, activity: str, trade: str) -> List[TaskDefinition]:
        return [t for t in self.catalog.search(activity) if self._in_trade(t, trade)]

    def partial_matches(self, activity: str, trade: str) -> List[TaskDefinition]:
        q = tokenize(activity)
        if len(q) < 2:
            return []
        out: List[TaskDefinition] = []
        for t in self.catalog:
            if len(out) >= self.partial_match_limit:
                break
            if self._in_trade(t, trade) and _overlap(q, tokenize(t.activity)) >= 2:
                out.append(t)
        return out

    def expand(self, tasks: Iterable[TaskDefinition]) -> List[TaskDefinition]:
        """One hop over related_tasks; related entries are not expanded further."""
        out: List[TaskDefinition] = []
        for t in tasks:
            out.append(t)
            for rid in t.related_tasks:
                rel = self.catalog.get(rid)
                if rel is not None:
                    out.append(rel)
        return out

    def trade_general(self, trade: str) -> List[TaskDefinition]:
        out: List[TaskDefinition] = []
        key = trade.lower()
        for t in self.catalog:
            if len(out) >= self.general_task_cap:
                break
            if t.is_universal or t.trade.strip().lower() != key:
                continue
            act = t.activity.lower()
            if (
                t.category.strip().lower() == GENERAL_CATEGORY
                or t.subcategory.strip().lower() == GENERAL_SUBCATEGORY
                or any(m in act for m in GENERAL_MARKERS)
            ):
                out.append(t)
        return out

    # --- entry point --------------------------------------------------------

    def resolve(self, selected_activities: Optional[Sequence[str]], trade_type: str) -> Resolution:
        trade = canonical_trade(trade_type)
        universal = self.catalog.universal()
        warnings: List[str] = []

        if not self.is_known_trade(trade):
            w = warning_text(UNKNOWN_TRADE, f"trade '{trade_type}' is not recognised; universal tasks only")
            logger.warning("[RESOLVER] %s", w)
            return Resolution(tuple(universal), (w,), known_trade=False, trade=trade)

        if not self.catalog.has_trade(trade):
            w = warning_text(RESOLUTION_EMPTY, f"no catalog tasks for trade '{trade}'")
            logger.warning("[RESOLVER] %s", w)
            warnings.append(w)

        matched: List[TaskDefinition] = []
        for activity in selected_activities or []:
            activity = (activity or "").strip()
            if not activity:
                continue
            hits = self.exact_matches(activity, trade) or self.partial_matches(activity, trade)
            if not hits:
                w = warning_text(RESOLUTION_EMPTY, f"no catalog match for activity '{activity}'")
                logger.warning("[RESOLVER] %s", w)
                warnings.append(w)
                continue
            matched.extend(self.expand(hits))

        general = self.trade_general(trade)
        tasks = tuple(universal + matched + general)
        logger.info(
            "[RESOLVER] trade=%s activities=%d -> %d tasks (%d universal, %d matched, %d general)",
            trade, len(selected_activities or []), len(tasks), len(universal), len(matched), len(general),
        )
        return Resolution(tasks, tuple(warnings), known_trade=True, trade=trade)
