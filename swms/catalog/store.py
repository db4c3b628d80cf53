# swms/catalog/store.py
from __future__ import annotations
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Iterator, List, Mapping, Optional, Tuple
import logging

import yaml
from pydantic import ValidationError

from swms.risk.errors import CatalogIntegrityError
from swms.risk.models import TaskDefinition
from swms.validation.json_schema_validator import load_schema, problem_lines, validate_rows

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent / "data"
DEFAULT_CATALOG_PATH = DATA_DIR / "tasks.yaml"
TASK_SCHEMA_PATH = DATA_DIR / "task.schema.json"


def _norm(s: str) -> str:
    return (s or "").strip().lower()


class TaskCatalog:
    """
    Read-only collection of curated task definitions.

    Built once from validated data and never mutated afterwards: tasks are frozen
    models held in a tuple, the id index is a MappingProxyType, and attribute
    assignment on the catalog itself raises. Concurrent readers need no locks.
    """

    __slots__ = ("_tasks", "_by_id", "_sealed")

    def __init__(self, tasks: Tuple[TaskDefinition, ...]):
        problems = self._integrity_problems(tasks)
        if problems:
            raise CatalogIntegrityError(problems)
        object.__setattr__(self, "_tasks", tuple(tasks))
        object.__setattr__(self, "_by_id", MappingProxyType({t.task_id: t for t in tasks}))
        object.__setattr__(self, "_sealed", True)

    def __setattr__(self, name, value):
        raise AttributeError("TaskCatalog is immutable")

    def __delattr__(self, name):
        raise AttributeError("TaskCatalog is immutable")

    # --- construction -------------------------------------------------------

    @staticmethod
    def _integrity_problems(tasks: Tuple[TaskDefinition, ...]) -> List[str]:
        problems: List[str] = []
        seen = set()
        for t in tasks:
            if t.task_id in seen:
                problems.append(f"duplicate task_id '{t.task_id}'")
            seen.add(t.task_id)
        for t in tasks:
            for rid in t.related_tasks:
                if rid not in seen:
                    problems.append(f"task '{t.task_id}' references unknown related task '{rid}'")
                elif rid == t.task_id:
                    problems.append(f"task '{t.task_id}' lists itself as related")
        return problems

    @classmethod
    def from_records(cls, records: List[dict], schema: Optional[dict] = None) -> "TaskCatalog":
        """Validate raw records (schema, then model) and build the catalog."""
        if not isinstance(records, list):
            raise CatalogIntegrityError("catalog data must be a list of task records")

        schema = schema if schema is not None else load_schema(TASK_SCHEMA_PATH)
        failures = validate_rows(schema, records, id_field="task_id")
        if failures:
            raise CatalogIntegrityError(problem_lines(failures))

        tasks: List[TaskDefinition] = []
        problems: List[str] = []
        for i, rec in enumerate(records):
            try:
                tasks.append(TaskDefinition(**rec))
            except ValidationError as e:
                tid = rec.get("task_id", f"#{i}") if isinstance(rec, dict) else f"#{i}"
                for err in e.errors():
                    problems.append(f"task '{tid}': {err['msg']}")
        if problems:
            raise CatalogIntegrityError(problems)
        return cls(tuple(tasks))

    @classmethod
    def from_yaml(cls, path: str | Path = DEFAULT_CATALOG_PATH) -> "TaskCatalog":
        p = Path(path)
        try:
            with p.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise CatalogIntegrityError(f"cannot load catalog from {p}: {e}") from e
        records = data.get("tasks") if isinstance(data, dict) else data
        catalog = cls.from_records(records or [])
        logger.info("[CATALOG] loaded %d tasks from %s", len(catalog), p.name)
        return catalog

    # --- lookup surface -----------------------------------------------------

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[TaskDefinition]:
        return iter(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._by_id

    @property
    def tasks(self) -> Tuple[TaskDefinition, ...]:
        return self._tasks

    @property
    def index(self) -> Mapping[str, TaskDefinition]:
        return self._by_id

    def get(self, task_id: str) -> Optional[TaskDefinition]:
        return self._by_id.get(task_id)

    def trades(self) -> List[str]:
        out: List[str] = []
        for t in self._tasks:
            if not t.is_universal and t.trade not in out:
                out.append(t.trade)
        return out

    def has_trade(self, trade: str) -> bool:
        key = _norm(trade)
        return any(_norm(t.trade) == key for t in self._tasks if not t.is_universal)

    def by_trade(self, trade: str) -> List[TaskDefinition]:
        key = _norm(trade)
        return [t for t in self._tasks if _norm(t.trade) == key or t.is_universal]

    def universal(self) -> List[TaskDefinition]:
        return [t for t in self._tasks if t.is_universal]

    def by_complexity(self, level: str) -> List[TaskDefinition]:
        key = _norm(level)
        return [t for t in self._tasks if t.complexity == key]

    def high_risk(self, threshold: int = 12) -> List[TaskDefinition]:
        return [t for t in self._tasks if t.initial_risk_score >= threshold]

    def search(self, term: str) -> List[TaskDefinition]:
        q = _norm(term)
        if not q:
            return []
        out = []
        for t in self._tasks:
            if (
                q in t.activity.lower()
                or q in t.category.lower()
                or q in t.subcategory.lower()
                or q in t.trade.lower()
                or any(q in h.lower() for h in t.hazards)
                or any(q in c.lower() for c in t.control_measures)
            ):
                out.append(t)
        return out


@lru_cache(maxsize=None)
def _load_cached(path: str) -> TaskCatalog:
    return TaskCatalog.from_yaml(path)


def default_catalog(path: Optional[str | Path] = None) -> TaskCatalog:
    """Process-wide catalog, loaded once per path. Integrity errors propagate."""
    return _load_cached(str(Path(path) if path else DEFAULT_CATALOG_PATH))
