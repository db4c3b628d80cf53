# swms/config.py
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict

import yaml
from dotenv import load_dotenv

# Optional: load .env in local dev
load_dotenv()

logger = logging.getLogger(__name__)

# Minimum activities a generated document must carry (AI or fallback)
MIN_ACTIVITIES: int = 4


def _load_yaml(path: str | Path) -> dict:
    """Best-effort YAML loader; returns {} if the file is missing or unreadable."""
    p = Path(path)
    if not p.exists():
        return {}
    try:
        with p.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("[CONFIG] could not read %s: %r", p, e)
        return {}


def _getenv_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return str(v).strip().lower() in ("1", "true", "yes", "on")


def _getenv_num(name: str, default, cast):
    v = os.getenv(name)
    if v is None or not str(v).strip():
        return default
    try:
        return cast(v)
    except ValueError:
        logger.warning("[CONFIG] ignoring non-numeric %s=%r", name, v)
        return default


def get_config() -> Dict[str, Any]:
    """
    Central place for engine runtime config.
    Merges (in order): defaults <- YAML (if present) <- ENV.
    """
    cfg: Dict[str, Any] = {}
    for candidate in ("swms/config.yaml", "config.yaml"):
        cfg.update(_load_yaml(candidate))

    defaults = {
        "use_llm": False,
        "llm_model": "gpt-4o",
        "llm_timeout_s": 30.0,
        "llm_max_tokens": 3000,
        "llm_temperature": 0.3,
        "default_state": "NSW",
        "catalog_path": None,  # None -> bundled catalog data
        "general_task_cap": 8,
        "partial_match_limit": 3,
        "min_activities": MIN_ACTIVITIES,
    }

    merged = {**defaults, **cfg}

    # ENV overrides
    merged["use_llm"] = _getenv_bool("SWMS_USE_LLM", merged["use_llm"])
    merged["llm_model"] = os.getenv("SWMS_LLM_MODEL", merged["llm_model"])
    merged["llm_timeout_s"] = _getenv_num("SWMS_LLM_TIMEOUT_S", merged["llm_timeout_s"], float)
    merged["llm_max_tokens"] = _getenv_num("SWMS_LLM_MAX_TOKENS", merged["llm_max_tokens"], int)
    merged["llm_temperature"] = _getenv_num("SWMS_LLM_TEMPERATURE", merged["llm_temperature"], float)
    merged["default_state"] = os.getenv("SWMS_DEFAULT_STATE", merged["default_state"])
    merged["catalog_path"] = os.getenv("SWMS_CATALOG_PATH", merged["catalog_path"])

    return merged
