import asyncio
import json

import pytest

from swms.catalog.store import default_catalog


class FakeClient:
    """Returns a canned completion and records the prompts it was given."""

    def __init__(self, payload):
        self.payload = payload if isinstance(payload, str) else json.dumps(payload)
        self.calls = []

    async def complete_json(self, system, user):
        self.calls.append((system, user))
        return self.payload


class HangingClient:
    """Never answers; notes whether the pending call was cancelled."""

    def __init__(self):
        self.cancelled = False

    async def complete_json(self, system, user):
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return ""


class FailingClient:
    async def complete_json(self, system, user):
        raise RuntimeError("connection reset")


def make_activity(name, **extra):
    item = {
        "name": name,
        "description": f"{name} description",
        "isTaskWithinTradeScope": "YES",
        "riskScore": 8,
        "residualRisk": 3,
        "legislation": ["NSW WHS Regulation 2017"],
        "hazards": [{
            "type": "Physical",
            "description": f"Hazard during {name.lower()}",
            "riskRating": 8,
            "controlMeasures": ["Engineering control", "PPE"],
            "residualRisk": 3,
        }],
        "ppe": ["Safety glasses"],
        "tools": ["Hand tools"],
        "trainingRequired": ["Induction"],
    }
    item.update(extra)
    return item


@pytest.fixture
def catalog():
    return default_catalog()


@pytest.fixture
def cfg():
    return {
        "use_llm": False,
        "llm_timeout_s": 30.0,
        "default_state": "NSW",
        "catalog_path": None,
        "general_task_cap": 8,
        "partial_match_limit": 3,
        "min_activities": 4,
    }


@pytest.fixture
def fake_client():
    return FakeClient


@pytest.fixture
def hanging_client():
    return HangingClient()


@pytest.fixture
def failing_client():
    return FailingClient()


@pytest.fixture
def activity():
    return make_activity
