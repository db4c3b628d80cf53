import json

import pytest

from swms.generation.normalizers import (
    coerce_score,
    find_task_array,
    normalize_response,
    normalize_task_name,
    parse_json,
    strip_code_fences,
)
from swms.risk.errors import AIMalformedResponseError

CTX = dict(trade="Tiling & Waterproofing", state="NSW", site="Commercial")


def test_pascal_case_wrapper_gets_defaults():
    text = json.dumps({"SWMS_Tasks": [{"Task": "X", "Description": "Y"}]})
    acts, warnings = normalize_response(text, **CTX)
    assert len(acts) == 1
    a = acts[0]
    assert a.name == "X"
    assert a.description == "Y"
    assert a.hazards and a.hazards[0].description
    assert a.hazards[0].control_measures
    assert a.ppe and a.tools and a.training_required and a.legislation
    assert a.residual_risk <= a.risk_score
    assert warnings == []


def test_fenced_json_and_bare_array(activity):
    fenced = "Here you go:\n```json\n" + json.dumps({"activities": [activity("Grouting")]}) + "\n```"
    acts, _ = normalize_response(fenced, **CTX)
    assert [a.name for a in acts] == ["Grouting"]

    bare = json.dumps([activity("Sealing")])
    acts, _ = normalize_response(bare, **CTX)
    assert [a.name for a in acts] == ["Sealing"]


def test_task_array_one_level_down(activity):
    data = {"swms": {"meta": {"v": 1}, "tasks": [activity("Layout")]}}
    assert find_task_array(data)[0]["name"] == "Layout"
    assert find_task_array({"message": "nothing here"}) is None
    assert find_task_array({"numbers": [1, 2, 3]}) is None


def test_snake_case_and_camel_case_keys_map_the_same():
    snake = {"task_name": "Priming", "risk_score": 9, "residual_risk": 2,
             "hazards": [{"description": "Vapour", "control_measures": ["Ventilate"], "cause_agent": "Primer"}]}
    acts, _ = normalize_response(json.dumps({"tasks": [snake]}), **CTX)
    a = acts[0]
    assert (a.name, a.risk_score, a.residual_risk) == ("Priming", 9, 2)
    assert a.hazards[0].cause_agent == "Primer"
    assert a.hazards[0].control_measures == ["Ventilate"]


def test_textual_ratings_and_residual_clamp(activity):
    item = activity("Tile removal", riskScore="High", residualRisk=15)
    item["hazards"][0]["riskRating"] = "Critical"
    acts, _ = normalize_response(json.dumps({"activities": [item]}), **CTX)
    a = acts[0]
    assert a.risk_score == 12
    assert a.residual_risk == 12
    assert a.hazards[0].risk_rating == 16


def test_plain_string_hazards_get_causation_defaults():
    item = {"name": "Floor levelling", "hazards": ["Dust from self-levelling compound"]}
    acts, _ = normalize_response(json.dumps({"activities": [item]}), **CTX)
    h = acts[0].hazards[0]
    assert h.description == "Dust from self-levelling compound"
    assert h.cause_agent and h.environmental_condition and h.consequence
    assert "Commercial" in h.environmental_condition


def test_out_of_scope_activities_dropped_with_warning(activity):
    items = [
        activity("Wall tiling"),
        activity("Rewire light switches", isTaskWithinTradeScope="NO", scopeReason="Electrical work"),
    ]
    acts, warnings = normalize_response(json.dumps({"activities": items}), **CTX)
    assert [a.name for a in acts] == ["Wall tiling"]
    assert len(warnings) == 1 and "Rewire light switches" in warnings[0]


def test_everything_out_of_scope_is_malformed(activity):
    items = [activity("Rewire", isTaskWithinTradeScope="NO")]
    with pytest.raises(AIMalformedResponseError):
        normalize_response(json.dumps({"activities": items}), **CTX)


def test_duplicate_names_after_filler_removal(activity):
    items = [activity("Tile cutting and installation"), activity("Tile Cutting Installation")]
    acts, _ = normalize_response(json.dumps({"activities": items}), **CTX)
    assert len(acts) == 1
    assert normalize_task_name("Installation of the Tile Cutting Tool") == "tilecutting"


def test_invalid_or_shapeless_responses_raise():
    with pytest.raises(AIMalformedResponseError):
        normalize_response("not json at all", **CTX)
    with pytest.raises(AIMalformedResponseError):
        normalize_response("", **CTX)
    with pytest.raises(AIMalformedResponseError):
        normalize_response(json.dumps({"message": "I cannot help"}), **CTX)


def test_hrcw_references_limited_to_selection(activity):
    item = activity("Sewer pit entry", hrcwReferences=[6, 4], permitRequired=["None"])
    acts, _ = normalize_response(json.dumps({"activities": [item]}), hrcw_categories=[6], **CTX)
    a = acts[0]
    assert a.hrcw_references == [6]
    assert "Confined space entry permit" in a.permit_required
    assert "None" not in a.permit_required

    acts, _ = normalize_response(json.dumps({"activities": [item]}), **CTX)
    assert acts[0].hrcw_references == []


def test_coerce_score():
    assert coerce_score(20, 6) == 16
    assert coerce_score(0, 6) == 1
    assert coerce_score("8/16", 6) == 8
    assert coerce_score("Medium", 6) == 8
    assert coerce_score("very high", 6) == 16
    assert coerce_score("Low", 6) == 4
    assert coerce_score(None, 6) == 6
    assert coerce_score("unknown", 5) == 5


def test_strip_fences_and_parse_json_with_prose():
    assert strip_code_fences("```json\n{\"a\": 1}\n```") == '{"a": 1}'
    assert parse_json('Sure! {"a": [1]} Hope that helps.') == {"a": [1]}


def test_non_finite_scores_fall_back_to_default():
    assert coerce_score(float("inf"), 6) == 6
    assert coerce_score(float("-inf"), 6) == 6
    assert coerce_score(float("nan"), 6) == 6
    assert coerce_score("9" * 400, 6) == 6
    assert coerce_score(10 ** 400, 6) == 16


def test_infinite_risk_score_in_response_is_tolerated():
    text = '{"tasks": [{"name": "X", "riskScore": Infinity, "residualRisk": "' + "9" * 400 + '"}]}'
    acts, _ = normalize_response(text, **CTX)
    assert acts[0].name == "X"
    assert 1 <= acts[0].residual_risk <= acts[0].risk_score <= 16
