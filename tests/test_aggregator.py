from swms.resolution.aggregator import (
    aggregate,
    emergency_procedures,
    general_requirements,
    project_specific,
    task_to_assessment,
)
from swms.resolution.resolver import TaskResolver
from swms.risk.models import GeneratedActivity, Hazard, TaskDefinition
from swms.schemas.contracts import ProjectDetails


def _doc(catalog, activities, trade, **kw):
    res = TaskResolver(catalog).resolve(activities, trade)
    return res, aggregate(res.tasks, trade_type=res.trade, **kw)


def test_overlap_from_exact_and_expansion_collapses_to_one(catalog):
    res, doc = _doc(catalog, ["bathroom tiling", "tile cutting"], "Tiling & Waterproofing")
    # reached once through related_tasks of the bathroom task and once by exact match
    assert res.task_ids.count("tiling-cutting-001") == 2
    cutting = [ra for ra in doc.risk_assessments if ra.task_id == "tiling-cutting-001"]
    assert len(cutting) == 1


def test_same_activity_and_hazards_under_different_ids_collapse():
    common = dict(
        activity="Tile cutting", category="Tiling", subcategory="Cutting", trade="Tiling & Waterproofing",
        hazards=("Lacerations",), initial_risk_score=9, control_measures=("Guard",),
        residual_risk_score=3, responsible="Tiler",
    )
    a = TaskDefinition(task_id="cut-a", **common)
    b = TaskDefinition(task_id="cut-b", **common)
    doc = aggregate([a, b], trade_type="Tiling & Waterproofing")
    assert [ra.task_id for ra in doc.risk_assessments] == ["cut-a"]


def test_dedup_keys_unique_and_aggregation_idempotent(catalog):
    res = TaskResolver(catalog).resolve(["bathroom tiling", "grouting"], "Tiling & Waterproofing")
    once = aggregate(res.tasks, trade_type=res.trade)
    twice = aggregate(list(res.tasks) + list(res.tasks), trade_type=res.trade)
    again = aggregate(res.tasks, trade_type=res.trade)
    keys = [ra.dedup_key for ra in once.risk_assessments]
    assert len(keys) == len(set(keys))
    assert once.to_dict() == twice.to_dict() == again.to_dict()


def test_compliance_codes_are_sorted_union_of_legislation(catalog):
    _, doc = _doc(catalog, ["cable installation", "switchboard"], "Electrical Installation")
    expected = set()
    for ra in doc.risk_assessments:
        expected.update(ra.legislation)
    assert doc.compliance_codes == sorted(expected)


def test_assessments_keep_risk_monotonic_and_non_empty(catalog):
    _, doc = _doc(catalog, ["scaffold erection"], "Scaffolding & Access")
    assert doc.risk_assessments
    for ra in doc.risk_assessments:
        assert ra.hazards and ra.control_measures
        assert ra.residual_risk_score <= ra.initial_risk_score
        assert ra.risk_level in ("Low", "Medium", "High", "Extreme")


def test_confined_space_task_gets_hrcw_reference_and_permits(catalog):
    res = TaskResolver(catalog).resolve(["sewer pit connection"], "Plumbing & Gasfitting")
    doc = aggregate(res.tasks, trade_type=res.trade, hrcw_categories=[6])
    pit = next(ra for ra in doc.risk_assessments if ra.task_id == "plumbing-sewer-pit-001")
    assert 6 in pit.hrcw_references
    assert "Confined space entry permit" in pit.permit_required
    # no category selected -> no annotation
    plain = aggregate(res.tasks, trade_type=res.trade)
    pit = next(ra for ra in plain.risk_assessments if ra.task_id == "plumbing-sewer-pit-001")
    assert pit.hrcw_references == [] and pit.permit_required == []


def test_safety_measures_base_plus_trade(catalog):
    doc = aggregate([], trade_type="Electrical Installation")
    cats = [m.category for m in doc.safety_measures]
    assert cats[:2] == ["Personal Protective Equipment (PPE)", "Emergency Equipment"]
    assert "Electrical Safety Equipment" in cats
    unknown = aggregate([], trade_type="Underwater Basket Weaving")
    assert len(unknown.safety_measures) == 2


def test_generated_activities_follow_catalog_tasks(catalog):
    act = GeneratedActivity(
        name="Grout haze removal",
        hazards=[Hazard(description="Acid cleaner splash", control_measures=["Dilute per SDS", "Face shield"])],
        risk_score=6,
        residual_risk=2,
        legislation=["AS 3958.1:2007 Ceramic tiles - Guide to the installation of ceramic tiles"],
    )
    task = catalog.get("tiling-grouting-001")
    doc = aggregate([task], trade_type="Tiling & Waterproofing", generated=[act], source="ai")
    assert [ra.origin for ra in doc.risk_assessments] == ["catalog", "ai"]
    generated = doc.risk_assessments[1]
    assert generated.control_measures == ["Dilute per SDS", "Face shield"]
    assert generated.id and generated.id != task.task_id
    assert doc.activities == [act]
    assert doc.source == "ai"


def test_task_to_assessment_keeps_catalog_id(catalog):
    ra = task_to_assessment(catalog.get("site-access-001"))
    assert ra.id == "site-access-001"
    assert ra.risk_level == "High" and ra.residual_risk_level == "Low"


def test_emergency_and_general_requirements_are_pure():
    assert emergency_procedures("Plumbing & Gasfitting", "VIC") == emergency_procedures("Plumbing & Gasfitting", "VIC")
    proc = emergency_procedures("Plumbing & Gasfitting", "VIC")
    assert any("WorkSafe Victoria" in p for p in proc)
    assert any("Confined space rescue" in p for p in proc)
    reqs = general_requirements("Plumbing & Gasfitting", "QLD")
    assert any("QLD WHS legislation" in r for r in reqs)


def test_project_specific_block():
    details = ProjectDetails(location="12 Smith St", state="WA", site_environment="Residential",
                             hrcw_categories=[1, 6], client_requirements=["Quiet hours 7am-5pm"])
    block = project_specific(details, "Roofing & Guttering")
    assert block["project_name"] == "12 Smith St"
    assert block["state"] == "WA"
    assert [c["id"] for c in block["hrcw_categories"]] == [1, 6]
    assert block["client_requirements"] == ["Quiet hours 7am-5pm"]
    assert project_specific(None, "X")["client_requirements"]


def test_catalog_controls_follow_hierarchy_markers():
    task = TaskDefinition(
        task_id="mix-001", activity="Adhesive mixing", category="Tiling", subcategory="Setting",
        trade="Tiling & Waterproofing", hazards=("Dust inhalation",), initial_risk_score=8,
        control_measures=("P2 respirator – L6", "Toolbox talk", "Pre-mixed adhesive – L2", "Dust extraction – L4"),
        residual_risk_score=3, responsible="Tiler",
    )
    ra = task_to_assessment(task)
    assert ra.control_measures == [
        "Pre-mixed adhesive – L2", "Dust extraction – L4", "P2 respirator – L6", "Toolbox talk",
    ]
