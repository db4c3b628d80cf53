from swms.catalog.store import TaskCatalog
from swms.resolution.resolver import TaskResolver, tokenize


def _widget_catalog():
    base = {
        "category": "Widgets",
        "subcategory": "Assembly",
        "trade": "Test Trade",
        "hazards": ["Pinch points"],
        "initial_risk_score": 8,
        "control_measures": ["Guarding"],
        "residual_risk_score": 3,
        "responsible": "Supervisor",
    }
    return TaskCatalog.from_records([
        {**base, "task_id": "sign-in", "activity": "Site sign-in", "trade": "Universal"},
        {**base, "task_id": "alpha", "activity": "Alpha widget assembly", "related_tasks": ["beta"]},
        {**base, "task_id": "beta", "activity": "Beta widget polishing", "related_tasks": ["gamma"]},
        {**base, "task_id": "gamma", "activity": "Gamma widget packing"},
    ])


def test_tokenize_drops_short_words_and_stopwords():
    assert tokenize("Tile the floor & walls in a bathroom") == ["tile", "floor", "walls", "bathroom"]


def test_bathroom_tiling_pulls_prep_or_cutting_and_all_universal(catalog):
    res = TaskResolver(catalog).resolve(["bathroom tiling"], "Tiling & Waterproofing")
    ids = res.task_ids
    assert "tiling-bathroom-001" in ids
    assert "tiling-surface-prep-001" in ids or "tiling-cutting-001" in ids
    universal = [t.task_id for t in catalog.universal()]
    assert set(universal) <= set(ids)
    assert ids[: len(universal)] == universal
    assert res.known_trade
    assert res.warnings == ()


def test_trade_general_tasks_close_the_list(catalog):
    res = TaskResolver(catalog).resolve(["bathroom tiling"], "Tiling & Waterproofing")
    assert res.task_ids[-1] == "tiling-general-001"


def test_empty_activities_give_universal_plus_trade_general(catalog):
    res = TaskResolver(catalog).resolve([], "Tiling & Waterproofing")
    universal = [t.task_id for t in catalog.universal()]
    assert res.task_ids == universal + ["tiling-general-001"]


def test_trade_alias_is_canonicalised(catalog):
    res = TaskResolver(catalog).resolve(["tile cutting"], "Tiling")
    assert res.trade == "Tiling & Waterproofing"
    assert "tiling-cutting-001" in res.task_ids


def test_unknown_trade_returns_universal_only_with_warning(catalog):
    res = TaskResolver(catalog).resolve(["bathroom tiling"], "Underwater Basket Weaving")
    assert not res.known_trade
    assert res.task_ids == [t.task_id for t in catalog.universal()]
    assert len(res.warnings) == 1
    assert res.warnings[0].startswith("UnknownTrade")


def test_unmatched_activity_warns_resolution_empty(catalog):
    res = TaskResolver(catalog).resolve(["zzz qqq xxx"], "Electrical Installation")
    assert any(w.startswith("ResolutionEmpty") for w in res.warnings)
    assert "site-access-001" in res.task_ids


def test_known_trade_without_catalog_tasks_warns():
    res = TaskResolver(_widget_catalog()).resolve([], "Electrical Installation")
    assert res.known_trade
    assert res.task_ids == ["sign-in"]
    assert any(w.startswith("ResolutionEmpty") for w in res.warnings)


def test_expansion_is_one_hop_only():
    res = TaskResolver(_widget_catalog()).resolve(["alpha widget assembly"], "Test Trade")
    assert res.task_ids == ["sign-in", "alpha", "beta"]


def test_partial_match_needs_two_shared_words_and_respects_limit():
    resolver = TaskResolver(_widget_catalog(), partial_match_limit=1)
    # "widget" alone is not enough
    assert resolver.partial_matches("widget", "Test Trade") == []
    hits = resolver.partial_matches("widgets for gamma packing", "Test Trade")
    assert [t.task_id for t in hits] == ["gamma"]
    hits = resolver.partial_matches("widget alpha beta gamma", "Test Trade")
    assert len(hits) == 1


def test_partial_match_filters_other_trades(catalog):
    hits = TaskResolver(catalog).partial_matches("switchboard installation upgrade", "Tiling & Waterproofing")
    assert all(t.trade in ("Tiling & Waterproofing", "Universal", "All Trades") for t in hits)


def test_general_task_cap(catalog):
    res = TaskResolver(catalog, general_task_cap=0).resolve([], "Tiling & Waterproofing")
    assert "tiling-general-001" not in res.task_ids
