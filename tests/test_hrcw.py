from swms.risk.hrcw import annotate, keyword_hit, match_categories, stem_hit


def test_keywords_match_whole_words_only():
    assert match_categories("Apply tanking membrane to the shower base", [6]) == []
    assert match_categories("Pump out the holding tank", [6]) == [6]
    assert match_categories("Check the pitch of the gutter", [6]) == []
    assert match_categories("Precautions that save lives", [11]) == []
    assert match_categories("Test for live conductors", [11]) == [11]
    assert match_categories("Repair water damage to ceiling", [17]) == []
    assert match_categories("Work beside the farm dam", [17]) == [17]


def test_listed_variants_still_match():
    assert match_categories("Scaffolding erection and dismantling", [1]) == [1]
    assert match_categories("Falls through brittle sheeting", [1]) == [1]
    assert match_categories("Sewer pits and trenches", [6, 7]) == [6, 7]


def test_annotate_ignores_partial_word_hits():
    refs, permits = annotate("Tanking and waterproofing of wet areas", [6])
    assert refs == [] and permits == []


def test_keyword_and_stem_matching():
    assert keyword_hit("sewer pit", "pit")
    assert not keyword_hit("spitting", "pit")
    assert stem_hit("concreting & cement work", "concret")
    assert not stem_hit("tiling & waterproofing", "roofing")
