import pytest

from app.search.cascade import (
    CascadeEvaluator,
    ItemSource,
    MatchKind,
    ResultAccumulator,
    ResultList,
    SearchQuery,
    SearchTier,
    SingleMatch,
    expand_phrases,
    normalize_keyword,
)


class FakeSource(ItemSource):
    """In-memory candidates; records which lookups the cascade made"""

    def __init__(self, items, categories=()):
        self.items = list(items)
        self.categories = list(categories)
        self.calls = []

    @staticmethod
    def _matches(tier, text, phrases):
        text = (text or "").lower()
        if tier == SearchTier.EXACT:
            return text in phrases
        if tier == SearchTier.PARTIAL:
            return any(p in text for p in phrases)
        return any(all(w in text.split() for w in p.split()) for p in phrases)

    def count(self):
        return len(self.items)

    def all_ids(self, limit):
        return [i["id"] for i in self.items][:limit]

    def ids_by_code(self, code, limit):
        self.calls.append(("code", code))
        return [i["id"] for i in self.items if i.get("code") == code][:limit]

    def ids_by_tier(self, tier, phrases, limit):
        self.calls.append(("items", tier))
        return [i["id"] for i in self.items if self._matches(tier, i["name"], phrases)][:limit]

    def category_ids_by_tier(self, tier, phrases, limit):
        self.calls.append(("categories", tier))
        return [c["id"] for c in self.categories if self._matches(tier, c["name"], phrases)][:limit]

    def member_ids(self, category_ids, limit):
        members = set()
        for c in self.categories:
            if c["id"] in category_ids:
                members.update(c["members"])
        return [i["id"] for i in self.items if i["id"] in members][:limit]


def items(*names):
    return [{"id": n, "name": name, "code": None} for n, name in enumerate(names, start=1)]


def test_normalize_keyword_collapses_whitespace_and_case():
    assert normalize_keyword("  Red \t  SHIRT\n") == "red shirt"
    assert normalize_keyword(None) == ""


def test_search_query_code_parsing():
    assert SearchQuery(keyword=" 1234 ").code == 1234
    assert SearchQuery(keyword="12abc").code is None
    assert SearchQuery(keyword="").code is None
    assert SearchQuery(keyword="-5").code == -5


@pytest.mark.parametrize("keyword", ["1_000", "+12", "--5", "-", "\uff11\uff12", "12.0"])
def test_search_query_code_needs_plain_digits(keyword):
    assert SearchQuery(keyword=keyword).code is None


def test_accumulator_dedupes_and_caps():
    acc = ResultAccumulator(3)
    assert acc.add([1, 2, 2, 1]) is False
    assert acc.ids == [1, 2]
    assert acc.add([2, 3, 4, 5]) is True
    assert acc.ids == [1, 2, 3]
    assert acc.position == 3
    # full accumulators ignore further input
    acc.add([6])
    assert acc.ids == [1, 2, 3]
    assert 3 in acc and 6 not in acc


def test_accumulator_requires_positive_maximum():
    with pytest.raises(ValueError):
        ResultAccumulator(0)


@pytest.mark.parametrize("keyword", ["", "a", " b "])
def test_short_keywords_return_base_list(keyword):
    source = FakeSource(items("Red Shirt", "Blue Shirt", "Mug"))
    recorded = []
    evaluator = CascadeEvaluator(history=recorded.append)

    outcome = evaluator.evaluate(SearchQuery(keyword=keyword), source, max_results=2)

    assert outcome == ResultList([1, 2], keyword_matched=False)
    assert source.calls == []
    assert recorded == []


def test_base_list_is_capped():
    source = FakeSource(items(*[f"item {n}" for n in range(150)]))
    outcome = CascadeEvaluator().evaluate(SearchQuery(keyword=""), source)
    assert len(outcome.ids) == 100


def test_single_code_match_returns_item():
    catalog = items("Red Shirt", "Blue Shirt")
    catalog[1]["code"] = 1234
    outcome = CascadeEvaluator().evaluate(SearchQuery(keyword="1234"), FakeSource(catalog))
    assert outcome == SingleMatch(MatchKind.PRODUCT, 2)


def test_multiple_code_matches_stop_the_cascade():
    catalog = items("Red Shirt", "Blue Shirt", "55")
    catalog[0]["code"] = 55
    catalog[1]["code"] = 55
    source = FakeSource(catalog)

    outcome = CascadeEvaluator().evaluate(SearchQuery(keyword="55"), source)

    assert outcome == ResultList([1, 2], keyword_matched=True)
    assert source.calls == [("code", 55)]


def test_exact_title_match_skips_full_text():
    source = FakeSource(items("Red Shirt", "Red Shirt Long Sleeve", "Blue Shirt"))

    outcome = CascadeEvaluator().evaluate(SearchQuery(keyword="RED  shirt"), source)

    assert outcome == SingleMatch(MatchKind.PRODUCT, 1)
    assert ("items", SearchTier.FULL_TEXT) not in source.calls


def test_multiple_titles_accumulate_in_tier_order():
    catalog = [
        {"id": 3, "name": "Blue Mug Large"},
        {"id": 1, "name": "Blue Mug"},
        {"id": 2, "name": "Blue Mug"},
        {"id": 4, "name": "Mug, blue glaze"},
    ]
    outcome = CascadeEvaluator().evaluate(SearchQuery(keyword="blue mug"), FakeSource(catalog))

    # exact hits first, then substring, then full-text
    assert outcome == ResultList([1, 2, 3], keyword_matched=True)


def test_single_hit_after_earlier_hits_is_accumulated():
    catalog = [
        {"id": 1, "name": "desk lampshade"},
        {"id": 2, "name": "desk lamps"},
        {"id": 3, "name": "lamp for desk"},
    ]
    # substring finds 1 and 2, full-text only 3
    outcome = CascadeEvaluator().evaluate(
        SearchQuery(keyword="desk lamp"), FakeSource(catalog)
    )
    assert outcome == ResultList([1, 2, 3], keyword_matched=True)


def test_full_accumulator_aborts_cascade():
    source = FakeSource(items(*["lamp"] * 5))

    outcome = CascadeEvaluator().evaluate(SearchQuery(keyword="lamp"), source, max_results=2)

    assert outcome.ids == [1, 2]
    assert source.calls == [("items", SearchTier.EXACT)]


def test_synonym_is_tried_as_replacement():
    synonyms = {"couch": ["sofa"]}
    source = FakeSource(items("Leather Sofa", "Sofa"))

    outcome = CascadeEvaluator(synonyms=lambda w: synonyms.get(w, [])).evaluate(
        SearchQuery(keyword="couch"), source
    )

    assert outcome == SingleMatch(MatchKind.PRODUCT, 2)


def test_expand_phrases_keeps_original_and_dedupes():
    synonyms = {"couch": [" Sofa ", "settee", "sofa", ""], "red": ["red"]}
    phrases = expand_phrases("red couch", lambda w: synonyms.get(w, []))
    assert phrases == ["red couch", "red sofa", "red settee"]


def test_single_category_match():
    source = FakeSource(
        items("Red Shirt"),
        categories=[{"id": 7, "name": "kitchen", "members": []}],
    )
    outcome = CascadeEvaluator().evaluate(SearchQuery(keyword="Kitchen"), source)
    assert outcome == SingleMatch(MatchKind.CATEGORY, 7)


def test_multiple_categories_expand_to_candidate_members():
    source = FakeSource(
        items("Red Shirt", "Blue Shirt", "Mug"),
        categories=[
            {"id": 7, "name": "summer collection", "members": [1, 99]},
            {"id": 8, "name": "summer sale", "members": [3]},
        ],
    )
    outcome = CascadeEvaluator().evaluate(SearchQuery(keyword="summer"), source)
    # 99 is not a candidate
    assert outcome == ResultList([1, 3], keyword_matched=True)


def test_categories_with_one_candidate_member_match_that_item():
    source = FakeSource(
        items("Red Shirt", "Mug"),
        categories=[
            {"id": 7, "name": "summer collection", "members": [99]},
            {"id": 8, "name": "summer sale", "members": [2]},
        ],
    )
    outcome = CascadeEvaluator().evaluate(SearchQuery(keyword="summer"), source)
    assert outcome == SingleMatch(MatchKind.PRODUCT, 2)


def test_section_search_skips_categories():
    source = FakeSource(
        items("Red Shirt", "Mug"),
        categories=[{"id": 7, "name": "kitchen", "members": [2]}],
    )
    outcome = CascadeEvaluator().evaluate(
        SearchQuery(keyword="kitchen", only_in_section=True), source
    )
    assert outcome == ResultList([1, 2], keyword_matched=False)
    assert not any(kind == "categories" for kind, _ in source.calls)


def test_no_matches_fall_back_to_base_list():
    source = FakeSource(items("Red Shirt", "Mug"))
    outcome = CascadeEvaluator().evaluate(SearchQuery(keyword="xylophone"), source)
    assert outcome == ResultList([1, 2], keyword_matched=False)


def test_empty_candidate_set_skips_keyword_stages():
    source = FakeSource([])
    recorded = []
    outcome = CascadeEvaluator(history=recorded.append).evaluate(
        SearchQuery(keyword="shirt"), source
    )
    assert outcome == ResultList([], keyword_matched=False)
    assert source.calls == []
    assert recorded == []


def test_history_records_normalized_keyword():
    recorded = []
    CascadeEvaluator(history=recorded.append).evaluate(
        SearchQuery(keyword="  Red   Shirt "), FakeSource(items("Red Shirt"))
    )
    assert recorded == ["red shirt"]


def test_history_failure_does_not_break_search():
    def broken_history(keyword):
        raise RuntimeError("broker down")

    outcome = CascadeEvaluator(history=broken_history).evaluate(
        SearchQuery(keyword="red shirt"), FakeSource(items("Red Shirt"))
    )
    assert outcome == SingleMatch(MatchKind.PRODUCT, 1)


def test_results_never_duplicate_or_exceed_cap():
    catalog = [{"id": n, "name": f"lamp {n % 3}"} for n in range(1, 40)]
    categories = [
        {"id": 1, "name": "lamp shop", "members": list(range(1, 40))},
        {"id": 2, "name": "lamp outlet", "members": list(range(20, 40))},
    ]
    outcome = CascadeEvaluator().evaluate(
        SearchQuery(keyword="lamp"), FakeSource(catalog, categories), max_results=25
    )
    assert len(outcome.ids) == 25
    assert len(set(outcome.ids)) == 25
