import pytest

from chat_actions.config import MatchingConfig
from chat_actions.matching import fuzzy
from chat_actions.matching.fuzzy import match_item, match_mentions, similarity
from chat_actions.types import CatalogItem, ExtractedMention

CATALOG = [
    CatalogItem(id="y9", name="Butter Chicken", price=299, category="Main"),
    CatalogItem(id="p1", name="Paneer Tikka", price=279, category="Starter"),
    CatalogItem(id="p2", name="Paneer Tikki", price=189, category="Starter"),
    CatalogItem(id="n1", name="Garlic Naan", price=49, category="Bread"),
]


def test_exact_match_short_circuits_without_scoring(monkeypatch: pytest.MonkeyPatch) -> None:
    def _fail(a: str, b: str) -> float:
        raise AssertionError("fuzzy scoring should not run for exact names")

    monkeypatch.setattr(fuzzy, "similarity", _fail)

    matched = match_item("  BUTTER chicken ", CATALOG)

    assert matched is not None
    assert matched.id == "y9"
    assert matched.confidence == 1.0


def test_fuzzy_match_resolves_misspelling_above_threshold() -> None:
    matched = match_item("Buter Chiken", CATALOG)

    assert matched is not None
    assert matched.id == "y9"
    assert 0.8 <= matched.confidence < 1.0
    assert matched.confidence == pytest.approx(1 - 2 / 14)


def test_similarity_is_monotone_in_edit_distance() -> None:
    closer = similarity("Butter Chickn", "Butter Chicken")
    farther = similarity("Buter Chickn", "Butter Chicken")

    assert closer >= farther
    assert similarity("butter chicken", "BUTTER CHICKEN ") == 1.0


def test_no_match_below_threshold_returns_none() -> None:
    assert match_item("Mango Lassi", CATALOG) is None
    assert match_item("", CATALOG) is None
    assert match_item("Butter Chicken", []) is None


def test_ties_keep_first_catalog_entry() -> None:
    matched = match_item("Paneer Tikkz", CATALOG)

    assert matched is not None
    assert matched.id == "p1"


def test_threshold_is_configurable() -> None:
    strict = MatchingConfig(similarity_threshold=0.95)

    assert match_item("Buter Chiken", CATALOG, strict) is None


def test_match_mentions_dedups_by_id_keeping_highest_confidence() -> None:
    mentions = [
        ExtractedMention(name="Butter Chiken", price=None, confidence=0.6),
        ExtractedMention(name="Garlic Nan", price=None, confidence=0.6),
        ExtractedMention(name="Butter Chicken", price=299.0, confidence=0.9),
    ]

    matched = match_mentions(mentions, CATALOG)

    assert [m.id for m in matched] == ["y9", "n1"]
    assert matched[0].confidence == 1.0
