"""Exact-then-fuzzy resolution of item names against a catalog snapshot."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from rapidfuzz.distance import Levenshtein

from chat_actions.config import MatchingConfig
from chat_actions.types import CatalogItem, ExtractedMention, MatchedItem


def similarity(a: str, b: str) -> float:
    """Normalised edit similarity: 1 - distance / max length.

    Compares full strings, case-insensitively and trimmed.
    """

    left = a.lower().strip()
    right = b.lower().strip()
    longest = max(len(left), len(right))
    if longest == 0:
        return 1.0
    return 1.0 - (Levenshtein.distance(left, right) / longest)


def match_item(
    name: str,
    catalog: Sequence[CatalogItem],
    config: MatchingConfig | None = None,
) -> MatchedItem | None:
    """Resolve one name to the best catalog row, or None below threshold."""

    cfg = config or MatchingConfig()
    needle = name.lower().strip()
    if not needle:
        return None

    for item in catalog:
        if item.name.lower().strip() == needle:
            return _to_match(item, 1.0)

    best: MatchedItem | None = None
    best_score = 0.0
    for item in catalog:
        score = similarity(needle, item.name)
        # Strict ">" keeps the first candidate on ties.
        if score >= cfg.similarity_threshold and score > best_score:
            best = _to_match(item, score)
            best_score = score
        if score == 1.0:
            break
    return best


def match_mentions(
    mentions: Iterable[ExtractedMention],
    catalog: Sequence[CatalogItem],
    config: MatchingConfig | None = None,
) -> list[MatchedItem]:
    """Match many mentions, deduplicating by catalog id.

    The highest confidence per id wins; ids keep the position where they were
    first matched.
    """

    unique: dict[str, MatchedItem] = {}
    for mention in mentions:
        matched = match_item(mention.name, catalog, config)
        if matched is None:
            continue
        existing = unique.get(matched.id)
        if existing is None or matched.confidence > existing.confidence:
            unique[matched.id] = matched
    return list(unique.values())


def _to_match(item: CatalogItem, confidence: float) -> MatchedItem:
    return MatchedItem(
        id=item.id,
        name=item.name,
        price=item.price,
        category=item.category,
        confidence=confidence,
    )
