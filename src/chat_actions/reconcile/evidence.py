"""Two-layer evidence reconciliation for items named in an assistant reply."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence

from chat_actions.agent.tool_calls import CatalogHit, ToolCallResult, ToolEvidence, parse_tool_calls
from chat_actions.config import ExtractionConfig, MatchingConfig, ReconcileConfig
from chat_actions.extraction.mentions import extract_mentions
from chat_actions.matching.catalog import CatalogSource
from chat_actions.matching.fuzzy import match_item
from chat_actions.types import (
    CatalogItem,
    EvidenceSource,
    ExtractedMention,
    MatchedItem,
    ResolvedItem,
    Urgency,
)

logger = logging.getLogger(__name__)

Extractor = Callable[[str], list[ExtractedMention]]
Matcher = Callable[[str, Sequence[CatalogItem]], MatchedItem | None]


class ResolutionSet:
    """Resolved items keyed by catalog id, in first-resolution order.

    Re-adding an id never moves it and never lowers its confidence.
    """

    def __init__(self) -> None:
        self._items: dict[str, ResolvedItem] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def add(self, item: ResolvedItem) -> None:
        existing = self._items.get(item.id)
        if existing is None:
            self._items[item.id] = item
        elif item.confidence > existing.confidence:
            existing.confidence = item.confidence

    def get(self, item_id: str) -> ResolvedItem | None:
        return self._items.get(item_id)

    def items(self) -> list[ResolvedItem]:
        return list(self._items.values())


class EvidenceReconciliator:
    """Merges tool-call evidence and text evidence into resolved items.

    Layer A trusts catalog-search then popularity-ranking results outright.
    Layer B (extract mentions, fuzzy-match against the catalog) runs only when
    Layer A produced nothing, and it is the only path that reads the catalog.
    Tool-sourced items are then marked `mentioned` or not by the mention
    filter; unmentioned items stay in the result so urgency can still attach.
    Text-sourced items were found in the reply, so they always count as
    mentioned.
    """

    def __init__(
        self,
        catalog: CatalogSource,
        *,
        config: ReconcileConfig | None = None,
        extraction_config: ExtractionConfig | None = None,
        matching_config: MatchingConfig | None = None,
        extractor: Extractor | None = None,
        matcher: Matcher | None = None,
    ) -> None:
        self.catalog = catalog
        self.config = config or ReconcileConfig()
        self._extraction_config = extraction_config or ExtractionConfig()
        self._matching_config = matching_config or MatchingConfig()
        self._extractor = extractor or self._default_extract
        self._matcher = matcher or self._default_match

    async def reconcile(
        self,
        tool_calls: Iterable[ToolCallResult],
        message: str,
    ) -> list[ResolvedItem]:
        evidence = parse_tool_calls(tool_calls)
        resolved = self._from_tool_evidence(evidence)
        layer: EvidenceSource | None = "tool" if len(resolved) else None

        if not len(resolved):
            resolved = await self._from_text(message)
            layer = "text" if len(resolved) else None

        items = resolved.items()
        self._apply_mention_filter(items, message, from_tools=layer == "tool")
        _attach_urgency(resolved, evidence)
        logger.debug(
            "Reconciled %d item(s) via %s layer, %d mentioned",
            len(items),
            layer or "no",
            sum(1 for item in items if item.mentioned),
        )
        return items

    def _from_tool_evidence(self, evidence: ToolEvidence) -> ResolutionSet:
        resolved = ResolutionSet()
        for hit in evidence.search_items:
            resolved.add(_from_hit(hit))
        for hit in evidence.popular_items[: self.config.popular_limit]:
            resolved.add(_from_hit(hit))
        return resolved

    async def _from_text(self, message: str) -> ResolutionSet:
        resolved = ResolutionSet()
        mentions = self._extractor(message)
        if not mentions:
            return resolved

        catalog = await self.catalog.list_available()
        threshold = self._matching_config.similarity_threshold
        for mention in mentions:
            matched = self._matcher(mention.name, catalog)
            if matched is None or matched.confidence < threshold:
                continue
            resolved.add(
                ResolvedItem(
                    id=matched.id,
                    name=matched.name,
                    price=matched.price,
                    category=matched.category or "Menu",
                    confidence=matched.confidence,
                    source="text",
                    snapshot={
                        "id": matched.id,
                        "name": matched.name,
                        "price": matched.price,
                        "category": matched.category or "Menu",
                    },
                )
            )
        return resolved

    def _apply_mention_filter(
        self,
        items: list[ResolvedItem],
        message: str,
        *,
        from_tools: bool,
    ) -> None:
        text = message.lower()
        negated = from_tools and any(
            phrase in text for phrase in self.config.stock_negation_phrases
        )
        message_words = [
            word for word in text.split() if len(word) > self.config.reverse_word_length
        ]

        for item in items:
            if item.source == "text":
                # Found in the reply itself, possibly misspelled.
                item.mentioned = True
                continue
            name = item.name.lower()
            exact = name in text

            significant = [
                word for word in name.split(" ") if len(word) > self.config.significant_word_length
            ]
            hits = sum(1 for word in significant if word in text)
            multi_word = hits >= min(2, len(significant))

            reverse = any(word in name for word in message_words)
            item.mentioned = exact or multi_word or reverse or negated
            logger.debug(
                "%s: exact=%s multi_word=%s (%d/%d) reverse=%s negation_override=%s -> %s",
                item.name,
                exact,
                multi_word,
                hits,
                len(significant),
                reverse,
                negated,
                item.mentioned,
            )

    def _default_extract(self, message: str) -> list[ExtractedMention]:
        return extract_mentions(message, self._extraction_config)

    def _default_match(
        self, name: str, catalog: Sequence[CatalogItem]
    ) -> MatchedItem | None:
        return match_item(name, catalog, self._matching_config)


def _from_hit(hit: CatalogHit) -> ResolvedItem:
    return ResolvedItem(
        id=hit.id,
        name=hit.name,
        price=hit.price,
        category=hit.category,
        confidence=1.0,
        source="tool",
        snapshot=hit.model_dump(),
    )


def _attach_urgency(resolved: ResolutionSet, evidence: ToolEvidence) -> None:
    for entry in evidence.urgency:
        item = resolved.get(entry.item_id)
        if item is None or not entry.level:
            continue
        item.urgency = Urgency(level=entry.level, message=entry.message, score=entry.score)
