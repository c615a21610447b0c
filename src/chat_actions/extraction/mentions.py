"""Pattern-based extraction of item mentions from assistant replies."""

from __future__ import annotations

import re
from dataclasses import dataclass

from chat_actions.config import ExtractionConfig
from chat_actions.types import ExtractedMention

_NAME = r"[A-Z][a-zA-Z\s\d()]+?"


@dataclass(slots=True, frozen=True)
class _MentionRule:
    label: str
    pattern: re.Pattern[str]
    name_group: int
    price_group: int | None


# Tried in order; earlier rules win on duplicate names.
_RULES: tuple[_MentionRule, ...] = (
    _MentionRule("at_price", re.compile(rf"({_NAME})\s+at\s+₹(\d+)"), 1, 2),
    _MentionRule("for_price", re.compile(rf"({_NAME})\s+for\s+₹(\d+)"), 1, 2),
    _MentionRule("paren_price", re.compile(rf"({_NAME})\s*\(₹(\d+)\)"), 1, 2),
    _MentionRule(
        "price_first",
        re.compile(rf"₹(\d+)\s+({_NAME})(?=[.,!?]|\s-|\sfor|\sat|\(|$)"),
        2,
        1,
    ),
    _MentionRule("dash_price", re.compile(rf"({_NAME})\s*-\s*₹(\d+)"), 1, 2),
    _MentionRule(
        "capitalized_phrase",
        re.compile(r"([A-Z][a-z]+(?:\s+[A-Z][a-z]+|\s+\d+)+)(?=\s|[.,!?]|$)"),
        1,
        None,
    ),
)

_PARENTHETICAL = re.compile(r"\s*\(.*?\)\s*")
_WHITESPACE = re.compile(r"\s+")


def normalize_name(raw: str) -> str:
    """Strip parenthetical asides and collapse whitespace."""
    cleaned = _PARENTHETICAL.sub("", raw)
    return _WHITESPACE.sub(" ", cleaned).strip()


def extract_mentions(
    message: str,
    config: ExtractionConfig | None = None,
) -> list[ExtractedMention]:
    """Scan a reply for item names, in rule priority order.

    Price-anchored rules ("Butter Chicken at ₹299", "Chicken 65 for ₹219",
    "Butter Naan (₹49)", "₹299 Butter Chicken", "Dal Makhani - ₹249") carry
    the configured price confidence. The final rule catches any capitalised
    multi-word phrase without a price at the lower fallback confidence.
    """

    cfg = config or ExtractionConfig()
    mentions: list[ExtractedMention] = []
    seen: set[str] = set()

    for rule in _RULES:
        for match in rule.pattern.finditer(message):
            name = normalize_name(match.group(rule.name_group))
            if rule.price_group is None:
                price = None
                confidence = cfg.fallback_confidence
            else:
                price = float(match.group(rule.price_group))
                confidence = cfg.price_confidence

            key = name.lower()
            if key in seen or len(name) < cfg.min_name_length:
                continue
            seen.add(key)
            mentions.append(ExtractedMention(name=name, price=price, confidence=confidence))

    return mentions


def deduplicate_mentions(mentions: list[ExtractedMention]) -> list[ExtractedMention]:
    """Keep the highest-confidence mention per normalised name."""

    best: dict[str, ExtractedMention] = {}
    for mention in mentions:
        key = mention.name.lower().strip()
        existing = best.get(key)
        if existing is None or mention.confidence > existing.confidence:
            best[key] = mention
    return list(best.values())
