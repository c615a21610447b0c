"""Configuration models for the chat action engine."""

from __future__ import annotations

import os

from pydantic import BaseModel, Field


class ExtractionConfig(BaseModel):
    """Configures pattern-based mention extraction."""

    price_confidence: float = Field(default=0.9, ge=0.0, le=1.0)
    fallback_confidence: float = Field(default=0.6, ge=0.0, le=1.0)
    min_name_length: int = Field(default=3, ge=1)


class MatchingConfig(BaseModel):
    """Configures exact + edit-distance catalog matching."""

    similarity_threshold: float = Field(default=0.8, gt=0.0, le=1.0)


class ReconcileConfig(BaseModel):
    """Configures evidence layering and the mention filter."""

    popular_limit: int = Field(default=5, ge=1)
    significant_word_length: int = Field(default=3, ge=0)
    reverse_word_length: int = Field(default=4, ge=0)
    stock_negation_phrases: tuple[str, ...] = (
        "out of",
        "fresh out",
        "we're out",
        "don't have",
    )


class ActionConfig(BaseModel):
    """Configures action construction rules and labels."""

    bulk_min_items: int = Field(default=2, ge=2)
    view_menu_keywords: tuple[str, ...] = ("popular", "menu", "browse")
    checkout_label: str = "View Cart & Checkout"
    view_menu_label: str = "View Full Menu"


class EngineConfig(BaseModel):
    """Top-level engine settings.

    `strict` makes the pipeline re-raise unexpected errors instead of degrading
    to the view-menu fallback. Use it in development and tests.
    """

    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    matching: MatchingConfig = Field(default_factory=MatchingConfig)
    reconcile: ReconcileConfig = Field(default_factory=ReconcileConfig)
    actions: ActionConfig = Field(default_factory=ActionConfig)
    strict: bool = False

    @classmethod
    def from_env(cls) -> "EngineConfig":
        strict = os.getenv("CHAT_ACTIONS_STRICT", "").strip().lower() in {"1", "true", "yes"}
        matching = MatchingConfig()
        threshold = os.getenv("CHAT_ACTIONS_SIMILARITY_THRESHOLD")
        if threshold:
            matching = MatchingConfig(similarity_threshold=float(threshold))
        return cls(matching=matching, strict=strict)
