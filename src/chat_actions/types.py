"""Shared domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

EvidenceSource = Literal["tool", "text"]


class CatalogContractError(ValueError):
    """Raised when a catalog row violates the engine's input contract."""


@dataclass(slots=True, frozen=True)
class CatalogItem:
    """A point-in-time catalog row, read-only for the duration of a request."""

    id: str
    name: str
    price: float
    category: str = "Menu"
    is_available: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id.strip():
            raise CatalogContractError(f"Catalog item id must be a non-empty string: {self.id!r}")
        if not self.name or not self.name.strip():
            raise CatalogContractError(f"Catalog item {self.id} has an empty name")
        if self.price <= 0:
            raise CatalogContractError(f"Catalog item {self.id} has non-positive price {self.price}")


@dataclass(slots=True)
class ExtractedMention:
    """A candidate item name found in generated text, not yet verified."""

    name: str
    price: float | None
    confidence: float


@dataclass(slots=True)
class MatchedItem:
    """A mention tied to a catalog row with a similarity confidence."""

    id: str
    name: str
    price: float
    category: str
    confidence: float


@dataclass(slots=True)
class Urgency:
    """Demand annotation copied from an urgency-lookup tool result."""

    level: str
    message: str | None = None
    score: float | None = None


@dataclass(slots=True)
class ResolvedItem:
    """A catalog item nominated by at least one evidence layer."""

    id: str
    name: str
    price: float
    category: str
    confidence: float
    source: EvidenceSource
    mentioned: bool = False
    urgency: Urgency | None = None
    snapshot: dict[str, Any] = field(default_factory=dict)
