"""Typed views over the agent's raw tool-call results.

Each recognised tool name maps to one payload model. A payload that fails to
decode or validate is logged and treated as if the call never happened, so
callers fall through to the next evidence layer instead of erroring.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class ToolName(str, Enum):
    CATALOG_SEARCH = "catalog-search"
    POPULARITY_RANKING = "popularity-ranking"
    URGENCY_LOOKUP = "urgency-lookup"
    CART_MUTATION = "cart-mutation"
    CHECKOUT_TRIGGER = "checkout-trigger"


# Function names registered with the sales agent.
_RUNTIME_ALIASES: dict[str, ToolName] = {
    "searchMenuItems": ToolName.CATALOG_SEARCH,
    "getPopularItems": ToolName.POPULARITY_RANKING,
    "getItemDemandPressure": ToolName.URGENCY_LOOKUP,
    "addItemToCart": ToolName.CART_MUTATION,
    "proceedToCheckout": ToolName.CHECKOUT_TRIGGER,
}


def resolve_tool_name(name: str) -> ToolName | None:
    """Map a raw tool name to a known tool, or None when unrecognised."""
    alias = _RUNTIME_ALIASES.get(name)
    if alias is not None:
        return alias
    try:
        return ToolName(name)
    except ValueError:
        return None


class ToolCallResult(BaseModel):
    """One executed tool call: its name and untyped JSON payload."""

    name: str = Field(min_length=1)
    payload: Any = None

    @property
    def tool(self) -> ToolName | None:
        return resolve_tool_name(self.name)


class CatalogHit(BaseModel):
    """An item row returned by a catalog tool; extra fields are kept."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    price: float = Field(default=0.0, ge=0.0)
    category: str = "Menu"


class ItemListPayload(BaseModel):
    success: bool = False
    items: list[CatalogHit] = Field(default_factory=list)


class UrgencyEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    item_id: str = Field(validation_alias=AliasChoices("itemId", "item_id"))
    level: str | None = Field(
        default=None,
        validation_alias=AliasChoices("urgencyLevel", "urgencyTier", "level"),
    )
    message: str | None = Field(
        default=None,
        validation_alias=AliasChoices("urgencyMessage", "message"),
    )
    score: float | None = Field(
        default=None,
        validation_alias=AliasChoices("demandScore", "score"),
    )


class UrgencyPayload(BaseModel):
    success: bool = False
    items: list[UrgencyEntry] = Field(default_factory=list)


@dataclass(slots=True)
class ToolEvidence:
    """Everything the engine reads out of one turn's tool calls."""

    search_items: list[CatalogHit] = field(default_factory=list)
    popular_items: list[CatalogHit] = field(default_factory=list)
    urgency: list[UrgencyEntry] = field(default_factory=list)
    cart_mutated: bool = False
    checkout_requested: bool = False


_PayloadT = TypeVar("_PayloadT", bound=BaseModel)


def parse_tool_calls(tool_calls: Iterable[ToolCallResult]) -> ToolEvidence:
    """Destructure the recognised tool calls of one turn, in call order."""

    evidence = ToolEvidence()
    for call in tool_calls:
        tool = call.tool
        if tool is None:
            logger.debug("Ignoring unrecognised tool call %s", call.name)
            continue

        if tool is ToolName.CART_MUTATION:
            evidence.cart_mutated = True
        elif tool is ToolName.CHECKOUT_TRIGGER:
            evidence.checkout_requested = True
        elif tool is ToolName.URGENCY_LOOKUP:
            urgency = _parse_payload(call, UrgencyPayload)
            if urgency is not None and urgency.success:
                evidence.urgency.extend(urgency.items)
        else:
            listing = _parse_payload(call, ItemListPayload)
            if listing is None or not listing.success or not listing.items:
                continue
            if tool is ToolName.CATALOG_SEARCH:
                evidence.search_items.extend(listing.items)
            else:
                evidence.popular_items.extend(listing.items)
    return evidence


def _parse_payload(call: ToolCallResult, model: type[_PayloadT]) -> _PayloadT | None:
    raw = call.payload
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except ValueError as exc:
            logger.warning("Tool %s returned non-JSON payload: %s", call.name, exc)
            return None
    if not isinstance(raw, dict):
        logger.warning("Tool %s payload is %s, expected an object", call.name, type(raw).__name__)
        return None
    try:
        return model.model_validate(raw)
    except ValidationError as exc:
        logger.warning(
            "Tool %s payload failed validation (%d errors)", call.name, exc.error_count()
        )
        return None
